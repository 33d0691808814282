"""Full-text search from the command line.

Run:
    python scripts/search.py "Gardens in Poland" --top-k 5 --type dataset

Environment:
    MILVUS_URI         (default http://localhost:19530)
    MILVUS_TOKEN       (default root:Milvus)
    SEARCH_COLLECTION  (default records)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure the repo root is importable when run as a plain script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from dotenv import load_dotenv  # noqa: E402

from src.api.modules import build_search_module  # noqa: E402

LOG_LEVEL: str = "INFO"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("query", help="Natural-language query")
    parser.add_argument("--top-k", type=int, default=5)
    parser.add_argument(
        "--type", dest="types", action="append", help="Restrict to an object type"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    load_dotenv()
    logger = logging.getLogger(__name__)
    args = parse_args(argv)

    try:
        module = build_search_module()
    except Exception as e:
        logger.exception("Could not connect to the store: %s", e)
        return 1

    try:
        results = module.service.search_by_query(
            args.query, top_k=args.top_k, types=args.types
        )
    except Exception as e:
        logger.exception("Search failed: %s", e)
        return 1
    finally:
        module.close()

    lines = [f"Returned {len(results)} results for {args.query!r}"]
    for idx, item in enumerate(results, start=1):
        lines.append(f"{idx}. id={item['id']}")
        if item["metadata"]:
            lines.append(f"    metadata: {json.dumps(item['metadata'], ensure_ascii=False)}")
    logger.info("\n".join(lines))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
