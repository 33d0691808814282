"""Manage the search collection: load records, delete ids, or reset it.

Run:
    python scripts/ingest.py load records.jsonl --batch-size 200
    python scripts/ingest.py delete <id> [<id> ...]
    python scripts/ingest.py reset

Environment:
    MILVUS_URI         (default http://localhost:19530)
    MILVUS_TOKEN       (default root:Milvus)
    SEARCH_COLLECTION  (default records)
"""

from __future__ import annotations

import argparse
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
from src.vectorstore.ingest import ingest_records, load_records  # noqa: E402

LOG_LEVEL: str = "INFO"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="action", required=True)

    load = sub.add_parser("load", help="Upsert records from a JSONL file")
    load.add_argument("path", type=Path)
    load.add_argument("--batch-size", type=int, default=100)
    load.add_argument("--reset", action="store_true", help="Recreate the collection first")

    delete = sub.add_parser("delete", help="Delete records by id")
    delete.add_argument("ids", nargs="+")

    sub.add_parser("reset", help="Drop and recreate the collection")
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

    store = module.store
    try:
        if args.action == "reset" or (args.action == "load" and args.reset):
            store.reset()
            logger.info("Collection '%s' reset", store.collection)
        if args.action == "load":
            ingest_records(store, load_records(args.path), batch_size=args.batch_size)
        elif args.action == "delete":
            store.delete(args.ids)
            logger.info("Deleted %d ids from '%s'", len(args.ids), store.collection)
    except Exception as e:
        logger.exception("%s failed: %s", args.action, e)
        return 1
    finally:
        module.close()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
