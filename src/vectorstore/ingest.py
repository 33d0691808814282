"""Load JSONL records into the search collection.

Each line is one object with ``id`` and ``text`` keys and an optional
``metadata`` object, e.g.::

    {"id": "…", "text": "Gardens in Poland", "metadata": {"type": "dataset"}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List

from .data_store import DataStore


logger = logging.getLogger(__name__)


def load_records(path: Path | str) -> Iterator[Dict[str, Any]]:
    """Yield records from a JSONL file, skipping blank lines.

    Raises:
        ValueError: A line is not valid JSON or lacks ``id``/``text``.
    """
    with Path(path).open(encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}:{lineno}: invalid JSON: {e}") from e
            if not isinstance(record, dict) or not record.get("id") or "text" not in record:
                raise ValueError(f"{path}:{lineno}: record needs 'id' and 'text'")
            yield record


def ingest_records(
    store: DataStore, records: Iterable[Dict[str, Any]], *, batch_size: int = 100
) -> int:
    """Upsert records in batches and return how many were written."""
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    total = 0
    batch: List[Dict[str, Any]] = []
    for record in records:
        batch.append(record)
        if len(batch) >= batch_size:
            total += _flush(store, batch)
            batch = []
    if batch:
        total += _flush(store, batch)
    logger.info("Ingested %d records into '%s'", total, store.collection)
    return total


def _flush(store: DataStore, batch: List[Dict[str, Any]]) -> int:
    store.upsert(
        [str(r["id"]) for r in batch],
        [r.get("text") or "" for r in batch],
        metadatas=[r.get("metadata") for r in batch],
    )
    return len(batch)
