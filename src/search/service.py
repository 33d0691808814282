from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from src.utils.text_cleaning import normalize_query
from src.vectorstore.data_store import DataStore
from src.vectorstore.schemas import SearchItem


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchServiceConfig:
    collection_name: str = "records"
    default_top_k: int = 10
    max_top_k: int = 100


class SourceItemNotFoundError(LookupError):
    """The item used as the source of a similarity search does not exist."""

    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"Source item '{source_id}' not found")


class SearchService:
    """Application-layer search service.

    Implements:
      1) Search by query text
      2) Search for items similar to an existing item by id

    Returns minimal results: {id, metadata}.
    """

    def __init__(self, store: DataStore, config: SearchServiceConfig | None = None):
        self.config = config or SearchServiceConfig()
        self.store = store

    def search_by_query(
        self,
        query: str,
        *,
        top_k: Optional[int] = None,
        types: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Search by a natural-language query string."""

        text = normalize_query(query)
        if not text:
            return []

        items = self.store.full_text_search(
            text,
            limit=self._clamp_top_k(top_k),
            filter_expression=self._build_filter_expression(types=types),
        )
        logger.debug("Query %r returned %d items", text, len(items))
        return [self._to_result(item) for item in items]

    def search_similar_by_id(
        self,
        source_id: str,
        *,
        top_k: Optional[int] = None,
        types: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Search for items whose text resembles the stored item ``source_id``.

        The source item itself is never part of the results.
        """

        found = self.store.get([source_id])
        if not found:
            raise SourceItemNotFoundError(source_id)

        source = found[0]
        text = normalize_query(source.text)
        if not text:
            return []

        limit = self._clamp_top_k(top_k)
        # One extra hit because the source usually matches itself best.
        items = self.store.full_text_search(
            text,
            limit=limit + 1,
            filter_expression=self._build_filter_expression(types=types),
        )
        similar = [item for item in items if item.id != source.id]
        return [self._to_result(item) for item in similar[:limit]]

    def _clamp_top_k(self, top_k: Optional[int]) -> int:
        if top_k is None:
            return self.config.default_top_k
        return max(1, min(int(top_k), self.config.max_top_k))

    def _to_result(self, item: SearchItem) -> Dict[str, Any]:
        return {
            "id": str(item.id),
            "metadata": item.metadata or {},
        }

    def _build_filter_expression(self, *, types: Optional[List[str]]) -> Optional[str]:
        """Build a Milvus filter expression restricting results to object types.

        The type is read from metadata["type"] or metadata["object_type"].
        """

        if not types:
            return None

        clean_types = [t.strip() for t in types if t and t.strip()]
        if not clean_types:
            return None

        quoted = ", ".join(f'"{_escape(t)}"' for t in clean_types)
        return f'(metadata["type"] in [{quoted}]) or (metadata["object_type"] in [{quoted}])'


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')
