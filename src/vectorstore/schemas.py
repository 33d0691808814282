from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass
class SearchItem:
    id: str
    text: str
    score: Optional[float] = None
    metadata: Optional[Dict[str, Any]] = None

    def snippet(self, max_len: int = 160) -> str:
        """Return a centered snippet: beginning + ... + ending, length <= max_len.

        If text is shorter than or equal to max_len, returns full text.
        If max_len <= 3, returns leading max_len characters.
        """
        s = self.text or ""
        if len(s) <= max_len:
            return s
        if max_len <= 3:
            return s[:max_len]
        budget = max_len - 3
        head_len = budget // 2
        tail_len = budget - head_len
        return f"{s[:head_len]}...{s[-tail_len:]}"


def hit_to_item(hit: Mapping[str, Any]) -> SearchItem:
    """Convert a Milvus search hit or get/query row into a SearchItem.

    Search hits nest output fields under ``entity``; get/query rows are flat.
    """
    entity = hit.get("entity") or {}

    def field(key: str) -> Any:
        value = entity.get(key)
        return hit.get(key) if value is None else value

    distance = hit.get("distance")
    try:
        score = float(distance) if distance is not None else None
    except (TypeError, ValueError):
        score = None
    metadata = field("metadata")

    return SearchItem(
        id=str(field("id")),
        text=field("text") or "",
        score=score,
        metadata=metadata if isinstance(metadata, dict) else None,
    )


def format_search_item(item: SearchItem, max_len: int = 160) -> str:
    """Create a compact string representation for logs/printing.

    Example: "id=<id>; score=1.2345; text=<snippet>"
    """
    score_str = f"{item.score:.4f}" if item.score is not None else "?"
    return f"id={item.id}; score={score_str}; text={item.snippet(max_len)}"
