from __future__ import annotations

import html
import re


def clean_text(text: str | None) -> str:
    """Clean free text before indexing or querying.

    - Decode HTML entities (e.g. &agrave; -> à)
    - Strip HTML tags while keeping inner text
    - Simplify Markdown links/bold/italics
    - Normalize whitespace
    """

    if not text:
        return ""

    text = html.unescape(text)

    # <a href="...">text</a> -> text
    text = re.sub(r"<[^>]+>", "", text)

    # [Text](url) -> Text
    text = re.sub(r"\[([^\]]+)\]\([^\)]+\)", r"\1", text)

    # **Text** / __Text__ -> Text
    text = re.sub(r"[\*_]{2,}(.*?)[\*_]{2,}", r"\1", text)

    text = re.sub(r"\s+", " ", text)

    return text.strip()


def normalize_query(text: str | None, max_len: int = 512) -> str:
    """Clean a user query and cap its length."""

    cleaned = clean_text(text)
    if len(cleaned) > max_len:
        cleaned = cleaned[:max_len].rstrip()
    return cleaned
