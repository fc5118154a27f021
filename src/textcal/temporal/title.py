"""Derive an event title from the text around a temporal expression."""

from __future__ import annotations

import re

from ..models import DEFAULT_TITLE

_LEADING = re.compile(r"^(?:at|on)(?:\s+|$)", re.IGNORECASE)
_TRAILING = re.compile(r"\s+at$", re.IGNORECASE)
_LOCATION_CLAUSE = re.compile(r"^\s*(?:at|in)\s+\S|^\s*@", re.IGNORECASE)


def extract_title(text: str, span: tuple[int, int], default: str = DEFAULT_TITLE) -> str:
    """
    Remove the matched span from ``text`` and tidy what is left.

    "Dinner at 7pm" becomes "Dinner": the preposition left dangling by the
    removal is dropped. When the text after the span is a location clause
    ("... 7pm at Mario's") and something precedes the span, only the part
    before the span is kept.
    """
    offset, length = span
    head, tail = text[:offset], text[offset + length:]
    if _LEADING.sub("", head.strip()) and _LOCATION_CLAUSE.match(tail):
        tail = ""

    title = f"{head.rstrip()} {tail.lstrip()}".strip()
    title = _LEADING.sub("", title)
    title = _TRAILING.sub("", title).strip()
    return title or default
