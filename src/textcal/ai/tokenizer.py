"""Token counting for prompts sent to the extraction model."""

from __future__ import annotations

import tiktoken

# Cache the encoding for reuse
_encoding: tiktoken.Encoding | None = None


def _get_encoding() -> tiktoken.Encoding:
    """Get or create the tiktoken encoding."""
    global _encoding
    if _encoding is None:
        _encoding = tiktoken.get_encoding("cl100k_base")
    return _encoding


def count_tokens(text: str) -> int:
    """
    Count the number of tokens in a text string.

    Args:
        text: The text to count tokens for.

    Returns:
        Number of tokens.
    """
    return len(_get_encoding().encode(text))


def truncate_to_tokens(text: str, max_tokens: int) -> str:
    """
    Cut ``text`` down to at most ``max_tokens`` tokens.

    Events are nearly always described near the top of a message, so the
    beginning is kept.
    """
    encoding = _get_encoding()
    tokens = encoding.encode(text)
    if len(tokens) <= max_tokens:
        return text
    return encoding.decode(tokens[:max_tokens])
