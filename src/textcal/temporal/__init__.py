"""Temporal expression scanning, resolution and title extraction."""

from .resolver import DEFAULT_DURATION, Resolution, resolve
from .scanner import TemporalToken, TokenScanner, scan
from .title import extract_title

__all__ = [
    "DEFAULT_DURATION",
    "Resolution",
    "TemporalToken",
    "TokenScanner",
    "extract_title",
    "resolve",
    "scan",
]
