"""Calendar interchange formats."""

from __future__ import annotations

from datetime import datetime

from ..config import get_settings
from ..models import NormalizedEvent
from .base import EventCodec, available_formats, get_codec, register_codec
from .ics import IcsCodec


def codec_for(format: str = "ics") -> EventCodec:
    """Codec for ``format`` configured from the application settings."""
    settings = get_settings()
    return get_codec(
        format,
        timezone=settings.timezone,
        prodid=settings.prodid,
        untitled_title=settings.untitled_title,
    )


def parse_document_to_event(document: str | bytes, format: str = "ics") -> NormalizedEvent:
    """
    Parse the first event of a calendar document.

    Raises:
        NoEventBlock: If the document has no event.
        MalformedDocument: If the document or its event cannot be parsed.
        UnknownFormat: If ``format`` is not supported.
    """
    return codec_for(format).parse(document)


def serialize_event_to_document(
    event: NormalizedEvent,
    format: str = "ics",
    now: datetime | None = None,
) -> str:
    """Render ``event`` as a complete single-event calendar document."""
    return codec_for(format).serialize(event, now=now)


__all__ = [
    "EventCodec",
    "IcsCodec",
    "available_formats",
    "codec_for",
    "get_codec",
    "parse_document_to_event",
    "register_codec",
    "serialize_event_to_document",
]
