"""
Base interface for calendar interchange formats.

Every format (iCalendar today) implements EventCodec so that callers can
parse and serialize without knowing which one they are talking to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from zoneinfo import ZoneInfo

from ..errors import UnknownFormat
from ..models import NormalizedEvent


class EventCodec(ABC):
    """
    Abstract base class for interchange-format codecs.

    Implementations should:
    1. Parse only the first event of a document into a NormalizedEvent
    2. Raise NoEventBlock / MalformedDocument instead of returning partial data
    3. Serialize a NormalizedEvent into a complete one-event document
    """

    #: Registry tag, e.g. "ics"
    name: str = ""
    #: MIME type of serialized documents
    media_type: str = "application/octet-stream"
    #: File extension of serialized documents, without the dot
    extension: str = ""

    def __init__(
        self,
        timezone: str = "UTC",
        prodid: str = "-//textcal//EN",
        untitled_title: str = "Untitled Event",
    ) -> None:
        """
        Args:
            timezone: IANA zone for floating (zone-less) times in documents.
            prodid: Product identifier written into serialized documents.
            untitled_title: Title used when a document event has none.
        """
        self.tz = ZoneInfo(timezone)
        self.prodid = prodid
        self.untitled_title = untitled_title

    @abstractmethod
    def parse(self, document: str | bytes) -> NormalizedEvent:
        """
        Parse the first event in a document.

        Raises:
            NoEventBlock: If the document holds no event.
            MalformedDocument: If the document or the event cannot be parsed.
        """

    @abstractmethod
    def serialize(self, event: NormalizedEvent, now: datetime | None = None) -> str:
        """
        Render ``event`` as a complete document.

        Args:
            event: Event to serialize.
            now: Generation timestamp; defaults to the current UTC time.
        """


_REGISTRY: dict[str, type[EventCodec]] = {}


def register_codec(codec_class: type[EventCodec]) -> type[EventCodec]:
    """Register a codec class under its ``name``. Usable as a decorator."""
    if not codec_class.name:
        raise ValueError(f"{codec_class.__name__} has no name")
    _REGISTRY[codec_class.name.lower()] = codec_class
    return codec_class


def available_formats() -> list[str]:
    return sorted(_REGISTRY)


def get_codec(name: str = "ics", **options) -> EventCodec:
    """
    Instantiate the codec registered under ``name``.

    Raises:
        UnknownFormat: If no codec has that name.
    """
    try:
        codec_class = _REGISTRY[name.lower()]
    except KeyError:
        raise UnknownFormat(f"Unsupported calendar format: {name}") from None
    return codec_class(**options)
