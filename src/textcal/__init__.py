"""textcal - turn free-form text and .ics files into calendar events."""

from .calendar import DeliveryAction, DeliveryMechanism, build_web_calendar_link, deliver_event
from .codecs import parse_document_to_event, serialize_event_to_document
from .errors import (
    EventExtractionError,
    MalformedDocument,
    NoEventBlock,
    NoTemporalMatch,
    TextcalError,
)
from .models import NormalizedEvent
from .pipeline import parse_text_to_event

__version__ = "1.0.0"

__all__ = [
    "DeliveryAction",
    "DeliveryMechanism",
    "EventExtractionError",
    "MalformedDocument",
    "NoEventBlock",
    "NoTemporalMatch",
    "NormalizedEvent",
    "TextcalError",
    "build_web_calendar_link",
    "deliver_event",
    "parse_document_to_event",
    "parse_text_to_event",
    "serialize_event_to_document",
]
