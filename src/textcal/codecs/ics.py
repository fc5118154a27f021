"""
iCalendar (RFC 5545) codec.

Parses the first VEVENT of an .ics document into a NormalizedEvent and
renders a NormalizedEvent as a single-event VCALENDAR.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Any

from icalendar import Calendar, Event

from ..errors import MalformedDocument, NoEventBlock
from ..models import NormalizedEvent, all_day_start, to_utc
from .base import EventCodec, register_codec

logger = logging.getLogger(__name__)

# Outlook's all-day marker, used to keep the all-day flag on UTC date-times
ALL_DAY_PROPERTY = "X-MICROSOFT-CDO-ALLDAYEVENT"


def _first(component: Any, name: str) -> Any:
    """Property value, or the first one when the property repeats."""
    value = component.get(name)
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _text(component: Any, name: str) -> str:
    value = _first(component, name)
    return "" if value is None else str(value)


@register_codec
class IcsCodec(EventCodec):
    """Codec for iCalendar documents, built on the icalendar library."""

    name = "ics"
    media_type = "text/calendar"
    extension = "ics"

    def parse(self, document: str | bytes) -> NormalizedEvent:
        try:
            calendar = Calendar.from_ical(document)
        except (ValueError, TypeError) as e:
            logger.warning(f"Could not parse calendar document: {e}")
            raise MalformedDocument() from e

        vevent = next(iter(calendar.walk("VEVENT")), None)
        if vevent is None:
            logger.warning("Calendar document has no VEVENT")
            raise NoEventBlock()

        # VEVENT swallows property errors while parsing; surface them here
        errors = getattr(vevent, "errors", None)
        if errors:
            logger.warning(f"Malformed event properties: {errors}")
            raise MalformedDocument()

        start_value = getattr(_first(vevent, "DTSTART"), "dt", None)
        if not isinstance(start_value, date):
            logger.warning("Event has no usable DTSTART")
            raise MalformedDocument("The event in the calendar file has no start time.")

        try:
            end_value = self._end_value(vevent, start_value)
            start, end = self._instant(start_value), self._instant(end_value)
        except (AttributeError, TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Could not resolve event times: {e}")
            raise MalformedDocument() from e

        all_day = (
            not isinstance(start_value, datetime)
            or _text(vevent, ALL_DAY_PROPERTY).strip().upper() == "TRUE"
        )
        event = NormalizedEvent(
            title=_text(vevent, "SUMMARY").strip() or self.untitled_title,
            description=_text(vevent, "DESCRIPTION"),
            location=_text(vevent, "LOCATION"),
            start=start,
            end=end,
            all_day=all_day,
        )
        logger.info(f"Parsed event {event.title!r} from calendar document")
        return event

    def serialize(self, event: NormalizedEvent, now: datetime | None = None) -> str:
        stamp = to_utc(now or datetime.now(timezone.utc))

        calendar = Calendar()
        calendar.add("version", "2.0")
        calendar.add("prodid", self.prodid)
        calendar.add("calscale", "GREGORIAN")

        vevent = Event()
        vevent.add("uid", self._uid(event))
        vevent.add("dtstamp", stamp)
        vevent.add("dtstart", event.start)
        vevent.add("dtend", event.end)
        vevent.add("summary", event.title)
        vevent.add("description", event.description or "")
        vevent.add("location", event.location or "")
        vevent.add("status", "CONFIRMED")
        if event.all_day:
            vevent.add(ALL_DAY_PROPERTY, "TRUE")
        calendar.add_component(vevent)

        return calendar.to_ical(sorted=False).decode("utf-8")

    def _end_value(self, vevent: Any, start_value: date) -> date:
        """DTEND, else DTSTART + DURATION, else the RFC 5545 default."""
        end = _first(vevent, "DTEND")
        if end is not None:
            return end.dt
        duration = _first(vevent, "DURATION")
        if duration is not None:
            return start_value + duration.dt
        if isinstance(start_value, datetime):
            return start_value
        return start_value + timedelta(days=1)

    def _instant(self, value: date) -> datetime:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=self.tz)
            return value.astimezone(timezone.utc)
        return all_day_start(value)

    @staticmethod
    def _uid(event: NormalizedEvent) -> str:
        # Stable per event so every delivery of it is byte-identical
        key = f"{event.start.isoformat()}/{event.end.isoformat()}/{event.title}"
        return f"{uuid.uuid5(uuid.NAMESPACE_URL, key)}@textcal"
