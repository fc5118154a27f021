"""The normalized event record shared by every textcal component."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import MAXYEAR, date, datetime, time, timedelta, timezone
from typing import Any

DEFAULT_TITLE = "New Event"

# Representable bounds, at second precision
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
LATEST = datetime.max.replace(microsecond=0, tzinfo=timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Convert to an aware UTC datetime truncated to whole seconds.

    Naive values are taken to already be in UTC. Values whose UTC form falls
    outside the calendar are pinned to its nearest end.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        value = value.astimezone(timezone.utc)
    except OverflowError:
        value = LATEST if value.year == MAXYEAR else EARLIEST
    return value.replace(microsecond=0)


def shift(value: datetime, delta: timedelta) -> datetime:
    """``value + delta``, stopping at LATEST."""
    if LATEST - value < delta:
        return LATEST
    return value + delta


def all_day_start(day: date) -> datetime:
    """Anchor of an all-day event on ``day``: 00:00 UTC of that date."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _single_newlines(value: str | None) -> str | None:
    if value is None:
        return None
    return value.replace("\r\n", "\n").replace("\r", "\n")


@dataclass(frozen=True)
class NormalizedEvent:
    """
    A single calendar event.

    Instants are stored in UTC with second precision. When ``all_day`` is set
    the UTC date of ``start``/``end`` is the calendar date and the time of day
    carries no meaning. Line breaks in text fields are stored as ``\\n``.
    """

    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    description: str | None = None
    location: str | None = None

    def __post_init__(self) -> None:
        start = to_utc(self.start)
        end = to_utc(self.end)
        # end < start is repaired, never reported
        if end < start:
            end = start
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        title = _single_newlines(self.title or "").strip()
        object.__setattr__(self, "title", title or DEFAULT_TITLE)
        object.__setattr__(self, "description", _single_newlines(self.description))
        object.__setattr__(self, "location", _single_newlines(self.location))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-friendly representation."""
        return {
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "all_day": self.all_day,
        }
