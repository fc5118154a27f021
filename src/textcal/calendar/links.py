"""Google Calendar "add event" link generation."""

from __future__ import annotations

import urllib.parse
from datetime import date, datetime, timedelta, timezone

from ..config import get_settings
from ..models import NormalizedEvent


def format_timestamp(value: datetime) -> str:
    """Compact UTC date-time, e.g. ``20250306T190000Z``."""
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def format_date(value: datetime) -> str:
    """Compact UTC date, e.g. ``20250306``."""
    return value.astimezone(timezone.utc).strftime("%Y%m%d")


def format_date_range(event: NormalizedEvent) -> str:
    """
    Value of the ``dates`` parameter.

    All-day ranges use dates only and their end is exclusive, so a range that
    starts and ends on the same date is widened by one day.
    """
    if not event.all_day:
        return f"{format_timestamp(event.start)}/{format_timestamp(event.end)}"

    start, end = format_date(event.start), format_date(event.end)
    if start == end and event.end.date() < date.max:
        end = format_date(event.end + timedelta(days=1))
    return f"{start}/{end}"


def build_web_calendar_link(
    event: NormalizedEvent,
    base_url: str | None = None,
) -> str:
    """
    Generate a Google Calendar link for an event.

    Args:
        event: Event to link to.
        base_url: Calendar render endpoint. Defaults to the configured
            ``google_calendar_url``.

    Returns:
        Google Calendar URL.
    """
    if base_url is None:
        base_url = get_settings().google_calendar_url

    params = {
        "action": "TEMPLATE",
        "text": event.title,
        "dates": format_date_range(event),
        "details": event.description or "",
        "location": event.location or "",
    }

    query_string = urllib.parse.urlencode(params, quote_via=urllib.parse.quote, safe="/")
    return f"{base_url}?{query_string}"
