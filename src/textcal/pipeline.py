"""Text-to-event pipeline: free-form text in, normalized event out."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from .config import get_settings
from .errors import NoTemporalMatch
from .models import NormalizedEvent
from .temporal import extract_title, resolve, scan

logger = logging.getLogger(__name__)


def parse_text_to_event(
    text: str,
    now: datetime | None = None,
    default_duration: timedelta | None = None,
) -> NormalizedEvent:
    """
    Build an event from the first date/time mentioned in ``text``.

    Args:
        text: Free-form text, e.g. "Lunch with Ana tomorrow at noon".
        now: Reference instant for relative expressions. Defaults to the
            current time in the configured timezone; a naive value is taken
            to be in that timezone.
        default_duration: Length of events whose end is not mentioned.
            Defaults to the configured duration (one hour).

    Returns:
        The event, with the original text as its description.

    Raises:
        NoTemporalMatch: If the text mentions no date or time.
    """
    settings = get_settings()
    if now is None:
        now = datetime.now(settings.tzinfo)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=settings.tzinfo)
    if default_duration is None:
        default_duration = settings.default_duration

    try:
        resolution = resolve(scan(text, now), default_duration)
    except NoTemporalMatch:
        logger.warning(f"No date or time found in text: {text[:80]!r}")
        raise

    title = extract_title(text, resolution.span, default=settings.default_title)
    logger.info(
        f"Parsed event {title!r} starting {resolution.start.isoformat()} "
        f"(all day: {resolution.all_day})"
    )

    return NormalizedEvent(
        title=title,
        start=resolution.start,
        end=resolution.end,
        all_day=resolution.all_day,
        description=text,
        location=None,
    )
