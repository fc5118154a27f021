"""Turn scanned temporal tokens into an event's start, end and all-day flag."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from ..errors import NoTemporalMatch
from ..models import all_day_start, shift, to_utc
from .scanner import TemporalToken

logger = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)


@dataclass(frozen=True)
class Resolution:
    """Resolved timing of an event, in UTC."""

    start: datetime
    end: datetime
    all_day: bool
    span: tuple[int, int]


def resolve(
    tokens: Iterable[TemporalToken],
    default_duration: timedelta = DEFAULT_DURATION,
) -> Resolution:
    """
    Decide the event timing from the first token found.

    Later mentions of a date or time in the same text are ignored. A token
    without an end gets ``default_duration``. A token that never pinned a time
    of day makes the event all-day, anchored on its calendar date at 00:00 UTC.
    Times past the end of the calendar are pinned to its last second.

    Raises:
        NoTemporalMatch: If there are no tokens.
    """
    token = next(iter(tokens), None)
    if token is None:
        raise NoTemporalMatch()

    all_day = not token.hour_specified
    if all_day:
        start = all_day_start(token.start.date())
        end = shift(start, token.end - token.start if token.end is not None else default_duration)
    else:
        start = to_utc(token.start)
        end = to_utc(token.end) if token.end is not None else shift(start, default_duration)

    if end < start:
        logger.debug(f"Clamping end {end.isoformat()} to start {start.isoformat()}")
        end = start

    return Resolution(start=start, end=end, all_day=all_day, span=token.span)
