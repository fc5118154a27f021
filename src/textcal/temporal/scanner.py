"""Locate date and time references inside free-form text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Iterator, NamedTuple

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

logger = logging.getLogger(__name__)

_NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11,
    "twelve": 12,
}
_NUMBER = r"\d+|an?|one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve"

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_MONTH = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)

_WEEKDAYS = {
    "mon": MO, "tue": TU, "wed": WE, "thu": TH, "fri": FR, "sat": SA, "sun": SU,
}
# Abbreviations must be capitalized: "sat", "wed" and "sun" are ordinary words.
_WEEKDAY = (
    r"(?i:monday|tuesday|wednesday|thursday|friday|saturday|sunday)|"
    r"Mon|Tues?|Wed|Thu(?:rs)?|Fri|Sat|Sun"
)

_RELATIVE_UNITS = {
    "min": "minutes", "minute": "minutes", "hr": "hours", "hour": "hours",
    "day": "days", "week": "weeks", "month": "months", "year": "years",
}

# Words allowed between a date and a time that belong to the same expression.
_JOINER = re.compile(r"[ \t]*,?[ \t]*(?:(?:at|on)[ \t]+|@[ \t]*)?", re.IGNORECASE)


@dataclass(frozen=True)
class TemporalToken:
    """A date/time reference found in text.

    ``span`` is ``(offset, length)`` into the scanned text. ``start`` and
    ``end`` are aware datetimes in the zone of the reference ``now``.
    """

    text: str
    span: tuple[int, int]
    start: datetime
    end: datetime | None = None
    hour_specified: bool = False


class _Atom(NamedTuple):
    kind: str  # "date", "time" or "moment"
    start: int
    end: int
    value: object


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _upcoming(month: int, day: int, today: date) -> date | None:
    """Next occurrence of month/day on or after today."""
    # Feb 29 may be up to eight years away
    for year in range(today.year, today.year + 9):
        candidate = _safe_date(year, month, day)
        if candidate is not None and candidate >= today:
            return candidate
    return None


def _count(word: str) -> int:
    word = word.lower()
    return int(word) if word.isdigit() else _NUMBER_WORDS[word]


def _clock(hour: int, minute: int, meridiem: str | None) -> time | None:
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem.lower() == "p" else 0)
    elif hour > 23:
        return None
    return time(hour, minute)


# Atom builders: (match, now) -> value, or None to reject the match.

def _iso_date(match: re.Match, now: datetime):
    day = _safe_date(int(match["year"]), int(match["month"]), int(match["day"]))
    return None if day is None else (day, None)


def _numeric_date(match: re.Match, now: datetime):
    month, day = int(match["month"]), int(match["day"])
    if match["year"]:
        year = int(match["year"])
        if year < 100:
            year += 2000
        resolved = _safe_date(year, month, day)
    else:
        resolved = _upcoming(month, day, now.date())
    return None if resolved is None else (resolved, None)


def _named_month_date(match: re.Match, now: datetime):
    month = _MONTHS[match["month"][:3].lower()]
    day = int(match["day"])
    if match["year"]:
        resolved = _safe_date(int(match["year"]), month, day)
    else:
        resolved = _upcoming(month, day, now.date())
    return None if resolved is None else (resolved, None)


def _relative_word(match: re.Match, now: datetime):
    word = match["word"].lower()
    today = now.date()
    if word == "tonight":
        return today, time(20, 0)
    offsets = {"today": 0, "tomorrow": 1, "tmrw": 1, "yesterday": -1}
    return today + timedelta(days=offsets[word]), None


def _weekday(match: re.Match, now: datetime):
    target = _WEEKDAYS[match["day"][:3].lower()]
    today = now.date()
    # "this friday" may be today, a bare or "next" weekday is always ahead
    modifier = (match["mod"] or "").lower()
    first = today if modifier == "this" else today + timedelta(days=1)
    return first + relativedelta(weekday=target(+1)), None


def _next_period(match: re.Match, now: datetime):
    unit = _RELATIVE_UNITS[match["unit"].lower()]
    return now.date() + relativedelta(**{unit: 1}), None


def _relative_offset(match: re.Match, now: datetime):
    unit = _RELATIVE_UNITS[match["unit"].lower().rstrip("s")]
    delta = relativedelta(**{unit: _count(match["count"])})
    if unit in ("minutes", "hours"):
        return now + delta
    return now.date() + delta, None


def _clock_12h(match: re.Match, now: datetime):
    start = _clock(int(match["h"]), int(match["m"] or 0), match["ap"])
    return None if start is None else (start, None)


def _clock_24h(match: re.Match, now: datetime):
    return time(int(match["h"]), int(match["m"])), None


def _named_time(match: re.Match, now: datetime):
    return (time(12, 0) if match["name"].lower() == "noon" else time(0, 0)), None


def _time_range(match: re.Match, now: datetime):
    first_ap, second_ap = match["ap1"], match["ap2"]
    # "3-5" alone is too ambiguous to be a time
    if not (first_ap or second_ap or (match["m1"] and match["m2"])):
        return None
    h1, m1 = int(match["h1"]), int(match["m1"] or 0)
    h2, m2 = int(match["h2"]), int(match["m2"] or 0)

    end = _clock(h2, m2, second_ap or first_ap)
    if end is None:
        return None
    start = _clock(h1, m1, first_ap)
    if not first_ap and second_ap:
        inherited = _clock(h1, m1, second_ap)
        if inherited is not None and inherited <= end:
            start = inherited
    if start is None:
        return None
    return start, end


_Builder = Callable[[re.Match, datetime], object]

_PATTERNS: tuple[tuple[str, re.Pattern, _Builder], ...] = (
    (
        "date",
        re.compile(r"\b(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})\b"),
        _iso_date,
    ),
    (
        "date",
        re.compile(r"\b(?P<month>\d{1,2})/(?P<day>\d{1,2})(?:/(?P<year>\d{4}|\d{2}))?\b(?!/)"),
        _numeric_date,
    ),
    (
        "date",
        re.compile(
            rf"\b(?P<month>{_MONTH})\b\.?\s+(?P<day>\d{{1,2}})(?:st|nd|rd|th)?\b"
            r"(?:,?\s+(?P<year>\d{4})\b)?",
            re.IGNORECASE,
        ),
        _named_month_date,
    ),
    (
        "date",
        re.compile(
            rf"\b(?P<day>\d{{1,2}})(?:st|nd|rd|th)?\s+(?:of\s+)?(?P<month>{_MONTH})\b\.?"
            r"(?:,?\s+(?P<year>\d{4})\b)?",
            re.IGNORECASE,
        ),
        _named_month_date,
    ),
    (
        "date",
        re.compile(r"\b(?P<word>today|tonight|tomorrow|tmrw|yesterday)\b", re.IGNORECASE),
        _relative_word,
    ),
    (
        "date",
        re.compile(rf"\b(?:(?P<mod>(?i:next|this|coming))\s+)?(?P<day>{_WEEKDAY})\b"),
        _weekday,
    ),
    (
        "date",
        re.compile(r"\bnext\s+(?P<unit>week|month|year)\b", re.IGNORECASE),
        _next_period,
    ),
    (
        "date",
        re.compile(
            rf"\bin\s+(?P<count>{_NUMBER})\s+(?P<unit>days?|weeks?|months?|years?)\b",
            re.IGNORECASE,
        ),
        _relative_offset,
    ),
    (
        "moment",
        re.compile(
            rf"\bin\s+(?P<count>{_NUMBER})\s+(?P<unit>minutes?|mins?|hours?|hrs?)\b",
            re.IGNORECASE,
        ),
        _relative_offset,
    ),
    (
        "time",
        re.compile(
            r"(?:\bfrom\s+)?\b(?P<h1>\d{1,2})(?::(?P<m1>[0-5]\d))?\s*(?:(?P<ap1>[ap])\.?m\.?)?"
            r"\s*(?:-|–|—|\bto\b|\buntil\b|\btill\b)\s*"
            r"(?P<h2>\d{1,2})(?::(?P<m2>[0-5]\d))?(?:\s*(?P<ap2>[ap])\.?m\.?(?![a-z]))?",
            re.IGNORECASE,
        ),
        _time_range,
    ),
    (
        "time",
        re.compile(r"\b(?P<h>\d{1,2})(?::(?P<m>[0-5]\d))?\s*(?P<ap>[ap])\.?m\.?(?![a-z])", re.IGNORECASE),
        _clock_12h,
    ),
    (
        "time",
        re.compile(r"\b(?P<h>[01]?\d|2[0-3]):(?P<m>[0-5]\d)\b"),
        _clock_24h,
    ),
    (
        "time",
        re.compile(r"\b(?P<name>noon|midnight|midday)\b", re.IGNORECASE),
        _named_time,
    ),
)


class TokenScanner:
    """
    Iterable of the temporal tokens in ``text``, left to right.

    Tokens never overlap; at any position the longest expression wins, so
    "tomorrow at 7pm" is one token rather than two. Each iteration starts a
    fresh scan. Relative expressions are resolved against ``now``; a naive
    ``now`` is taken to be UTC.
    """

    def __init__(self, text: str, now: datetime) -> None:
        self.text = text or ""
        self.now = now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)

    def __iter__(self) -> Iterator[TemporalToken]:
        return self._tokens()

    def _tokens(self) -> Iterator[TemporalToken]:
        atoms = self._atoms()
        position = 0
        for offset in sorted(atoms):
            if offset < position:
                continue
            token = self._longest_token(atoms, offset)
            if token is None:
                continue
            position = token.span[0] + token.span[1]
            logger.debug(
                f"Matched {token.text!r} -> {token.start.isoformat()} "
                f"(hour specified: {token.hour_specified})"
            )
            yield token

    def _atoms(self) -> dict[int, list[_Atom]]:
        by_offset: dict[int, list[_Atom]] = {}
        for kind, pattern, build in _PATTERNS:
            for match in pattern.finditer(self.text):
                try:
                    value = build(match, self.now)
                except (ValueError, OverflowError):
                    logger.debug(f"Skipping {match[0]!r}: outside the supported date range")
                    continue
                if value is None:
                    continue
                by_offset.setdefault(match.start(), []).append(
                    _Atom(kind, match.start(), match.end(), value)
                )
        return by_offset

    def _longest_token(self, atoms: dict[int, list[_Atom]], offset: int) -> TemporalToken | None:
        candidates = []
        for atom in atoms[offset]:
            candidates.append((atom,))
            if atom.kind == "moment":
                continue
            partner = "time" if atom.kind == "date" else "date"
            joined_at = _JOINER.match(self.text, atom.end).end()
            for other in atoms.get(joined_at, ()):
                if other.kind == partner:
                    candidates.append((atom, other))

        for group in sorted(candidates, key=lambda group: group[-1].end, reverse=True):
            try:
                return self._build(group)
            except OverflowError:
                logger.debug(f"Skipping {self.text[offset:group[-1].end]!r}: outside the supported date range")
        return None

    def _build(self, group: tuple[_Atom, ...]) -> TemporalToken:
        start_offset, end_offset = group[0].start, group[-1].end
        text = self.text[start_offset:end_offset]
        span = (start_offset, end_offset - start_offset)

        if group[0].kind == "moment":
            return TemporalToken(text, span, group[0].value, None, True)

        day = implied = clock = None
        for atom in group:
            if atom.kind == "date":
                day, implied = atom.value
            else:
                clock = atom.value

        tz = self.now.tzinfo
        if clock is None:
            if implied is not None:
                return TemporalToken(text, span, datetime.combine(day, implied, tzinfo=tz), None, True)
            return TemporalToken(text, span, datetime.combine(day, time.min, tzinfo=tz), None, False)

        start_time, end_time = clock
        if day is None:
            day = self.now.date()
            # a bare time that already passed today means tomorrow
            if datetime.combine(day, start_time, tzinfo=tz) < self.now:
                day += timedelta(days=1)
        start = datetime.combine(day, start_time, tzinfo=tz)
        end = None
        if end_time is not None:
            end = datetime.combine(day, end_time, tzinfo=tz)
            if end <= start:
                end += timedelta(days=1)
        return TemporalToken(text, span, start, end, True)


def scan(text: str, now: datetime) -> TokenScanner:
    """Scan ``text`` for temporal tokens relative to ``now``."""
    return TokenScanner(text, now)
