from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from textcal import (
    NoTemporalMatch,
    parse_document_to_event,
    parse_text_to_event,
    serialize_event_to_document,
)
from textcal.models import LATEST


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_dinner_example(now, timed_event):
    text = "Dinner with Sarah at 7 PM tomorrow at Mario's Italian Restaurant"
    event = parse_text_to_event(text, now=now)

    assert event.title == "Dinner with Sarah"
    assert event.start == timed_event.start
    assert event.end == timed_event.end
    assert event.all_day is False
    assert event.description == text
    assert event.location is None


def test_lunch_at_noon(now):
    event = parse_text_to_event("Lunch at noon tomorrow", now=now)
    assert event.title == "Lunch"
    assert event.start == utc(2025, 3, 6, 17, 0)
    assert event.end == utc(2025, 3, 6, 18, 0)


def test_date_only_text_is_all_day(now):
    event = parse_text_to_event("Meeting next Monday", now=now)
    assert event.title == "Meeting"
    assert event.all_day is True
    assert event.start == utc(2025, 3, 10)
    assert event.end == utc(2025, 3, 10, 1)


def test_range_sets_duration(now):
    event = parse_text_to_event("Workshop 7-9 PM tomorrow", now=now)
    assert event.title == "Workshop"
    assert event.duration == timedelta(hours=2)


def test_text_without_date_fails(now):
    with pytest.raises(NoTemporalMatch) as excinfo:
        parse_text_to_event("Buy milk", now=now)
    assert excinfo.value.message == "Could not find any date or time in the text."


def test_only_a_date_uses_default_title(now):
    assert parse_text_to_event("tomorrow", now=now).title == "New Event"


def test_naive_now_uses_configured_timezone(monkeypatch):
    monkeypatch.setenv("TEXTCAL_TIMEZONE", "America/New_York")
    event = parse_text_to_event("Call at 3pm tomorrow", now=datetime(2025, 3, 5, 10, 0))
    assert event.start == utc(2025, 3, 6, 20, 0)


def test_configured_default_duration(monkeypatch, now):
    monkeypatch.setenv("TEXTCAL_DEFAULT_DURATION_MINUTES", "30")
    event = parse_text_to_event("Call at 3pm tomorrow", now=now)
    assert event.duration == timedelta(minutes=30)


def test_explicit_default_duration(now):
    event = parse_text_to_event("Call at 3pm tomorrow", now=now, default_duration=timedelta(minutes=45))
    assert event.duration == timedelta(minutes=45)


def test_same_input_same_event(now):
    text = "Dentist Friday at 9:30am"
    assert parse_text_to_event(text, now=now) == parse_text_to_event(text, now=now)


def test_offset_beyond_the_calendar_is_no_match(now):
    with pytest.raises(NoTemporalMatch):
        parse_text_to_event("Retire in 10000 years", now=now)


def test_last_representable_evening_is_pinned(now):
    event = parse_text_to_event("Deadline 12/31/9999 at 11:30pm", now=now)
    assert event.title == "Deadline"
    assert event.start == LATEST
    assert event.end == LATEST


def test_windows_line_breaks_survive_export(now):
    text = "Meeting tomorrow\r\nRoom 5\rBring slides"
    event = parse_text_to_event(text, now=now)
    assert event.description == "Meeting tomorrow\nRoom 5\nBring slides"
    assert parse_document_to_event(serialize_event_to_document(event, now=now)) == replace(event, location="")


def test_configured_default_title(monkeypatch, now):
    monkeypatch.setenv("TEXTCAL_DEFAULT_TITLE", "Reminder")
    assert parse_text_to_event("tomorrow", now=now).title == "Reminder"
