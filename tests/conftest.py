"""Shared fixtures."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from textcal.config import get_settings
from textcal.models import NormalizedEvent

NEW_YORK = ZoneInfo("America/New_York")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("TEXTCAL_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    """Wednesday 2025-03-05, 10:00 in New York."""
    return datetime(2025, 3, 5, 10, 0, tzinfo=NEW_YORK)


@pytest.fixture
def timed_event() -> NormalizedEvent:
    return NormalizedEvent(
        title="Dinner with Sarah",
        start=datetime(2025, 3, 7, 0, 0, tzinfo=timezone.utc),
        end=datetime(2025, 3, 7, 1, 0, tzinfo=timezone.utc),
        all_day=False,
        description="Bring wine; maybe dessert, too.\nTable for two",
        location="Mario's Italian Restaurant",
    )


@pytest.fixture
def all_day_event() -> NormalizedEvent:
    return NormalizedEvent(
        title="Team offsite",
        start=datetime(2025, 3, 10, 0, 0, tzinfo=timezone.utc),
        end=datetime(2025, 3, 10, 1, 0, tzinfo=timezone.utc),
        all_day=True,
        description="Meeting next Monday",
    )


SAMPLE_ICS = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Example Corp//Calendar//EN
BEGIN:VEVENT
UID:1234@example.com
DTSTAMP:20250301T120000Z
DTSTART:20250320T150000Z
DTEND:20250320T163000Z
SUMMARY:Quarterly review
DESCRIPTION:Agenda:\\n1. Numbers\\n2. Plans
LOCATION:Room 4\\, Building B
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics() -> str:
    return SAMPLE_ICS
