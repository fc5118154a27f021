import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import httpx
import openai
import pytest

from textcal.ai import AiEventExtractor, ExtractedEvent
from textcal.calendar import format_date_range
from textcal.config import Settings
from textcal.errors import ExtractionServiceError

from conftest import NEW_YORK


class FakeCompletions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(reply=None, error=None):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(reply, error)))


@pytest.fixture(autouse=True)
def offline_tokenizer(monkeypatch):
    monkeypatch.setattr("textcal.ai.extractor.count_tokens", lambda text: len(text.split()))
    monkeypatch.setattr("textcal.ai.extractor.truncate_to_tokens", lambda text, limit: text)


@pytest.fixture
def settings():
    return Settings(timezone="America/New_York", openai_model="test-model")


def test_requires_api_key_without_client(settings):
    with pytest.raises(ExtractionServiceError):
        AiEventExtractor(settings=settings)


def test_extracts_event(settings, now):
    reply = {
        "title": "Dinner with Sarah",
        "location": "Mario's",
        "description": "Bring wine",
        "startDate": "2025-03-06T19:00:00-05:00",
        "endDate": "2025-03-06T21:00:00-05:00",
        "allDay": False,
    }
    client = fake_client(json.dumps(reply))
    event = AiEventExtractor(settings=settings, client=client).extract("Dinner with Sarah tomorrow 7-9pm", now=now)

    assert event.title == "Dinner with Sarah"
    assert event.location == "Mario's"
    assert event.start == datetime(2025, 3, 7, 0, 0, tzinfo=timezone.utc)
    assert event.duration == timedelta(hours=2)

    call = client.chat.completions.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}
    prompt = call["messages"][0]["content"]
    assert prompt.startswith(f"Current Date/Time: {now.isoformat()}.")
    assert prompt.endswith("Input Text:\nDinner with Sarah tomorrow 7-9pm")


def test_naive_times_and_missing_end(settings, now):
    reply = json.dumps({"title": "  ", "startDate": "2025-03-06T09:00:00"})
    event = AiEventExtractor(settings=settings, client=fake_client(reply)).extract("something", now=now)

    assert event.title == "New Event"
    assert event.start == datetime(2025, 3, 6, 9, 0, tzinfo=NEW_YORK)
    assert event.duration == timedelta(minutes=60)


@pytest.mark.parametrize("reply", ["not json", json.dumps({"title": "No start"}), ""])
def test_unusable_reply(settings, now, reply):
    extractor = AiEventExtractor(settings=settings, client=fake_client(reply))
    with pytest.raises(ExtractionServiceError):
        extractor.extract("something", now=now)


def test_api_error_is_wrapped(settings, now):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = openai.AuthenticationError("bad key", response=httpx.Response(401, request=request), body=None)
    client = fake_client(error=error)

    with pytest.raises(ExtractionServiceError) as excinfo:
        AiEventExtractor(settings=settings, client=client).extract("something", now=now)

    assert excinfo.value.message == "Failed to process event details."
    assert len(client.chat.completions.calls) == 1


def test_extracted_event_accepts_field_names():
    extracted = ExtractedEvent(title="x", start_date=datetime(2025, 3, 6), all_day=True)
    assert extracted.all_day is True
    assert extracted.end_date is None


def test_all_day_reply_keeps_its_local_date(monkeypatch, now):
    monkeypatch.setenv("TEXTCAL_TIMEZONE", "Asia/Seoul")
    settings = Settings()
    reply = json.dumps({"title": "Holiday", "startDate": "2025-03-06T00:00:00", "allDay": True})

    event = AiEventExtractor(settings=settings, client=fake_client(reply)).extract("Holiday on the 6th", now=now)

    assert event.all_day is True
    assert event.start == datetime(2025, 3, 6, tzinfo=timezone.utc)
    assert event.duration == timedelta(minutes=60)
    assert format_date_range(event) == "20250306/20250307"
