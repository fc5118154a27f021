from urllib.parse import unquote

import pytest

from textcal import DeliveryMechanism, deliver_event, serialize_event_to_document
from textcal.calendar import file_name_for


def test_download(timed_event, now):
    action = deliver_event(timed_event, "download", now=now)

    assert action.mechanism is DeliveryMechanism.DOWNLOAD
    assert action.file_name == "dinner_with_sarah.ics"
    assert action.mime_type == "text/calendar"
    assert action.content == serialize_event_to_document(timed_event, now=now).encode("utf-8")
    assert action.href is None
    assert action.disposition == 'attachment; filename="dinner_with_sarah.ics"'


def test_direct_open(timed_event, now):
    action = deliver_event(timed_event, DeliveryMechanism.DIRECT_OPEN, now=now)

    assert action.href.startswith("data:text/calendar;charset=utf-8,BEGIN%3AVCALENDAR%0D%0A")
    assert unquote(action.href.split(",", 1)[1]) == action.content.decode("utf-8")
    assert action.disposition.startswith("inline;")


def test_both_mechanisms_carry_the_same_document(timed_event, now):
    download = deliver_event(timed_event, "download", now=now)
    direct = deliver_event(timed_event, "direct-open", now=now)
    assert download.content == direct.content
    assert download.file_name == direct.file_name


def test_unknown_platform(timed_event):
    with pytest.raises(ValueError):
        deliver_event(timed_event, "fax")


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Team Sync!", "team_sync_.ics"),
        ("Dinner with Sarah", "dinner_with_sarah.ics"),
        ("Café 2pm", "caf__2pm.ics"),
    ],
)
def test_file_names(title, expected):
    assert file_name_for(title) == expected
