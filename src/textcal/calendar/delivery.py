"""Hand a serialized event to the platform: open it in place or download it."""

from __future__ import annotations

import logging
import re
import urllib.parse
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..codecs import EventCodec, codec_for
from ..models import NormalizedEvent

logger = logging.getLogger(__name__)


class DeliveryMechanism(str, Enum):
    """How the caller should hand the document to the user."""

    # Platforms that open calendar files inline (iOS Safari and friends)
    DIRECT_OPEN = "direct-open"
    # Platforms that save calendar files to disk
    DOWNLOAD = "download"


@dataclass(frozen=True)
class DeliveryAction:
    """
    Everything a UI needs to deliver an event document.

    Carrying it out (navigating, writing the file) is the caller's job.
    """

    file_name: str
    mime_type: str
    content: bytes
    mechanism: DeliveryMechanism
    href: str | None = None

    @property
    def disposition(self) -> str:
        """``Content-Disposition`` value for HTTP responses."""
        kind = "inline" if self.mechanism is DeliveryMechanism.DIRECT_OPEN else "attachment"
        return f'{kind}; filename="{self.file_name}"'


def file_name_for(title: str, extension: str = "ics") -> str:
    """``Team Sync!`` -> ``team_sync_.ics``"""
    return f"{re.sub(r'[^a-z0-9]', '_', title, flags=re.IGNORECASE).lower()}.{extension}"


def data_uri(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};charset=utf-8,{urllib.parse.quote(content)}"


def deliver_event(
    event: NormalizedEvent,
    platform: DeliveryMechanism | str,
    now: datetime | None = None,
    codec: EventCodec | None = None,
) -> DeliveryAction:
    """
    Serialize ``event`` and describe how to deliver it on ``platform``.

    Both mechanisms carry the same bytes; only the hand-off differs.

    Args:
        event: Event to deliver.
        platform: ``"direct-open"`` or ``"download"``, as detected by the caller.
        now: Generation timestamp written into the document.
        codec: Document format; defaults to the configured iCalendar codec.

    Raises:
        ValueError: If ``platform`` is not a known mechanism.
    """
    mechanism = DeliveryMechanism(platform)
    codec = codec or codec_for("ics")

    content = codec.serialize(event, now=now).encode("utf-8")
    mime_type = codec.media_type
    href = data_uri(content, mime_type) if mechanism is DeliveryMechanism.DIRECT_OPEN else None

    action = DeliveryAction(
        file_name=file_name_for(event.title, codec.extension),
        mime_type=mime_type,
        content=content,
        mechanism=mechanism,
        href=href,
    )
    logger.info(f"Prepared {mechanism.value} delivery of {action.file_name}")
    return action
