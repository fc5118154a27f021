"""Exceptions raised by textcal."""

from __future__ import annotations


class TextcalError(Exception):
    """Base class for all textcal errors."""

    default_message = "Something went wrong while processing the event."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class EventExtractionError(TextcalError):
    """Input could not be turned into an event. Failure means no record."""


class NoTemporalMatch(EventExtractionError):
    default_message = "Could not find any date or time in the text."


class NoEventBlock(EventExtractionError):
    default_message = "No event found in the calendar file."


class MalformedDocument(EventExtractionError):
    default_message = "Failed to parse the calendar file."


class UnknownFormat(TextcalError):
    default_message = "Unsupported calendar format."


class ExtractionServiceError(EventExtractionError):
    default_message = "Failed to process event details."
