"""FastAPI endpoints for the textcal service."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response, Security
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

from . import __version__
from .calendar import DeliveryMechanism, build_web_calendar_link, deliver_event
from .codecs import parse_document_to_event
from .config import Settings, get_settings
from .errors import EventExtractionError
from .models import NormalizedEvent
from .pipeline import parse_text_to_event


# Pydantic models for API
class ParseTextRequest(BaseModel):
    """Request body for text parsing."""

    text: str
    now: Optional[datetime] = None


class ImportRequest(BaseModel):
    """Request body for .ics import."""

    document: str


class EventModel(BaseModel):
    """A normalized event."""

    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    description: Optional[str] = None
    location: Optional[str] = None

    def to_event(self) -> NormalizedEvent:
        return NormalizedEvent(**self.model_dump())


class EventResponse(EventModel):
    """Event in API response, with its Google Calendar link."""

    calendar_link: str


class LinkResponse(BaseModel):
    """Google Calendar link response."""

    calendar_link: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


# API key authentication
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_api_key(
    api_key: str | None = Security(api_key_header),
    settings: Settings = Depends(get_settings),
) -> str | None:
    """Validate API key if configured."""
    if settings.api_key and api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return api_key


def _event_response(event: NormalizedEvent, settings: Settings) -> EventResponse:
    return EventResponse(
        **event.to_dict(),
        calendar_link=build_web_calendar_link(event, base_url=settings.google_calendar_url),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="textcal - Text to Calendar API",
        description="Turn free-form text and .ics files into calendar events",
        version=__version__,
    )

    @app.exception_handler(EventExtractionError)
    async def extraction_error_handler(request: Request, exc: EventExtractionError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "error": type(exc).__name__},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.post("/api/events/parse", response_model=EventResponse)
    async def parse_text(
        request: ParseTextRequest,
        _: str | None = Depends(get_api_key),
        settings: Settings = Depends(get_settings),
    ) -> EventResponse:
        """
        Extract an event from free-form text.

        Returns the event and a Google Calendar link for it.
        """
        event = parse_text_to_event(request.text, now=request.now)
        return _event_response(event, settings)

    @app.post("/api/events/import", response_model=EventResponse)
    async def import_document(
        request: ImportRequest,
        _: str | None = Depends(get_api_key),
        settings: Settings = Depends(get_settings),
    ) -> EventResponse:
        """Read the first event of an .ics document."""
        event = parse_document_to_event(request.document)
        return _event_response(event, settings)

    @app.post("/api/events/link", response_model=LinkResponse)
    async def calendar_link(
        request: EventModel,
        _: str | None = Depends(get_api_key),
        settings: Settings = Depends(get_settings),
    ) -> LinkResponse:
        """Build a Google Calendar link for an event."""
        link = build_web_calendar_link(request.to_event(), base_url=settings.google_calendar_url)
        return LinkResponse(calendar_link=link)

    @app.post("/api/events/export")
    async def export_event(
        request: EventModel,
        platform: DeliveryMechanism = DeliveryMechanism.DOWNLOAD,
        _: str | None = Depends(get_api_key),
    ) -> Response:
        """
        Serialize an event as an .ics document.

        ``platform=direct-open`` serves it inline so capable clients open it
        straight away; ``download`` serves it as an attachment.
        """
        action = deliver_event(request.to_event(), platform)
        return Response(
            content=action.content,
            media_type=action.mime_type,
            headers={"Content-Disposition": action.disposition},
        )

    @app.post("/api/events/extract", response_model=EventResponse)
    def extract_event(
        request: ParseTextRequest,
        _: str | None = Depends(get_api_key),
        settings: Settings = Depends(get_settings),
    ) -> EventResponse:
        """
        Extract an event with the OpenAI model.

        Runs in the threadpool: the OpenAI client call blocks.
        """
        from .ai import AiEventExtractor

        extractor = AiEventExtractor(settings=settings)
        event = extractor.extract(request.text, now=request.now)
        return _event_response(event, settings)

    return app
