"""Command-line interface for textcal."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .calendar import DeliveryMechanism, build_web_calendar_link, deliver_event
from .codecs import parse_document_to_event
from .config import get_settings
from .errors import TextcalError
from .models import NormalizedEvent
from .pipeline import parse_text_to_event

app = typer.Typer(
    name="textcal",
    help="Turn free-form text and .ics files into calendar events",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _parse_now(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Not an ISO 8601 date/time: {value}", param_hint="--now")


def _read_text(text: Optional[str], stdin: bool) -> str:
    if stdin:
        return sys.stdin.read()
    if not text:
        typer.echo("Error: Provide text as argument or use --stdin", err=True)
        raise typer.Exit(1)
    return text


def _load_event(text: Optional[str], ics: Optional[Path], stdin: bool, now: Optional[str]) -> NormalizedEvent:
    """Build the event from an .ics file when given, otherwise from text."""
    try:
        if ics is not None:
            return parse_document_to_event(ics.read_bytes())
        return parse_text_to_event(_read_text(text, stdin), now=_parse_now(now))
    except TextcalError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)


def _show(event: NormalizedEvent, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(event.to_dict(), indent=2))
        return

    when = (
        f"{event.start:%Y-%m-%d} (all day)"
        if event.all_day
        else f"{event.start:%Y-%m-%d %H:%M} - {event.end:%Y-%m-%d %H:%M} UTC"
    )
    typer.echo(f"📌 {event.title}")
    typer.echo(f"📅 {when}")
    if event.location:
        typer.echo(f"📍 {event.location}")
    if event.description:
        typer.echo(f"\n{event.description}")


@app.command()
def parse(
    text: Optional[str] = typer.Argument(None, help="Text describing the event"),
    stdin: bool = typer.Option(False, "--stdin", help="Read from stdin"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO 8601) for relative dates"),
    as_json: bool = typer.Option(False, "--json", help="Print the event as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Extract an event from free-form text."""
    setup_logging(verbose)
    _show(_load_event(text, None, stdin, now), as_json)


@app.command("import")
def import_(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help=".ics file to read"),
    as_json: bool = typer.Option(False, "--json", help="Print the event as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Read the first event of an .ics file."""
    setup_logging(verbose)
    _show(_load_event(None, path, False, None), as_json)


@app.command()
def link(
    text: Optional[str] = typer.Argument(None, help="Text describing the event"),
    ics: Optional[Path] = typer.Option(None, "--ics", exists=True, dir_okay=False, help="Use an .ics file instead of text"),
    stdin: bool = typer.Option(False, "--stdin", help="Read text from stdin"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO 8601) for relative dates"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Print a Google Calendar link for the event."""
    setup_logging(verbose)
    event = _load_event(text, ics, stdin, now)
    typer.echo(build_web_calendar_link(event))


@app.command()
def export(
    text: Optional[str] = typer.Argument(None, help="Text describing the event"),
    ics: Optional[Path] = typer.Option(None, "--ics", exists=True, dir_okay=False, help="Use an .ics file instead of text"),
    platform: DeliveryMechanism = typer.Option(
        DeliveryMechanism.DOWNLOAD, "--platform", "-p", help="How the calendar file is handed over"
    ),
    output: Path = typer.Option(Path("."), "--output", "-o", file_okay=False, help="Directory for downloads"),
    stdin: bool = typer.Option(False, "--stdin", help="Read text from stdin"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO 8601) for relative dates"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Export the event as an .ics file, or as a data URI for direct opening."""
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    event = _load_event(text, ics, stdin, now)
    action = deliver_event(event, platform)

    if action.mechanism is DeliveryMechanism.DIRECT_OPEN:
        typer.echo(action.href)
        return

    output.mkdir(parents=True, exist_ok=True)
    target = output / action.file_name
    target.write_bytes(action.content)
    logger.info(f"Wrote {len(action.content)} bytes to {target}")
    typer.echo(str(target))


@app.command()
def extract(
    text: Optional[str] = typer.Argument(None, help="Text describing the event"),
    stdin: bool = typer.Option(False, "--stdin", help="Read from stdin"),
    as_json: bool = typer.Option(False, "--json", help="Print the event as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Extract an event with the OpenAI model instead of the built-in parser."""
    setup_logging(verbose)
    from .ai import AiEventExtractor

    content = _read_text(text, stdin)
    try:
        event = AiEventExtractor(settings=get_settings()).extract(content)
    except TextcalError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)
    _show(event, as_json)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="API host (default from config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="API port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    setup_logging()
    uvicorn.run(
        "textcal.api:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@app.command()
def config(
    validate: bool = typer.Option(False, "--validate", help="Validate configuration"),
    show: bool = typer.Option(False, "--show", help="Show current config (masks secrets)"),
) -> None:
    """Check or display configuration."""
    try:
        settings = get_settings()

        if validate:
            typer.echo("✅ Configuration is valid")

        if show:
            typer.echo("\nCurrent Configuration:")
            typer.echo(f"  Timezone: {settings.timezone}")
            typer.echo(f"  Default Duration: {settings.default_duration_minutes} min")
            typer.echo(f"  Default Title: {settings.default_title}")
            typer.echo(f"  PRODID: {settings.prodid}")
            typer.echo(f"  OpenAI Model: {settings.openai_model}")
            typer.echo(f"  OpenAI Key: {'✓ set' if settings.openai_api_key else '✗ not set'}")
            typer.echo(f"  API Key: {'✓ set' if settings.api_key else '✗ not set'}")

    except Exception as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(1)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
