"""Command-line interface for the AI event finder."""

from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer

from .calendar import calendar_filename, generate_ics
from .config import get_settings
from .errors import EventFinderError
from .events import EventRecord, parse_events
from .search import EventSearch, normalize_month

app = typer.Typer(
    name="eventfinder",
    help="Find events with AI web search and export them as a calendar",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False, level: str = "INFO") -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def format_event_date(value: str) -> str:
    """Render an ISO date as e.g. 'Saturday, June 1, 2024', or return it unchanged."""
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return value
    return f"{parsed:%A}, {parsed:%B} {parsed.day}, {parsed.year}"


def format_event_card(event: EventRecord) -> str:
    """Render an event as a plain-text card."""
    lines = [event.event_name]
    if event.category:
        lines[0] += f" [{event.category}]"
    lines.append(f"  {event.description}")
    lines.append(f"  When:  {format_event_date(event.date)} at {event.time}")
    lines.append(f"  Where: {event.location}")
    return "\n".join(lines)


@app.command()
def search(
    location: str = typer.Argument(..., help="University or location to search around"),
    topics: str = typer.Argument(..., help="Topics and categories of interest"),
    month: Optional[str] = typer.Option(
        None, "--month", "-m", help="Month name or number (default: current month)"
    ),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Year (default: current year)"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the events to this .ics file"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print events as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Search the web for events and print them as cards."""
    settings = get_settings()
    setup_logging(verbose, settings.log_level)
    logger = logging.getLogger(__name__)

    today = datetime.now()
    try:
        month_name = normalize_month(month if month is not None else today.month)
        result = EventSearch(settings=settings).find_events(
            location, topics, month_name, year or today.year
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except EventFinderError as e:
        typer.echo(f"Error: {e.user_message}", err=True)
        raise typer.Exit(1)

    if as_json:
        payload = {
            "events": [e.to_dict() for e in result.events],
            "sources": [{"uri": s.uri, "title": s.title} for s in result.sources],
        }
        typer.echo(json.dumps(payload, indent=2))
    elif not result.events:
        typer.echo("No events found.")
    else:
        for event in result.events:
            typer.echo(format_event_card(event))
            typer.echo("")
        if result.sources:
            typer.echo("Sources:")
            for source in result.sources:
                typer.echo(f"  - {source.title or source.uri}: {source.uri}")

    if output is not None:
        if output.is_dir():
            output = output / calendar_filename(month_name, year or today.year)
        output.write_text(generate_ics(result.events), encoding="utf-8")
        logger.info(f"Wrote calendar to {output}")
        typer.echo(f"Calendar written to {output}")


@app.command()
def export(
    source: Optional[Path] = typer.Argument(
        None, help="File with the raw search response or a JSON event array"
    ),
    stdin: bool = typer.Option(False, "--stdin", help="Read from stdin"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output .ics file (default: stdout)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Convert a saved search response into an .ics calendar."""
    setup_logging(verbose)

    if stdin:
        text = sys.stdin.read()
    elif source is not None:
        text = source.read_text(encoding="utf-8")
    else:
        typer.echo("Error: Provide an input file or use --stdin", err=True)
        raise typer.Exit(1)

    try:
        events = parse_events(text)
    except EventFinderError as e:
        typer.echo(f"Error: {e.user_message}", err=True)
        raise typer.Exit(1)

    content = generate_ics(events)
    if output is None:
        typer.echo(content)
    else:
        output.write_text(content, encoding="utf-8")
        typer.echo(f"Calendar written to {output}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="API host (default from config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="API port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    setup_logging(level=settings.log_level)
    uvicorn.run(
        "eventfinder.api:app",
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
            if not settings.openai_api_key:
                typer.echo("⚠️  OPENAI_API_KEY is not set; searches will fail")

        if show:
            typer.echo("\nCurrent Configuration:")
            typer.echo(f"  OpenAI Model: {settings.openai_model}")
            typer.echo(f"  Request Timeout: {settings.request_timeout}s")
            typer.echo(f"  Token Limit: {settings.token_limit_per_minute}/min")
            typer.echo(f"  API: {settings.api_host}:{settings.api_port}")
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
