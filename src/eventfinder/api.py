"""FastAPI endpoints for the event finder service."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.responses import Response
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .calendar import ICS_MEDIA_TYPE, calendar_filename, generate_ics
from .config import Settings, get_settings
from .errors import ConfigurationError, MalformedResponseError, UpstreamError
from .events import EventRecord
from .search import EventSearch, normalize_month

VERSION = __version__


# Pydantic models for API
class EventPayload(BaseModel):
    """Event in API requests and responses."""

    model_config = ConfigDict(populate_by_name=True)

    event_name: str = Field("", alias="eventName")
    description: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    category: Optional[str] = None

    @classmethod
    def from_record(cls, record: EventRecord) -> EventPayload:
        return cls.model_validate(record.to_dict())

    def to_record(self) -> EventRecord:
        return EventRecord.from_dict(self.model_dump(by_alias=True))


class SourcePayload(BaseModel):
    """Web page cited by the search."""

    uri: str
    title: str


class SearchRequest(BaseModel):
    """Request body for an event search."""

    location: str
    topics: str
    month: str
    year: int = Field(ge=1, le=9999)


class SearchResponse(BaseModel):
    """Response for an event search."""

    events: list[EventPayload]
    sources: list[SourcePayload]


class CalendarRequest(BaseModel):
    """Request body for calendar export."""

    events: list[EventPayload]
    month: Optional[str] = None
    year: Optional[int] = None


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


def get_event_search(settings: Settings = Depends(get_settings)) -> EventSearch:
    """Create the search client for a request."""
    return EventSearch(settings=settings)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Event Finder API",
        description="AI-powered event search with calendar export",
        version=VERSION,
    )

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=VERSION)

    @app.post("/api/events", response_model=SearchResponse, response_model_by_alias=True)
    def find_events(
        request: SearchRequest,
        _: str | None = Depends(get_api_key),
        search: EventSearch = Depends(get_event_search),
    ) -> SearchResponse:
        """
        Search the web for events in a month at a location.

        Returns the events found and the pages the search cited.
        """
        try:
            result = search.find_events(
                request.location, request.topics, request.month, request.year
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except ConfigurationError as e:
            raise HTTPException(status_code=503, detail=e.user_message)
        except (MalformedResponseError, UpstreamError) as e:
            raise HTTPException(status_code=502, detail=e.user_message)

        return SearchResponse(
            events=[EventPayload.from_record(e) for e in result.events],
            sources=[SourcePayload(uri=s.uri, title=s.title) for s in result.sources],
        )

    @app.post("/api/calendar")
    def export_calendar(
        request: CalendarRequest,
        _: str | None = Depends(get_api_key),
    ) -> Response:
        """Render events as a downloadable .ics file."""
        content = generate_ics(e.to_record() for e in request.events)

        filename = "events.ics"
        if request.month and request.year:
            try:
                filename = calendar_filename(normalize_month(request.month), request.year)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        return Response(
            content=content,
            media_type=ICS_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app


# For direct uvicorn usage
app = create_app()
