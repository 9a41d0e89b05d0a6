"""Event search using OpenAI's web search tool."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from openai import OpenAI
from tenacity import retry, stop_after_attempt, wait_random_exponential

from ..errors import ConfigurationError, MalformedResponseError, UpstreamError
from ..events.extractor import parse_events
from ..events.models import EventRecord, SourceReference, dedupe_sources
from ..utils.rate_limiter import RateLimiter
from .tokenizer import estimate_request_tokens

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

MONTH_NAMES = list(calendar.month_name)[1:]
WEB_SEARCH_TOOL = {"type": "web_search_preview"}


def normalize_month(month: str | int) -> str:
    """
    Return the English month name for a month name or number.

    Raises:
        ValueError: The month is not recognised.
    """
    if isinstance(month, int) or str(month).strip().isdigit():
        number = int(month)
        if 1 <= number <= 12:
            return MONTH_NAMES[number - 1]
    else:
        for name in MONTH_NAMES:
            if name.lower() == str(month).strip().lower():
                return name
    raise ValueError(f"Unknown month: {month!r}")


@dataclass
class SearchResult:
    """Events found for a query, plus the pages the model cited."""

    events: list[EventRecord] = field(default_factory=list)
    sources: list[SourceReference] = field(default_factory=list)


def collect_sources(response: Any) -> list[SourceReference]:
    """Pull ``url_citation`` annotations out of a Responses API result."""
    sources = []
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for content in getattr(item, "content", None) or []:
            for annotation in getattr(content, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                url = getattr(annotation, "url", None) or ""
                sources.append(SourceReference(uri=url, title=getattr(annotation, "title", None) or url))
    return dedupe_sources(sources)


@dataclass
class EventSearch:
    """
    Finds events for a location and topics using a search-grounded model.

    Handles rate limiting, retries, and parsing of the model output.
    """

    settings: Settings
    _client: OpenAI | None = field(default=None, init=False)
    _rate_limiter: RateLimiter | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        """Initialize OpenAI client and rate limiter."""
        if self.settings.openai_api_key:
            self._client = OpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.request_timeout,
            )
        self._rate_limiter = RateLimiter(
            tokens_per_minute=self.settings.token_limit_per_minute
        )

    @retry(
        wait=wait_random_exponential(min=1, max=30),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    def _call_openai(self, prompt: str) -> Any:
        """
        Make a rate-limited web search call.

        Args:
            prompt: The prompt to send.

        Returns:
            The Responses API result.
        """
        estimated_tokens = estimate_request_tokens(prompt)
        self._rate_limiter.acquire(estimated_tokens)

        logger.debug(f"Calling OpenAI API with ~{estimated_tokens} tokens")

        return self._client.responses.create(
            model=self.settings.openai_model,
            tools=[WEB_SEARCH_TOOL],
            input=prompt,
        )

    def find_events(
        self,
        location: str,
        topics: str,
        month: str | int,
        year: int,
    ) -> SearchResult:
        """
        Search for events happening in a month at a location.

        Args:
            location: University, city or venue to search around.
            topics: Free-text description of the events wanted.
            month: Month name or number.
            year: Four-digit year.

        Returns:
            SearchResult with the parsed events and cited sources.

        Raises:
            ValueError: Location or topics are blank, or the month is unknown.
            ConfigurationError: No OpenAI API key is configured.
            MalformedResponseError: The model output held no parseable array.
            UpstreamError: The API call failed.
        """
        if not location.strip() or not topics.strip():
            raise ValueError("Please provide both a university/location and topics to search for.")
        month_name = normalize_month(month)
        if self._client is None:
            raise ConfigurationError("OpenAI API key is not configured")

        prompt = self._build_prompt(location.strip(), topics.strip(), month_name, year)
        logger.info(f"Searching events for {location!r} in {month_name} {year}")

        try:
            response = self._call_openai(prompt)
        except Exception as e:
            logger.error(f"Error fetching events from OpenAI API: {e}")
            raise UpstreamError(str(e)) from e

        text = getattr(response, "output_text", None) or ""
        try:
            events = parse_events(text)
        except MalformedResponseError:
            logger.error("Search response could not be parsed")
            raise

        sources = collect_sources(response)
        logger.info(f"Found {len(events)} event(s) with {len(sources)} source(s)")
        return SearchResult(events=events, sources=sources)

    def _build_prompt(self, location: str, topics: str, month: str, year: int) -> str:
        """Build the event curator prompt."""
        return f"""Act as an expert event curator performing a comprehensive web search.
Find events happening in {month} {year} in the following location: "{location}".

Strictly limit the search to these topics and categories:
---
TOPICS: "{topics}"
---

For each matching event give the event name, a concise one-sentence description,
the date (YYYY-MM-DD), the start time (HH:MM, 24-hour), the specific location,
and a relevant category (e.g. "Concert", "Conference", "Seminar", "Art Show", "Workshop").

Return the result only as a JSON array of objects with these fields:
  eventName: string
  description: string
  date: string (YYYY-MM-DD)
  time: string (HH:MM)
  location: string
  category: string

Do not include any other text, commentary, or markdown formatting.
If no relevant events are found, return an empty array: []."""
