"""Exceptions raised while searching for events and parsing the results."""

from __future__ import annotations

MALFORMED_RESPONSE_MESSAGE = "Received an invalid or malformed JSON response from the AI."
UPSTREAM_FAILURE_MESSAGE = (
    "Failed to fetch events. Please check your API key and network connection."
)


class EventFinderError(Exception):
    """Base class for errors surfaced to users."""

    user_message = "An unexpected error occurred."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.user_message)
        self.detail = detail


class MalformedResponseError(EventFinderError):
    """The search API returned text without a parseable event array."""

    user_message = MALFORMED_RESPONSE_MESSAGE

    def __init__(self, detail: str | None = None, raw_text: str = "") -> None:
        super().__init__(detail)
        self.raw_text = raw_text


class UpstreamError(EventFinderError):
    """The search API call itself failed."""

    user_message = UPSTREAM_FAILURE_MESSAGE


class ConfigurationError(EventFinderError):
    """A setting needed for the requested operation is missing."""

    user_message = "OPENAI_API_KEY environment variable not set."
