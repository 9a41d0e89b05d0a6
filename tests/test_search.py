"""Tests for the search-grounded event lookup."""

from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest

from eventfinder.config import Settings
from eventfinder.errors import (
    UPSTREAM_FAILURE_MESSAGE,
    ConfigurationError,
    MalformedResponseError,
    UpstreamError,
)
from eventfinder.events import SourceReference, dedupe_sources
from eventfinder.search import EventSearch, collect_sources, normalize_month


def citation(url, title="Page"):
    return SimpleNamespace(type="url_citation", url=url, title=title)


def fake_response(text, citations=()):
    return SimpleNamespace(
        output_text=text,
        output=[
            SimpleNamespace(type="web_search_call"),
            SimpleNamespace(
                type="message",
                content=[SimpleNamespace(type="output_text", annotations=list(citations))],
            ),
        ],
    )


@pytest.fixture
def settings():
    return Settings(openai_api_key="test-key", openai_model="test-model")


@pytest.fixture
def openai_client():
    with patch("eventfinder.search.client.OpenAI") as mock_openai, patch(
        "eventfinder.search.client.estimate_request_tokens", return_value=100
    ):
        client = Mock()
        mock_openai.return_value = client
        yield client


@pytest.fixture
def search(settings, openai_client):
    return EventSearch(settings=settings)


def test_find_events_parses_events_and_sources(search, openai_client):
    openai_client.responses.create.return_value = fake_response(
        '```json\n[{"eventName": "Biotech Summit", "description": "Talks.", '
        '"date": "2025-03-04", "time": "09:00", "location": "Reitz Union", '
        '"category": "Conference"}]\n```',
        citations=[
            citation("https://example.edu/summit", "Summit"),
            citation("https://example.edu/summit", "Summit again"),
            citation("https://example.edu/calendar", "Calendar"),
        ],
    )

    result = search.find_events("University of Florida", "biotech conferences", "march", 2025)

    assert [e.event_name for e in result.events] == ["Biotech Summit"]
    assert result.events[0].category == "Conference"
    assert result.sources == [
        SourceReference("https://example.edu/summit", "Summit"),
        SourceReference("https://example.edu/calendar", "Calendar"),
    ]


def test_find_events_sends_web_search_request(search, openai_client):
    openai_client.responses.create.return_value = fake_response("[]")

    search.find_events("Stanford University", "jazz concerts", 6, 2025)

    kwargs = openai_client.responses.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["tools"] == [{"type": "web_search_preview"}]
    assert "June 2025" in kwargs["input"]
    assert '"Stanford University"' in kwargs["input"]
    assert "jazz concerts" in kwargs["input"]


def test_empty_response_means_no_events(search, openai_client):
    openai_client.responses.create.return_value = fake_response("   ")

    result = search.find_events("Gainesville", "art shows", "April", 2025)

    assert result.events == []
    assert result.sources == []


def test_malformed_response_propagates(search, openai_client):
    openai_client.responses.create.return_value = fake_response("I could not find any events.")

    with pytest.raises(MalformedResponseError):
        search.find_events("Gainesville", "art shows", "April", 2025)


def test_api_failure_becomes_upstream_error(search):
    with patch.object(EventSearch, "_call_openai", side_effect=RuntimeError("connection reset")):
        with pytest.raises(UpstreamError) as exc_info:
            search.find_events("Gainesville", "art shows", "April", 2025)

    assert exc_info.value.user_message == UPSTREAM_FAILURE_MESSAGE
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.parametrize("location,topics", [("", "jazz"), ("Gainesville", "  ")])
def test_blank_query_is_rejected(search, openai_client, location, topics):
    with pytest.raises(ValueError, match="Please provide both"):
        search.find_events(location, topics, "May", 2025)
    openai_client.responses.create.assert_not_called()


def test_call_is_rate_limited(search, openai_client):
    openai_client.responses.create.return_value = fake_response("[]")
    with patch.object(search._rate_limiter, "acquire") as acquire:
        search.find_events("Gainesville", "jazz", "May", 2025)
    acquire.assert_called_once_with(100)


@pytest.mark.parametrize(
    "value,expected",
    [("June", "June"), ("june", "June"), (" DECEMBER ", "December"), (1, "January"), ("12", "December")],
)
def test_normalize_month(value, expected):
    assert normalize_month(value) == expected


@pytest.mark.parametrize("value", ["Juneteenth", "", 0, 13, "13"])
def test_normalize_month_rejects_unknown(value):
    with pytest.raises(ValueError):
        normalize_month(value)


def test_collect_sources_ignores_other_annotations():
    response = fake_response(
        "[]",
        citations=[
            SimpleNamespace(type="file_citation", file_id="f1"),
            citation("https://example.com/a", None),
        ],
    )
    assert collect_sources(response) == [SourceReference("https://example.com/a", "https://example.com/a")]


def test_dedupe_sources_drops_empty_uris():
    sources = [SourceReference(""), SourceReference("https://a"), SourceReference("https://a", "dup")]
    assert dedupe_sources(sources) == [SourceReference("https://a")]


def test_missing_api_key_raises_configuration_error():
    with patch("eventfinder.search.client.OpenAI") as mock_openai:
        search = EventSearch(settings=Settings(openai_api_key=None))

        with pytest.raises(ConfigurationError):
            search.find_events("Gainesville", "jazz", "May", 2025)

    mock_openai.assert_not_called()
