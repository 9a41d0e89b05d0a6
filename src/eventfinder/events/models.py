"""Event and source records shared by the search, calendar and API layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class EventRecord:
    """An event found by the search API."""

    event_name: str
    description: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    location: str
    category: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EventRecord:
        """
        Build a record from a loosely-typed candidate object.

        Missing fields become empty strings; ``category`` stays ``None``
        when absent.

        Args:
            data: Mapping using the camelCase wire names.

        Returns:
            The event record.
        """
        category = data.get("category")
        return cls(
            event_name=_as_text(data.get("eventName")),
            description=_as_text(data.get("description")),
            date=_as_text(data.get("date")),
            time=_as_text(data.get("time")),
            location=_as_text(data.get("location")),
            category=None if category is None else _as_text(category),
        )

    def to_dict(self) -> dict[str, str | None]:
        """Return the record using the camelCase wire names."""
        return {
            "eventName": self.event_name,
            "description": self.description,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "category": self.category,
        }


@dataclass(frozen=True)
class NormalizedEvent:
    """An event record whose date and time resolved to UTC instants."""

    record: EventRecord
    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


@dataclass(frozen=True)
class SourceReference:
    """A web page the search API cited for its answer."""

    uri: str
    title: str = ""


def dedupe_sources(sources: Iterable[SourceReference]) -> list[SourceReference]:
    """Drop repeated and empty URIs, keeping the first occurrence of each."""
    seen: set[str] = set()
    unique = []
    for source in sources:
        if not source.uri or source.uri in seen:
            continue
        seen.add(source.uri)
        unique.append(source)
    return unique
