"""iCalendar (.ics) generation for found events."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone, tzinfo
from typing import Iterable

from ..events.models import EventRecord, NormalizedEvent
from ..events.normalizer import partition_events

logger = logging.getLogger(__name__)

PRODID = "-//AIEventScraper//EN"
UID_DOMAIN = "aieventscraper.com"
ICS_MEDIA_TYPE = "text/calendar; charset=utf-8"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_NEWLINE = re.compile(r"\r\n|\r|\n")


def format_ics_datetime(dt: datetime) -> str:
    """Format an aware datetime as a UTC iCalendar timestamp (YYYYMMDDTHHMMSSZ)."""
    dt = dt.astimezone(timezone.utc)
    # %Y is not zero-padded below year 1000 on glibc
    return f"{dt.year:04d}{dt:%m%dT%H%M%SZ}"


def escape_newlines(text: str) -> str:
    """Replace line breaks with the literal ``\\n`` escape."""
    return _NEWLINE.sub(r"\\n", text)


def make_uid(record: EventRecord) -> str:
    """
    Build the event UID from its date and alphanumeric name.

    Two events with the same date and sanitized name share a UID.
    """
    return f"{record.date}-{_NON_ALNUM.sub('', record.event_name)}@{UID_DOMAIN}"


def _vevent(event: NormalizedEvent, dtstamp: str) -> str:
    record = event.record
    lines = [
        "BEGIN:VEVENT",
        f"UID:{make_uid(record)}",
        f"DTSTAMP:{dtstamp}",
        f"DTSTART:{format_ics_datetime(event.start)}",
        f"DTEND:{format_ics_datetime(event.end)}",
        f"SUMMARY:{record.event_name}",
        f"DESCRIPTION:{escape_newlines(record.description)}",
        f"LOCATION:{escape_newlines(record.location)}",
        "END:VEVENT",
    ]
    return "\n".join(lines)


def generate_ics(
    records: Iterable[EventRecord],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> str:
    """
    Generate a VCALENDAR document for a list of events.

    Records whose date or time cannot be resolved are skipped; an empty
    or fully rejected list still yields a valid, empty calendar.

    Args:
        records: Events to include.
        now: Creation instant for DTSTAMP (default: current time).
        tz: Timezone event times are read in (default: local).

    Returns:
        The calendar document.
    """
    dtstamp = format_ics_datetime(now or datetime.now(timezone.utc))

    accepted, rejected = partition_events(records, tz=tz)
    blocks = [_vevent(event, dtstamp) for event in accepted]

    logger.info(f"Generated calendar with {len(blocks)} event(s), {len(rejected)} skipped")

    return "\n".join(
        ["BEGIN:VCALENDAR", "VERSION:2.0", f"PRODID:{PRODID}", *blocks, "END:VCALENDAR"]
    )


def calendar_filename(month: str, year: int) -> str:
    """Download filename for a month's calendar."""
    return f"events_{month}_{year}.ics"
