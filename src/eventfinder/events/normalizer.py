"""Date/time validation for event records."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable

from .models import EventRecord, NormalizedEvent

logger = logging.getLogger(__name__)

DEFAULT_TIME = "00:00"
DEFAULT_DURATION = timedelta(hours=2)

_NUMBER = re.compile(r"\d+", re.ASCII)


def _to_int(part: str) -> int:
    part = part.strip()
    if not _NUMBER.fullmatch(part):
        raise ValueError(f"not a number: {part!r}")
    return int(part)


def resolve_start(date: str, time: str | None = None, tz: tzinfo | None = None) -> datetime:
    """
    Resolve a ``YYYY-MM-DD`` date and ``HH:MM`` time to a UTC instant.

    The values are read as wall-clock time in ``tz``, or in the local
    timezone of this machine when ``tz`` is None.

    Raises:
        ValueError: A component is not a number or the date-time does not exist.
    """
    date_parts = date.split("-")
    if len(date_parts) != 3:
        raise ValueError(f"expected YYYY-MM-DD, got {date!r}")
    time_parts = (time or DEFAULT_TIME).split(":")
    if len(time_parts) not in (2, 3):
        raise ValueError(f"expected HH:MM, got {time!r}")

    year, month, day = (_to_int(p) for p in date_parts)
    hours, minutes = (_to_int(p) for p in time_parts[:2])

    wall_clock = datetime(year, month, day, hours, minutes)
    if tz is not None:
        wall_clock = wall_clock.replace(tzinfo=tz)
    try:
        return wall_clock.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(str(e)) from e


def normalize(
    record: EventRecord,
    tz: tzinfo | None = None,
    duration: timedelta = DEFAULT_DURATION,
) -> NormalizedEvent | None:
    """
    Validate a record's date and time.

    Args:
        record: Event record from the extractor.
        tz: Timezone the wall-clock values are in (default: local).
        duration: Length given to the event; records carry no end time.

    Returns:
        NormalizedEvent, or None if the record has to be skipped.
    """
    try:
        start = resolve_start(record.date, record.time, tz=tz)
        end = start + duration
    except (ValueError, OverflowError) as e:
        logger.warning(
            f"Skipping event {record.event_name!r}: invalid date/time "
            f"{record.date!r} {record.time!r} ({e})"
        )
        return None

    return NormalizedEvent(record=record, start=start, end=end)


def partition_events(
    records: Iterable[EventRecord],
    tz: tzinfo | None = None,
) -> tuple[list[NormalizedEvent], list[EventRecord]]:
    """Split records into normalized events and rejected records, keeping order."""
    accepted: list[NormalizedEvent] = []
    rejected: list[EventRecord] = []
    for record in records:
        normalized = normalize(record, tz=tz)
        if normalized is None:
            rejected.append(record)
        else:
            accepted.append(normalized)

    if rejected:
        logger.info(f"Accepted {len(accepted)} event(s), skipped {len(rejected)}")
    return accepted, rejected
