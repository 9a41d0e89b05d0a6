"""Event records and response parsing."""

from .extractor import extract_candidates, parse_events
from .models import EventRecord, NormalizedEvent, SourceReference, dedupe_sources
from .normalizer import normalize, partition_events

__all__ = [
    "EventRecord",
    "NormalizedEvent",
    "SourceReference",
    "dedupe_sources",
    "extract_candidates",
    "normalize",
    "parse_events",
    "partition_events",
]
