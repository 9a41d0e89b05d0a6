"""Search-grounded event lookup module."""

from .client import EventSearch, SearchResult, collect_sources, normalize_month
from .tokenizer import count_tokens

__all__ = ["EventSearch", "SearchResult", "collect_sources", "count_tokens", "normalize_month"]
