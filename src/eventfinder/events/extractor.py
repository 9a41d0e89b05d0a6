"""Recover event records from free-form search API output."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from ..errors import MalformedResponseError
from .models import EventRecord

logger = logging.getLogger(__name__)

FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def _unfence(text: str) -> str:
    """Return the content of the first fenced block, or the text itself."""
    match = FENCED_BLOCK.search(text)
    if match and match.group(1):
        return match.group(1)
    return text


def extract_candidates(text: str) -> list[dict[str, Any]]:
    """
    Extract the JSON array of event objects embedded in a response.

    The model is asked for a bare array but often wraps it in a markdown
    fence or adds prose around it, so only the span between the first
    ``[`` and the last ``]`` is parsed.

    Args:
        text: Raw response text.

    Returns:
        List of candidate event objects, empty when the text is blank.

    Raises:
        MalformedResponseError: No array was found or it failed to parse.
    """
    text = (text or "").strip()
    if not text:
        return []

    working = _unfence(text)
    start = working.find("[")
    end = working.rfind("]")
    if start == -1 or end == -1 or end < start:
        logger.error(f"No JSON array found in response: {text!r}")
        raise MalformedResponseError("No valid JSON array found in the response.", raw_text=text)

    try:
        parsed = json.loads(working[start : end + 1])
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {text!r} ({e})")
        raise MalformedResponseError(f"Invalid JSON: {e}", raw_text=text) from e

    if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
        logger.error(f"Response array does not contain only objects: {text!r}")
        raise MalformedResponseError("Expected an array of event objects.", raw_text=text)

    logger.debug(f"Extracted {len(parsed)} candidate event(s)")
    return parsed


def parse_events(text: str) -> list[EventRecord]:
    """Extract candidates and convert them to event records."""
    return [EventRecord.from_dict(item) for item in extract_candidates(text)]
