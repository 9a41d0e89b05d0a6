"""Prompt token estimation."""

from __future__ import annotations

import tiktoken

# Cache the encoding for reuse
_encoding: tiktoken.Encoding | None = None


def _get_encoding() -> tiktoken.Encoding:
    """Get or create the tiktoken encoding."""
    global _encoding
    if _encoding is None:
        _encoding = tiktoken.get_encoding("o200k_base")
    return _encoding


def count_tokens(text: str) -> int:
    """
    Count the number of tokens in a text string.

    Args:
        text: The text to count tokens for.

    Returns:
        Number of tokens.
    """
    return len(_get_encoding().encode(text))


def estimate_request_tokens(prompt: str, response_allowance: int = 2000) -> int:
    """
    Estimate the tokens a search request will consume.

    Web search adds retrieved page content to the context, so the prompt
    count is padded by a fixed allowance for results and the answer.
    """
    return count_tokens(prompt) + response_allowance
