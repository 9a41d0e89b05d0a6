"""Thread-safe token budget for search API calls."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


@dataclass
class RateLimiter:
    """
    Per-minute token budget with a fixed window.

    Web-search calls are expensive, so a request that would exceed the
    budget blocks until the current window ends.
    """

    tokens_per_minute: int = 30_000
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep
    _tokens_used: int = field(default=0, init=False)
    _window_start: float = field(default=0.0, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def __post_init__(self) -> None:
        self._window_start = self.clock()

    def _start_window_if_elapsed(self) -> None:
        now = self.clock()
        if now - self._window_start >= WINDOW_SECONDS:
            self._tokens_used = 0
            self._window_start = now

    def acquire(self, tokens: int) -> None:
        """
        Reserve tokens, waiting for the next window if the budget is spent.

        A single request larger than the whole budget is let through at the
        start of a fresh window.

        Args:
            tokens: Estimated tokens for the request.
        """
        with self._lock:
            self._start_window_if_elapsed()

            if self._tokens_used and self._tokens_used + tokens > self.tokens_per_minute:
                wait = max(0.0, WINDOW_SECONDS - (self.clock() - self._window_start))
                if wait > 0:
                    logger.info(f"Token budget spent, waiting {wait:.1f}s")
                    self.sleep(wait)
                self._tokens_used = 0
                self._window_start = self.clock()

            self._tokens_used += tokens

    @property
    def tokens_remaining(self) -> int:
        """Tokens left in the current window."""
        with self._lock:
            self._start_window_if_elapsed()
            return max(0, self.tokens_per_minute - self._tokens_used)
