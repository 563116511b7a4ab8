"""Per-minute request budget for the summarization endpoint."""

import threading
import time
from typing import Callable

from ..exceptions import RateLimitExceeded


class RequestBudget:
    """
    Fixed-window request counter.

    The window restarts once window_seconds have passed since it opened.
    acquire() either reserves a request or raises RateLimitExceeded.
    """

    def __init__(
        self,
        requests_per_minute: int = 20,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.requests_per_minute = requests_per_minute
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._window_start = clock()
        self._requests = 0
        self._tokens = 0

    def _roll_window(self) -> None:
        now = self._clock()
        if now - self._window_start >= self.window_seconds:
            self._window_start = now
            self._requests = 0
            self._tokens = 0

    def acquire(self) -> None:
        """Reserve one request in the current window."""
        with self._lock:
            self._roll_window()
            if self._requests >= self.requests_per_minute:
                raise RateLimitExceeded(
                    f"Rate limit exceeded: {self.requests_per_minute} requests per minute"
                )
            self._requests += 1

    def record_tokens(self, tokens: int) -> None:
        with self._lock:
            self._tokens += tokens

    @property
    def remaining(self) -> int:
        with self._lock:
            self._roll_window()
            return max(0, self.requests_per_minute - self._requests)

    @property
    def tokens_this_window(self) -> int:
        with self._lock:
            self._roll_window()
            return self._tokens
