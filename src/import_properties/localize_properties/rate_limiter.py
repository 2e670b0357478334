"""
Shared rate limiter for language-model calls.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Iterator


class RateLimiter:
    """
    Caps in-flight calls and enforces a minimum interval between call starts.

    One instance is shared by every record in a run, so parallel translation
    fan-out within a record still draws from a single budget.
    """

    def __init__(self, *, requests_per_second: float, max_concurrent: int) -> None:
        self._min_interval = 1.0 / requests_per_second if requests_per_second > 0 else 0.0
        self._semaphore = threading.BoundedSemaphore(max(1, max_concurrent))
        self._last_start = 0.0
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Sleep until the next call may start."""
        if not self._min_interval:
            return
        with self._lock:
            now = time.monotonic()
            wait_seconds = self._min_interval - (now - self._last_start)
            if wait_seconds > 0:
                time.sleep(wait_seconds)
            self._last_start = time.monotonic()

    @contextmanager
    def limit(self) -> Iterator[None]:
        """Hold a concurrency slot for the duration of one call."""
        with self._semaphore:
            self.wait()
            yield
