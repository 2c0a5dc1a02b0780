"""In-memory sliding-window limiter for failed password attempts.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: each key has its own lock, so concurrent failures on the
  same post are never lost while unrelated posts do not contend.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Hashable

from collab_board.adapters.rate_limit.base import AbstractAttemptLimiter


@dataclass
class _AttemptHistory:
    lock: threading.Lock = field(default_factory=threading.Lock)
    failures: deque[float] = field(default_factory=deque)


class InMemorySlidingWindowAttemptLimiter(AbstractAttemptLimiter):
    """Block a key after ``max_failures`` failures within ``window_seconds``.

    A failure counts while it is strictly younger than the window; once it
    ages out it is pruned on the next access to that key.
    """

    def __init__(
        self,
        *,
        max_failures: int = 5,
        window_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_failures: Failures within the window that block the key.
            window_seconds: Length of the sliding window in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If max_failures or window_seconds are invalid.
        """
        if max_failures < 1:
            raise ValueError("max_failures must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._max_failures = max_failures
        self._window_seconds = window_seconds
        self._clock = clock
        self._table_lock = threading.Lock()
        self._histories: dict[str, _AttemptHistory] = {}

    @property
    def max_failures(self) -> int:
        return self._max_failures

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    @staticmethod
    def _normalize_key(key: Hashable) -> str:
        # Post ids arrive as ints from the path and as strings from JSON bodies
        normalized = str(key).strip()
        if not normalized:
            raise ValueError("key must be non-empty")
        return normalized

    def _history(self, key: str) -> _AttemptHistory:
        with self._table_lock:
            history = self._histories.get(key)
            if history is None:
                history = _AttemptHistory()
                self._histories[key] = history
            return history

    def _prune_locked(self, history: _AttemptHistory, now: float) -> None:
        cutoff = now - self._window_seconds
        failures = history.failures
        while failures and failures[0] <= cutoff:
            failures.popleft()

    def check_allowed(self, key: Hashable) -> bool:
        history = self._history(self._normalize_key(key))
        with history.lock:
            self._prune_locked(history, self._clock())
            return len(history.failures) < self._max_failures

    def record_failure(self, key: Hashable) -> None:
        history = self._history(self._normalize_key(key))
        with history.lock:
            now = self._clock()
            self._prune_locked(history, now)
            history.failures.append(now)

    def retry_after_seconds(self, key: Hashable) -> int | None:
        history = self._history(self._normalize_key(key))
        with history.lock:
            now = self._clock()
            self._prune_locked(history, now)
            excess = len(history.failures) - self._max_failures
            if excess < 0:
                return None
            # The key unblocks once enough of the oldest failures expire
            unblock_at = history.failures[excess] + self._window_seconds
            return max(1, int(math.ceil(unblock_at - now)))

    def reset(self, key: Hashable) -> None:
        normalized = self._normalize_key(key)
        with self._table_lock:
            history = self._histories.get(normalized)
        if history is not None:
            with history.lock:
                history.failures.clear()

    def failure_count(self, key: Hashable) -> int:
        """Number of failures currently inside the window for ``key``."""
        history = self._history(self._normalize_key(key))
        with history.lock:
            self._prune_locked(history, self._clock())
            return len(history.failures)
