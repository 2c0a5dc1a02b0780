"""Attempt limiter interface.

Services depend on this abstraction (not the concrete implementation) so
the storage backend can be swapped later (e.g., Redis) without touching
the password-gate logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Hashable


class AbstractAttemptLimiter(ABC):
    """Counts failed attempts per key within a sliding time window."""

    @abstractmethod
    def check_allowed(self, key: Hashable) -> bool:
        """Return whether another attempt may be made for ``key``.

        Expired failures are pruned first, so a key recovers on its own once
        its failures age out of the window.
        """
        raise NotImplementedError

    @abstractmethod
    def record_failure(self, key: Hashable) -> None:
        """Record one failed attempt for ``key`` at the current instant."""
        raise NotImplementedError

    @abstractmethod
    def retry_after_seconds(self, key: Hashable) -> int | None:
        """Seconds until ``key`` is allowed again, or None if it already is."""
        raise NotImplementedError

    @abstractmethod
    def reset(self, key: Hashable) -> None:
        """Forget every recorded failure for ``key``."""
        raise NotImplementedError
