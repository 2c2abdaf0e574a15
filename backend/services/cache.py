"""In-process TTL cache for quote snapshots and per-user reads.

One ``TTLCache`` is created at startup and injected into route handlers, so
tests can swap in their own instance (or a fake clock) without touching call
sites. Entries live only in this process; there is no size bound beyond TTL
expiry, and expired entries are dropped lazily on ``get``.
"""

import time
from collections.abc import Callable
from typing import Any, Protocol

QUOTE_SNAPSHOT_KEY = "quote-snapshot"


def portfolios_key(user_id: int) -> str:
    return f"portfolios:{user_id}"


def holdings_key(user_id: int, portfolio_id: int) -> str:
    return f"holdings:{user_id}:{portfolio_id}"


def watchlist_key(user_id: int) -> str:
    return f"watchlist:{user_id}"


class CacheBackend(Protocol):
    """Interface the API depends on, satisfied by ``TTLCache``."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl_seconds: float) -> None: ...

    def invalidate(self, *keys: str) -> None: ...

    def clear(self) -> None: ...


class TTLCache:
    """Key/value store where every entry expires ``ttl_seconds`` after ``set``.

    Args:
        clock: Monotonic time source in seconds. Tests pass a fake clock to
            step past expiry without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        """Return the live value for ``key``, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store ``value`` under ``key`` until ``ttl_seconds`` from now.

        A non-positive TTL stores nothing and drops any existing entry.
        """
        if ttl_seconds <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = (value, self._clock() + ttl_seconds)

    def invalidate(self, *keys: str) -> None:
        """Drop the given keys immediately. Unknown keys are ignored."""
        for key in keys:
            self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        # Counts expired-but-unread entries too
        return len(self._entries)
