"""Dashboard Cache — single-entry read-through cache with a bounded TTL.

Invariants:
    - Holds at most one value together with its expiry instant
    - Every read checks expiry explicitly; expired entries are never returned
    - Writes elsewhere never invalidate the entry (stale reads up to the TTL)

Design Decisions:
    - Explicit object owned by app.state, not a module global
    - Clock is injected so expiry is testable without sleeping
"""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class _Entry:
    value: Any
    expires_at: float


class DashboardCache:
    """Single-entry TTL cache for aggregate dashboard statistics."""

    def __init__(
        self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: _Entry | None = None

    def get(self) -> Any | None:
        """Return the cached value, or None when empty or expired."""
        entry = self._entry
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entry = None
            return None
        return entry.value

    def set(self, value: Any) -> None:
        self._entry = _Entry(value=value, expires_at=self._clock() + self.ttl_seconds)

    def clear(self) -> None:
        self._entry = None

    async def get_or_load(self, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value or await `loader()` and cache its result."""
        cached = self.get()
        if cached is not None:
            return cached
        value = await loader()
        self.set(value)
        return value
