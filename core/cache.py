"""
Time-based response cache for upstream commerce data.

Entries expire a fixed number of seconds after they are written. Expiry is
passive: nothing sweeps the cache, an expired entry is dropped when it is
read. Writes are last-write-wins without locking; cached values are
snapshots of upstream data, so a lost race only costs an extra upstream call.

Usage:
    cache = ResponseCache(ttl_seconds=300)
    cache.set("categories", categories)
    cached = cache.get("categories")  # None once 300 s have passed
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


DEFAULT_TTL_SECONDS = 300


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the clock reading after which it is stale."""

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class ResponseCache:
    """
    In-process TTL cache keyed by opaque strings.

    Args:
        ttl_seconds: Lifetime of every entry (default 300)
        clock: Zero-argument callable returning seconds; defaults to
            time.monotonic. Tests inject a fake clock to simulate expiry.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = float(ttl_seconds)
        self._clock = clock or time.monotonic
        self._entries: Dict[str, CacheEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any existing entry."""
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            expires_at=self._clock() + self._ttl,
        )

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            # Drop only the entry we read; a concurrent set() must survive
            if self._entries.get(key) is entry:
                self._entries.pop(key, None)
            return None
        return entry.value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        # Counts entries not yet dropped, expired or not
        return len(self._entries)
