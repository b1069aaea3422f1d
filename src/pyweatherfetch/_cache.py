"""Internal weather record cache keyed by normalized location."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pyweatherfetch._constants import CACHE_DURATION


def normalize_location(location: str) -> str:
    """Return the cache key for *location*: stripped and case-folded."""
    return location.strip().casefold()


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A cached provider record and the time (epoch seconds) it was stored."""

    data: Any
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp


class WeatherCache:
    """In-memory record cache.

    ``get`` never evicts; staleness is judged by the caller through
    :meth:`is_fresh` / :meth:`get_fresh`. Stale entries stay in memory
    until overwritten, invalidated or cleared.
    """

    def __init__(
        self,
        *,
        duration: float = CACHE_DURATION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._duration = duration
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def duration(self) -> float:
        return self._duration

    def now(self) -> float:
        return self._clock()

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, key: str, data: Any) -> CacheEntry:
        entry = CacheEntry(data=data, timestamp=self._clock())
        self._entries[key] = entry
        return entry

    def is_fresh(self, entry: CacheEntry) -> bool:
        return entry.age(self._clock()) < self._duration

    def get_fresh(self, key: str) -> CacheEntry | None:
        """Return the entry for *key* only while it is younger than the cache duration."""
        entry = self._entries.get(key)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
