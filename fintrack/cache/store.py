"""
Entity Cache Store.

A generic, type-erased, time-bounded key/value table shared by every
data-access service in the process.

Lifecycle
---------
Exactly one ``CacheStore`` exists per process.  The composition root
(:func:`fintrack.services.create_services`) constructs it and passes the
same instance to every consumer; nothing in this module keeps a global.
All state is in memory and is rebuilt from the remote store after a
restart.

Concurrency
-----------
Every method is synchronous and runs to completion without yielding, so
under asyncio's single-threaded scheduling no two operations interleave
and no locking is needed.  Two in-flight fetches for the same key race;
whichever ``set`` runs last wins.

Payload contract
----------------
Payloads are opaque.  Whoever ``set``s a key fixes the shape of its
payload, and every reader of that key must expect that same shape.
:meth:`CacheStore.get_as` turns a violation of that precondition into a
``TypeError`` instead of a silent mis-cast.  ``None`` is reserved for
"miss" and is never stored.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from fintrack.cache.keys import DEFAULT_TTL_SECONDS
from fintrack.logger import StructuredLogger

T = TypeVar("T")

Clock = Callable[[], float]


class CacheEntry(BaseModel):
    """One cached read result.  Valid while ``now <= expires_at``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    value: object
    created_at: float
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now <= self.expires_at


class CacheStats(BaseModel):
    """Diagnostic snapshot of the store.  Never used for control flow."""

    size: int = 0
    keys: list[str] = Field(default_factory=list)


class CacheStore:
    """Process-wide cache table keyed by entity-prefixed strings.

    Parameters
    ----------
    logger:
        Receives DEBUG lines for hits, misses, evictions and drops.
    default_ttl:
        Lifetime in seconds applied when ``set`` is called without a TTL.
    clock:
        Zero-argument callable returning the current time in seconds.
        Defaults to :func:`time.monotonic`; tests inject a fake.
    """

    def __init__(
        self,
        logger: StructuredLogger,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self._logger: StructuredLogger = logger
        self._default_ttl: float = default_ttl
        self._clock: Clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[object]:
        """Return the cached payload for *key*, or ``None`` on a miss.

        An entry that exists but has expired is deleted before the miss
        is reported, so no stale payload outlives its first late read.
        """
        entry = self._entries.get(key)
        if entry is None:
            self._logger.debug("Cache miss: %s", key)
            return None

        if not entry.is_valid(self._clock()):
            del self._entries[key]
            self._logger.debug("Cache entry expired and evicted: %s", key)
            return None

        self._logger.debug("Cache hit: %s", key)
        return entry.value

    def get_as(self, key: str, expected_type: type[T]) -> Optional[T]:
        """Typed variant of :meth:`get`.

        Raises
        ------
        TypeError
            If a live entry holds a payload that is not an instance of
            *expected_type*.  That means two call sites disagree on the
            shape stored under one key, which is a programming error.
        """
        value = self.get(key)
        if value is None:
            return None
        if not isinstance(value, expected_type):
            raise TypeError(
                f"Cache key '{key}' holds {type(value).__name__}, "
                f"expected {expected_type.__name__}"
            )
        return value

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, key: str, value: object, ttl: Optional[float] = None) -> None:
        """Store *value* under *key*, replacing any previous entry.

        ``expires_at`` is ``now + ttl``; *ttl* defaults to the store's
        default lifetime.
        """
        if value is None:
            raise ValueError("None cannot be cached; it is reserved for a miss")
        resolved_ttl = self._default_ttl if ttl is None else ttl
        now = self._clock()
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            created_at=now,
            expires_at=now + resolved_ttl,
        )
        self._logger.debug("Cache set: %s (ttl=%ss)", key, resolved_ttl)

    def invalidate(self, key: str) -> None:
        """Drop one entry.  Dropping an absent key is a no-op."""
        if self._entries.pop(key, None) is not None:
            self._logger.debug("Cache invalidated: %s", key)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every entry whose key starts with *prefix*.

        Matching is a plain ``str.startswith``: the prefix ``"budget"``
        also reaches ``"budget-items"``.  Returns the number of entries
        removed (zero matches is fine).
        """
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        if doomed:
            self._logger.debug(
                "Cache prefix '%s' invalidated %d entries", prefix, len(doomed),
            )
        return len(doomed)

    def clear(self) -> None:
        """Drop every entry."""
        count = len(self._entries)
        self._entries.clear()
        self._logger.debug("Cache cleared (%d entries)", count)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        """Return the current entry count and key list.

        Expired entries that have not been read yet are still counted;
        eviction only happens on read.
        """
        return CacheStats(size=len(self._entries), keys=list(self._entries))
