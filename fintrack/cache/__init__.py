"""
Entity Cache Package.

Client-side cache that sits in front of every read path:

- ``CacheStore``: time-bounded, type-erased key/value table, one per process.
- ``InvalidationRouter``: drops the caches an entity mutation makes stale.
- ``build_cache_key`` / ``EntityKind``: the shared key and TTL policy.
"""

from fintrack.cache.invalidation import RELATIONSHIPS, InvalidationRouter, RefreshPolicy
from fintrack.cache.keys import DEFAULT_TTL_SECONDS, EntityKind, build_cache_key
from fintrack.cache.store import CacheEntry, CacheStats, CacheStore

__all__ = [
    "CacheEntry",
    "CacheStats",
    "CacheStore",
    "DEFAULT_TTL_SECONDS",
    "EntityKind",
    "InvalidationRouter",
    "RELATIONSHIPS",
    "RefreshPolicy",
    "build_cache_key",
]
