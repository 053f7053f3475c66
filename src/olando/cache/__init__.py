"""Content-addressed response cache and its backing stores."""

from olando.cache.fetch import (
    CACHE_FOREVER,
    CachedFetcher,
    CachedResponse,
    CacheEntry,
    request_fingerprint,
)
from olando.cache.stores import CacheStore, JsonFileStore, MemoryStore

__all__ = [
    "CACHE_FOREVER",
    "CachedFetcher",
    "CachedResponse",
    "CacheEntry",
    "request_fingerprint",
    "CacheStore",
    "JsonFileStore",
    "MemoryStore",
]
