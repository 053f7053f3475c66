"""Content-addressed HTTP response cache.

Each request is fingerprinted with SHA-256 over its canonical string
form (URL, plus the canonical JSON of request options when present).
Identical requests therefore land on the same entry regardless of call
order. The fingerprint is the store key.

Entry format (a JSON string in the store):

    {"timestamp": <unix seconds>,
     "payload": {"body": ..., "status_code": ..., "resolved_url": ...}}

Freshness: an entry is served while (now − timestamp) is below the
duration. A negative duration caches forever. Stale or missing entries
trigger a live request whose response overwrites the entry.

Known simplifications:
- No in-flight coalescing: concurrent callers for the same fingerprint
  each hit the network; the last write wins.
- Transport errors propagate. There is no stale fallback and no retry.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from olando.cache.stores import CacheStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "cachedFetch-"
CACHE_FOREVER = -1
DEFAULT_DURATION_MS = 300_000


@dataclass(frozen=True)
class CachedResponse:
    """Response-like value, live or reconstructed from the cache."""
    body: str
    status_code: int
    url: str
    from_cache: bool = False

    @property
    def text(self) -> str:
        return self.body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass(frozen=True)
class CacheEntry:
    fingerprint: str
    timestamp_seconds: int
    body: str
    status_code: int
    resolved_url: str

    def to_json(self) -> str:
        return json.dumps({
            "timestamp": self.timestamp_seconds,
            "payload": {
                "body": self.body,
                "status_code": self.status_code,
                "resolved_url": self.resolved_url,
            },
        })

    @staticmethod
    def from_json(fingerprint: str, raw: str) -> Optional[CacheEntry]:
        """Parse a stored entry. Returns None for corrupt or incomplete data."""
        try:
            data = json.loads(raw)
            payload = data["payload"]
            return CacheEntry(
                fingerprint=fingerprint,
                timestamp_seconds=int(data["timestamp"]),
                body=str(payload["body"]),
                status_code=int(payload["status_code"]),
                resolved_url=str(payload["resolved_url"]),
            )
        except (ValueError, KeyError, TypeError):
            return None

    def is_fresh(self, now_seconds: float, duration_ms: int) -> bool:
        if not self.status_code:
            return False
        if duration_ms < 0:
            return True
        return (now_seconds - self.timestamp_seconds) * 1000 < duration_ms


def request_fingerprint(url: str, options: Optional[dict[str, Any]] = None) -> str:
    """SHA-256 hex fingerprint of a request's canonical form."""
    canonical = url
    if options:
        canonical += json.dumps(options, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class CachedFetcher:
    """HTTP GET/POST with a content-addressed cache in front.

    Usage:
        async with httpx.AsyncClient() as client:
            fetcher = CachedFetcher(client)
            response = await fetcher.fetch(url, store=session_store)
            response = await fetcher.fetch(url, store=durable, duration_ms=CACHE_FOREVER)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._clock = clock

    async def fetch(
        self,
        url: str,
        *,
        store: CacheStore,
        duration_ms: int = DEFAULT_DURATION_MS,
        method: str = "GET",
        **options: Any,
    ) -> CachedResponse:
        """Return a cached response if fresh, else fetch and store it.

        `options` are passed to httpx (headers, params, json, ...) and
        are part of the fingerprint. A non-GET method is folded into the
        options so it is fingerprinted too.
        """
        request_options = dict(options)
        if method.upper() != "GET":
            request_options["method"] = method.upper()
        fingerprint = request_fingerprint(url, request_options)
        key = KEY_PREFIX + fingerprint
        now = self._clock()

        raw = store.get(key)
        if raw is not None:
            entry = CacheEntry.from_json(fingerprint, raw)
            if entry is not None and entry.is_fresh(now, duration_ms):
                logger.debug("Cache hit %s (%s)", url, fingerprint[:12])
                return CachedResponse(
                    body=entry.body,
                    status_code=entry.status_code,
                    url=entry.resolved_url,
                    from_cache=True,
                )

        logger.debug("Cache miss %s (%s)", url, fingerprint[:12])
        response = await self._client.request(method.upper(), url, **options)
        entry = CacheEntry(
            fingerprint=fingerprint,
            timestamp_seconds=round(now),
            body=response.text,
            status_code=response.status_code,
            resolved_url=str(response.url),
        )
        store.set(key, entry.to_json())
        return CachedResponse(
            body=entry.body,
            status_code=entry.status_code,
            url=entry.resolved_url,
        )
