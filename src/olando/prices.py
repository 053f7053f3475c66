"""Price and pool queries against the Cauldron indexer, through the cache.

Durations follow the data's volatility:
- current price and active pools: short-lived (session store, 5 min).
- historic price windows: immutable once the window has passed, cached
  forever in the durable store.

Network and decoding errors propagate to the caller; there is no stale
fallback value.
"""

from __future__ import annotations

from typing import Any

from olando.cache.fetch import CACHE_FOREVER, DEFAULT_DURATION_MS, CachedFetcher
from olando.cache.stores import CacheStore
from olando.quotes.cauldron import PoolSnapshot, parse_active_pools

DEFAULT_INDEXER = "https://indexer.cauldron.quest"

# History lookup: the day before the timestamp in 10-minute steps.
HISTORY_LOOKBACK_SECONDS = 86_400
HISTORY_STEP_SECONDS = 600


async def fetch_current_token_price(
    fetcher: CachedFetcher,
    token_id: str,
    store: CacheStore,
    indexer: str = DEFAULT_INDEXER,
    duration_ms: int = DEFAULT_DURATION_MS,
) -> Any:
    """Current indexer price for a token (sats per token base unit)."""
    response = await fetcher.fetch(
        f"{indexer}/cauldron/price/{token_id}/current",
        store=store,
        duration_ms=duration_ms,
    )
    return response.json()["price"]


async def fetch_historic_token_price(
    fetcher: CachedFetcher,
    token_id: str,
    timestamp: int,
    store: CacheStore,
    indexer: str = DEFAULT_INDEXER,
) -> Any:
    """Latest average price reported in the day before `timestamp`.

    Returns 0 when the indexer has no history for the window.
    """
    start = timestamp - HISTORY_LOOKBACK_SECONDS
    end = timestamp + 1
    response = await fetcher.fetch(
        f"{indexer}/cauldron/price/{token_id}/history/"
        f"?start={start}&end={end}&stepsize={HISTORY_STEP_SECONDS}",
        store=store,
        duration_ms=CACHE_FOREVER,
    )
    history = response.json().get("history") or []
    if not history:
        return 0
    return history[-1].get("avg", 0)


async def fetch_active_pools(
    fetcher: CachedFetcher,
    token_id: str,
    store: CacheStore,
    indexer: str = DEFAULT_INDEXER,
    duration_ms: int = DEFAULT_DURATION_MS,
) -> list[PoolSnapshot]:
    """Active Cauldron pools for a token, as quoter snapshots."""
    response = await fetcher.fetch(
        f"{indexer}/cauldron/pool/active",
        store=store,
        duration_ms=duration_ms,
        params={"token": token_id},
    )
    return parse_active_pools(response.json())
