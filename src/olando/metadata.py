"""Token metadata from a BCMR indexer, through the durable cache.

Resolved registry metadata is immutable for a given token and NFT
commitment, so lookups default to caching forever. The indexer serves:

    {indexer}/tokens/{category}/                 token-level metadata
    {indexer}/tokens/{category}/{commitment}/    NFT type metadata
                                                 ("empty" for no commitment)

A 404 means the token has no registry and is skipped. Other statuses
are decoded as JSON and errors propagate.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional

from olando.cache.fetch import CACHE_FOREVER, CachedFetcher
from olando.cache.stores import CacheStore

logger = logging.getLogger(__name__)

EMPTY_COMMITMENT_ENDPOINT = "empty"


def metadata_url(indexer: str, token_id: str, nft_commitment: Optional[str] = None) -> str:
    url = f"{indexer}/tokens/{token_id}/"
    if nft_commitment is not None:
        url += f"{nft_commitment or EMPTY_COMMITMENT_ENDPOINT}/"
    return url


async def fetch_token_metadata(
    fetcher: CachedFetcher,
    token_id: str,
    store: CacheStore,
    indexer: str,
    duration_ms: int = CACHE_FOREVER,
    nft_commitment: Optional[str] = None,
) -> Optional[dict[str, Any]]:
    """Registry metadata for a token, or for one of its NFT commitments.

    Returns None when the indexer knows nothing about it (404).
    """
    response = await fetcher.fetch(
        metadata_url(indexer, token_id, nft_commitment),
        store=store,
        duration_ms=duration_ms,
    )
    if response.status_code == 404:
        logger.debug("No registry metadata for %s", token_id)
        return None
    return response.json()


async def import_registries(
    fetcher: CachedFetcher,
    tokens: Mapping[str, Optional[Iterable[str]]],
    store: CacheStore,
    indexer: str,
    duration_ms: int = CACHE_FOREVER,
    fetch_nft_info: bool = False,
) -> dict[str, dict[str, Any]]:
    """Resolve registries for a token list, keyed by token category.

    `tokens` maps a category to its held NFT commitments (hex), or to
    None for a fungible-only token. NFT type metadata is looked up per
    unique commitment when `fetch_nft_info` is set or the token has a
    single NFT; otherwise only the token-level entry is fetched. NFT
    type metadata lands under the registry's "nfts" map, keyed by
    commitment.
    """
    lookups: list[tuple[str, Optional[str]]] = []
    for token_id, commitments in tokens.items():
        held = list(commitments) if commitments is not None else []
        if commitments is not None and (fetch_nft_info or len(held) == 1):
            for commitment in dict.fromkeys(held):
                lookups.append((token_id, commitment))
        else:
            lookups.append((token_id, None))

    results = await asyncio.gather(*(
        fetch_token_metadata(
            fetcher, token_id, store, indexer,
            duration_ms=duration_ms, nft_commitment=commitment,
        )
        for token_id, commitment in lookups
    ))

    registries: dict[str, dict[str, Any]] = {}
    for (token_id, commitment), metadata in zip(lookups, results):
        if metadata is None:
            continue
        category = (metadata.get("token") or {}).get("category") or token_id
        registry = registries.setdefault(category, dict(metadata))
        type_metadata = metadata.get("type_metadata")
        if type_metadata is not None:
            registry.setdefault("nfts", {})[commitment or ""] = type_metadata
    return registries
