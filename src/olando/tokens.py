"""Token and UTXO helpers for wallet-provider data.

Converts Electrum-style UTXO entries into Utxo values, tallies token
balances, and reads the extended JSON used to persist UTXOs (bigints and
byte arrays encoded as tagged strings).
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Mapping, Optional

from olando.models.utxo import NftCapability, NftData, TokenData, Utxo

_BIGINT = re.compile(r"^<bigint: (?P<bigint>[0-9]*)n>$")
_UINT8ARRAY = re.compile(r"^<Uint8Array: 0x(?P<hex>[0-9a-f]*)>$")
_TOKEN_ID = re.compile(r"^[0-9a-fA-F]{64}$")


def is_token_id(text: str) -> bool:
    """True for a 32-byte token category in hex."""
    return bool(_TOKEN_ID.match(text))


def parse_extended_json(text: str) -> Any:
    """json.loads with "<bigint: Nn>" -> int and "<Uint8Array: 0x..>" -> bytes."""

    def revive(value: Any) -> Any:
        if isinstance(value, str):
            match = _BIGINT.match(value)
            if match:
                return int(match.group("bigint"))
            match = _UINT8ARRAY.match(value)
            if match:
                return bytes.fromhex(match.group("hex"))
            return value
        if isinstance(value, list):
            return [revive(v) for v in value]
        if isinstance(value, dict):
            return {k: revive(v) for k, v in value.items()}
        return value

    return revive(json.loads(text))


def convert_electrum_token_data(data: Optional[Mapping[str, Any]]) -> Optional[TokenData]:
    """Electrum `token_data` -> TokenData.

    A positive amount makes the token fungible; otherwise it is read as
    an NFT with its capability and hex commitment.
    """
    if not data:
        return None
    amount = int(data.get("amount") or 0)
    nft = data.get("nft")
    nft_data = None
    if nft is not None:
        nft_data = NftData(
            capability=NftCapability(nft.get("capability", "none")),
            commitment=bytes.fromhex(nft.get("commitment", "")),
        )
    if amount > 0:
        return TokenData(token_id=data["category"], amount=amount, nft=nft_data)
    return TokenData(token_id=data["category"], nft=nft_data)


def utxo_from_electrum(entry: Mapping[str, Any]) -> Utxo:
    """Electrum listunspent entry -> Utxo."""
    return Utxo(
        txid=entry["tx_hash"],
        vout=int(entry["tx_pos"]),
        satoshis=int(entry["value"]),
        token=convert_electrum_token_data(entry.get("token_data")),
    )


def fungible_token_balances(
    utxos: Iterable[Utxo],
    featured_tokens: Iterable[str] = (),
) -> dict[str, int]:
    """Fungible amount per category. Featured tokens appear with 0 if absent."""
    result: dict[str, int] = {}
    for utxo in utxos:
        if utxo.token is None or not utxo.token.amount:
            continue
        result[utxo.token.token_id] = result.get(utxo.token.token_id, 0) + utxo.token.amount
    for token_id in featured_tokens:
        result.setdefault(token_id, 0)
    return result


def nft_token_counts(utxos: Iterable[Utxo]) -> dict[str, int]:
    """Number of NFTs held per category."""
    result: dict[str, int] = {}
    for utxo in utxos:
        if utxo.token is None or utxo.token.nft is None:
            continue
        result[utxo.token.token_id] = result.get(utxo.token.token_id, 0) + 1
    return result
