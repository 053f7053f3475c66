"""UTXO value objects at the wallet/provider boundary.

Selecting the issuance UTXO from chain state is the caller's job. The
engine only reads token.amount and token.nft.commitment.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class NftCapability(str, enum.Enum):
    """CashTokens NFT capability."""
    NONE = "none"
    MUTABLE = "mutable"
    MINTING = "minting"


@dataclass(frozen=True)
class NftData:
    capability: NftCapability
    commitment: bytes = b""


@dataclass(frozen=True)
class TokenData:
    """Token payload of a UTXO. Fungible amount and NFT may coexist."""
    token_id: str
    amount: int = 0
    nft: Optional[NftData] = None


@dataclass(frozen=True)
class Utxo:
    txid: str
    vout: int
    satoshis: int
    token: Optional[TokenData] = None
