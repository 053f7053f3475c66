"""Core data models for the issuance engine."""

from olando.models.issuance import (
    EmissionState,
    IssuanceCommitment,
    QuoteOutcome,
    QuoteStatus,
)
from olando.models.utxo import NftCapability, NftData, TokenData, Utxo

__all__ = [
    "EmissionState",
    "IssuanceCommitment",
    "QuoteOutcome",
    "QuoteStatus",
    "NftCapability",
    "NftData",
    "TokenData",
    "Utxo",
]
