"""Issuance contract — commitment codec and state orchestration."""

from olando.contract.commitment import (
    decode_commitment,
    decode_commitment_hex,
    encode_commitment,
)
from olando.contract.state import StateRequest, compute_state, compute_state_for_utxo

__all__ = [
    "decode_commitment",
    "decode_commitment_hex",
    "encode_commitment",
    "StateRequest",
    "compute_state",
    "compute_state_for_utxo",
]
