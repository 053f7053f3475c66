"""Commitment codec — issuance contract state packed into the NFT commitment.

Layout (big-endian, unsigned):

    bytes [0:8)   deployment_time        seconds since epoch
    bytes [8:16)  last_interaction_time  seconds since epoch

Trailing bytes beyond 16 are ignored. Decoding is a pure byte-slice to
integer conversion: ordering between the two timestamps is validated by
the state orchestrator, not here.
"""

from __future__ import annotations

from olando.errors import MalformedCommitment
from olando.models.issuance import IssuanceCommitment
from olando.policy.params import COMMITMENT_FIELD_BYTES, COMMITMENT_MIN_BYTES

_UINT64_LIMIT = 1 << (8 * COMMITMENT_FIELD_BYTES)


def decode_commitment(data: bytes) -> IssuanceCommitment:
    """Decode an issuance commitment.

    Raises MalformedCommitment if fewer than 16 bytes are supplied.
    """
    if len(data) < COMMITMENT_MIN_BYTES:
        raise MalformedCommitment(
            f"Commitment must be at least {COMMITMENT_MIN_BYTES} bytes, got {len(data)}"
        )
    deployment = int.from_bytes(data[0:COMMITMENT_FIELD_BYTES], "big")
    last_interaction = int.from_bytes(
        data[COMMITMENT_FIELD_BYTES:COMMITMENT_MIN_BYTES], "big"
    )
    return IssuanceCommitment(
        deployment_time=deployment,
        last_interaction_time=last_interaction,
    )


def decode_commitment_hex(text: str) -> IssuanceCommitment:
    """Decode a hex-encoded commitment, as carried in Electrum token data."""
    try:
        data = bytes.fromhex(text.removeprefix("0x"))
    except ValueError as exc:
        raise MalformedCommitment(f"Commitment is not valid hex: {text!r}") from exc
    return decode_commitment(data)


def encode_commitment(commitment: IssuanceCommitment) -> bytes:
    """Encode to the canonical 16-byte layout."""
    for name, value in (
        ("deployment_time", commitment.deployment_time),
        ("last_interaction_time", commitment.last_interaction_time),
    ):
        if not 0 <= value < _UINT64_LIMIT:
            raise MalformedCommitment(f"{name} out of uint64 range: {value}")
    return (
        commitment.deployment_time.to_bytes(COMMITMENT_FIELD_BYTES, "big")
        + commitment.last_interaction_time.to_bytes(COMMITMENT_FIELD_BYTES, "big")
    )
