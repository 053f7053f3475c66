"""Contract-state orchestrator — one consolidated snapshot per call.

Composes the commitment codec, the emission curve and the quote-sizing
adapter:

    1. Decode the issuance UTXO commitment and check its time ordering.
    2. issued = initial_supply − current_supply.
    3. Evaluate the cap at now − EMISSION_TIME_OFFSET_SECONDS.
    4. Size the requested investment through the AMM (forward).
    5. Derive issue and exceeds = issue > cap − issued.
    6. Size the remaining capacity in BCH (backward, best effort).

Failure policy is asymmetric:
- MalformedCommitment (including a deployment time after the last
  interaction time), InvalidTimeRange and forward QuoteUnavailable
  abort the call.
- A backward quote failure only leaves max_bch_investment_sat absent.

Inputs are never mutated and nothing is retried. The backward query is
sequenced after the forward one.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from olando.contract.commitment import decode_commitment
from olando.emission.curve import emission_cap
from olando.errors import InvalidTimeRange, MalformedCommitment
from olando.models.issuance import EmissionState
from olando.models.utxo import Utxo
from olando.policy.params import EMISSION_TIME_OFFSET_SECONDS
from olando.quotes.sizing import QuoteSizer, issue_from_adjusted


@dataclass(frozen=True)
class StateRequest:
    """Inputs for one state computation."""
    issuance_utxo_commitment: bytes
    issuance_utxo_token_amount: int
    initial_supply: int
    invest_amount_bch: int
    now_seconds: int


def emission_time(deployment_time: int, now_seconds: int) -> int:
    """Time at which the contract will evaluate the cap.

    The offset is a literal protocol rule. When only the offset pushes
    the time before deployment, it clamps to deployment (cap 0).
    """
    if now_seconds < deployment_time:
        raise InvalidTimeRange(
            f"Current time {now_seconds} precedes deployment time {deployment_time}"
        )
    return max(now_seconds - EMISSION_TIME_OFFSET_SECONDS, deployment_time)


async def compute_state(request: StateRequest, sizer: QuoteSizer) -> EmissionState:
    """Compute the issuance contract state for a proposed investment."""
    commitment = decode_commitment(request.issuance_utxo_commitment)
    if commitment.deployment_time > commitment.last_interaction_time:
        raise MalformedCommitment(
            f"Deployment time {commitment.deployment_time} is after last "
            f"interaction time {commitment.last_interaction_time}"
        )
    current_supply = request.issuance_utxo_token_amount
    issued = request.initial_supply - current_supply

    evaluated_at = emission_time(commitment.deployment_time, request.now_seconds)
    cap = emission_cap(request.initial_supply, commitment.deployment_time, evaluated_at)

    # Forward failures propagate.
    adjusted = await sizer.size_forward_purchase(request.invest_amount_bch)
    issue = issue_from_adjusted(adjusted)
    remaining = cap - issued
    exceeds = issue > remaining

    max_investment = await sizer.size_backward_budget(remaining)

    return EmissionState(
        deployment_time=commitment.deployment_time,
        last_interaction_time=commitment.last_interaction_time,
        contract_lifetime=request.now_seconds - commitment.deployment_time,
        current_emission_cap=cap,
        current_supply=current_supply,
        issued=issued,
        issue=issue,
        cauldron_trade_adjusted_token_amount=adjusted,
        exceeds=exceeds,
        max_bch_investment=max_investment,
    )


async def compute_state_for_utxo(
    utxo: Utxo,
    initial_supply: int,
    invest_amount_bch: int,
    sizer: QuoteSizer,
    now_seconds: Optional[int] = None,
) -> EmissionState:
    """compute_state for an issuance UTXO as returned by the wallet provider."""
    if utxo.token is None or utxo.token.nft is None:
        raise MalformedCommitment(
            f"UTXO {utxo.txid}:{utxo.vout} carries no NFT commitment"
        )
    if now_seconds is None:
        now_seconds = int(time.time())

    request = StateRequest(
        issuance_utxo_commitment=utxo.token.nft.commitment,
        issuance_utxo_token_amount=utxo.token.amount,
        initial_supply=initial_supply,
        invest_amount_bch=invest_amount_bch,
        now_seconds=now_seconds,
    )
    return await compute_state(request, sizer)
