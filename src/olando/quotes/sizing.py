"""Quote-sizing adapter — sizes issuance purchases against the AMM.

Two directional queries, with deliberately different failure policies:

    forward   BCH -> token   "how many tokens does this investment buy?"
              Fatal on failure: raises QuoteUnavailable.
    backward  token -> BCH   "what is the remaining capacity worth in BCH?"
              Best effort: returns a QuoteOutcome, never raises.

Forward quotes are reduced by the protocol haircut (95/100), a safety
margin for AMM fees and slippage. Issuance is then derived by undoing
the haircut and applying the issuance ratio (9/10):

    adjusted      = 95 × demand / 100
    tokens_bought = adjusted × 100 / 95
    issue         = tokens_bought × 9 / 10

All ratios are exact integer arithmetic. No retries: a failed query is
reported once.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from olando.errors import QuoteUnavailable
from olando.models.issuance import QuoteOutcome
from olando.policy.params import (
    ISSUANCE_RATIO_DEN,
    ISSUANCE_RATIO_NUM,
    NATIVE_BCH,
    TRADE_HAIRCUT_DEN,
    TRADE_HAIRCUT_NUM,
)
from olando.quotes.provider import QuoteProvider

logger = logging.getLogger(__name__)


def apply_trade_haircut(demand: int) -> int:
    return TRADE_HAIRCUT_NUM * demand // TRADE_HAIRCUT_DEN


def tokens_bought_from_adjusted(adjusted_amount: int) -> int:
    """Reverse the haircut: the token amount notionally bought."""
    return adjusted_amount * TRADE_HAIRCUT_DEN // TRADE_HAIRCUT_NUM


def issue_from_adjusted(adjusted_amount: int) -> int:
    """Newly issued tokens for a haircut-adjusted trade amount."""
    tokens_bought = tokens_bought_from_adjusted(adjusted_amount)
    return tokens_bought * ISSUANCE_RATIO_NUM // ISSUANCE_RATIO_DEN


class QuoteSizer:
    """Sizes forward purchases and backward budgets for one token.

    Usage:
        sizer = QuoteSizer(provider, token_id, active_pools)
        adjusted = await sizer.size_forward_purchase(100_000)
        outcome = await sizer.size_backward_budget(remaining_capacity)
    """

    def __init__(
        self,
        provider: QuoteProvider,
        token_id: str,
        active_pools: Sequence[Any] = (),
    ) -> None:
        self._provider = provider
        self._token_id = token_id
        self._active_pools = active_pools

    @property
    def token_id(self) -> str:
        return self._token_id

    async def size_forward_purchase(self, bch_satoshis: int) -> int:
        """Haircut-adjusted token amount bought with `bch_satoshis`.

        Returns 0 without querying for a zero investment. Raises
        QuoteUnavailable if the AMM cannot quote the trade.
        """
        if bch_satoshis < 0:
            raise ValueError(f"Investment must be non-negative, got {bch_satoshis}")
        if bch_satoshis == 0:
            return 0

        logger.debug("Forward quote: %d sats -> %s", bch_satoshis, self._token_id)
        try:
            proposal = await self._provider.propose_trade(
                supply_token_id=NATIVE_BCH,
                demand_token_id=self._token_id,
                supply_amount=bch_satoshis,
                active_pools=self._active_pools,
            )
        except QuoteUnavailable:
            raise
        except Exception as exc:
            raise QuoteUnavailable(
                f"Forward quote failed for {bch_satoshis} sats: {exc}"
            ) from exc

        return apply_trade_haircut(proposal.summary.demand)

    async def size_backward_budget(self, remaining_capacity: int) -> QuoteOutcome:
        """BCH value of the remaining issuance capacity.

        Never raises for quote failures: the result is a QuoteOutcome that
        is SKIPPED when there is no capacity and FAILED when the AMM
        cannot quote.
        """
        if remaining_capacity <= 0:
            return QuoteOutcome.skipped(
                f"No remaining capacity ({remaining_capacity})"
            )

        logger.debug("Backward quote: %d %s -> BCH", remaining_capacity, self._token_id)
        try:
            proposal = await self._provider.propose_trade(
                supply_token_id=self._token_id,
                demand_token_id=NATIVE_BCH,
                supply_amount=remaining_capacity,
                active_pools=self._active_pools,
            )
        except Exception as exc:
            logger.warning(
                "Backward quote failed for %d tokens: %s", remaining_capacity, exc
            )
            return QuoteOutcome.failed(str(exc))

        return QuoteOutcome.ok(proposal.summary.demand)
