"""Constant-product quoter over a snapshot of active Cauldron pools.

Cauldron pools hold BCH and a single token and trade on x·y = k with a
0.3% fee charged on the BCH side: taken from the input when buying
tokens, from the output when selling. This quoter routes the whole
trade through the single pool that returns the most, which is a lower
bound on what a multi-pool route would return.

All math is integer-only. Rounding always favours the pool, so a quote
never promises more than the pool can pay.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from olando.errors import QuoteUnavailable
from olando.policy.params import NATIVE_BCH
from olando.quotes.provider import TradeProposal, TradeSummary

POOL_FEE_NUM = 3
POOL_FEE_DEN = 1000


@dataclass(frozen=True)
class PoolSnapshot:
    """Reserves of one Cauldron pool at snapshot time."""
    pool_id: str
    token_id: str
    sats: int
    token_amount: int

    @property
    def invariant(self) -> int:
        return self.sats * self.token_amount


def parse_active_pools(payload: Mapping[str, Any]) -> list[PoolSnapshot]:
    """Parse the indexer's /cauldron/pool/active response body."""
    pools: list[PoolSnapshot] = []
    for entry in payload.get("active", []):
        pools.append(PoolSnapshot(
            pool_id=f"{entry['txid']}:{entry['tx_pos']}",
            token_id=entry["token_id"],
            sats=int(entry["sats"]),
            token_amount=int(entry["tokens"]),
        ))
    return pools


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def tokens_out_for_sats(pool: PoolSnapshot, sats_in: int) -> int:
    """Tokens received for supplying `sats_in` (fee on input)."""
    effective = sats_in - _ceil_div(sats_in * POOL_FEE_NUM, POOL_FEE_DEN)
    if effective <= 0 or pool.sats <= 0 or pool.token_amount <= 0:
        return 0
    new_tokens = _ceil_div(pool.invariant, pool.sats + effective)
    return max(pool.token_amount - new_tokens, 0)


def sats_out_for_tokens(pool: PoolSnapshot, tokens_in: int) -> int:
    """Satoshis received for supplying `tokens_in` (fee on output)."""
    if tokens_in <= 0 or pool.sats <= 0 or pool.token_amount <= 0:
        return 0
    new_sats = _ceil_div(pool.invariant, pool.token_amount + tokens_in)
    gross = pool.sats - new_sats
    if gross <= 0:
        return 0
    return gross - _ceil_div(gross * POOL_FEE_NUM, POOL_FEE_DEN)


class ConstantProductQuoter:
    """QuoteProvider over PoolSnapshot lists.

    Usage:
        quoter = ConstantProductQuoter()
        proposal = await quoter.propose_trade("BCH", token_id, 100_000, pools)
    """

    async def propose_trade(
        self,
        supply_token_id: str,
        demand_token_id: str,
        supply_amount: int,
        active_pools: Sequence[PoolSnapshot],
    ) -> TradeProposal:
        if supply_amount <= 0:
            raise QuoteUnavailable(f"Supply amount must be positive, got {supply_amount}")

        if supply_token_id == NATIVE_BCH and demand_token_id != NATIVE_BCH:
            token_id, quote = demand_token_id, tokens_out_for_sats
        elif demand_token_id == NATIVE_BCH and supply_token_id != NATIVE_BCH:
            token_id, quote = supply_token_id, sats_out_for_tokens
        else:
            raise QuoteUnavailable(
                f"Unsupported pair {supply_token_id} -> {demand_token_id}"
            )

        best = self._best_pool(
            (p for p in active_pools if p.token_id == token_id),
            supply_amount,
            quote,
        )
        if best is None:
            raise QuoteUnavailable(
                f"No pool can fill {supply_amount} {supply_token_id} -> {demand_token_id}"
            )
        pool, amount_out = best
        return TradeProposal(
            summary=TradeSummary(supply=supply_amount, demand=amount_out),
            pool_ids=(pool.pool_id,),
        )

    @staticmethod
    def _best_pool(
        pools: Iterable[PoolSnapshot],
        supply_amount: int,
        quote,
    ) -> Optional[tuple[PoolSnapshot, int]]:
        best: Optional[tuple[PoolSnapshot, int]] = None
        for pool in pools:
            amount_out = quote(pool, supply_amount)
            if amount_out <= 0:
                continue
            if best is None or amount_out > best[1]:
                best = (pool, amount_out)
        return best
