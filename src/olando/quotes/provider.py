"""AMM quote collaborator contract.

The emission engine never talks to an AMM directly. It asks a
QuoteProvider to propose a trade and reads the summary. Pool discovery
and refresh belong to the caller, which passes an opaque active-pools
snapshot through unchanged.

Amounts are in the smallest on-chain unit of each side. A provider
signals "no viable route" or "insufficient liquidity" by raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class TradeSummary:
    """Totals of a proposed trade: what the trader supplies and receives."""
    supply: int
    demand: int


@dataclass(frozen=True)
class TradeProposal:
    summary: TradeSummary
    pool_ids: tuple[str, ...] = field(default_factory=tuple)


@runtime_checkable
class QuoteProvider(Protocol):
    """Anything that can quote a swap between two token ids ("BCH" for native)."""

    async def propose_trade(
        self,
        supply_token_id: str,
        demand_token_id: str,
        supply_amount: int,
        active_pools: Sequence[Any],
    ) -> TradeProposal:
        ...
