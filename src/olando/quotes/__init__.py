"""AMM quoting — collaborator contract, sizing adapter, pool quoter."""

from olando.quotes.provider import QuoteProvider, TradeProposal, TradeSummary
from olando.quotes.sizing import (
    QuoteSizer,
    apply_trade_haircut,
    issue_from_adjusted,
    tokens_bought_from_adjusted,
)
from olando.quotes.cauldron import ConstantProductQuoter, PoolSnapshot, parse_active_pools

__all__ = [
    "QuoteProvider",
    "TradeProposal",
    "TradeSummary",
    "QuoteSizer",
    "apply_trade_haircut",
    "issue_from_adjusted",
    "tokens_bought_from_adjusted",
    "ConstantProductQuoter",
    "PoolSnapshot",
    "parse_active_pools",
]
