"""Issuance contract models — decoded commitment, quote outcomes, state snapshot.

All amounts are integers in the smallest on-chain unit (satoshis for
BCH, base units for the token). No floats anywhere in issuance math.

Invariants carried by these models:
- IssuanceCommitment is a pure decode of the UTXO commitment. It is
  never mutated or cached; callers re-fetch the UTXO for fresh state.
- EmissionState is purely computed and owns no resources.
- QuoteOutcome keeps "not attempted" and "failed" distinguishable even
  though both surface as an absent maximum investment.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class IssuanceCommitment:
    """State committed in the issuance UTXO's NFT commitment field."""
    deployment_time: int
    last_interaction_time: int


class QuoteStatus(str, enum.Enum):
    """Result classification for best-effort quotes."""
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class QuoteOutcome:
    """Explicit result of a best-effort AMM quote."""
    status: QuoteStatus
    amount: Optional[int] = None
    reason: str = ""

    @staticmethod
    def ok(amount: int) -> QuoteOutcome:
        return QuoteOutcome(status=QuoteStatus.OK, amount=amount)

    @staticmethod
    def failed(reason: str) -> QuoteOutcome:
        return QuoteOutcome(status=QuoteStatus.FAILED, reason=reason)

    @staticmethod
    def skipped(reason: str) -> QuoteOutcome:
        return QuoteOutcome(status=QuoteStatus.SKIPPED, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status == QuoteStatus.OK


@dataclass(frozen=True)
class EmissionState:
    """Consolidated snapshot of the issuance contract at one instant.

    Invariant: issued == initial supply - current_supply
    Invariant: exceeds == (issue > current_emission_cap - issued)
    """
    deployment_time: int
    last_interaction_time: int
    contract_lifetime: int
    current_emission_cap: int
    current_supply: int
    issued: int
    issue: int
    cauldron_trade_adjusted_token_amount: int
    exceeds: bool
    max_bch_investment: QuoteOutcome

    @property
    def max_bch_investment_sat(self) -> Optional[int]:
        """Maximum safe investment, or None when not computed or failed."""
        return self.max_bch_investment.amount if self.max_bch_investment.is_ok else None

    @property
    def remaining_capacity(self) -> int:
        return self.current_emission_cap - self.issued

    def to_dict(self) -> dict[str, Any]:
        return {
            "deployment_time": self.deployment_time,
            "last_interaction_time": self.last_interaction_time,
            "contract_lifetime": self.contract_lifetime,
            "current_emission_cap": self.current_emission_cap,
            "current_supply": self.current_supply,
            "issued": self.issued,
            "issue": self.issue,
            "cauldron_trade_adjusted_token_amount": self.cauldron_trade_adjusted_token_amount,
            "exceeds": self.exceeds,
            "max_bch_investment_sat": self.max_bch_investment_sat,
            "max_bch_investment_status": self.max_bch_investment.status.value,
        }
