"""Tests for the contract-state orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import pytest

from olando.contract.commitment import encode_commitment
from olando.contract.state import (
    StateRequest,
    compute_state,
    compute_state_for_utxo,
    emission_time,
)
from olando.errors import InvalidTimeRange, MalformedCommitment, QuoteUnavailable
from olando.models.issuance import IssuanceCommitment, QuoteStatus
from olando.models.utxo import NftCapability, NftData, TokenData, Utxo
from olando.policy.params import EMISSION_TIME_OFFSET_SECONDS, NATIVE_BCH
from olando.quotes.provider import TradeProposal, TradeSummary
from olando.quotes.sizing import QuoteSizer


TOKEN_ID = "c1" * 32
DEPLOYED = 1_700_000_000
YEAR = 31_536_000
INITIAL_SUPPLY = 2_100_000_000
# One year after deployment, as seen by the contract.
NOW = DEPLOYED + YEAR + EMISSION_TIME_OFFSET_SECONDS
CAP_AT_ONE_YEAR = 347_322_307


@dataclass
class StubProvider:
    forward_demand: int = 1000
    backward_demand: int = 5_000_000
    forward_error: Optional[Exception] = None
    backward_error: Optional[Exception] = None
    calls: list[str] = field(default_factory=list)

    async def propose_trade(
        self,
        supply_token_id: str,
        demand_token_id: str,
        supply_amount: int,
        active_pools: Sequence[Any],
    ) -> TradeProposal:
        if supply_token_id == NATIVE_BCH:
            self.calls.append("forward")
            if self.forward_error is not None:
                raise self.forward_error
            demand = self.forward_demand
        else:
            self.calls.append("backward")
            if self.backward_error is not None:
                raise self.backward_error
            demand = self.backward_demand
        return TradeProposal(summary=TradeSummary(supply=supply_amount, demand=demand))


def _commitment(deployed: int = DEPLOYED) -> bytes:
    return encode_commitment(IssuanceCommitment(deployed, deployed + 500))


def _request(**overrides: Any) -> StateRequest:
    values = dict(
        issuance_utxo_commitment=_commitment(),
        issuance_utxo_token_amount=2_000_000_000,
        initial_supply=INITIAL_SUPPLY,
        invest_amount_bch=50_000,
        now_seconds=NOW,
    )
    values.update(overrides)
    return StateRequest(**values)


class TestEmissionTime:
    def test_applies_offset(self) -> None:
        assert emission_time(DEPLOYED, NOW) == DEPLOYED + YEAR

    def test_clamps_to_deployment(self) -> None:
        assert emission_time(DEPLOYED, DEPLOYED + 60) == DEPLOYED

    def test_rejects_now_before_deployment(self) -> None:
        with pytest.raises(InvalidTimeRange):
            emission_time(DEPLOYED, DEPLOYED - 1)


class TestComputeState:
    @pytest.mark.asyncio
    async def test_small_investment_within_cap(self) -> None:
        provider = StubProvider()
        state = await compute_state(_request(), QuoteSizer(provider, TOKEN_ID))

        assert state.deployment_time == DEPLOYED
        assert state.last_interaction_time == DEPLOYED + 500
        assert state.contract_lifetime == YEAR + EMISSION_TIME_OFFSET_SECONDS
        assert state.current_emission_cap == CAP_AT_ONE_YEAR
        assert state.current_supply == 2_000_000_000
        assert state.issued == 100_000_000
        assert state.cauldron_trade_adjusted_token_amount == 950
        assert state.issue == 900
        assert state.exceeds is False
        assert state.remaining_capacity == CAP_AT_ONE_YEAR - 100_000_000
        assert state.max_bch_investment_sat == 5_000_000
        assert provider.calls == ["forward", "backward"]

    @pytest.mark.asyncio
    async def test_large_investment_exceeds_cap(self) -> None:
        provider = StubProvider(forward_demand=300_000_000)
        state = await compute_state(_request(), QuoteSizer(provider, TOKEN_ID))
        assert state.cauldron_trade_adjusted_token_amount == 285_000_000
        assert state.issue == 270_000_000
        assert state.exceeds is True
        assert state.exceeds == (state.issue > state.current_emission_cap - state.issued)

    @pytest.mark.asyncio
    async def test_zero_investment_queries_backward_only(self) -> None:
        provider = StubProvider()
        state = await compute_state(
            _request(invest_amount_bch=0), QuoteSizer(provider, TOKEN_ID)
        )
        assert state.cauldron_trade_adjusted_token_amount == 0
        assert state.issue == 0
        assert state.exceeds is False
        assert provider.calls == ["backward"]

    @pytest.mark.asyncio
    async def test_within_offset_of_deployment_cap_is_zero(self) -> None:
        provider = StubProvider()
        state = await compute_state(
            _request(issuance_utxo_token_amount=INITIAL_SUPPLY, now_seconds=DEPLOYED + 60),
            QuoteSizer(provider, TOKEN_ID),
        )
        assert state.current_emission_cap == 0
        assert state.issued == 0
        assert state.exceeds is True
        assert state.max_bch_investment.status == QuoteStatus.SKIPPED
        assert state.max_bch_investment_sat is None

    @pytest.mark.asyncio
    async def test_now_before_deployment(self) -> None:
        with pytest.raises(InvalidTimeRange):
            await compute_state(
                _request(now_seconds=DEPLOYED - 1), QuoteSizer(StubProvider(), TOKEN_ID)
            )

    @pytest.mark.asyncio
    async def test_malformed_commitment_skips_quotes(self) -> None:
        provider = StubProvider()
        with pytest.raises(MalformedCommitment):
            await compute_state(
                _request(issuance_utxo_commitment=b"\x00" * 15),
                QuoteSizer(provider, TOKEN_ID),
            )
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_deployment_after_last_interaction_rejected(self) -> None:
        provider = StubProvider()
        commitment = encode_commitment(IssuanceCommitment(DEPLOYED + 100_000, DEPLOYED))
        with pytest.raises(MalformedCommitment):
            await compute_state(
                _request(issuance_utxo_commitment=commitment),
                QuoteSizer(provider, TOKEN_ID),
            )
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_deployment_equal_to_last_interaction_accepted(self) -> None:
        commitment = encode_commitment(IssuanceCommitment(DEPLOYED, DEPLOYED))
        state = await compute_state(
            _request(issuance_utxo_commitment=commitment),
            QuoteSizer(StubProvider(), TOKEN_ID),
        )
        assert state.last_interaction_time == DEPLOYED

    @pytest.mark.asyncio
    async def test_forward_failure_aborts(self) -> None:
        provider = StubProvider(forward_error=RuntimeError("pool drained"))
        with pytest.raises(QuoteUnavailable):
            await compute_state(_request(), QuoteSizer(provider, TOKEN_ID))
        assert provider.calls == ["forward"]

    @pytest.mark.asyncio
    async def test_backward_failure_leaves_maximum_absent(self) -> None:
        provider = StubProvider(backward_error=RuntimeError("no route"))
        state = await compute_state(_request(), QuoteSizer(provider, TOKEN_ID))
        assert state.issue == 900
        assert state.max_bch_investment.status == QuoteStatus.FAILED
        assert state.max_bch_investment_sat is None

    @pytest.mark.asyncio
    async def test_to_dict(self) -> None:
        state = await compute_state(_request(), QuoteSizer(StubProvider(), TOKEN_ID))
        data = state.to_dict()
        assert data["current_emission_cap"] == CAP_AT_ONE_YEAR
        assert data["max_bch_investment_sat"] == 5_000_000
        assert data["max_bch_investment_status"] == "ok"


class TestComputeStateForUtxo:
    @pytest.mark.asyncio
    async def test_reads_commitment_and_amount(self) -> None:
        utxo = Utxo(
            txid="aa" * 32,
            vout=0,
            satoshis=1000,
            token=TokenData(
                token_id=TOKEN_ID,
                amount=2_000_000_000,
                nft=NftData(capability=NftCapability.MUTABLE, commitment=_commitment()),
            ),
        )
        state = await compute_state_for_utxo(
            utxo, INITIAL_SUPPLY, 50_000, QuoteSizer(StubProvider(), TOKEN_ID), now_seconds=NOW,
        )
        assert state.issued == 100_000_000
        assert state.current_emission_cap == CAP_AT_ONE_YEAR

    @pytest.mark.asyncio
    async def test_utxo_without_nft(self) -> None:
        utxo = Utxo(txid="aa" * 32, vout=1, satoshis=1000,
                    token=TokenData(token_id=TOKEN_ID, amount=5))
        with pytest.raises(MalformedCommitment):
            await compute_state_for_utxo(
                utxo, INITIAL_SUPPLY, 0, QuoteSizer(StubProvider(), TOKEN_ID), now_seconds=NOW,
            )
