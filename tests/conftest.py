"""
Pytest fixtures for WalletRisk tests: injectable clock, transaction/observation
builders, and in-memory on-chain / AML provider doubles with call counters.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

NOW = 1_700_000_000.0
DAY = 86400
WALLET = "0xAbC0000000000000000000000000000000000001"
WEI = 10**18


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = NOW) -> None:
        self.t = float(start)

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class StubOnChain:
    """OnChainProvider double. Set `error` to make fetch_observation raise, `hang` to block forever."""

    def __init__(self, observation: Any, *, contract: bool = False) -> None:
        self.observation = observation
        self.contract = contract
        self.error: BaseException | None = None
        self.hang = False
        self.cancelled = False
        self.observation_calls = 0
        self.contract_calls = 0

    async def fetch_observation(self, address: str) -> Any:
        self.observation_calls += 1
        if self.hang:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return self.observation

    async def is_contract(self, address: str) -> bool:
        self.contract_calls += 1
        return self.contract


class StubAml:
    """AmlProvider double returning a fixed result (or None)."""

    def __init__(self, result: Any = None) -> None:
        self.result = result
        self.error: BaseException | None = None
        self.calls: list[tuple[str, int]] = []

    async def fetch_aml_result(self, address: str, chain_id: int) -> Any:
        self.calls.append((address, chain_id))
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_tx():
    """Factory: make_tx(timestamp, value_wei=..., gas_price=...) -> Transaction."""
    from walletrisk.onchain.models import Transaction

    counter = {"n": 0}

    def _make(timestamp: float, value: int = WEI // 10, gas_price: int = 1_000_000_000) -> Transaction:
        counter["n"] += 1
        return Transaction(
            hash=f"0x{counter['n']:064x}",
            from_address=WALLET.lower(),
            to_address="0x" + "2" * 40,
            value=value,
            timestamp=int(timestamp),
            gas=21000,
            gas_price=gas_price,
            gas_used=21000,
        )

    return _make


@pytest.fixture
def make_observation(make_tx):
    """
    Factory: make_observation(tx_count=0, age_days=0, balance=WEI, spacing_sec=DAY)
    builds an observation whose first tx is age_days before NOW.
    """
    from walletrisk.onchain.models import WalletObservation

    def _make(
        tx_count: int = 0,
        age_days: float = 0,
        balance: int = WEI,
        spacing_sec: float | None = None,
    ) -> WalletObservation:
        first_ts = NOW - age_days * DAY
        if spacing_sec is None:
            spacing_sec = (age_days * DAY) / tx_count if tx_count else 0
        txs = [make_tx(first_ts + i * spacing_sec) for i in range(tx_count)]
        return WalletObservation.from_transactions(WALLET, txs, balance)

    return _make


@pytest.fixture
def stub_onchain(make_observation) -> StubOnChain:
    return StubOnChain(make_observation(tx_count=0))


@pytest.fixture
def stub_aml() -> StubAml:
    return StubAml(None)


@pytest.fixture
def analyzer(stub_onchain, stub_aml, clock):
    from walletrisk.analysis_engine.analyzer import WalletRiskAnalyzer
    from walletrisk.analysis_engine.cache import RiskCache

    return WalletRiskAnalyzer(
        stub_onchain,
        stub_aml,
        cache=RiskCache(clock=clock),
        fetch_timeout_sec=5.0,
    )
