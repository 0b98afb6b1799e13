"""
Pytest tests for RiskCache: TTL on read, key normalization, sweep and lifecycle.
"""

from __future__ import annotations

import asyncio
import threading

import pytest

from conftest import DAY, NOW, FakeClock
from walletrisk.analysis_engine.cache import RiskCache, cache_key


def _analysis(address: str = "0xabc"):
    from walletrisk.analysis_engine.models import (
        AddressReputationFactor,
        BehaviorPatternsFactor,
        RiskAnalysis,
        RiskFactors,
        RiskLevel,
        TransactionHistoryFactor,
        WalletAgeFactor,
    )

    factors = RiskFactors(
        wallet_age=WalletAgeFactor(0, None, 100, 0.20, ""),
        transaction_history=TransactionHistoryFactor(0, 0.0, None, "None", 100, 0.25, ""),
        address_reputation=AddressReputationFactor(False, 0, 0.15, ""),
        behavior_patterns=BehaviorPatternsFactor(False, False, False, 0, 0.10, ""),
    )
    return RiskAnalysis(
        wallet_address=address,
        risk_score=45,
        risk_level=RiskLevel.MEDIUM,
        factors=factors,
        recommendations=("x",),
        timestamp="",
        cache_expiry="",
    )


def test_put_get_until_expiry(clock):
    cache = RiskCache(clock=clock)
    analysis = _analysis()
    expiry = cache.put("0xabc", analysis)

    assert expiry == NOW + DAY
    assert cache.get("0xabc") is analysis

    clock.advance(DAY - 1)
    assert cache.get("0xabc") is analysis

    # expiry > now is strict: at exactly the expiry instant the entry is stale
    clock.advance(1)
    assert cache.get("0xabc") is None


def test_keys_are_case_and_whitespace_insensitive(clock):
    cache = RiskCache(clock=clock)
    analysis = _analysis()
    cache.put("0xABC", analysis)
    assert cache.get("  0xabc ") is analysis
    assert cache_key(" 0xAbC\n") == "0xabc"


def test_put_replaces_entry(clock):
    cache = RiskCache(ttl_sec=100, clock=clock)
    first, second = _analysis(), _analysis()
    cache.put("0xabc", first)
    clock.advance(50)
    cache.put("0xabc", second)
    clock.advance(60)
    assert cache.get("0xabc") is second
    assert len(cache) == 1


def test_put_with_explicit_now(clock):
    cache = RiskCache(ttl_sec=100, clock=clock)
    expiry = cache.put("0xabc", _analysis(), now=NOW - 100)
    assert expiry == NOW
    assert cache.get("0xabc") is None


def test_expired_entry_not_served_before_sweep(clock):
    cache = RiskCache(ttl_sec=10, clock=clock)
    cache.put("0xabc", _analysis())
    clock.advance(11)
    assert cache.get("0xabc") is None
    assert len(cache) == 1


def test_sweep_removes_only_expired(clock):
    cache = RiskCache(ttl_sec=10, clock=clock)
    cache.put("0xold", _analysis())
    clock.advance(5)
    cache.put("0xnew", _analysis())
    clock.advance(6)

    cache.sweep_expired()

    assert len(cache) == 1
    assert cache.get("0xnew") is not None


def test_clear(clock):
    cache = RiskCache(clock=clock)
    cache.put("0xabc", _analysis())
    cache.clear()
    assert len(cache) == 0


@pytest.mark.parametrize("kwargs", [{"ttl_sec": 0}, {"ttl_sec": -1}, {"sweep_interval_sec": 0}])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        RiskCache(**kwargs)


def test_background_sweep_lifecycle():
    clock = FakeClock()
    cache = RiskCache(ttl_sec=10, sweep_interval_sec=0.01, clock=clock)

    async def run():
        cache.put("0xabc", _analysis())
        clock.advance(11)
        cache.start()
        cache.start()
        assert cache.running
        for _ in range(100):
            if len(cache) == 0:
                break
            await asyncio.sleep(0.01)
        await cache.stop()

    asyncio.run(run())

    assert len(cache) == 0
    assert not cache.running


def test_sweep_restarts_after_stop():
    clock = FakeClock()
    cache = RiskCache(ttl_sec=10, sweep_interval_sec=0.01, clock=clock)

    async def run():
        cache.start()
        await cache.stop()
        cache.put("0xabc", _analysis())
        clock.advance(11)
        cache.start()
        assert cache.running
        for _ in range(100):
            if len(cache) == 0:
                break
            await asyncio.sleep(0.01)
        await cache.stop()

    asyncio.run(run())

    assert len(cache) == 0
    assert not cache.running


def test_stop_without_start_is_noop():
    cache = RiskCache()
    asyncio.run(cache.stop())
    assert not cache.running


def test_async_context_manager_stops_sweep():
    cache = RiskCache(sweep_interval_sec=0.01)

    async def run():
        async with cache:
            assert cache.running
            await asyncio.sleep(0.02)

    asyncio.run(run())
    assert not cache.running


def test_concurrent_put_get_with_sweeper_thread(clock):
    cache = RiskCache(ttl_sec=100, clock=clock)
    for i in range(50):
        cache.put(f"0xstale{i:02d}", _analysis())
    clock.advance(150)

    errors: list[BaseException] = []
    writers_done = threading.Event()
    sweeps = {"n": 0}

    def writer(n: int) -> None:
        try:
            for i in range(200):
                address = f"0x{n:02x}{i:038x}"
                analysis = _analysis(address)
                cache.put(address, analysis)
                assert cache.get(address) is analysis
        except BaseException as e:
            errors.append(e)

    def sweeper() -> None:
        try:
            while not writers_done.wait(0.001):
                cache.sweep_expired()
                sweeps["n"] += 1
            cache.sweep_expired()
            sweeps["n"] += 1
        except BaseException as e:
            errors.append(e)

    sweep_thread = threading.Thread(target=sweeper)
    writers = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    sweep_thread.start()
    for t in writers:
        t.start()
    for t in writers:
        t.join()
    writers_done.set()
    sweep_thread.join()

    assert errors == []
    assert sweeps["n"] >= 1
    assert len(cache) == 8 * 200
    assert all(cache.get(f"0xstale{i:02d}") is None for i in range(50))
