"""
Wallet risk analyzer: cache -> fetch (on-chain + AML in parallel) -> score -> recommend -> cache.

Single entrypoint for callers: WalletRiskAnalyzer.analyze_wallet(address).
An analysis either completes fully or raises WalletAnalysisError; nothing
partial is cached or returned.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, TypeVar

from walletrisk.aml.models import AmlResult
from walletrisk.aml.provider import AmlProvider, MetaSleuthClient
from walletrisk.analysis_engine.aggregator import (
    calculate_overall_score,
    calculate_risk_factors,
    get_risk_level,
)
from walletrisk.analysis_engine.cache import RiskCache
from walletrisk.analysis_engine.models import RiskAnalysis
from walletrisk.analysis_engine.recommendations import generate_recommendations
from walletrisk.config import Settings, get_settings
from walletrisk.config.env import BASE_SEPOLIA_CHAIN_ID, DEFAULT_FETCH_TIMEOUT_SEC
from walletrisk.core.exceptions import InvalidAddressError, WalletAnalysisError
from walletrisk.onchain.client import BasescanClient, OnChainProvider
from walletrisk.onchain.models import WalletObservation
from walletrisk.onchain.patterns import PatternConfig, detect_patterns
from walletrisk.walletrisk_logging import bind_wallet

T = TypeVar("T")


def _iso(epoch_sec: float) -> str:
    return datetime.fromtimestamp(epoch_sec, tz=timezone.utc).isoformat()


def normalize_address(address: str | None) -> str:
    return (address or "").strip().lower()


class WalletRiskAnalyzer:
    """
    Orchestrates one risk analysis per address over two collaborators.

    Concurrent calls for the same uncached address are not coalesced; each
    fetches and computes independently and the last write to the cache wins.
    """

    def __init__(
        self,
        onchain: OnChainProvider,
        aml: AmlProvider,
        *,
        cache: RiskCache | None = None,
        chain_id: int = BASE_SEPOLIA_CHAIN_ID,
        fetch_timeout_sec: float | None = DEFAULT_FETCH_TIMEOUT_SEC,
        pattern_config: PatternConfig | None = None,
    ) -> None:
        """
        Args:
            onchain: On-chain data provider (observation + contract detection).
            aml: AML provider; may return None for "no data".
            cache: Result cache; a default 24h/1h cache is created if None.
            chain_id: Chain id passed to the AML provider.
            fetch_timeout_sec: Deadline per collaborator call; None disables it.
            pattern_config: Thresholds for behavior pattern detection.
        """
        if fetch_timeout_sec is not None and fetch_timeout_sec <= 0:
            raise ValueError("fetch_timeout_sec must be positive or None")
        self._onchain = onchain
        self._aml = aml
        self._cache = cache if cache is not None else RiskCache()
        self._chain_id = chain_id
        self._fetch_timeout_sec = fetch_timeout_sec
        self._pattern_config = pattern_config

    @property
    def cache(self) -> RiskCache:
        return self._cache

    async def analyze_wallet(self, address: str) -> RiskAnalysis:
        """Return the risk analysis for address, from cache when still valid."""
        normalized = normalize_address(address)
        if not normalized:
            raise InvalidAddressError("Failed to analyze wallet: address must be non-empty", address=address)
        log = bind_wallet(normalized)

        cached = self._cache.get(normalized)
        if cached is not None:
            log.info("wallet_analysis_cache_hit", risk_score=cached.risk_score)
            return cached

        log.info("wallet_analysis_start", chain_id=self._chain_id)
        try:
            analysis, computed_at = await self._analyze_uncached(normalized)
        except Exception as e:
            reason = str(e) or type(e).__name__
            log.error("wallet_analysis_failed", error=reason, error_type=type(e).__name__)
            raise WalletAnalysisError(f"Failed to analyze wallet: {reason}", address=normalized) from e

        self._cache.put(normalized, analysis, now=computed_at)
        log.info(
            "wallet_analysis_done",
            risk_score=analysis.risk_score,
            risk_level=analysis.risk_level.value,
            aml_available=analysis.factors.aml_compliance is not None,
        )
        return analysis

    def sweep_expired_cache(self) -> None:
        """Drop expired cache entries now, independent of the periodic sweep."""
        self._cache.sweep_expired()

    async def _analyze_uncached(self, address: str) -> tuple[RiskAnalysis, float]:
        """Fetch and score; returns the analysis and the instant it was computed at."""
        observation, aml_result = await self._fetch_concurrently(address)
        is_contract = bool(await self._bounded(self._onchain.is_contract(address)))
        pattern = detect_patterns(observation, self._pattern_config)

        now = self._cache.now()
        factors = calculate_risk_factors(observation, is_contract, pattern, aml_result, now=now)
        risk_score = calculate_overall_score(factors)
        analysis = RiskAnalysis(
            wallet_address=address,
            risk_score=risk_score,
            risk_level=get_risk_level(risk_score),
            factors=factors,
            recommendations=generate_recommendations(risk_score, factors),
            timestamp=_iso(now),
            cache_expiry=_iso(self._cache.expiry_for(now)),
        )
        return analysis, now

    async def _fetch_concurrently(self, address: str) -> tuple[WalletObservation, AmlResult | None]:
        """Fan out both collaborator fetches; if either fails, cancel the other and re-raise."""
        tasks: list[asyncio.Future[Any]] = [
            asyncio.ensure_future(self._bounded(self._onchain.fetch_observation(address))),
            asyncio.ensure_future(self._bounded(self._aml.fetch_aml_result(address, self._chain_id))),
        ]
        try:
            observation, aml_result = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if not isinstance(observation, WalletObservation):
            raise TypeError(f"on-chain provider returned {type(observation).__name__}, expected WalletObservation")
        if aml_result is not None and not isinstance(aml_result, AmlResult):
            raise TypeError(f"AML provider returned {type(aml_result).__name__}, expected AmlResult or None")
        return observation, aml_result

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        if self._fetch_timeout_sec is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self._fetch_timeout_sec)

    def start(self) -> None:
        """Start the cache's periodic sweep on the running loop."""
        self._cache.start()

    async def stop(self) -> None:
        await self._cache.stop()

    async def __aenter__(self) -> "WalletRiskAnalyzer":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()


def build_default_analyzer(settings: Settings | None = None) -> WalletRiskAnalyzer:
    """Wire the Basescan and MetaSleuth clients and a cache from settings (env by default)."""
    s = settings or get_settings()
    onchain = BasescanClient(
        s.basescan_api_url,
        s.basescan_api_key,
        request_timeout_sec=s.http_timeout_sec,
        tx_limit=s.tx_limit,
    )
    aml = MetaSleuthClient(
        s.metasleuth_api_url,
        s.metasleuth_api_key,
        request_timeout_sec=s.http_timeout_sec,
    )
    cache = RiskCache(ttl_sec=s.cache_ttl_sec, sweep_interval_sec=s.cache_sweep_interval_sec)
    return WalletRiskAnalyzer(
        onchain,
        aml,
        cache=cache,
        chain_id=s.chain_id,
        fetch_timeout_sec=s.fetch_timeout_sec,
    )


def analyze_wallet_sync(analyzer: WalletRiskAnalyzer, address: str) -> RiskAnalysis:
    """Blocking wrapper for scripts; must not be called from inside a running event loop."""
    return asyncio.run(analyzer.analyze_wallet(address))
