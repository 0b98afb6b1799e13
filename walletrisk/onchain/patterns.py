"""
Derived on-chain helpers: wallet age, average value, behavior patterns.

Rule-based and explainable: each behavior flag is an independent rule with
configurable thresholds, and the observed values are kept in
BehaviorPattern.details for auditing.
"""

from __future__ import annotations

import statistics
import time
from dataclasses import dataclass
from typing import Any, Callable

from walletrisk.onchain.models import BehaviorPattern, WalletObservation
from walletrisk.walletrisk_logging import get_logger, short_wallet

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


@dataclass
class PatternConfig:
    """Thresholds for behavior pattern rules."""

    # Rapid: consecutive transactions closer than this many seconds...
    rapid_tx_max_gap_sec: int = 60
    # ...at least this many times.
    rapid_tx_min_occurrences: int = 5

    # Gas: any gas price above multiplier x median gas price.
    gas_price_outlier_multiplier: float = 3.0
    gas_min_samples: int = 3

    # Amounts: any non-zero value above multiplier x median non-zero value.
    amount_outlier_multiplier: float = 10.0
    amount_min_samples: int = 3


def wallet_age_days(observation: WalletObservation, now: float | None = None) -> int:
    """
    Whole days since the first transaction. 0 when there is no first transaction
    (or its timestamp is in the future).
    """
    first = observation.first_transaction
    if first is None:
        return 0
    now = time.time() if now is None else now
    return max(0, int((now - first.timestamp) // SECONDS_PER_DAY))


def average_transaction_value(observation: WalletObservation) -> float:
    """Mean transaction value in native units (ether); 0.0 with no transactions."""
    txs = observation.transactions
    if not txs:
        return 0.0
    return sum(tx.value_ether for tx in txs) / len(txs)


def _check_rapid(observation: WalletObservation, config: PatternConfig, details: dict[str, Any]) -> bool:
    timestamps = [tx.timestamp for tx in observation.transactions]
    short_gaps = sum(
        1 for prev, cur in zip(timestamps, timestamps[1:])
        if cur - prev < config.rapid_tx_max_gap_sec
    )
    details["rapid_short_gaps"] = short_gaps
    details["rapid_threshold"] = config.rapid_tx_min_occurrences
    return short_gaps >= config.rapid_tx_min_occurrences


def _check_gas(observation: WalletObservation, config: PatternConfig, details: dict[str, Any]) -> bool:
    prices = [tx.gas_price for tx in observation.transactions if tx.gas_price > 0]
    if len(prices) < config.gas_min_samples:
        return False
    median = statistics.median(prices)
    peak = max(prices)
    details["gas_price_median"] = median
    details["gas_price_max"] = peak
    return peak > median * config.gas_price_outlier_multiplier


def _check_amounts(observation: WalletObservation, config: PatternConfig, details: dict[str, Any]) -> bool:
    values = [tx.value for tx in observation.transactions if tx.value > 0]
    if len(values) < config.amount_min_samples:
        return False
    median = statistics.median(values)
    peak = max(values)
    details["value_median_wei"] = median
    details["value_max_wei"] = peak
    return peak > median * config.amount_outlier_multiplier


_Rule = Callable[[WalletObservation, PatternConfig, dict[str, Any]], bool]


def detect_patterns(
    observation: WalletObservation,
    config: PatternConfig | None = None,
) -> BehaviorPattern:
    """
    Run all behavior rules on an observation.

    A rule that fails on unexpected data is logged and treated as not triggered.
    """
    cfg = config or PatternConfig()
    details: dict[str, Any] = {}
    results: dict[str, bool] = {}
    rules: tuple[tuple[str, _Rule], ...] = (
        ("rapid_transactions", _check_rapid),
        ("suspicious_gas_usage", _check_gas),
        ("unusual_amounts", _check_amounts),
    )
    for name, rule in rules:
        try:
            results[name] = rule(observation, cfg, details)
        except (TypeError, ValueError, statistics.StatisticsError) as e:
            logger.warning(
                "pattern_rule_failed",
                rule=name,
                wallet_id=short_wallet(observation.address),
                error=str(e),
            )
            results[name] = False

    return BehaviorPattern(details=details, **results)
