"""
Risk aggregation — factor breakdown, weighted composite score, risk level.

The composite is the weight-sum over the factors that are present. When AML
data is absent its 0.30 weight is simply not counted and the remaining four
weights are NOT renormalized, so the composite tops out at 70 in that case.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from types import MappingProxyType

from walletrisk.aml.models import AmlResult
from walletrisk.aml.provider import describe_aml
from walletrisk.analysis_engine import calculators
from walletrisk.analysis_engine.models import (
    AddressReputationFactor,
    AmlComplianceFactor,
    BehaviorPatternsFactor,
    RiskFactors,
    RiskLevel,
    TransactionHistoryFactor,
    WalletAgeFactor,
)
from walletrisk.onchain.models import BehaviorPattern, Transaction, WalletObservation
from walletrisk.onchain.patterns import average_transaction_value, wallet_age_days

WEIGHT_WALLET_AGE = 0.20
WEIGHT_TRANSACTION_HISTORY = 0.25
WEIGHT_ADDRESS_REPUTATION = 0.15
WEIGHT_BEHAVIOR_PATTERNS = 0.10
WEIGHT_AML_COMPLIANCE = 0.30

WEIGHTS = MappingProxyType({
    "wallet_age": WEIGHT_WALLET_AGE,
    "transaction_history": WEIGHT_TRANSACTION_HISTORY,
    "address_reputation": WEIGHT_ADDRESS_REPUTATION,
    "behavior_patterns": WEIGHT_BEHAVIOR_PATTERNS,
    "aml_compliance": WEIGHT_AML_COMPLIANCE,
})

SCORE_MIN = 0
SCORE_MAX = 100

# Risk level thresholds (inclusive lower bounds)
CRITICAL_THRESHOLD = 80
HIGH_THRESHOLD = 60
MEDIUM_THRESHOLD = 30


def _iso(tx: Transaction | None) -> str | None:
    if tx is None:
        return None
    return datetime.fromtimestamp(tx.timestamp, tz=timezone.utc).isoformat()


def calculate_risk_factors(
    observation: WalletObservation,
    is_contract: bool,
    pattern: BehaviorPattern,
    aml_result: AmlResult | None,
    *,
    now: float | None = None,
) -> RiskFactors:
    """Score every dimension and assemble the explainable breakdown."""
    age_days = wallet_age_days(observation, now=now)
    avg_value = average_transaction_value(observation)
    tx_count = observation.transaction_count

    wallet_age = WalletAgeFactor(
        age_in_days=age_days,
        first_seen_date=_iso(observation.first_transaction),
        score=calculators.wallet_age_score(age_days),
        weight=WEIGHT_WALLET_AGE,
        description=calculators.wallet_age_description(age_days),
    )
    transaction_history = TransactionHistoryFactor(
        total_transactions=tx_count,
        average_transaction_value=avg_value,
        last_transaction_date=_iso(observation.last_transaction),
        transaction_frequency=calculators.transaction_frequency(observation, age_days),
        score=calculators.transaction_score(tx_count, avg_value),
        weight=WEIGHT_TRANSACTION_HISTORY,
        description=calculators.transaction_description(tx_count),
    )
    address_reputation = AddressReputationFactor(
        is_contract=is_contract,
        score=calculators.reputation_score(is_contract, observation),
        weight=WEIGHT_ADDRESS_REPUTATION,
        description=calculators.reputation_description(is_contract),
    )
    behavior_patterns = BehaviorPatternsFactor(
        rapid_transactions=pattern.rapid_transactions,
        unusual_patterns=pattern.unusual_amounts,
        suspicious_gas_usage=pattern.suspicious_gas_usage,
        score=calculators.behavior_score(pattern),
        weight=WEIGHT_BEHAVIOR_PATTERNS,
        description=calculators.behavior_description(pattern),
    )

    aml_compliance: AmlComplianceFactor | None = None
    if aml_result is not None:
        aml_compliance = AmlComplianceFactor(
            provider_score=aml_result.risk_score,
            risk_indicators=aml_result.risk_indicators,
            score=calculators.aml_score(aml_result.risk_score),
            weight=WEIGHT_AML_COMPLIANCE,
            description=describe_aml(aml_result.risk_score, aml_result.risk_indicators),
        )

    return RiskFactors(
        wallet_age=wallet_age,
        transaction_history=transaction_history,
        address_reputation=address_reputation,
        behavior_patterns=behavior_patterns,
        aml_compliance=aml_compliance,
    )


def calculate_overall_score(factors: RiskFactors) -> int:
    """
    Weighted sum of present factor scores, rounded half-up to an integer
    and clamped to 0-100.
    """
    weighted = 0.0
    for factor in factors.present():
        weighted += factor.score * factor.weight
    score = math.floor(weighted + 0.5)
    return max(SCORE_MIN, min(SCORE_MAX, int(score)))


def get_risk_level(score: int) -> RiskLevel:
    if score >= CRITICAL_THRESHOLD:
        return RiskLevel.CRITICAL
    if score >= HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
