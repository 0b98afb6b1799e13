"""
Score calculators: one observed metric -> 0-100 risk sub-score (higher = riskier).

Fixed breakpoint tables, no configuration surface. Boundaries are part of the
contract: "< 7" is strict, ">= 8" is inclusive. Description helpers share the
same breakpoints.
"""

from __future__ import annotations

from walletrisk.onchain.models import BehaviorPattern, WalletObservation

SCORE_MAX = 100

CONTRACT_PENALTY = 30
ZERO_BALANCE_PENALTY = 20

RAPID_TX_PENALTY = 40
SUSPICIOUS_GAS_PENALTY = 30
UNUSUAL_AMOUNT_PENALTY = 30


def wallet_age_score(age_days: int) -> int:
    if age_days == 0:
        return 100
    if age_days < 7:
        return 80
    if age_days < 30:
        return 60
    if age_days < 90:
        return 40
    if age_days < 180:
        return 20
    return 10


def transaction_score(tx_count: int, avg_value: float = 0.0) -> int:
    """avg_value is accepted for the signature but not weighted into the score."""
    if tx_count == 0:
        return 100
    if tx_count < 5:
        return 70
    if tx_count < 20:
        return 50
    if tx_count < 50:
        return 30
    return 15


def reputation_score(is_contract: bool, observation: WalletObservation) -> int:
    # Blacklist and known-malicious signals are reserved and contribute nothing yet.
    score = 0
    if is_contract:
        score += CONTRACT_PENALTY
    if observation.balance == 0 and observation.transaction_count > 0:
        score += ZERO_BALANCE_PENALTY
    return min(score, SCORE_MAX)


def behavior_score(pattern: BehaviorPattern) -> int:
    score = 0
    if pattern.rapid_transactions:
        score += RAPID_TX_PENALTY
    if pattern.suspicious_gas_usage:
        score += SUSPICIOUS_GAS_PENALTY
    if pattern.unusual_amounts:
        score += UNUSUAL_AMOUNT_PENALTY
    return min(score, SCORE_MAX)


def aml_score(provider_score: float) -> int:
    """Map the provider's 0-10 scale onto 0-100, weighting the top end."""
    if provider_score >= 8:
        return 100
    if provider_score >= 6:
        return 85
    if provider_score >= 4:
        return 60
    if provider_score >= 2:
        return 35
    return 10


def wallet_age_description(age_days: int) -> str:
    if age_days == 0:
        return "No transaction history"
    if age_days < 7:
        return "Very new wallet (< 1 week)"
    if age_days < 30:
        return "New wallet (< 1 month)"
    if age_days < 90:
        return "Relatively new (< 3 months)"
    if age_days < 180:
        return "Established wallet (< 6 months)"
    return "Mature wallet (> 6 months)"


def transaction_description(tx_count: int) -> str:
    if tx_count == 0:
        return "No transactions"
    if tx_count < 5:
        return "Very limited activity"
    if tx_count < 20:
        return "Limited activity"
    if tx_count < 50:
        return "Moderate activity"
    return "Active wallet"


def reputation_description(is_contract: bool) -> str:
    if is_contract:
        return "Smart contract address"
    return "Standard EOA (Externally Owned Account)"


def behavior_description(pattern: BehaviorPattern) -> str:
    issues: list[str] = []
    if pattern.rapid_transactions:
        issues.append("rapid transactions")
    if pattern.suspicious_gas_usage:
        issues.append("unusual gas usage")
    if pattern.unusual_amounts:
        issues.append("suspicious amounts")
    if not issues:
        return "Normal behavior patterns"
    return f"Suspicious patterns: {', '.join(issues)}"


def transaction_frequency(observation: WalletObservation, age_days: int) -> str:
    """Bucket transactions per day of wallet age."""
    if observation.transaction_count == 0:
        return "None"
    if age_days == 0:
        return "N/A"
    tx_per_day = observation.transaction_count / age_days
    if tx_per_day > 10:
        return "Very High"
    if tx_per_day > 5:
        return "High"
    if tx_per_day > 1:
        return "Moderate"
    return "Low"
