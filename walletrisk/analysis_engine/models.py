"""
Data models for analysis engine output.

Factor records, the RiskFactors breakdown and the top-level RiskAnalysis.
All are frozen: a cached analysis is shared between callers and never
mutated after it is built.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from walletrisk.aml.models import RiskIndicator


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class WalletAgeFactor:
    age_in_days: int
    first_seen_date: str | None
    score: int
    weight: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "age_in_days": self.age_in_days,
            "first_seen_date": self.first_seen_date,
            "score": self.score,
            "weight": self.weight,
            "description": self.description,
        }


@dataclass(frozen=True)
class TransactionHistoryFactor:
    total_transactions: int
    average_transaction_value: float
    last_transaction_date: str | None
    transaction_frequency: str
    score: int
    weight: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_transactions": self.total_transactions,
            "average_transaction_value": self.average_transaction_value,
            "last_transaction_date": self.last_transaction_date,
            "transaction_frequency": self.transaction_frequency,
            "score": self.score,
            "weight": self.weight,
            "description": self.description,
        }


@dataclass(frozen=True)
class AddressReputationFactor:
    is_contract: bool
    score: int
    weight: float
    description: str
    has_blacklist_interactions: bool = False
    """Reserved; no blacklist source is wired in yet."""
    known_malicious_activity: bool = False
    """Reserved; no malicious-activity source is wired in yet."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_contract": self.is_contract,
            "has_blacklist_interactions": self.has_blacklist_interactions,
            "known_malicious_activity": self.known_malicious_activity,
            "score": self.score,
            "weight": self.weight,
            "description": self.description,
        }


@dataclass(frozen=True)
class BehaviorPatternsFactor:
    rapid_transactions: bool
    unusual_patterns: bool
    suspicious_gas_usage: bool
    score: int
    weight: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "rapid_transactions": self.rapid_transactions,
            "unusual_patterns": self.unusual_patterns,
            "suspicious_gas_usage": self.suspicious_gas_usage,
            "score": self.score,
            "weight": self.weight,
            "description": self.description,
        }


@dataclass(frozen=True)
class AmlComplianceFactor:
    provider_score: float
    risk_indicators: tuple[RiskIndicator, ...]
    score: int
    weight: float
    description: str
    enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_score": self.provider_score,
            "risk_indicators": [i.to_dict() for i in self.risk_indicators],
            "score": self.score,
            "weight": self.weight,
            "description": self.description,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class RiskFactors:
    """
    Per-dimension breakdown. aml_compliance is None when the provider had no
    data; its weight is then not part of the composite.
    """

    wallet_age: WalletAgeFactor
    transaction_history: TransactionHistoryFactor
    address_reputation: AddressReputationFactor
    behavior_patterns: BehaviorPatternsFactor
    aml_compliance: AmlComplianceFactor | None = None

    def present(self) -> Iterator[Any]:
        """Yield the factors that count toward the composite score."""
        yield self.wallet_age
        yield self.transaction_history
        yield self.address_reputation
        yield self.behavior_patterns
        if self.aml_compliance is not None and self.aml_compliance.enabled:
            yield self.aml_compliance

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "wallet_age": self.wallet_age.to_dict(),
            "transaction_history": self.transaction_history.to_dict(),
            "address_reputation": self.address_reputation.to_dict(),
            "behavior_patterns": self.behavior_patterns.to_dict(),
        }
        if self.aml_compliance is not None:
            out["aml_compliance"] = self.aml_compliance.to_dict()
        return out


@dataclass(frozen=True)
class RiskAnalysis:
    """Complete, cacheable risk assessment for one wallet."""

    wallet_address: str
    risk_score: int
    risk_level: RiskLevel
    factors: RiskFactors
    recommendations: tuple[str, ...]
    timestamp: str
    """ISO-8601 (UTC) time the analysis was computed."""
    cache_expiry: str
    """ISO-8601 (UTC) time after which the cached copy is no longer served."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet_address": self.wallet_address,
            "risk_score": self.risk_score,
            "risk_level": self.risk_level.value,
            "factors": self.factors.to_dict(),
            "recommendations": list(self.recommendations),
            "timestamp": self.timestamp,
            "cache_expiry": self.cache_expiry,
        }
