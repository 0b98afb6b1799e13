"""
Analysis engine package — wallet risk scoring.

Score calculators, weighted aggregation, recommendations, the result cache
and the analyzer that orchestrates them over the on-chain and AML providers.
"""

from walletrisk.analysis_engine.aggregator import (
    WEIGHTS,
    calculate_overall_score,
    calculate_risk_factors,
    get_risk_level,
)
from walletrisk.analysis_engine.analyzer import (
    WalletRiskAnalyzer,
    analyze_wallet_sync,
    build_default_analyzer,
)
from walletrisk.analysis_engine.cache import CacheEntry, RiskCache
from walletrisk.analysis_engine.models import (
    AddressReputationFactor,
    AmlComplianceFactor,
    BehaviorPatternsFactor,
    RiskAnalysis,
    RiskFactors,
    RiskLevel,
    TransactionHistoryFactor,
    WalletAgeFactor,
)
from walletrisk.analysis_engine.recommendations import generate_recommendations

__all__ = [
    "WEIGHTS",
    "calculate_overall_score",
    "calculate_risk_factors",
    "get_risk_level",
    "WalletRiskAnalyzer",
    "analyze_wallet_sync",
    "build_default_analyzer",
    "CacheEntry",
    "RiskCache",
    "AddressReputationFactor",
    "AmlComplianceFactor",
    "BehaviorPatternsFactor",
    "RiskAnalysis",
    "RiskFactors",
    "RiskLevel",
    "TransactionHistoryFactor",
    "WalletAgeFactor",
    "generate_recommendations",
]
