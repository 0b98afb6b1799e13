"""
Recommendation generator: ordered, human-readable actions for a scored wallet.

Evaluated strictly in order:
1. Auto-block: critical AML indicators short-circuit with a fixed notice plus
   one line per critical indicator; nothing else is appended.
2. One score-tier line (block / review / monitor / allow).
3. AML due-diligence and non-critical indicator summary.
4. Independent factor nudges (new wallet, thin history, contract, rapid txs).

Never raises; every input yields at least one line.
"""

from __future__ import annotations

from walletrisk.aml.models import CRITICAL_INDICATOR_CODE
from walletrisk.aml.provider import should_auto_block
from walletrisk.analysis_engine.aggregator import (
    CRITICAL_THRESHOLD,
    HIGH_THRESHOLD,
    MEDIUM_THRESHOLD,
)
from walletrisk.analysis_engine.models import RiskFactors

AUTO_BLOCK_NOTICE = (
    "🚫 CRITICAL AML RISK - BLOCK IMMEDIATELY",
    "Wallet has interactions with sanctioned or high-risk entities.",
    "Compliance review required before any transaction.",
)
SOURCE_EXCERPT_LEN = 10

TIER_BLOCK = "🚫 BLOCK - Risk score is critical. Do not process payment."
TIER_REVIEW = "⚠️ REVIEW REQUIRED - High risk detected. Manual review recommended."
TIER_REVIEW_FOLLOWUP = "Consider limiting transaction amount or requiring additional verification."
TIER_MONITOR = "⚡ MONITOR - Medium risk. Allow transaction but monitor closely."
TIER_ALLOW = "✅ ALLOW - Low risk. Safe to proceed with transaction."

AML_ENHANCED_DUE_DILIGENCE = "High AML risk detected. Enhanced due diligence recommended."
AML_STANDARD_DUE_DILIGENCE = "Moderate AML risk. Standard due diligence required."
AML_ENHANCED_MIN_SCORE = 6
AML_STANDARD_MIN_SCORE = 4

NEW_WALLET_MAX_DAYS = 7
LIMITED_HISTORY_MAX_TX = 5
NUDGE_NEW_WALLET = "New wallet detected. Consider requiring additional verification."
NUDGE_LIMITED_HISTORY = "Limited transaction history. Monitor for unusual behavior."
NUDGE_CONTRACT = "Smart contract address. Verify contract legitimacy."
NUDGE_RAPID = "Rapid transaction pattern detected. Possible bot activity."


def _score_tier(score: int) -> list[str]:
    if score >= CRITICAL_THRESHOLD:
        return [TIER_BLOCK]
    if score >= HIGH_THRESHOLD:
        return [TIER_REVIEW, TIER_REVIEW_FOLLOWUP]
    if score >= MEDIUM_THRESHOLD:
        return [TIER_MONITOR]
    return [TIER_ALLOW]


def generate_recommendations(score: int, factors: RiskFactors) -> tuple[str, ...]:
    recommendations: list[str] = []
    aml = factors.aml_compliance
    aml_enabled = aml is not None and aml.enabled

    if aml_enabled and should_auto_block(aml.risk_indicators):
        recommendations.extend(AUTO_BLOCK_NOTICE)
        for indicator in aml.risk_indicators:
            if indicator.code <= CRITICAL_INDICATOR_CODE:
                recommendations.append(
                    f"⚠️ {indicator.name} detected (Source: {indicator.source[:SOURCE_EXCERPT_LEN]}...)"
                )
        return tuple(recommendations)

    recommendations.extend(_score_tier(score))

    if aml_enabled:
        if aml.provider_score >= AML_ENHANCED_MIN_SCORE:
            recommendations.append(AML_ENHANCED_DUE_DILIGENCE)
        elif aml.provider_score >= AML_STANDARD_MIN_SCORE:
            recommendations.append(AML_STANDARD_DUE_DILIGENCE)

        non_critical = [i.name for i in aml.risk_indicators if i.code > CRITICAL_INDICATOR_CODE]
        if non_critical:
            recommendations.append(f"AML indicators: {', '.join(non_critical)}")

    if factors.wallet_age.age_in_days < NEW_WALLET_MAX_DAYS:
        recommendations.append(NUDGE_NEW_WALLET)
    if factors.transaction_history.total_transactions < LIMITED_HISTORY_MAX_TX:
        recommendations.append(NUDGE_LIMITED_HISTORY)
    if factors.address_reputation.is_contract:
        recommendations.append(NUDGE_CONTRACT)
    if factors.behavior_patterns.rapid_transactions:
        recommendations.append(NUDGE_RAPID)

    return tuple(recommendations)
