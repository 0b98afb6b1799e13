"""
AML provider — MetaSleuth address-compliance risk score.

fetch_aml_result returns None when AML is disabled (no API key) or when the
provider has no data for the address; that is a valid state, not an error.
Transport failures and unusable responses raise.
"""

from __future__ import annotations

from typing import Iterable, Protocol

import httpx
from pydantic import ValidationError

from walletrisk.aml.models import (
    CRITICAL_INDICATOR_CODE,
    AmlResult,
    RiskIndicator,
    RiskScoreResponse,
)
from walletrisk.core.exceptions import ProviderError
from walletrisk.walletrisk_logging import get_logger, short_wallet

logger = get_logger(__name__)

PROVIDER_NAME = "metasleuth"
RISK_SCORE_PATH = "/risk-score"
RESPONSE_CODE_OK = 200


class AmlProvider(Protocol):
    """Interface the analyzer consumes for AML data."""

    async def fetch_aml_result(self, address: str, chain_id: int) -> AmlResult | None:
        ...


def should_auto_block(indicators: Iterable[RiskIndicator]) -> bool:
    """True when any indicator is sanctions/critical (code <= CRITICAL_INDICATOR_CODE)."""
    return any(i.code <= CRITICAL_INDICATOR_CODE for i in indicators)


def _score_label(score: float) -> str:
    if score >= 8:
        return "Critical AML risk"
    if score >= 6:
        return "High AML risk"
    if score >= 4:
        return "Medium AML risk"
    if score >= 2:
        return "Low AML risk"
    return "Minimal AML risk"


def describe_aml(score: float, indicators: Iterable[RiskIndicator]) -> str:
    """Human-readable summary of a provider score and its indicators."""
    names = [i.name for i in indicators if i.name]
    summary = f"{_score_label(score)} (score {score:g}/10)"
    if not names:
        return f"{summary}: no risk indicators"
    return f"{summary}: {', '.join(names)}"


class MetaSleuthClient:
    """Async client for the MetaSleuth risk-score endpoint."""

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        *,
        request_timeout_sec: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_url.strip():
            raise ValueError("api_url must be non-empty")
        self._url = api_url.strip().rstrip("/") + RISK_SCORE_PATH
        self._api_key = api_key.strip()
        self._timeout = request_timeout_sec
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def fetch_aml_result(self, address: str, chain_id: int) -> AmlResult | None:
        address = address.strip().lower()
        if not self.enabled:
            logger.debug("aml_provider_disabled", wallet_id=short_wallet(address))
            return None

        body = {"chain_id": str(chain_id), "address": address}
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        ) as client:
            resp = await client.post(
                self._url,
                json=body,
                headers={"API-KEY": self._api_key, "Content-Type": "application/json"},
            )
        if resp.status_code == httpx.codes.NOT_FOUND:
            logger.info("aml_no_data", wallet_id=short_wallet(address), chain_id=chain_id)
            return None
        resp.raise_for_status()

        try:
            parsed = RiskScoreResponse.model_validate_json(resp.content)
        except ValidationError as e:
            raise ProviderError(PROVIDER_NAME, f"invalid risk-score response: {e}") from e
        if parsed.code != RESPONSE_CODE_OK:
            raise ProviderError(PROVIDER_NAME, f"risk-score error {parsed.code}: {parsed.message or 'unknown'}")
        if parsed.data is None:
            logger.info("aml_no_data", wallet_id=short_wallet(address), chain_id=chain_id)
            return None

        result = AmlResult.from_payload(parsed.data)
        logger.info(
            "aml_result_fetched",
            wallet_id=short_wallet(address),
            chain_id=chain_id,
            risk_score=result.risk_score,
            indicator_count=len(result.risk_indicators),
        )
        return result
