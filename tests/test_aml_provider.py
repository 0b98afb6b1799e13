"""
Pytest tests for the AML layer: auto-block rule, descriptions and the
MetaSleuth client over httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from conftest import WALLET
from walletrisk.aml.models import AmlResult, RiskIndicator
from walletrisk.aml.provider import MetaSleuthClient, describe_aml, should_auto_block
from walletrisk.core.exceptions import ProviderError

API_URL = "https://aml.test/api/v3/"


def _client(handler) -> MetaSleuthClient:
    return MetaSleuthClient(API_URL, "aml-key", transport=httpx.MockTransport(handler))


def test_should_auto_block():
    assert should_auto_block([RiskIndicator(5004, "Sanctions")]) is True
    assert should_auto_block([RiskIndicator(6001, "Gambling"), RiskIndicator(1, "OFAC")]) is True
    assert should_auto_block([RiskIndicator(5005, "Mixer")]) is False
    assert should_auto_block([]) is False


def test_indicator_is_critical():
    assert RiskIndicator(5004, "x").is_critical
    assert not RiskIndicator(5005, "x").is_critical


def test_describe_aml():
    assert describe_aml(9, []) == "Critical AML risk (score 9/10): no risk indicators"
    assert describe_aml(
        4.5, [RiskIndicator(6001, "Gambling"), RiskIndicator(7001, "Mixer")]
    ) == "Medium AML risk (score 4.5/10): Gambling, Mixer"
    assert describe_aml(0, []).startswith("Minimal AML risk")


def test_fetch_aml_result():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={
            "code": 200,
            "message": "OK",
            "data": {
                "risk_score": 7,
                "risk_level": "high",
                "risk_indicators": [
                    {"indicator": {"code": 5001, "name": "Sanctioned Entity"}, "source": "0x1234567890abcdef"},
                    {"indicator": {"code": 6001, "name": "Gambling"}},
                ],
            },
        })

    result = asyncio.run(_client(handler).fetch_aml_result(WALLET, 84532))

    assert result == AmlResult(
        risk_score=7.0,
        risk_indicators=(
            RiskIndicator(5001, "Sanctioned Entity", "0x1234567890abcdef"),
            RiskIndicator(6001, "Gambling", ""),
        ),
    )
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://aml.test/api/v3/risk-score"
    assert request.headers["API-KEY"] == "aml-key"
    assert json.loads(request.content) == {"chain_id": "84532", "address": WALLET.lower()}


def test_disabled_without_api_key():
    calls: list = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    client = MetaSleuthClient(API_URL, "  ", transport=httpx.MockTransport(handler))
    assert client.enabled is False
    assert asyncio.run(client.fetch_aml_result(WALLET, 84532)) is None
    assert calls == []


def test_not_found_means_no_data():
    result = asyncio.run(_client(lambda r: httpx.Response(404)).fetch_aml_result(WALLET, 84532))
    assert result is None


def test_null_data_means_no_data():
    handler = lambda r: httpx.Response(200, json={"code": 200, "message": "OK", "data": None})  # noqa: E731
    assert asyncio.run(_client(handler).fetch_aml_result(WALLET, 84532)) is None


def test_error_code_in_body():
    handler = lambda r: httpx.Response(200, json={"code": 40001, "message": "invalid api key"})  # noqa: E731
    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_client(handler).fetch_aml_result(WALLET, 84532))
    assert exc_info.value.provider == "metasleuth"
    assert "invalid api key" in str(exc_info.value)


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        json.dumps({"code": 200, "data": {"risk_score": 11}}),
        json.dumps({"code": 200, "data": {"risk_score": 5, "risk_indicators": [{"source": "x"}]}}),
    ],
)
def test_malformed_response(body):
    handler = lambda r: httpx.Response(200, text=body)  # noqa: E731
    with pytest.raises(ProviderError):
        asyncio.run(_client(handler).fetch_aml_result(WALLET, 84532))


def test_server_error_propagates():
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(_client(lambda r: httpx.Response(503)).fetch_aml_result(WALLET, 84532))


def test_result_to_dict():
    result = AmlResult(3.0, (RiskIndicator(6001, "Gambling", "src"),))
    assert result.to_dict() == {
        "risk_score": 3.0,
        "risk_indicators": [{"code": 6001, "name": "Gambling", "source": "src"}],
    }


def test_null_indicator_fields_default_to_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 200, "data": {"risk_score": 5, "risk_indicators": None}})

    result = asyncio.run(_client(handler).fetch_aml_result(WALLET, 84532))

    assert result == AmlResult(risk_score=5.0, risk_indicators=())


def test_null_indicator_name_and_source_default_to_blank():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "code": 200,
            "data": {
                "risk_score": 2,
                "risk_indicators": [{"indicator": {"code": 6001, "name": None}, "source": None}],
            },
        })

    result = asyncio.run(_client(handler).fetch_aml_result(WALLET, 84532))

    assert result.risk_indicators == (RiskIndicator(6001, "", ""),)
