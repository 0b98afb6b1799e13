"""
On-chain data provider — Etherscan-compatible explorer client (Basescan by default).

Responsibilities:
- Fetch a wallet's transaction list and balance and build a WalletObservation.
- Detect whether an address holds contract code (proxy eth_getCode).
- Validate explorer items at the boundary; drop items that cannot be parsed.

Transport and HTTP errors propagate to the caller; the analyzer wraps them.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from walletrisk.core.exceptions import ProviderError
from walletrisk.onchain.models import Transaction, WalletObservation
from walletrisk.walletrisk_logging import get_logger, short_wallet

logger = get_logger(__name__)

PROVIDER_NAME = "basescan"
# Explorer answers status "0" with this message for wallets without history
NO_TRANSACTIONS_MESSAGE = "no transactions found"
EMPTY_CODE_VALUES = frozenset({"", "0x", "0x0"})


class OnChainProvider(Protocol):
    """Interface the analyzer consumes for on-chain data."""

    async def fetch_observation(self, address: str) -> WalletObservation:
        ...

    async def is_contract(self, address: str) -> bool:
        ...


class BasescanClient:
    """
    Async client for an Etherscan-compatible explorer API.

    One httpx.AsyncClient is opened per public call, so instances are cheap
    and safe to share across concurrent analyses.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        *,
        request_timeout_sec: float = 15.0,
        tx_limit: int = 1000,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            api_url: Explorer API endpoint (e.g. https://api-sepolia.basescan.org/api).
            api_key: Explorer API key; empty uses the keyless rate limit.
            request_timeout_sec: HTTP timeout for each request.
            tx_limit: Max transactions requested per wallet (1-10000).
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        if not api_url.strip():
            raise ValueError("api_url must be non-empty")
        if not (1 <= tx_limit <= 10_000):
            raise ValueError("tx_limit must be between 1 and 10000")
        self._api_url = api_url.strip()
        self._api_key = api_key.strip()
        self._timeout = request_timeout_sec
        self._tx_limit = tx_limit
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        )

    def _params(self, **params: Any) -> dict[str, Any]:
        if self._api_key:
            params["apikey"] = self._api_key
        return params

    async def _get(self, client: httpx.AsyncClient, **params: Any) -> dict[str, Any]:
        resp = await client.get(self._api_url, params=self._params(**params))
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(PROVIDER_NAME, f"invalid JSON response: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError(PROVIDER_NAME, "unexpected response shape")
        return data

    async def fetch_observation(self, address: str) -> WalletObservation:
        """Fetch transaction list and balance concurrently; build the observation."""
        address = address.strip().lower()
        async with self._client() as client:
            raw_txs, balance = await asyncio.gather(
                self._fetch_transactions(client, address),
                self._fetch_balance(client, address),
            )

        transactions: list[Transaction] = []
        skipped = 0
        for item in raw_txs:
            if not isinstance(item, dict):
                skipped += 1
                continue
            try:
                transactions.append(Transaction.from_api_item(item))
            except ValidationError as e:
                skipped += 1
                logger.debug("onchain_tx_item_skipped", wallet_id=short_wallet(address), error=str(e))

        observation = WalletObservation.from_transactions(address, transactions, balance)
        logger.info(
            "onchain_observation_fetched",
            wallet_id=short_wallet(address),
            transaction_count=observation.transaction_count,
            skipped_items=skipped,
        )
        return observation

    async def _fetch_transactions(self, client: httpx.AsyncClient, address: str) -> list[Any]:
        data = await self._get(
            client,
            module="account",
            action="txlist",
            address=address,
            startblock=0,
            endblock=99999999,
            page=1,
            offset=self._tx_limit,
            sort="asc",
        )
        result = data.get("result")
        if str(data.get("status")) == "1" and isinstance(result, list):
            return result
        message = str(data.get("message") or "")
        if message.strip().lower() == NO_TRANSACTIONS_MESSAGE:
            return []
        raise ProviderError(PROVIDER_NAME, f"txlist failed: {message or 'unknown'} ({result})")

    async def _fetch_balance(self, client: httpx.AsyncClient, address: str) -> int:
        data = await self._get(client, module="account", action="balance", address=address, tag="latest")
        if str(data.get("status")) != "1":
            raise ProviderError(PROVIDER_NAME, f"balance failed: {data.get('message') or 'unknown'}")
        try:
            return int(data.get("result") or 0)
        except (TypeError, ValueError) as e:
            raise ProviderError(PROVIDER_NAME, f"invalid balance: {data.get('result')!r}") from e

    async def is_contract(self, address: str) -> bool:
        """True if the address has deployed bytecode."""
        address = address.strip().lower()
        async with self._client() as client:
            data = await self._get(client, module="proxy", action="eth_getCode", address=address, tag="latest")
        if "error" in data:
            err = data["error"]
            message = err.get("message", err) if isinstance(err, dict) else err
            raise ProviderError(PROVIDER_NAME, f"eth_getCode failed: {message}")
        code = data.get("result")
        if not isinstance(code, str):
            raise ProviderError(PROVIDER_NAME, f"eth_getCode returned {code!r}")
        return code.strip().lower() not in EMPTY_CODE_VALUES
