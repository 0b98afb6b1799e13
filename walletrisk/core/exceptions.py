"""
Application-level exceptions.

Collaborator failures are surfaced to callers as a single WalletAnalysisError
carrying the underlying cause as __cause__; provider clients raise
ProviderError for responses they cannot interpret.
"""

from __future__ import annotations


class WalletRiskError(Exception):
    """Base class for all walletrisk errors."""


class WalletAnalysisError(WalletRiskError):
    """Analysis of a wallet failed; nothing was cached."""

    def __init__(self, message: str, *, address: str | None = None) -> None:
        super().__init__(message)
        self.address = address


class InvalidAddressError(WalletAnalysisError):
    """Address was empty or blank."""


class ProviderError(WalletRiskError):
    """An external data provider returned an unusable response."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
