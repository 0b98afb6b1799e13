"""
Core utilities: shared exceptions and cross-cutting concerns.
"""

from walletrisk.core.exceptions import (
    InvalidAddressError,
    ProviderError,
    WalletAnalysisError,
    WalletRiskError,
)

__all__ = [
    "InvalidAddressError",
    "ProviderError",
    "WalletAnalysisError",
    "WalletRiskError",
]
