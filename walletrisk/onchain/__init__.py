"""
On-chain collaborator: wallet observations from a block explorer.

Provides the OnChainProvider interface, the default Basescan client, the
typed observation records, and the derived helpers (wallet age, average
value, behavior patterns) the analysis engine consumes.
"""

from walletrisk.onchain.client import BasescanClient, OnChainProvider
from walletrisk.onchain.models import BehaviorPattern, Transaction, WalletObservation
from walletrisk.onchain.patterns import (
    PatternConfig,
    average_transaction_value,
    detect_patterns,
    wallet_age_days,
)

__all__ = [
    "BasescanClient",
    "OnChainProvider",
    "BehaviorPattern",
    "Transaction",
    "WalletObservation",
    "PatternConfig",
    "average_transaction_value",
    "detect_patterns",
    "wallet_age_days",
]
