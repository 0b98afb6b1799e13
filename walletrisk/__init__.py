"""
WalletRisk — explainable risk scoring for blockchain wallets.

Combines on-chain behavioral signals with a third-party AML compliance
signal into a 0-100 composite score, a risk level, and ordered
recommendations up to an automatic block verdict. Results are cached
per address for a fixed TTL.
"""

__version__ = "0.1.0"
