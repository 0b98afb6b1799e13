"""
Structured logging for WalletRisk.

JSON logs with timestamp, wallet_id, event_type.
Use get_logger() in all modules for aggregation-friendly output.
"""

from walletrisk.walletrisk_logging.logger import bind_wallet, get_logger, short_wallet

__all__ = ["bind_wallet", "get_logger", "short_wallet"]
