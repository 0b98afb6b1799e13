"""
Structured logging for risk analyses: event_type, wallet_id, timestamp.

Every record carries a snake_case event_type (wallet_analysis_done,
aml_result_fetched, cache_sweep_done, ...), the emitting module, an ISO-8601
UTC timestamp and, where a wallet is involved, a truncated wallet_id. Full
addresses never reach the log output.

LOG_LEVEL selects the threshold; LOG_FORMAT=json (default) emits JSON lines,
any other value the human-readable console renderer.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

SERVICE_NAME = "walletrisk"
WALLET_LOG_PREFIX_LEN = 16
# Keys whose values are wallet addresses and get truncated before rendering
_WALLET_KEYS = ("wallet_id", "address")


def short_wallet(wallet: str | None) -> str:
    """Truncate an address for log output."""
    wallet = wallet or ""
    if len(wallet) > WALLET_LOG_PREFIX_LEN:
        return wallet[:WALLET_LOG_PREFIX_LEN] + "..."
    return wallet


def _stamp_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Move structlog's `event` to event_type and add service + UTC timestamp."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _truncate_wallets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in _WALLET_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str) and not value.endswith("..."):
            event_dict[key] = short_wallet(value)
    return event_dict


def _renderer() -> Any:
    if LOG_FORMAT == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _truncate_wallets,
            _stamp_event,
            _renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("wallet_analysis_done", wallet_id=short_wallet(addr), risk_score=45)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_wallet(wallet_id: str) -> structlog.BoundLogger:
    """Return a logger with wallet_id bound to all subsequent log calls."""
    return get_logger(SERVICE_NAME).bind(wallet_id=short_wallet(wallet_id))
