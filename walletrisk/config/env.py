"""
Environment variable loading and validation for WalletRisk.

- BASESCAN_API_URL / BASESCAN_API_KEY: Etherscan-compatible explorer endpoint
- METASLEUTH_API_URL / METASLEUTH_API_KEY: AML provider (no key = AML disabled)
- WALLETRISK_CHAIN_ID: chain passed to the AML provider (default: Base Sepolia)
- WALLETRISK_CACHE_TTL_SEC, WALLETRISK_CACHE_SWEEP_INTERVAL_SEC
- WALLETRISK_FETCH_TIMEOUT_SEC, WALLETRISK_HTTP_TIMEOUT_SEC, WALLETRISK_TX_LIMIT
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from walletrisk.walletrisk_logging import get_logger

logger = get_logger(__name__)

# Project root: config is walletrisk/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_BASESCAN_API_URL = "https://api-sepolia.basescan.org/api"
DEFAULT_METASLEUTH_API_URL = "https://aml.blocksec.com/address-compliance/api/v3"
BASE_SEPOLIA_CHAIN_ID = 84532

DEFAULT_CACHE_TTL_SEC = 24 * 60 * 60
DEFAULT_CACHE_SWEEP_INTERVAL_SEC = 60 * 60
DEFAULT_FETCH_TIMEOUT_SEC = 30.0
DEFAULT_HTTP_TIMEOUT_SEC = 15.0
DEFAULT_TX_LIMIT = 1000
MIN_INTERVAL_SEC = 1.0


def load_walletrisk_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH)


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or "").strip() or default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("config_invalid_number", variable=name, value=raw, default=default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("config_invalid_number", variable=name, value=raw, default=default)
        return default


def get_basescan_api_url() -> str:
    load_walletrisk_env()
    return _env_str("BASESCAN_API_URL", DEFAULT_BASESCAN_API_URL)


def get_basescan_api_key() -> str:
    load_walletrisk_env()
    return _env_str("BASESCAN_API_KEY")


def get_metasleuth_api_url() -> str:
    load_walletrisk_env()
    return _env_str("METASLEUTH_API_URL", DEFAULT_METASLEUTH_API_URL)


def get_metasleuth_api_key() -> str:
    """Return METASLEUTH_API_KEY; empty string disables AML lookups."""
    load_walletrisk_env()
    return _env_str("METASLEUTH_API_KEY")


def get_chain_id() -> int:
    load_walletrisk_env()
    return _env_int("WALLETRISK_CHAIN_ID", BASE_SEPOLIA_CHAIN_ID)


def get_cache_ttl_sec() -> float:
    """Cache time-to-live in seconds (default 24h); clamped to at least 1s."""
    load_walletrisk_env()
    return max(MIN_INTERVAL_SEC, _env_float("WALLETRISK_CACHE_TTL_SEC", DEFAULT_CACHE_TTL_SEC))


def get_cache_sweep_interval_sec() -> float:
    """Interval between expired-entry sweeps (default 1h); clamped to at least 1s."""
    load_walletrisk_env()
    return max(
        MIN_INTERVAL_SEC,
        _env_float("WALLETRISK_CACHE_SWEEP_INTERVAL_SEC", DEFAULT_CACHE_SWEEP_INTERVAL_SEC),
    )


def get_fetch_timeout_sec() -> float:
    """Per-collaborator fetch deadline used by the analyzer."""
    load_walletrisk_env()
    return max(MIN_INTERVAL_SEC, _env_float("WALLETRISK_FETCH_TIMEOUT_SEC", DEFAULT_FETCH_TIMEOUT_SEC))


def get_http_timeout_sec() -> float:
    load_walletrisk_env()
    return max(MIN_INTERVAL_SEC, _env_float("WALLETRISK_HTTP_TIMEOUT_SEC", DEFAULT_HTTP_TIMEOUT_SEC))


def get_tx_limit() -> int:
    """Max transactions requested from the explorer per wallet (1-10000)."""
    load_walletrisk_env()
    return min(10_000, max(1, _env_int("WALLETRISK_TX_LIMIT", DEFAULT_TX_LIMIT)))
