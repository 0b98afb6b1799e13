"""
Application settings.

Collects every environment-driven value into one typed Settings object so the
analyzer factory and the provider clients read a single source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass

from walletrisk.config import env


@dataclass(frozen=True)
class Settings:
    """Resolved runtime configuration; see config.env for variables and defaults."""

    basescan_api_url: str = env.DEFAULT_BASESCAN_API_URL
    basescan_api_key: str = ""
    metasleuth_api_url: str = env.DEFAULT_METASLEUTH_API_URL
    metasleuth_api_key: str = ""
    chain_id: int = env.BASE_SEPOLIA_CHAIN_ID
    cache_ttl_sec: float = env.DEFAULT_CACHE_TTL_SEC
    cache_sweep_interval_sec: float = env.DEFAULT_CACHE_SWEEP_INTERVAL_SEC
    fetch_timeout_sec: float = env.DEFAULT_FETCH_TIMEOUT_SEC
    http_timeout_sec: float = env.DEFAULT_HTTP_TIMEOUT_SEC
    tx_limit: int = env.DEFAULT_TX_LIMIT

    @property
    def aml_enabled(self) -> bool:
        return bool(self.metasleuth_api_key)


def get_settings() -> Settings:
    """Return the current application settings, read from env (and .env)."""
    return Settings(
        basescan_api_url=env.get_basescan_api_url(),
        basescan_api_key=env.get_basescan_api_key(),
        metasleuth_api_url=env.get_metasleuth_api_url(),
        metasleuth_api_key=env.get_metasleuth_api_key(),
        chain_id=env.get_chain_id(),
        cache_ttl_sec=env.get_cache_ttl_sec(),
        cache_sweep_interval_sec=env.get_cache_sweep_interval_sec(),
        fetch_timeout_sec=env.get_fetch_timeout_sec(),
        http_timeout_sec=env.get_http_timeout_sec(),
        tx_limit=env.get_tx_limit(),
    )
