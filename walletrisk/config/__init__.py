"""
Configuration management for WalletRisk.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for provider endpoints, cache and timeouts.
"""

from walletrisk.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
