"""
Estate Admin - Configuration Management
=======================================
Centralized configuration with environment variable support.

Usage:
    from estate_admin.config import settings

    base_url = settings.api_base_url
    timeout = settings.request_timeout_seconds
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


DEFAULT_API_BASE_URL = "https://musabaha-home-ltd.onrender.com/api"
DEFAULT_ASSET_HOST = "https://musabaha-home-ltd.onrender.com"


@dataclass
class Settings:
    """Application settings with environment variable overrides."""

    # Backend
    api_base_url: str = DEFAULT_API_BASE_URL
    asset_host: str = DEFAULT_ASSET_HOST
    request_timeout_seconds: float = 15.0

    # New-payment polling (0 disables)
    notification_poll_seconds: int = 30

    # Display
    currency_symbol: str = "₦"
    app_title: str = "Estate Admin"

    # Feature flags
    debug_mode: bool = False

    def __post_init__(self):
        """Load overrides from environment variables."""
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration from environment variables."""
        if api_url := os.environ.get("ESTATE_ADMIN_API_URL", "").strip():
            self.api_base_url = api_url.rstrip("/")
        if asset_host := os.environ.get("ESTATE_ADMIN_ASSET_HOST", "").strip():
            self.asset_host = asset_host.rstrip("/")
        if timeout := os.environ.get("ESTATE_ADMIN_TIMEOUT"):
            self.request_timeout_seconds = float(timeout)

        if poll := os.environ.get("ESTATE_ADMIN_POLL_SECONDS"):
            self.notification_poll_seconds = max(0, int(poll))

        if symbol := os.environ.get("ESTATE_ADMIN_CURRENCY_SYMBOL"):
            self.currency_symbol = symbol

        if os.environ.get("DEBUG", "").lower() in ("1", "true"):
            self.debug_mode = True

    @property
    def admin_token(self) -> str | None:
        """Get the admin bearer token from environment (never stored in config)."""
        return os.environ.get("ESTATE_ADMIN_TOKEN") or None


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        if _settings.debug_mode:
            logger.info("Settings loaded with debug mode enabled")
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings


# Convenience alias
settings = get_settings()
