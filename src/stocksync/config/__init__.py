"""Application configuration helpers."""

from __future__ import annotations

from stocksync.common.logging import configure_logging

from .env import env_flag, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .shopify import ShopifyConfig, get_shopify_config
from .sync import SyncSettings, get_sync_settings

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "SyncSettings",
    "configure_logging",
    "env_flag",
    "env_int",
    "get_shopify_config",
    "get_sync_settings",
    "optional_env_var",
    "require_env_vars",
]
