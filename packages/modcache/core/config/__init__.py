"""Configuration management for modcache."""

from modcache.core.config.loader import (
    configure_logging,
    detect_format,
    load_cache_config,
    load_config,
)
from modcache.core.config.models import CacheConfig, LoggingConfig

__all__ = [
    # Loaders
    "detect_format",
    "load_config",
    "load_cache_config",
    "configure_logging",
    # Models
    "CacheConfig",
    "LoggingConfig",
]
