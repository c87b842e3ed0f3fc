"""Shared utilities for modcache."""

from modcache.core.utils.logging import StructuredJSONFormatter, configure_logging, get_logger

__all__ = ["StructuredJSONFormatter", "configure_logging", "get_logger"]
