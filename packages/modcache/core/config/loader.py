"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from modcache.core.config.models import CacheConfig
from modcache.core.fetch.auth import AUTH_TOKENS_ENV_VAR
from modcache.core.utils.logging import configure_logging as setup_logging

logger = logging.getLogger(__name__)


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("modcache.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Supports both JSON and YAML formats. Format is auto-detected
    from file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            content = json.loads(path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                # safe_load returns None for empty files
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping in {path}")
    return content


def load_cache_config(path: str | Path | None = None) -> CacheConfig:
    """Load and validate cache configuration.

    A missing path (or None) yields the defaults. Auth tokens are read from
    the environment when the config does not set them.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Validated CacheConfig instance

    Raises:
        ValidationError: If config is invalid
    """
    if path is not None and Path(path).exists():
        config = CacheConfig.model_validate(load_config(path))
    else:
        if path is not None:
            logger.debug(f"Config file {path} not found, using defaults")
        config = CacheConfig()

    return _load_env_vars_into_config(config)


def _load_env_vars_into_config(config: CacheConfig) -> CacheConfig:
    """Fill unset values from environment variables.

    Args:
        config: CacheConfig instance to populate

    Returns:
        Config with environment values applied
    """
    updates: dict[str, Any] = {}

    if config.auth_tokens is None:
        tokens = os.getenv(AUTH_TOKENS_ENV_VAR)
        if tokens:
            logger.debug(f"Loaded {AUTH_TOKENS_ENV_VAR} from environment")
            updates["auth_tokens"] = tokens

    return config.model_copy(update=updates) if updates else config


def configure_logging(config: CacheConfig | None = None) -> None:
    """Configure Python logging from cache config.

    Args:
        config: CacheConfig instance (loads defaults if None)
    """
    if config is None:
        config = load_cache_config()

    setup_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
