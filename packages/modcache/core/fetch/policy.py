"""Cache-reuse policy: when may a cached entry be returned without a fetch."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal, TypeAlias

CacheSettingLiteral = Literal["only", "use", "reloadAll"]
CacheSetting: TypeAlias = CacheSettingLiteral | list[str]

CACHE_SETTING_VALUES: tuple[str, ...] = ("only", "use", "reloadAll")


def parse_cache_setting(value: str | Sequence[str] | None) -> CacheSetting:
    """Validate a cache setting from configuration.

    Args:
        value: "only", "use", "reloadAll", a list of URL prefixes to reload,
            or None for the default ("use")

    Returns:
        Normalized cache setting

    Raises:
        ValueError: If the value is an unknown string or a list with non-strings
    """
    if value is None:
        return "use"
    if isinstance(value, str):
        if value not in CACHE_SETTING_VALUES:
            raise ValueError(
                f"Invalid cache setting {value!r}, expected one of {CACHE_SETTING_VALUES} "
                "or a list of URL prefixes"
            )
        return value  # type: ignore[return-value]
    prefixes = list(value)
    if not all(isinstance(p, str) for p in prefixes):
        raise ValueError("Cache setting prefixes must be strings")
    return prefixes


def should_use_cache(setting: CacheSetting, specifier: str) -> bool:
    """
    Decide whether a cached entry for ``specifier`` may be reused.

    ``only`` and ``use`` always reuse, ``reloadAll`` never does, and a prefix
    list forces a reload for every specifier starting with one of the prefixes.
    """
    if setting == "only" or setting == "use":
        return True
    if setting == "reloadAll":
        return False
    return not any(specifier.startswith(prefix) for prefix in setting)
