"""Configuration models for the module cache."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modcache.core.fetch.config import FetchClientConfig
from modcache.core.fetch.fetcher import DEFAULT_MAX_REDIRECTS
from modcache.core.fetch.policy import CacheSetting, parse_cache_setting


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False
    filename: str | None = None


class CacheConfig(BaseModel):
    """Top-level configuration for building a module cache.

    Args:
        root: Cache root directory (None resolves from DENO_DIR / OS defaults)
        cache_setting: "only", "use", "reloadAll", or a list of URL prefixes to reload
        allow_remote: Permit network fetches for http(s) specifiers
        read_only: Force read-only mode; None probes the cache directory
        max_redirects: Redirect hop budget per fetch
        auth_tokens: ``host@token;host@user:pass`` string (None reads DENO_AUTH_TOKENS)
        client: HTTP client settings
        logging: Logging settings
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    root: str | None = None
    cache_setting: CacheSetting = "use"
    allow_remote: bool = True
    read_only: bool | None = None
    max_redirects: int = Field(default=DEFAULT_MAX_REDIRECTS, ge=0)
    auth_tokens: str | None = Field(default=None, repr=False)
    client: FetchClientConfig = Field(default_factory=FetchClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("cache_setting", mode="before")
    @classmethod
    def _validate_cache_setting(cls, v: object) -> CacheSetting:
        if v is not None and not isinstance(v, (str, list, tuple)):
            raise ValueError("cache_setting must be a string or a list of URL prefixes")
        return parse_cache_setting(v)  # type: ignore[arg-type]
