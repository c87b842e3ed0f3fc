"""Module fetching for modcache.

Resolves file, data, blob and http(s) specifiers to content, using the
HTTP cache according to a reuse policy and per-host auth tokens.
"""

from modcache.core.fetch.auth import AUTH_TOKENS_ENV_VAR, AuthToken, AuthTokens, parse_auth_tokens
from modcache.core.fetch.config import FetchClientConfig, build_client
from modcache.core.fetch.fetcher import DEFAULT_MAX_REDIRECTS, FileFetcher
from modcache.core.fetch.inline import decode_data_url, register_blob, revoke_blob
from modcache.core.fetch.models import LoadResponse
from modcache.core.fetch.policy import CacheSetting, parse_cache_setting, should_use_cache

__all__ = [
    # Fetcher
    "FileFetcher",
    "LoadResponse",
    "DEFAULT_MAX_REDIRECTS",
    # Policy
    "CacheSetting",
    "parse_cache_setting",
    "should_use_cache",
    # Auth
    "AUTH_TOKENS_ENV_VAR",
    "AuthToken",
    "AuthTokens",
    "parse_auth_tokens",
    # Client
    "FetchClientConfig",
    "build_client",
    # Inline specifiers
    "decode_data_url",
    "register_blob",
    "revoke_blob",
]
