"""Module fetcher: resolves a specifier to bytes through the HTTP cache.

Dispatches on scheme. ``file:`` reads the local file, ``data:`` and
``blob:`` are resolved in-process, and ``http(s):`` goes through the cache
according to the reuse policy, then the network. Redirects are followed
iteratively with a hop budget; each hop leaves a redirect pointer in the
cache so later cached resolutions follow the same chain.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from modcache.core.caching.backends.http import HttpCache
from modcache.core.caching.models import CacheEntry, normalize_headers
from modcache.core.caching.paths import file_url_to_path, get_scheme
from modcache.core.errors import (
    HttpStatusError,
    NotFoundError,
    PermissionDeniedError,
    TooManyRedirectsError,
)
from modcache.core.fetch.auth import AuthTokens
from modcache.core.fetch.config import FetchClientConfig, build_client
from modcache.core.fetch.inline import decode_data_url, resolve_blob
from modcache.core.fetch.logging_utils import RequestLogContext, log_request, log_response
from modcache.core.fetch.models import LoadResponse
from modcache.core.fetch.policy import CacheSetting, parse_cache_setting, should_use_cache
from modcache.core.fetch.utils import resolve_location, safe_snippet, strip_hashbang
from modcache.core.io import FileSystem, RealFileSystem, absolute_path

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS = 10

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


class FileFetcher:
    """Fetch modules by specifier, honoring the cache-reuse policy.

    Results are memoized per instance for remote, data and blob
    specifiers; local files are re-read on every call.

    Args:
        http_cache: Cache for fetched bodies and headers
        cache_setting: "only", "use", "reloadAll" or a list of URL prefixes to reload
        allow_remote: Permit network fetches for http(s) specifiers
        auth_tokens: Per-host credentials applied to each request
        max_redirects: Redirect hop budget per fetch
        client: Optional pre-built client (not closed by this fetcher)
        client_config: Configuration for the client built when none is given
        transport: Optional custom transport for the built client (testing)
        fs: Filesystem used for local ``file:`` reads

    Example:
        >>> async with FileFetcher(HttpCache(fs, "/tmp/deno/deps")) as fetcher:
        ...     response = await fetcher.fetch("https://deno.land/std/path/mod.ts")
    """

    def __init__(
        self,
        http_cache: HttpCache,
        *,
        cache_setting: CacheSetting = "use",
        allow_remote: bool = True,
        auth_tokens: AuthTokens | None = None,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        client: httpx.AsyncClient | None = None,
        client_config: FetchClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        if max_redirects < 0:
            raise ValueError(f"max_redirects must be >= 0, got {max_redirects}")
        self.http_cache = http_cache
        self.cache_setting = parse_cache_setting(cache_setting)
        self.allow_remote = allow_remote
        self.auth_tokens = auth_tokens or AuthTokens()
        self.max_redirects = max_redirects
        self.client_config = client_config or FetchClientConfig()
        self._owns_client = client is None
        self._client = client or build_client(self.client_config, transport=transport)
        self._fs = fs or RealFileSystem()
        self._memo: dict[str, LoadResponse] = {}

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> FileFetcher:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        """Async context manager exit."""
        await self.aclose()

    async def fetch(self, specifier: str) -> LoadResponse | None:
        """
        Resolve ``specifier`` to its content.

        Args:
            specifier: Absolute URL (file, data, blob, http or https)

        Returns:
            LoadResponse, or None when the module does not exist (missing
            local file, unknown blob, HTTP 404)

        Raises:
            UnsupportedSchemeError: Scheme outside the supported five
            InvalidSpecifierError: Malformed URL or data URL
            PermissionDeniedError: Remote specifier while remote fetching is disabled
            NotFoundError: Cache miss while only cached entries may be used
            TooManyRedirectsError: Redirect chain exceeded the hop budget
            HttpStatusError: Non-2xx response other than 404
        """
        scheme = get_scheme(specifier)
        if scheme == "file":
            return await self._fetch_local(specifier)

        if specifier in self._memo:
            return self._memo[specifier]

        if scheme in ("data", "blob"):
            response = await self._fetch_inline(specifier, scheme)
        elif not self.allow_remote:
            raise PermissionDeniedError(
                "A remote specifier was requested but remote fetching is disabled",
                specifier=specifier,
            )
        else:
            response = await self._fetch_remote(specifier)

        if response is not None:
            self._memo[specifier] = response
        return response

    async def _fetch_local(self, specifier: str) -> LoadResponse | None:
        path = file_url_to_path(specifier)
        try:
            content = await self._fs.read_bytes(absolute_path(path))
        except OSError as e:
            logger.debug(f"Local module {path} unreadable: {e}")
            return None
        return LoadResponse(specifier=specifier, content=strip_hashbang(content))

    async def _fetch_inline(self, specifier: str, scheme: str) -> LoadResponse | None:
        if scheme == "data":
            content, content_type = decode_data_url(specifier)
        else:
            blob = resolve_blob(specifier)
            if blob is None:
                return None
            content, content_type = blob

        headers = {"content-type": content_type}
        await self.http_cache.set(specifier, headers, content)
        return LoadResponse(specifier=specifier, headers=headers, content=content)

    async def _fetch_remote(self, specifier: str) -> LoadResponse | None:
        url = specifier
        remaining = self.max_redirects
        hop = 0

        while True:
            if remaining < 0:
                raise TooManyRedirectsError(
                    "Too many redirects",
                    specifier=specifier,
                    redirect_limit=self.max_redirects,
                )

            cached = await self.http_cache.get(url)
            if cached is not None and should_use_cache(self.cache_setting, url):
                if cached.location is None:
                    return self._from_entry(url, cached)
                target = resolve_location(url, cached.location)
                logger.debug(f"Cached redirect {url} -> {target}")
                url, remaining, hop = target, remaining - 1, hop + 1
                continue

            if self.cache_setting == "only":
                raise NotFoundError(
                    "Specifier not found in cache and only cached entries may be used",
                    specifier=url,
                )

            response = await self._request(url, cached, hop)

            if response.status_code == 404:
                logger.debug(f"Not found: {url}")
                return None

            if response.status_code == 304 and cached is not None and cached.location is None:
                logger.debug(f"Not modified: {url}")
                return self._from_entry(url, cached)

            if response.status_code == 304:
                # Nothing cached to revalidate (no entry, or only a redirect pointer)
                raise HttpStatusError(
                    "304 Not Modified without a cached body to revalidate",
                    specifier=url,
                    status_code=304,
                    status_text=response.reason_phrase,
                )

            location = response.headers.get("location")
            if response.status_code in REDIRECT_STATUSES and location:
                target = resolve_location(url, location)
                logger.debug(f"Redirect {url} -> {target}")
                await self.http_cache.set(url, {"location": target}, b"")
                url, remaining, hop = target, remaining - 1, hop + 1
                continue

            if not response.is_success:
                raise HttpStatusError(
                    f"{response.status_code} {response.reason_phrase}",
                    specifier=url,
                    status_code=response.status_code,
                    status_text=response.reason_phrase,
                    response_body_snippet=safe_snippet(
                        response.content, self.client_config.max_response_body_for_error
                    ),
                )

            final_url = str(response.url)
            if final_url != url:
                # The client followed redirects on its own
                await self.http_cache.set(url, {"location": final_url}, b"")
                url = final_url

            headers = normalize_headers(response.headers)
            content = response.content
            await self.http_cache.set(url, headers, content)
            return LoadResponse(specifier=url, headers=headers, content=content)

    async def _request(self, url: str, cached: CacheEntry | None, hop: int) -> httpx.Response:
        headers: dict[str, str] = {}
        if cached is not None and cached.etag:
            headers["If-None-Match"] = cached.etag

        logger.info(f"Download {url}")
        ctx = RequestLogContext(url=url, hop=hop)
        start = log_request(ctx, headers, self.client_config.redact_headers)

        kwargs: dict[str, Any] = {"headers": headers}
        if len(self.auth_tokens):
            kwargs["auth"] = self.auth_tokens
        response = await self._client.get(url, **kwargs)

        log_response(ctx, response.status_code, time.perf_counter() - start)
        return response

    @staticmethod
    def _from_entry(url: str, entry: CacheEntry) -> LoadResponse:
        return LoadResponse(specifier=url, headers=dict(entry.headers), content=entry.content)
