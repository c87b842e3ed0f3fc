"""Error hierarchy for the fetch/cache subsystem."""

from __future__ import annotations

from pydantic import BaseModel


class FetchErrorData(BaseModel):
    """Structured data for fetch and cache errors.

    Args:
        message: Human-readable error description
        specifier: URL the failing operation was working on
        status_code: HTTP status code (if available)
        status_text: HTTP reason phrase (if available)
        redirect_limit: Redirect budget that was exhausted (if applicable)
        response_body_snippet: Truncated response body for debugging
    """

    message: str
    specifier: str | None = None
    status_code: int | None = None
    status_text: str | None = None
    redirect_limit: int | None = None
    response_body_snippet: str | None = None


class FetchError(Exception):
    """Base exception for all fetch/cache errors.

    Wraps structured error data in an exception for ergonomic error handling.

    Attributes:
        data: Structured error data (FetchErrorData)
        message: Human-readable error description
        specifier: URL the failing operation was working on
        status_code: HTTP status code (if available)
        status_text: HTTP reason phrase (if available)
        redirect_limit: Redirect budget that was exhausted
        response_body_snippet: Truncated response body
    """

    def __init__(
        self,
        message: str,
        *,
        specifier: str | None = None,
        status_code: int | None = None,
        status_text: str | None = None,
        redirect_limit: int | None = None,
        response_body_snippet: str | None = None,
    ) -> None:
        self.data = FetchErrorData(
            message=message,
            specifier=specifier,
            status_code=status_code,
            status_text=status_text,
            redirect_limit=redirect_limit,
            response_body_snippet=response_body_snippet,
        )
        # Expose fields as attributes for convenience
        self.message = self.data.message
        self.specifier = self.data.specifier
        self.status_code = self.data.status_code
        self.status_text = self.data.status_text
        self.redirect_limit = self.data.redirect_limit
        self.response_body_snippet = self.data.response_body_snippet

        super().__init__(str(self))

    def __str__(self) -> str:
        """Format error for logging and display."""
        parts = [self.message]
        if self.specifier is not None:
            parts.append(self.specifier)
        if self.status_code is not None:
            status = f"status={self.status_code}"
            if self.status_text:
                status = f"{status} {self.status_text}"
            parts.append(status)
        if self.redirect_limit is not None:
            parts.append(f"redirect_limit={self.redirect_limit}")
        return " | ".join(parts)


class UnsupportedSchemeError(FetchError):
    """URL scheme is not one of file, data, blob, http, https."""


class InvalidSpecifierError(FetchError):
    """Specifier could not be parsed (e.g. a malformed data URL)."""


class NotFoundError(FetchError):
    """Entry absent from the cache while only cached entries may be used."""


class PermissionDeniedError(FetchError):
    """Remote specifier requested while remote fetching is disabled."""


class TooManyRedirectsError(FetchError):
    """Redirect chain exceeded the hop budget."""


class HttpStatusError(FetchError):
    """Non-2xx response other than 404 (and 304 on revalidation)."""


class CacheNotInitializedError(FetchError):
    """Cache queried before its read-only mode was resolved."""


class CacheRootError(FetchError):
    """No cache root directory could be determined."""
