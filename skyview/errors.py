"""Exception taxonomy for the search and weather controllers."""

from enum import StrEnum


class ApiError(Exception):
    """Raised when an upstream API returns a non-2xx status or is misconfigured."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(ApiError):
    """Upstream answered 429."""

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message, status_code=429)


class RequestCancelled(Exception):
    """The operation was aborted through its CancelToken."""


class SearchFailure(StrEnum):
    CANCELLED = "cancelled"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


class SearchError(Exception):
    """A city search that did not produce suggestions.

    Only FAILED ever escapes SearchController.submit; CANCELLED and
    RATE_LIMITED resolve to an empty suggestion list.
    """

    def __init__(self, kind: SearchFailure, cause: BaseException | None = None):
        super().__init__(f"City search {kind}: {cause}" if cause else f"City search {kind}")
        self.kind = kind
        self.cause = cause


class WeatherFetchError(Exception):
    """Either weather request failed; there is no partial result."""

    def __init__(self, cause: BaseException, status_code: int | None = None):
        super().__init__(f"Weather fetch failed: {cause}")
        self.cause = cause
        self.status_code = status_code
