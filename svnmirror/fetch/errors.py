"""Exceptions raised by the fetch layer.

Every failure of a single fetch derives from ``FetchError`` so callers can
abort a checkout on the first one. HTTP error statuses are only turned into
exceptions by the status-checking helpers; ``RedirectingFetcher.get`` returns
any final response as is.
"""

from svnmirror.fetch.models import FetchErrorClass
from svnmirror.fetch.redact import redact_url_credentials


class FetchError(Exception):
    """Base exception for all fetch errors.

    Provides structured error information for logging and status reporting.
    """

    error_class: FetchErrorClass = FetchErrorClass.UNKNOWN

    def __init__(
        self,
        url: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize the fetch error.

        Args:
            url: URL being fetched when the error occurred.
            message: Human-readable error message.
            status_code: HTTP status code if one was received.
        """
        super().__init__(message)
        self.url = url
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "url": redact_url_credentials(self.url),
            "status_code": self.status_code,
        }


class TooManyRedirectsError(FetchError):
    """Raised when a GET keeps redirecting past the redirect bound."""

    error_class = FetchErrorClass.TOO_MANY_REDIRECTS

    def __init__(self, url: str, count: int, limit: int) -> None:
        """Initialize the error.

        Args:
            url: URL originally requested.
            count: Redirects seen when giving up.
            limit: Configured redirect bound.
        """
        self.count = count
        self.limit = limit
        super().__init__(url, f"too many redirects: {count} >= {limit}")


class InvalidRedirectError(FetchError):
    """Raised when a redirect response carries no Location header."""

    error_class = FetchErrorClass.INVALID_REDIRECT

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(
            url,
            f"redirect ({status_code}) without Location header",
            status_code=status_code,
        )


class TransportError(FetchError):
    """Raised when the connection or read fails (DNS, TLS, reset, timeout)."""

    def __init__(
        self,
        url: str,
        message: str,
        error_class: FetchErrorClass = FetchErrorClass.TRANSPORT,
    ) -> None:
        """Initialize the transport error.

        Args:
            url: URL being fetched.
            message: Human-readable error message.
            error_class: Finer classification used for retry decisions.
        """
        super().__init__(url, message)
        self.error_class = error_class


class HttpStatusError(FetchError):
    """Raised when a listing or file fetch ends with a non-2xx status."""

    error_class = FetchErrorClass.HTTP_STATUS

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"unexpected HTTP status {status_code}", status_code)


class AuthenticationError(HttpStatusError):
    """Raised on 401/403, usually because of bad credentials."""

    error_class = FetchErrorClass.AUTHENTICATION


class ResponseSizeExceededError(FetchError):
    """Raised when a listing without Content-Length exceeds the size bound."""

    error_class = FetchErrorClass.RESPONSE_SIZE_EXCEEDED

    def __init__(self, url: str, limit: int) -> None:
        self.limit = limit
        super().__init__(url, f"response exceeded limit of {limit} bytes")


class OperationCancelledError(FetchError):
    """Raised when the cancel token fires before or during a fetch."""

    error_class = FetchErrorClass.CANCELLED

    def __init__(self, url: str, reason: str = "cancelled") -> None:
        self.reason = reason
        super().__init__(url, f"fetch cancelled: {reason}")
