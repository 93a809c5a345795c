"""HTTP fetch layer for listing pages and file bodies.

This module provides authenticated HTTP fetch operations with:
- Basic authentication computed once per run
- Bounded following of 301/302/303 redirects
- Bounded draining of response bodies
- Retry of transient transport failures with exponential backoff
- Cooperative cancellation and deadlines
- Header redaction and metrics for observability
"""

from svnmirror.fetch.auth import Credentials, encode_basic_auth
from svnmirror.fetch.cancel import CancelToken
from svnmirror.fetch.client import RedirectingFetcher
from svnmirror.fetch.config import FetchConfig
from svnmirror.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_USER_AGENT,
    DISCARD,
    MAX_REDIRECTS,
    REDIRECT_STATUS_CODES,
)
from svnmirror.fetch.drain import drain, drain_response
from svnmirror.fetch.errors import (
    AuthenticationError,
    FetchError,
    HttpStatusError,
    InvalidRedirectError,
    OperationCancelledError,
    ResponseSizeExceededError,
    TooManyRedirectsError,
    TransportError,
)
from svnmirror.fetch.metrics import FetchMetrics
from svnmirror.fetch.models import FetchErrorClass, RetryPolicy
from svnmirror.fetch.redact import redact_headers, redact_url_credentials


__all__ = [
    # Client
    "RedirectingFetcher",
    # Auth
    "Credentials",
    "encode_basic_auth",
    # Cancellation
    "CancelToken",
    # Config
    "FetchConfig",
    # Models
    "FetchErrorClass",
    "RetryPolicy",
    # Errors
    "FetchError",
    "TooManyRedirectsError",
    "InvalidRedirectError",
    "TransportError",
    "HttpStatusError",
    "AuthenticationError",
    "ResponseSizeExceededError",
    "OperationCancelledError",
    # Drain
    "drain",
    "drain_response",
    # Constants
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_USER_AGENT",
    "DISCARD",
    "MAX_REDIRECTS",
    "REDIRECT_STATUS_CODES",
    # Metrics
    "FetchMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
