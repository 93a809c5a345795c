"""Authenticated HTTP client that follows redirects up to a fixed bound."""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType

import httpx
import structlog

from svnmirror.fetch.auth import Credentials
from svnmirror.fetch.cancel import CancelToken
from svnmirror.fetch.config import FetchConfig
from svnmirror.fetch.constants import (
    ACCEPT_ENCODING_IDENTITY,
    AUTH_FAILURE_STATUS_CODES,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
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
from svnmirror.fetch.models import FetchErrorClass
from svnmirror.fetch.redact import redact_headers, redact_url_credentials


logger = structlog.get_logger()


class RedirectingFetcher:
    """HTTP client for listing pages and file bodies.

    Provides authenticated GET operations with:
    - A Basic Authorization header computed once at construction
    - Manual following of 301/302/303 up to ``MAX_REDIRECTS``
    - Draining of every redirect body before the next request
    - Bounded retry of transient transport failures
    - Cooperative cancellation through a ``CancelToken``
    """

    def __init__(
        self,
        credentials: Credentials,
        config: FetchConfig | None = None,
        run_id: str = "",
        cancel_token: CancelToken | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            credentials: Account used for every request.
            config: Fetch configuration.
            run_id: Unique run identifier for logging.
            cancel_token: Token polled before each request and between chunks.
            client: Preconfigured httpx client (tests inject a mock transport).
                Redirect following must be disabled on it.
        """
        self._config = config or FetchConfig()
        self._cancel_token = cancel_token
        self._metrics = FetchMetrics.get_instance()
        self._headers: dict[str, str] = {
            "Authorization": credentials.auth_token(),
            "User-Agent": self._config.user_agent,
            "Accept": "*/*",
            "Accept-Encoding": ACCEPT_ENCODING_IDENTITY,
        }
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self._config.timeout_seconds,
            follow_redirects=False,
            verify=self._config.verify_tls,
        )
        self._log = logger.bind(component="fetch", run_id=run_id)

    def __enter__(self) -> "RedirectingFetcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def get(self, url: str) -> httpx.Response:
        """GET a URL, following redirects.

        The returned response is streamed and still open; the caller must
        drain or close it. Error statuses are returned, not raised.

        Args:
            url: URL to fetch.

        Returns:
            The first non-redirect response.

        Raises:
            TooManyRedirectsError: If the redirect bound is reached.
            InvalidRedirectError: If a redirect has no Location header.
            TransportError: If the exchange fails after retries.
            OperationCancelledError: If the cancel token fired.
        """
        current_url = url
        response = self._send(current_url)
        redirects = 0

        while response.status_code in REDIRECT_STATUS_CODES:
            status_code = response.status_code
            location = response.headers.get("location")
            drain_response(response)
            redirects += 1
            if redirects >= MAX_REDIRECTS:
                self._metrics.record_failure(FetchErrorClass.TOO_MANY_REDIRECTS)
                raise TooManyRedirectsError(url, redirects, MAX_REDIRECTS)
            if not location:
                self._metrics.record_failure(FetchErrorClass.INVALID_REDIRECT)
                raise InvalidRedirectError(current_url, status_code)

            next_url = str(response.url.join(location))
            self._metrics.record_redirect()
            self._log.debug(
                "redirect_followed",
                status_code=status_code,
                from_url=redact_url_credentials(current_url),
                to_url=redact_url_credentials(next_url),
                redirects=redirects,
            )
            current_url = next_url
            response = self._send(current_url)

        return response

    def get_content(self, url: str) -> bytes:
        """Fetch a whole body, typically a listing page.

        With a Content-Length header the body is read through a sized
        drain of exactly that many bytes. Without one it is read up to
        ``max_listing_size_bytes``, which also caps the declared length.

        Args:
            url: URL to fetch.

        Returns:
            Body bytes.

        Raises:
            AuthenticationError: On 401/403.
            HttpStatusError: On any other non-2xx status.
            ResponseSizeExceededError: If the body is or claims to be too large.
        """
        response = self.get(url)
        self._ensure_success(response, url)

        content_length = response.headers.get("content-length", "")
        if content_length.isdigit():
            size = int(content_length)
            limit = self._config.max_listing_size_bytes
            if size > limit:
                response.close()
                self._metrics.record_failure(FetchErrorClass.RESPONSE_SIZE_EXCEEDED)
                raise ResponseSizeExceededError(url, limit)
            body = drain(response, size, self._config.chunk_size)
            body = body or b""
        else:
            body = self._read_bounded(response, url)

        self._metrics.record_bytes(len(body))
        return body

    @contextmanager
    def open(self, url: str) -> Iterator[httpx.Response]:
        """Open a status-checked streamed response.

        Usage::

            with fetcher.open(url) as response:
                for chunk in fetcher.iter_body(response, url):
                    ...

        Raises:
            AuthenticationError: On 401/403.
            HttpStatusError: On any other non-2xx status.
        """
        response = self.get(url)
        self._ensure_success(response, url)
        try:
            yield response
        finally:
            response.close()

    def iter_body(self, response: httpx.Response, url: str) -> Iterator[bytes]:
        """Iterate over body chunks, honouring cancellation.

        Args:
            response: Response obtained from ``open``.
            url: URL the response belongs to, for error reporting.

        Yields:
            Body chunks of at most ``chunk_size`` bytes.

        Raises:
            TransportError: If the read fails.
            OperationCancelledError: If the cancel token fired.
        """
        try:
            for chunk in response.iter_bytes(chunk_size=self._config.chunk_size):
                self._check_cancelled(url)
                self._metrics.record_bytes(len(chunk))
                yield chunk
        except httpx.TransportError as e:
            error = self._classify_transport_error(url, e)
            self._metrics.record_failure(error.error_class)
            raise error from e

    def _send(self, url: str) -> httpx.Response:
        """Execute a single GET exchange with retry on transport errors."""
        policy = self._config.retry_policy
        attempt = 0

        while True:
            self._check_cancelled(url)
            try:
                request = self._client.build_request("GET", url, headers=self._headers)
                response = self._client.send(request, stream=True)
            except httpx.InvalidURL as e:
                self._metrics.record_failure(FetchErrorClass.UNKNOWN)
                raise FetchError(url, f"Invalid URL: {e}") from e
            except httpx.TransportError as e:
                error = self._classify_transport_error(url, e)
                if not policy.should_retry(error.error_class, attempt):
                    self._metrics.record_failure(error.error_class)
                    raise error from e

                delay_ms = policy.get_delay_ms(attempt)
                self._metrics.record_retry()
                self._log.info(
                    "retry_attempt",
                    url=redact_url_credentials(url),
                    error_class=error.error_class.value,
                    attempt=attempt + 1,
                    delay_ms=delay_ms,
                    max_retries=policy.max_retries,
                )
                time.sleep(delay_ms / 1000.0)
                attempt += 1
                continue

            self._metrics.record_request(response.status_code)
            self._log.debug(
                "http_get",
                url=redact_url_credentials(url),
                status_code=response.status_code,
                headers=redact_headers(self._headers),
            )
            return response

    def _ensure_success(self, response: httpx.Response, url: str) -> None:
        """Drain and raise if the final status is not 2xx."""
        status_code = response.status_code
        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return

        drain_response(response)
        error: HttpStatusError
        if status_code in AUTH_FAILURE_STATUS_CODES:
            error = AuthenticationError(url, status_code)
        else:
            error = HttpStatusError(url, status_code)
        self._metrics.record_failure(error.error_class)
        self._log.warning(
            "http_status_rejected",
            url=redact_url_credentials(url),
            status_code=status_code,
            error_class=error.error_class.value,
        )
        raise error

    def _read_bounded(self, response: httpx.Response, url: str) -> bytes:
        """Read an unsized body, enforcing ``max_listing_size_bytes``."""
        limit = self._config.max_listing_size_bytes
        buffer = bytearray()
        try:
            for chunk in response.iter_bytes(chunk_size=self._config.chunk_size):
                buffer += chunk
                if len(buffer) > limit:
                    self._metrics.record_failure(
                        FetchErrorClass.RESPONSE_SIZE_EXCEEDED
                    )
                    raise ResponseSizeExceededError(url, limit)
        except httpx.TransportError as e:
            error = self._classify_transport_error(url, e)
            self._metrics.record_failure(error.error_class)
            raise error from e
        finally:
            response.close()
        return bytes(buffer)

    def _check_cancelled(self, url: str) -> None:
        if self._cancel_token is not None and self._cancel_token.is_cancelled:
            self._metrics.record_failure(FetchErrorClass.CANCELLED)
            raise OperationCancelledError(url, self._cancel_token.reason)

    def _classify_transport_error(
        self, url: str, error: httpx.TransportError
    ) -> TransportError:
        if isinstance(error, httpx.TimeoutException):
            return TransportError(
                url, f"Request timed out: {error}", FetchErrorClass.NETWORK_TIMEOUT
            )
        if isinstance(error, httpx.ConnectError):
            return TransportError(
                url, f"Connection failed: {error}", FetchErrorClass.CONNECTION_ERROR
            )
        return TransportError(url, f"Transport error: {error}")
