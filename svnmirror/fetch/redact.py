"""Redaction helpers so credentials never reach the logs."""

import re


# Headers that must never appear in logs
SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
    }
)

REDACTED_VALUE = "[REDACTED]"

_URL_USERINFO = re.compile(r"(https?://)[^/@\s]+@")


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers for logging.

    Args:
        headers: Original headers dictionary.

    Returns:
        New dictionary with Authorization and cookie values replaced.
    """
    return {
        key: REDACTED_VALUE if is_sensitive_header(key) else value
        for key, value in headers.items()
    }


def is_sensitive_header(header_name: str) -> bool:
    """Check if a header name is sensitive."""
    return header_name.lower() in SENSITIVE_HEADERS


def redact_url_credentials(url: str) -> str:
    """Redact ``user:password@`` userinfo from a URL.

    Args:
        url: URL that may contain credentials.

    Returns:
        URL with the userinfo part replaced.
    """
    return _URL_USERINFO.sub(rf"\1{REDACTED_VALUE}@", url)
