"""HTTP constants for the fetch layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_MOVED_PERMANENTLY = 301
HTTP_STATUS_FOUND = 302
HTTP_STATUS_SEE_OTHER = 303
HTTP_STATUS_UNAUTHORIZED = 401
HTTP_STATUS_FORBIDDEN = 403

# Statuses that are re-issued as a GET against Location
REDIRECT_STATUS_CODES = frozenset(
    {
        HTTP_STATUS_MOVED_PERMANENTLY,
        HTTP_STATUS_FOUND,
        HTTP_STATUS_SEE_OTHER,
    }
)

AUTH_FAILURE_STATUS_CODES = frozenset({HTTP_STATUS_UNAUTHORIZED, HTTP_STATUS_FORBIDDEN})

# Maximum number of redirects followed on a single GET
MAX_REDIRECTS = 10

# Kept constant so the server sees the same client on every run
DEFAULT_USER_AGENT = "curl/7.37.1"

# Content-Length must describe the bytes we read, so no transfer compression
ACCEPT_ENCODING_IDENTITY = "identity"

# Upper bound for listing pages served without Content-Length
DEFAULT_MAX_LISTING_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 8192

# Drain size meaning "read everything, keep nothing"
DISCARD = -1
