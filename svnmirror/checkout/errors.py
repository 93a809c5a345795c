"""Exceptions raised by the checkout engine.

Fetch failures surface as ``svnmirror.fetch.errors.FetchError``; this module
covers the local side of a checkout and its lifecycle.
"""

from pathlib import Path


class CheckoutError(Exception):
    """Base exception for checkout errors."""


class FilesystemError(CheckoutError):
    """Raised when a directory cannot be created or a file cannot be written.

    Fatal to the checkout; whatever was already written stays in place.
    """

    def __init__(self, path: Path, message: str) -> None:
        """Initialize the filesystem error.

        Args:
            path: Local path that could not be created or written.
            message: Human-readable error message.
        """
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")

    def to_dict(self) -> dict[str, str]:
        """Convert error to dictionary for logging."""
        return {"path": str(self.path), "message": self.message}


class UnsafeEntryError(CheckoutError):
    """Raised when a listing entry does not map to a path inside the destination."""

    def __init__(self, entry: str, reason: str) -> None:
        """Initialize the error.

        Args:
            entry: Raw entry value from the listing.
            reason: Why the entry was rejected.
        """
        self.entry = entry
        self.reason = reason
        super().__init__(f"Unsafe listing entry {entry!r}: {reason}")


class CheckoutCancelledError(CheckoutError):
    """Raised when a checkout is cancelled or runs past its deadline."""

    def __init__(self, reason: str = "cancelled") -> None:
        self.reason = reason
        super().__init__(f"Checkout cancelled: {reason}")
