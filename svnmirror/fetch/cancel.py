"""Cooperative cancellation shared by the engine and the fetcher."""

import threading
import time


class CancelToken:
    """Cancellation flag with an optional deadline.

    Cancelled either explicitly through ``cancel()`` (e.g. from a signal
    handler or another thread) or implicitly once the deadline has passed.
    Workers poll ``is_cancelled`` between blocking steps.
    """

    def __init__(
        self,
        deadline_seconds: float | None = None,
        parent: "CancelToken | None" = None,
    ) -> None:
        """Initialize the token.

        Args:
            deadline_seconds: Seconds from now after which the token counts
                as cancelled. ``None`` disables the deadline.
            parent: Token whose cancellation also cancels this one.
        """
        self._parent = parent
        self._event = threading.Event()
        self._reason = "cancelled"
        self._deadline = (
            time.monotonic() + deadline_seconds
            if deadline_seconds is not None
            else None
        )

    def cancel(self, reason: str = "cancelled") -> None:
        """Request cancellation."""
        self._reason = reason
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        """Check whether cancellation was requested or the deadline passed."""
        if self._event.is_set():
            return True
        if self._parent is not None and self._parent.is_cancelled:
            self._reason = self._parent.reason
            self._event.set()
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._reason = "deadline exceeded"
            self._event.set()
            return True
        return False

    @property
    def reason(self) -> str:
        """Get why the token was cancelled."""
        return self._reason
