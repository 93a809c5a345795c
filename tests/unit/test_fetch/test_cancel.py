"""Tests for CancelToken."""

import time

from svnmirror.fetch.cancel import CancelToken


class TestCancelToken:
    """Tests for explicit cancellation, deadlines and parents."""

    def test_not_cancelled_by_default(self) -> None:
        """Test a fresh token."""
        assert CancelToken().is_cancelled is False

    def test_explicit_cancel(self) -> None:
        """Test cancel() with a reason."""
        token = CancelToken()

        token.cancel("interrupted")

        assert token.is_cancelled is True
        assert token.reason == "interrupted"

    def test_deadline(self) -> None:
        """Test that a passed deadline cancels the token."""
        token = CancelToken(deadline_seconds=0.01)
        time.sleep(0.02)

        assert token.is_cancelled is True
        assert token.reason == "deadline exceeded"

    def test_future_deadline(self) -> None:
        """Test that a distant deadline does not cancel."""
        assert CancelToken(deadline_seconds=60).is_cancelled is False

    def test_parent_cancels_child(self) -> None:
        """Test that a child inherits cancellation and reason."""
        parent = CancelToken()
        child = CancelToken(parent=parent)

        parent.cancel("shutdown")

        assert child.is_cancelled is True
        assert child.reason == "shutdown"

    def test_child_does_not_cancel_parent(self) -> None:
        """Test that cancelling a child leaves the parent alone."""
        parent = CancelToken()
        child = CancelToken(parent=parent)

        child.cancel()

        assert parent.is_cancelled is False
