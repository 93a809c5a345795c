"""Recursive checkout of a remote listing tree."""

from svnmirror.checkout.config import CheckoutConfig
from svnmirror.checkout.engine import CheckoutEngine, CheckoutResult
from svnmirror.checkout.errors import (
    CheckoutCancelledError,
    CheckoutError,
    FilesystemError,
    UnsafeEntryError,
)
from svnmirror.checkout.io import AtomicFileWriter, WrittenFile
from svnmirror.checkout.paths import (
    local_path,
    normalize_directory_url,
    validate_entry_name,
)
from svnmirror.checkout.state_machine import (
    CheckoutState,
    CheckoutStateMachine,
    CheckoutStateTransitionError,
)


__all__ = [
    # Engine
    "CheckoutEngine",
    "CheckoutResult",
    "CheckoutConfig",
    # Errors
    "CheckoutError",
    "CheckoutCancelledError",
    "FilesystemError",
    "UnsafeEntryError",
    # IO
    "AtomicFileWriter",
    "WrittenFile",
    # Paths
    "local_path",
    "normalize_directory_url",
    "validate_entry_name",
    # State
    "CheckoutState",
    "CheckoutStateMachine",
    "CheckoutStateTransitionError",
]
