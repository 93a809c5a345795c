"""Mirror Subversion web directory listings onto the local filesystem."""

__version__ = "0.1.0"

from svnmirror.checkout import CheckoutConfig, CheckoutEngine, CheckoutResult  # noqa: E402
from svnmirror.fetch import Credentials, FetchConfig  # noqa: E402


__all__ = [
    "CheckoutConfig",
    "CheckoutEngine",
    "CheckoutResult",
    "Credentials",
    "FetchConfig",
    "__version__",
]
