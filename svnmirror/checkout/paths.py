"""Mapping of remote listing entries to URLs and local paths.

Remote and local trees are addressed by the same relative path: the raw
hrefs joined together, e.g. ``"lib/sub%20dir/"``. The remote side appends it
verbatim to the root URL; the local side percent-decodes each segment.
"""

from pathlib import Path
from urllib.parse import unquote

from svnmirror.checkout.errors import UnsafeEntryError


_FORBIDDEN_SEGMENTS = frozenset({".", ".."})
_FORBIDDEN_CHARS = ("/", "\\", "\x00")


def _decode(entry: str, segment: str) -> str:
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError as e:
        raise UnsafeEntryError(entry, "percent-encoding is not valid UTF-8") from e


def normalize_directory_url(url: str) -> str:
    """Make a directory URL end with exactly one ``/``."""
    return url.rstrip("/") + "/"


def validate_entry_name(name: str) -> str:
    """Check that a listing entry is a single, harmless path segment.

    A directory entry may carry one trailing ``/``. Both the raw and the
    percent-decoded forms are checked so ``%2e%2e/`` is caught as well.
    Decoding is strict: escapes that are not valid UTF-8 are rejected
    rather than replaced.

    Args:
        name: Raw href value from the listing.

    Returns:
        The decoded segment to use on disk.

    Raises:
        UnsafeEntryError: If the entry could escape its directory or does
            not decode.
    """
    segment = name[:-1] if name.endswith("/") else name
    if not segment:
        raise UnsafeEntryError(name, "empty name")

    decoded = _decode(name, segment)
    for candidate in (segment, decoded):
        if any(char in candidate for char in _FORBIDDEN_CHARS):
            raise UnsafeEntryError(name, "not a single path segment")
        if candidate in _FORBIDDEN_SEGMENTS:
            raise UnsafeEntryError(name, "relative path reference")
    return decoded


def local_path(local_root: Path, rel: str) -> Path:
    """Map a relative path to its location under the destination.

    Args:
        local_root: Destination directory.
        rel: Relative path built from validated entries ("" for the root).

    Returns:
        Path under ``local_root``.

    Raises:
        UnsafeEntryError: If the result would land outside ``local_root``
            (e.g. through a pre-existing symlink).
    """
    segments = [_decode(rel, part) for part in rel.split("/") if part]
    target = local_root.joinpath(*segments)

    root = local_root.resolve()
    if not target.resolve().is_relative_to(root):
        raise UnsafeEntryError(rel, "resolves outside the destination")
    return target
