"""Filesystem writes for the checkout engine.

Files are streamed to a temporary sibling and renamed over the final path,
so an interrupted download never leaves a truncated file under its real name.
The temporary name is hidden, unique per write and created exclusively, so
it never replaces a mirrored entry or a concurrent write in the same directory.
"""

import os
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from svnmirror.checkout.errors import FilesystemError


logger = structlog.get_logger()

TEMP_SUFFIX = ".tmp"


def _temp_path_for(path: Path) -> Path:
    return path.with_name(f".{path.name}.{uuid.uuid4().hex[:12]}{TEMP_SUFFIX}")


@dataclass(frozen=True)
class WrittenFile:
    """A file written by the checkout."""

    path: str
    bytes_written: int


class AtomicFileWriter:
    """Creates directories and atomically replaces files under a base directory."""

    def __init__(self, base_dir: Path, run_id: str | None = None) -> None:
        """Initialize the writer.

        Args:
            base_dir: Destination root, used for relative paths in logs.
            run_id: Optional run ID for logging context.
        """
        self._base_dir = base_dir
        self._log = logger.bind(component="atomic_writer")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def make_directory(self, path: Path) -> None:
        """Create a directory and any missing parents.

        Raises:
            FilesystemError: If the directory cannot be created.
        """
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(path, f"cannot create directory: {e}") from e
        self._log.debug("directory_created", path=self._relative(path))

    def write_stream(self, path: Path, chunks: Iterable[bytes]) -> WrittenFile:
        """Write chunks to ``path``, replacing any existing file.

        Args:
            path: Target file path.
            chunks: Body chunks; errors raised while iterating propagate.

        Returns:
            WrittenFile with relative path and size.

        Raises:
            FilesystemError: If the file cannot be written.
        """
        temp_path: Path | None = None
        bytes_written = 0
        try:
            with _temp_path_for(path).open("xb") as f:
                temp_path = Path(f.name)
                for chunk in chunks:
                    f.write(chunk)
                    bytes_written += len(chunk)
            os.replace(temp_path, path)
        except OSError as e:
            self._discard(temp_path)
            raise FilesystemError(path, f"cannot write file: {e}") from e
        except Exception:
            self._discard(temp_path)
            raise

        relative_path = self._relative(path)
        self._log.debug("file_written", path=relative_path, bytes=bytes_written)
        return WrittenFile(path=relative_path, bytes_written=bytes_written)

    def _discard(self, temp_path: Path | None) -> None:
        if temp_path is None:
            return
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            self._log.warning(
                "temp_file_cleanup_failed", path=str(temp_path), error=str(e)
            )

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self._base_dir).as_posix()
        except ValueError:
            return str(path)
