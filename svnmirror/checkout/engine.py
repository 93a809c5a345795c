"""Breadth-first checkout of a remote listing tree onto the local filesystem."""

import threading
import time
import uuid
from collections import deque
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TypeVar

import httpx
import structlog

from svnmirror.checkout.config import CheckoutConfig
from svnmirror.checkout.errors import (
    CheckoutCancelledError,
    CheckoutError,
    UnsafeEntryError,
)
from svnmirror.checkout.io import AtomicFileWriter
from svnmirror.checkout.paths import (
    local_path,
    normalize_directory_url,
    validate_entry_name,
)
from svnmirror.checkout.state_machine import CheckoutState, CheckoutStateMachine
from svnmirror.fetch.auth import Credentials
from svnmirror.fetch.cancel import CancelToken
from svnmirror.fetch.client import RedirectingFetcher
from svnmirror.fetch.errors import FetchError, OperationCancelledError
from svnmirror.fetch.redact import redact_url_credentials
from svnmirror.listing.parser import ListingEntry, parse_listing


logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class CheckoutResult:
    """Result of a completed checkout."""

    run_id: str
    remote_root: str
    local_root: Path
    state: CheckoutState
    started_at: datetime
    finished_at: datetime
    directories_created: int = 0
    files_downloaded: int = 0
    bytes_written: int = 0
    skipped_entries: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if the whole tree was mirrored."""
        return self.state == CheckoutState.DONE

    @property
    def duration_ms(self) -> float:
        """Get total duration in milliseconds."""
        return (self.finished_at - self.started_at).total_seconds() * 1000


@dataclass
class _Progress:
    """Counters shared by the workers of one checkout."""

    directories_created: int = 0
    files_downloaded: int = 0
    bytes_written: int = 0
    skipped_entries: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def add_directory(self) -> None:
        with self._lock:
            self.directories_created += 1

    def add_file(self, size: int) -> None:
        with self._lock:
            self.files_downloaded += 1
            self.bytes_written += size

    def add_skipped(self, entry: str) -> None:
        with self._lock:
            self.skipped_entries.append(entry)

    def to_log(self) -> dict[str, int]:
        with self._lock:
            return {
                "directories_created": self.directories_created,
                "files_downloaded": self.files_downloaded,
                "bytes_written": self.bytes_written,
                "entries_skipped": len(self.skipped_entries),
            }


class _CheckoutRun:
    """Per-call state: the remote root, destination and collaborators."""

    def __init__(  # noqa: PLR0913
        self,
        fetcher: RedirectingFetcher,
        writer: AtomicFileWriter,
        root_url: str,
        destination: Path,
        cancel_token: CancelToken,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        self.fetcher = fetcher
        self.writer = writer
        self.root_url = root_url
        self.destination = destination
        self.cancel_token = cancel_token
        self.progress = _Progress()
        self.log = log
        self._queued: set[str] = {""}
        self._queued_lock = threading.Lock()

    def check_cancelled(self) -> None:
        if self.cancel_token.is_cancelled:
            raise CheckoutCancelledError(self.cancel_token.reason)

    def list_directory(self, rel: str) -> list[ListingEntry]:
        """Fetch and parse the listing of ``root_url + rel``."""
        self.check_cancelled()
        body = self.fetcher.get_content(self.root_url + rel)
        entries = parse_listing(body.decode("utf-8", errors="replace"))
        self.log.debug("directory_listed", rel=rel, entries=len(entries))
        return entries

    def create_directory(self, rel: str) -> None:
        self.writer.make_directory(local_path(self.destination, rel))
        self.progress.add_directory()
        self.log.debug("mkdir", rel=rel)

    def accept_entries(
        self, rel: str, entries: Sequence[ListingEntry]
    ) -> list[ListingEntry]:
        """Filter a listing down to safe entries, with names made relative to the root.

        Unsafe names and names that decode to the local name of an earlier
        sibling are skipped and reported. Repeated hrefs are dropped quietly.
        """
        accepted: list[ListingEntry] = []
        seen_hrefs: set[str] = set()
        local_names: dict[str, str] = {}
        for entry in entries:
            direntry = rel + entry.name
            if entry.name in seen_hrefs:
                self.log.debug("duplicate_entry_ignored", entry=direntry)
                continue
            seen_hrefs.add(entry.name)

            try:
                local_name = validate_entry_name(entry.name)
                local_path(self.destination, direntry)
            except UnsafeEntryError as e:
                self._skip(direntry, e.reason)
                continue

            if local_name in local_names:
                self._skip(
                    direntry, f"same local name as {rel + local_names[local_name]!r}"
                )
                continue
            local_names[local_name] = entry.name

            if entry.is_directory:
                with self._queued_lock:
                    if direntry in self._queued:
                        self.log.debug("duplicate_entry_ignored", entry=direntry)
                        continue
                    self._queued.add(direntry)

            accepted.append(ListingEntry(name=direntry, is_directory=entry.is_directory))
        return accepted

    def download(self, direntry: str) -> None:
        """Stream ``root_url + direntry`` to its local counterpart."""
        self.check_cancelled()
        url = self.root_url + direntry
        target = local_path(self.destination, direntry)
        with self.fetcher.open(url) as response:
            written = self.writer.write_stream(
                target, self.fetcher.iter_body(response, url)
            )
        self.progress.add_file(written.bytes_written)
        self.log.debug(
            "file_downloaded",
            rel=direntry,
            url=redact_url_credentials(url),
            bytes=written.bytes_written,
        )

    def _skip(self, direntry: str, reason: str) -> None:
        self.progress.add_skipped(direntry)
        self.log.warning("entry_skipped", entry=direntry, reason=reason)


class CheckoutEngine:
    """Mirrors a remote directory listing tree onto the local filesystem.

    The traversal is breadth-first over a FIFO queue of relative paths,
    starting from the empty path (the root). For each directory the listing
    is fetched and parsed, the local directory is created (even when the
    listing is empty), sub-directories are queued and files are downloaded,
    overwriting existing local files. Local files that no longer exist
    remotely are left alone.

    With ``max_workers > 1`` one BFS level is handled at a time: its
    listings are fetched in parallel, its directories are created in queue
    order, then all of its files are downloaded in parallel and awaited
    before the next level starts.

    The first fetch or filesystem error aborts the run; already written
    content stays in place.
    """

    def __init__(
        self,
        credentials: Credentials,
        config: CheckoutConfig | None = None,
        run_id: str | None = None,
        cancel_token: CancelToken | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            credentials: Account used for every request.
            config: Checkout configuration.
            run_id: Unique run identifier for logging (generated if omitted).
            cancel_token: External token that aborts running checkouts.
            client: Preconfigured httpx client shared by all fetches.
        """
        self._credentials = credentials
        self._config = config or CheckoutConfig()
        self._run_id = run_id or uuid.uuid4().hex[:12]
        self._cancel_token = cancel_token
        self._client = client
        self._log = logger.bind(component="checkout", run_id=self._run_id)

    @property
    def run_id(self) -> str:
        """Get the run identifier."""
        return self._run_id

    def checkout(self, remote_root: str, local_root: Path | str) -> CheckoutResult:
        """Mirror the tree under ``remote_root`` into ``local_root``.

        Args:
            remote_root: URL of the remote directory (trailing '/' optional).
            local_root: Destination directory, created if absent.

        Returns:
            CheckoutResult with counters and skipped entries.

        Raises:
            FetchError: If a listing or file fetch fails.
            FilesystemError: If a directory or file cannot be written.
            CheckoutCancelledError: If cancelled or past the deadline.
        """
        root_url = normalize_directory_url(remote_root)
        destination = Path(local_root)
        token = CancelToken(self._config.deadline_seconds, parent=self._cancel_token)
        machine = CheckoutStateMachine(self._run_id)
        started_at = datetime.now(UTC)
        start_time_ns = time.perf_counter_ns()

        log = self._log.bind(
            remote_root=redact_url_credentials(root_url),
            local_root=str(destination),
        )
        log.info("checkout_started", max_workers=self._config.max_workers)
        machine.transition_to(CheckoutState.RUNNING)

        with RedirectingFetcher(
            self._credentials,
            config=self._config.fetch,
            run_id=self._run_id,
            cancel_token=token,
            client=self._client,
        ) as fetcher:
            run = _CheckoutRun(
                fetcher=fetcher,
                writer=AtomicFileWriter(destination, self._run_id),
                root_url=root_url,
                destination=destination,
                cancel_token=token,
                log=log,
            )
            try:
                if self._config.max_workers <= 1:
                    self._walk_sequential(run)
                else:
                    self._walk_parallel(run, self._config.max_workers)
            except (CheckoutCancelledError, OperationCancelledError) as e:
                machine.transition_to(CheckoutState.CANCELLED)
                log.warning("checkout_cancelled", reason=e.reason, **run.progress.to_log())
                if isinstance(e, CheckoutCancelledError):
                    raise
                raise CheckoutCancelledError(e.reason) from e
            except (FetchError, CheckoutError) as e:
                machine.transition_to(CheckoutState.FAILED)
                log.error(
                    "checkout_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    **run.progress.to_log(),
                )
                raise

        machine.transition_to(CheckoutState.DONE)
        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        log.info(
            "checkout_complete",
            duration_ms=round(duration_ms, 2),
            **run.progress.to_log(),
        )

        return CheckoutResult(
            run_id=self._run_id,
            remote_root=root_url,
            local_root=destination,
            state=machine.state,
            started_at=started_at,
            finished_at=datetime.now(UTC),
            directories_created=run.progress.directories_created,
            files_downloaded=run.progress.files_downloaded,
            bytes_written=run.progress.bytes_written,
            skipped_entries=list(run.progress.skipped_entries),
        )

    def _walk_sequential(self, run: _CheckoutRun) -> None:
        """One request at a time, in queue order."""
        queue: deque[str] = deque([""])
        while queue:
            run.check_cancelled()
            rel = queue.popleft()
            entries = run.list_directory(rel)
            run.create_directory(rel)
            for entry in run.accept_entries(rel, entries):
                if entry.is_directory:
                    queue.append(entry.name)
                else:
                    run.download(entry.name)

    def _walk_parallel(self, run: _CheckoutRun, max_workers: int) -> None:
        """One BFS level at a time, fanning out listings and downloads."""
        frontier = [""]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            while frontier:
                run.check_cancelled()
                listings = _run_all(executor, run.list_directory, frontier)

                next_frontier: list[str] = []
                files: list[str] = []
                for rel, entries in zip(frontier, listings, strict=True):
                    run.create_directory(rel)
                    for entry in run.accept_entries(rel, entries):
                        if entry.is_directory:
                            next_frontier.append(entry.name)
                        else:
                            files.append(entry.name)

                _run_all(executor, run.download, files)
                frontier = next_frontier


def _run_all(
    executor: ThreadPoolExecutor,
    fn: Callable[[T], R],
    items: Sequence[T],
) -> list[R]:
    """Run ``fn`` over ``items`` and wait for every call to finish.

    Returns results in input order. If any call failed, the error of the
    earliest failing item is raised once all calls have completed.
    """
    futures: list[Future[R]] = [executor.submit(fn, item) for item in items]
    wait(futures)
    return [future.result() for future in futures]
