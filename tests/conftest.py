"""Shared fixtures: an in-memory listing server behind httpx.MockTransport."""

from collections.abc import Callable, Generator, Iterator
from pathlib import Path

import httpx
import pytest

from svnmirror.fetch.auth import Credentials, encode_basic_auth
from svnmirror.fetch.metrics import FetchMetrics


ROOT_URL = "https://svn.example.com/repo/"

# Directory: dict keyed by raw href (directories end with "/"). File: bytes.
Tree = dict[str, "Tree | bytes"]


def render_listing(entries: Iterator[str] | list[str], with_parent: bool) -> str:
    """Render the listing markup produced by mod_dav_svn."""
    items = ['<li><a href="../">..</a></li>'] if with_parent else []
    items += [f'<li><a href="{name}">{name}</a></li>' for name in entries]
    return (
        "<html><head><title>repo - Revision 42: /</title></head>\n"
        "<body>\n <h2>repo - Revision 42: /</h2>\n <ul>\n  "
        + "\n  ".join(items)
        + "\n </ul>\n</body></html>\n"
    )


class FakeListingServer:
    """Serves a nested tree as listing pages and file bodies.

    Records every requested URL. Optionally requires Basic auth and
    redirects every URL under ``redirect_from`` to the same path under
    the root.
    """

    def __init__(
        self,
        tree: Tree,
        root_url: str = ROOT_URL,
        credentials: Credentials | None = None,
        redirect_from: str | None = None,
        overrides: dict[str, httpx.Response] | None = None,
        on_request: Callable[[str], None] | None = None,
    ) -> None:
        self.tree = tree
        self.root_url = root_url
        self.expected_auth = credentials.auth_token() if credentials else None
        self.redirect_from = redirect_from
        self.overrides = overrides or {}
        self.on_request = on_request
        self.requested: list[str] = []
        self.requests: list[httpx.Request] = []

    @property
    def relative_requests(self) -> list[str]:
        """Requested URLs relative to the root."""
        return [
            url[len(self.root_url) :]
            for url in self.requested
            if url.startswith(self.root_url)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        self.requests.append(request)
        if self.on_request is not None:
            self.on_request(url)

        if self.expected_auth is not None and (
            request.headers.get("authorization") != self.expected_auth
        ):
            return httpx.Response(401, text="Authorization Required")

        if url in self.overrides:
            return self.overrides[url]

        if self.redirect_from and url.startswith(self.redirect_from):
            location = self.root_url + url[len(self.redirect_from) :]
            return httpx.Response(301, headers={"Location": location})

        if not url.startswith(self.root_url):
            return httpx.Response(404, text="Not Found")

        node = self._lookup(url[len(self.root_url) :])
        if node is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(node, bytes):
            return httpx.Response(200, content=node)
        return httpx.Response(
            200,
            text=render_listing(list(node), with_parent=url != self.root_url),
            headers={"Content-Type": "text/html; charset=UTF-8"},
        )

    def client(self) -> httpx.Client:
        return httpx.Client(
            transport=httpx.MockTransport(self.handler), follow_redirects=False
        )

    def _lookup(self, rel: str) -> "Tree | bytes | None":
        node: Tree | bytes = self.tree
        remaining = rel
        while remaining:
            head, sep, remaining = remaining.partition("/")
            key = head + sep
            if not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
        return node


def snapshot(root: Path) -> dict[str, bytes | None]:
    """Map every path under root to its bytes (None for directories)."""
    return {
        path.relative_to(root).as_posix(): (
            path.read_bytes() if path.is_file() else None
        )
        for path in sorted(root.rglob("*"))
    }


@pytest.fixture(autouse=True)
def reset_fetch_metrics() -> Generator[None, None, None]:
    """Give every test a fresh metrics singleton."""
    FetchMetrics.reset()
    yield
    FetchMetrics.reset()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="alice", password="s3cret")


@pytest.fixture
def auth_header(credentials: Credentials) -> str:
    return encode_basic_auth("alice", "s3cret")


@pytest.fixture
def listing_server() -> Callable[..., FakeListingServer]:
    """Factory for FakeListingServer instances."""
    return FakeListingServer


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, bytes | None]]:
    return snapshot
