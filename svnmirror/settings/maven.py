"""Credentials stored in a Maven ``settings.xml``.

Reads the ``<server>`` entry whose ``<id>`` matches::

    <settings>
      <servers>
        <server>
          <id>svn.example.com</id>
          <username>alice</username>
          <password>secret</password>
        </server>
      </servers>
    </settings>

The settings namespace, when present, is ignored.
"""

from pathlib import Path
from xml.etree.ElementTree import Element, ParseError

import defusedxml.ElementTree as DefusedET
import structlog
from defusedxml import DefusedXmlException

from svnmirror.fetch.auth import Credentials


logger = structlog.get_logger()

DEFAULT_MAVEN_SETTINGS = Path.home() / ".m2" / "settings.xml"


class MavenSettingsError(Exception):
    """Raised when credentials cannot be read from a Maven settings file."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: Element, name: str) -> str | None:
    for child in element:
        if _local_name(child.tag) == name:
            return (child.text or "").strip()
    return None


def load_maven_credentials(server_id: str, path: Path = DEFAULT_MAVEN_SETTINGS) -> Credentials:
    """Load the username and password of a ``<server>`` entry.

    Args:
        server_id: Value of the server's ``<id>``.
        path: Settings file location.

    Returns:
        Credentials of the matching server.

    Raises:
        MavenSettingsError: If the file is unreadable, malformed, or has no
            matching server with both username and password.
    """
    try:
        body = path.read_bytes()
    except OSError as e:
        raise MavenSettingsError(path, f"cannot read file: {e}") from e

    try:
        root = DefusedET.fromstring(body)
    except (ParseError, DefusedXmlException) as e:
        raise MavenSettingsError(path, f"invalid XML: {e}") from e

    for element in root.iter():
        if _local_name(element.tag) != "server":
            continue
        if _child_text(element, "id") != server_id:
            continue

        username = _child_text(element, "username")
        password = _child_text(element, "password")
        if username is None or password is None:
            raise MavenSettingsError(
                path, f"server {server_id!r} has no username/password"
            )
        logger.debug("maven_credentials_loaded", path=str(path), server_id=server_id)
        return Credentials(username=username, password=password)

    raise MavenSettingsError(path, f"no server with id {server_id!r}")
