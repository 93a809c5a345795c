"""Basic authentication for listing and file requests."""

import base64

from pydantic import BaseModel, ConfigDict, Field, SecretStr


BASIC_PREFIX = "Basic "


def encode_basic_auth(username: str, password: str) -> str:
    """Build a Basic ``Authorization`` header value.

    No validation is done: empty credentials simply produce a header the
    server will reject.

    Args:
        username: Account name.
        password: Account password.

    Returns:
        ``"Basic " + base64(username:password)``.
    """
    raw = f"{username}:{password}".encode()
    return BASIC_PREFIX + base64.b64encode(raw).decode("ascii")


class Credentials(BaseModel):
    """Username and password supplied once per engine.

    The password is a ``SecretStr`` so it never shows up in reprs or logs.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    username: str = Field(description="Account name")
    password: SecretStr = Field(description="Account password")

    def auth_token(self) -> str:
        """Get the Authorization header value for these credentials."""
        return encode_basic_auth(self.username, self.password.get_secret_value())
