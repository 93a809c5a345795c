"""Unit tests for Basic authentication encoding."""

import base64

import pytest
from pydantic import ValidationError

from svnmirror.fetch.auth import BASIC_PREFIX, Credentials, encode_basic_auth


class TestEncodeBasicAuth:
    """Tests for encode_basic_auth."""

    def test_rfc7617_example(self) -> None:
        """Test the example from RFC 7617."""
        assert (
            encode_basic_auth("Aladdin", "open sesame")
            == "Basic QWxhZGRpbjpvcGVuIHNlc2FtZQ=="
        )

    @pytest.mark.parametrize(
        ("username", "password"),
        [
            ("alice", "s3cret"),
            ("", ""),
            ("bob", "pass:with:colons"),
            ("jürgen", "pässwörd"),
            ("user@example.com", " spaced "),
        ],
    )
    def test_decodes_back_to_user_colon_password(
        self, username: str, password: str
    ) -> None:
        """Test that the token decodes to username:password."""
        token = encode_basic_auth(username, password)

        assert token.startswith(BASIC_PREFIX)
        decoded = base64.b64decode(token[len(BASIC_PREFIX) :]).decode("utf-8")
        assert decoded == f"{username}:{password}"

    def test_deterministic(self) -> None:
        """Test that the same input always gives the same token."""
        assert encode_basic_auth("a", "b") == encode_basic_auth("a", "b")


class TestCredentials:
    """Tests for the Credentials model."""

    def test_auth_token_matches_encoder(self) -> None:
        """Test that Credentials.auth_token delegates to the encoder."""
        creds = Credentials(username="alice", password="s3cret")

        assert creds.auth_token() == encode_basic_auth("alice", "s3cret")

    def test_password_hidden_in_repr(self) -> None:
        """Test that the password never appears in repr or str."""
        creds = Credentials(username="alice", password="s3cret")

        assert "s3cret" not in repr(creds)
        assert "s3cret" not in str(creds)

    def test_frozen(self) -> None:
        """Test that credentials are immutable."""
        creds = Credentials(username="alice", password="s3cret")

        with pytest.raises(ValidationError):
            creds.username = "mallory"  # type: ignore[misc]
