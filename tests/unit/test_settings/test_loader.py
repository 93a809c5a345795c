"""Unit tests for the YAML checkout configuration loader."""

from pathlib import Path

import pytest

from svnmirror.settings.loader import (
    ConfigValidationError,
    format_validation_error,
    get_error_hint,
    load_checkout_config,
)


def write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "checkout.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadCheckoutConfig:
    """Tests for load_checkout_config."""

    def test_valid_config(self, tmp_path: Path) -> None:
        """Test loading nested checkout and fetch settings."""
        path = write(
            tmp_path,
            "max_workers: 4\n"
            "deadline_seconds: 120\n"
            "fetch:\n"
            "  timeout_seconds: 15\n"
            "  retry_policy:\n"
            "    max_retries: 1\n",
        )

        config = load_checkout_config(path)

        assert config.max_workers == 4
        assert config.deadline_seconds == 120
        assert config.fetch.timeout_seconds == 15
        assert config.fetch.retry_policy.max_retries == 1

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test that an empty file yields the default configuration."""
        config = load_checkout_config(write(tmp_path, ""))

        assert config.max_workers == 1
        assert config.deadline_seconds is None

    def test_out_of_range_value(self, tmp_path: Path) -> None:
        """Test that range violations carry the field hint."""
        path = write(tmp_path, "max_workers: 0\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_checkout_config(path)

        assert exc_info.value.file_path == str(path)
        assert len(exc_info.value.errors) == 1
        assert exc_info.value.errors[0].startswith("max_workers:")
        assert "Must be between 1 (sequential) and 32." in exc_info.value.errors[0]

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Test that misspelled keys are rejected."""
        path = write(tmp_path, "fetch:\n  timeout: 5\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_checkout_config(path)

        assert exc_info.value.errors[0].startswith("fetch.timeout:")
        assert "Unknown key" in exc_info.value.errors[0]

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Test that a top-level list is reported at the root."""
        with pytest.raises(ConfigValidationError) as exc_info:
            load_checkout_config(write(tmp_path, "- 1\n- 2\n"))

        assert exc_info.value.errors[0].startswith("(root):")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that YAML syntax errors are reported."""
        with pytest.raises(ConfigValidationError) as exc_info:
            load_checkout_config(write(tmp_path, "max_workers: [1\n"))

        assert "Invalid YAML syntax" in exc_info.value.errors[0]


class TestErrorHints:
    """Tests for hint lookup."""

    def test_field_hint_wins(self) -> None:
        """Test that field hints take precedence over type hints."""
        assert get_error_hint("greater_than", "fetch.timeout_seconds") == (
            "Must be between 1 and 600 seconds."
        )

    def test_type_hint(self) -> None:
        """Test falling back to the error type hint."""
        assert get_error_hint("int_parsing", "chunk_size") == (
            "This field must be an integer (whole number)."
        )

    def test_default_hint(self) -> None:
        """Test the generic hint for unknown error types."""
        assert "documentation" in get_error_hint("something_else")

    def test_format(self) -> None:
        """Test the formatted error line."""
        assert format_validation_error("max_workers", "bad", "int_parsing") == (
            "max_workers: bad\n    Hint: Must be between 1 (sequential) and 32."
        )
