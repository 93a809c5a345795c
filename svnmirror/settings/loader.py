"""YAML loader for checkout run configuration."""

from pathlib import Path
from typing import Final

import structlog
import yaml
from pydantic import ValidationError

from svnmirror.checkout.config import CheckoutConfig


logger = structlog.get_logger()

# Mapping of error types to user-friendly hints
ERROR_HINTS: Final[dict[str, str]] = {
    "extra_forbidden": "Unknown key. Check the spelling against the documented options.",
    "int_parsing": "This field must be an integer (whole number).",
    "float_parsing": "This field must be a number.",
    "bool_parsing": "This field must be true or false.",
    "greater_than": "The value is too small. Check the minimum allowed.",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "less_than_equal": "The value is too large. Check the maximum allowed.",
    "string_too_short": "The text is too short. Check minimum length requirement.",
    "string_too_long": "The text is too long. Check maximum length requirement.",
    "model_type": "This section must be a mapping of keys to values.",
}

# Field-specific hints for more context
FIELD_HINTS: Final[dict[str, str]] = {
    "max_workers": "Must be between 1 (sequential) and 32.",
    "deadline_seconds": "Must be a positive number of seconds, or omitted.",
    "timeout_seconds": "Must be between 1 and 600 seconds.",
    "max_retries": "Must be between 0 and 10.",
    "user_agent": "Must be a non-empty string of at most 500 characters.",
}


class ConfigValidationError(Exception):
    """Raised when the configuration file cannot be loaded or validated."""

    def __init__(self, errors: list[str], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: Formatted validation messages.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error."""
    if field_name:
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]
    return ERROR_HINTS.get(
        error_type, "Check the configuration documentation for valid values."
    )


def format_validation_error(location: str, message: str, error_type: str) -> str:
    """Format a validation error with its hint.

    Args:
        location: The error location (e.g., 'fetch.timeout_seconds').
        message: The original error message.
        error_type: The Pydantic error type.

    Returns:
        Formatted error string.
    """
    hint = get_error_hint(error_type, location)
    return f"{location}: {message}\n    Hint: {hint}"


def load_checkout_config(path: Path) -> CheckoutConfig:
    """Load and validate a YAML checkout configuration.

    An empty file yields the defaults.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated configuration.

    Raises:
        ConfigValidationError: If the file is unreadable, not YAML, or invalid.
    """
    log = logger.bind(component="config", path=str(path))

    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigValidationError([f"cannot read file: {e}"], str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigValidationError(
            [f"Invalid YAML syntax: {e}"], str(path)
        ) from e

    try:
        config = CheckoutConfig.model_validate(parsed)
    except ValidationError as e:
        errors = [
            format_validation_error(
                location=".".join(str(part) for part in error["loc"]) or "(root)",
                message=error["msg"],
                error_type=error["type"],
            )
            for error in e.errors()
        ]
        log.warning("config_invalid", error_count=len(errors))
        raise ConfigValidationError(errors, str(path)) from e

    log.info(
        "config_loaded",
        max_workers=config.max_workers,
        deadline_seconds=config.deadline_seconds,
    )
    return config
