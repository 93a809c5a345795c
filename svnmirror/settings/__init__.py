"""Application settings, credential sources and run configuration."""

from .app import AppSettings, get_settings
from .loader import ConfigValidationError, load_checkout_config
from .maven import DEFAULT_MAVEN_SETTINGS, MavenSettingsError, load_maven_credentials


__all__ = [
    "AppSettings",
    "ConfigValidationError",
    "DEFAULT_MAVEN_SETTINGS",
    "MavenSettingsError",
    "get_settings",
    "load_checkout_config",
    "load_maven_credentials",
]
