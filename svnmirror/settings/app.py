"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from svnmirror.fetch.auth import Credentials


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    svn_username: str | None = Field(default=None, validation_alias="SVN_USERNAME")
    svn_password: SecretStr | None = Field(
        default=None, validation_alias="SVN_PASSWORD"
    )

    def credentials(self) -> Credentials | None:
        """Return credentials when both username and password are set."""
        if self.svn_username is None or self.svn_password is None:
            return None
        return Credentials(username=self.svn_username, password=self.svn_password)


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
