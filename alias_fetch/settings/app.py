"""Application settings powered by Pydantic BaseSettings."""

from collections.abc import Callable

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from alias_fetch.transport.constants import DEFAULT_TIMEOUT_SECONDS, MAX_URI_LENGTH
from alias_fetch.transport.models import InstanceConfig


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    base_url: str | None = Field(default=None, validation_alias="DHIS2_BASE_URL")
    username: str | None = Field(default=None, validation_alias="DHIS2_USERNAME")
    password: str | None = Field(
        default=None, validation_alias="DHIS2_PASSWORD", repr=False
    )
    max_uri_length: int = Field(
        default=MAX_URI_LENGTH, gt=0, validation_alias="ALIAS_MAX_URI_LENGTH"
    )
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        validation_alias="HTTP_TIMEOUT_SECONDS",
    )

    def missing_credentials(self) -> list[str]:
        """Return the names of required variables that are not set."""
        required = {
            "DHIS2_BASE_URL": self.base_url,
            "DHIS2_USERNAME": self.username,
            "DHIS2_PASSWORD": self.password,
        }
        return [name for name, value in required.items() if not value]

    def to_instance_config(
        self, report_status: Callable[[str], None] | None = None
    ) -> InstanceConfig:
        """Build the per-call instance configuration.

        Args:
            report_status: Sink for progress messages.

        Returns:
            InstanceConfig built from these settings.

        Raises:
            ValueError: If base URL or credentials are missing.
        """
        missing = self.missing_credentials()
        if missing:
            msg = f"Missing required settings: {', '.join(missing)}"
            raise ValueError(msg)

        values: dict[str, object] = {
            "base_url": self.base_url,
            "username": self.username,
            "password": self.password,
        }
        if report_status is not None:
            values["report_status"] = report_status
        return InstanceConfig.model_validate(values)


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
