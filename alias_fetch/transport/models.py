"""Data models for the transport layer."""

from collections.abc import Callable
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from alias_fetch.transport.constants import HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN


def _discard_status(message: str) -> None:  # noqa: ARG001
    """Default status sink that drops every message."""


class InstanceConfig(BaseModel):
    """Connection settings for one API instance.

    Supplied by the caller and passed through every request unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: Annotated[str, Field(min_length=1, description="Instance base URL")]
    username: str = Field(description="Basic auth user name")
    password: str = Field(repr=False, description="Basic auth password")
    report_status: Callable[[str], None] = Field(
        default=_discard_status,
        description="Sink for human-readable progress messages",
    )


class RequestOptions(BaseModel):
    """Per-request overrides for method, headers and body."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: Annotated[str, Field(min_length=1)] = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    content: bytes | str | None = None

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        """Upper-case the HTTP method."""
        return v.upper()


class AliasRecord(BaseModel):
    """Server-issued alias for a long target path.

    ``path`` is the short URI requested in place of ``target``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Annotated[str, Field(min_length=1)]
    path: Annotated[str, Field(min_length=1)]
    href: str = ""
    target: str = ""


class FetchResult(BaseModel):
    """Normalized outcome of a single transport call.

    ``data`` holds the parsed JSON body for HTTP 200 responses (or the
    created ``AliasRecord`` for alias creation) and is ``None`` otherwise.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: int = Field(ge=100, le=599, description="HTTP status code")
    data: Any | None = Field(default=None, description="Parsed response body")

    @property
    def is_success(self) -> bool:
        """Check if the status is 2xx."""
        return HTTP_STATUS_OK_MIN <= self.status < HTTP_STATUS_OK_MAX
