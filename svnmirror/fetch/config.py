"""Configuration model for the fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from svnmirror.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_LISTING_SIZE_BYTES,
    DEFAULT_USER_AGENT,
)
from svnmirror.fetch.models import RetryPolicy


class FetchConfig(BaseModel):
    """Configuration for the HTTP fetch layer.

    Central configuration for all fetch operations of one checkout: client
    identity, timeouts, read sizes and retry policy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    timeout_seconds: Annotated[float, Field(ge=1.0, le=600.0)] = 60.0
    max_listing_size_bytes: Annotated[
        int, Field(ge=1024, le=1024 * 1024 * 1024)
    ] = DEFAULT_MAX_LISTING_SIZE_BYTES
    chunk_size: Annotated[int, Field(ge=512, le=16 * 1024 * 1024)] = (
        DEFAULT_CHUNK_SIZE
    )
    verify_tls: bool = Field(
        default=True, description="Verify server TLS certificates"
    )
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)
