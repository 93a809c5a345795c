"""Configuration model for a checkout run."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from svnmirror.fetch.config import FetchConfig


class CheckoutConfig(BaseModel):
    """Settings for one checkout: fetch behaviour, parallelism and deadline."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    max_workers: Annotated[int, Field(ge=1, le=32)] = Field(
        default=1,
        description="1 runs the sequential traversal; more fetches a BFS level in parallel",
    )
    deadline_seconds: Annotated[float, Field(gt=0)] | None = Field(
        default=None,
        description="Abort the checkout once this many seconds have elapsed",
    )
