"""Configuration for the rule test pipeline."""

from pydantic import BaseModel, Field


class PipelineConfig(BaseModel):
    """Configuration for rule test runs and editing sessions."""

    sample_size: int = Field(default=5, ge=0, description="Outcomes shown to the user")
    throttle_interval: float = Field(
        default=0.1, ge=0, description="Seconds between content-change notifications"
    )
    # Fixed seed makes the displayed samples reproducible, mainly for the CLI
    seed: int | None = None
