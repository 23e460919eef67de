"""Configuration settings for montecarlo runs.

Uses Pydantic Settings for validation and environment variable support.
All settings can be overridden via MONTECARLO_* environment variables.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class EstimatorSettings(BaseSettings):
    """Defaults for kernels, the experiment runner and the batch driver."""

    # Warm-up pass before a timed run
    warmup_threshold: int = Field(default=100_000, ge=0)  # warm up above this many samples
    warmup_samples: int = Field(default=10_000, ge=1)

    # Parallel decomposition
    tasks_per_worker: int = Field(default=2, ge=1)
    executor: Literal["thread", "process"] = "thread"

    # Batch driver defaults
    sample_sizes: list[int] = Field(default=[100_000, 1_000_000, 10_000_000])
    worker_counts: list[int] = Field(default=[2, 4, 8])
    trial_count: int = Field(default=10, ge=1)
    seed: int | None = None

    # Output
    output_dir: str = "data/montecarlo"
    log_level: str = "INFO"

    model_config = {"env_prefix": "MONTECARLO_"}
