"""Immutable parameters describing one estimation run."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from montecarlo.errors import InvalidConfigurationError


def _require_positive(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidConfigurationError(f"{name} must be >= 1, got {value}")


@dataclass(frozen=True)
class SampleConfig:
    """Sample size plus the degree of parallel decomposition.

    Attributes:
        total_samples: Number of random points drawn for the estimate
        task_count: Number of chunks the samples are split into
        worker_count: Size of the worker pool executing the chunks
    """

    total_samples: int
    task_count: int = 1
    worker_count: int = 1

    def __post_init__(self) -> None:
        _require_positive("total_samples", self.total_samples)
        _require_positive("task_count", self.task_count)
        _require_positive("worker_count", self.worker_count)

    @classmethod
    def for_workers(
        cls, total_samples: int, worker_count: int, tasks_per_worker: int = 2
    ) -> SampleConfig:
        """Build a parallel config with ``tasks_per_worker`` chunks per worker."""
        _require_positive("tasks_per_worker", tasks_per_worker)
        _require_positive("worker_count", worker_count)
        return cls(
            total_samples=total_samples,
            task_count=worker_count * tasks_per_worker,
            worker_count=worker_count,
        )

    def with_total_samples(self, total_samples: int) -> SampleConfig:
        """Same decomposition, different sample size."""
        return dataclasses.replace(self, total_samples=total_samples)

    def __str__(self) -> str:
        return (
            f"Config[points={self.total_samples:,}, "
            f"tasks={self.task_count}, threads={self.worker_count}]"
        )
