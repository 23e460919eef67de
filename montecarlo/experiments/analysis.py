"""Statistical reduction of run results.

Uses plain arithmetic (no numpy/scipy dependency).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from montecarlo.errors import InvalidConfigurationError
from montecarlo.experiments.results import SingleRunResult

SEQUENTIAL_LABEL = "Sequential"


@dataclass(frozen=True)
class TrialStatistics:
    """Summary over repeated trials of the same kernel and config.

    All fields are computed once from ``results``. The standard deviation
    is the population standard deviation (divides by n).
    """

    results: tuple[SingleRunResult, ...]
    label: str = field(init=False)
    trial_count: int = field(init=False)
    mean_estimate: float = field(init=False)
    std_dev_estimate: float = field(init=False)
    mean_runtime_millis: float = field(init=False)
    mean_absolute_error: float = field(init=False)
    min_estimate: float = field(init=False)
    max_estimate: float = field(init=False)

    def __post_init__(self) -> None:
        results = tuple(self.results)
        if not results:
            raise InvalidConfigurationError("Trial results cannot be empty")
        labels = {r.label for r in results}
        if len(labels) > 1:
            raise InvalidConfigurationError(
                f"Trial results must share one label, got {sorted(labels)}"
            )

        estimates = [r.estimate for r in results]
        n = len(estimates)
        mean = sum(estimates) / n
        variance = sum((x - mean) ** 2 for x in estimates) / n

        values = {
            "results": results,
            "label": results[0].label,
            "trial_count": n,
            "mean_estimate": mean,
            "std_dev_estimate": math.sqrt(variance),
            "mean_runtime_millis": sum(r.runtime_millis for r in results) / n,
            "mean_absolute_error": sum(r.absolute_error for r in results) / n,
            "min_estimate": min(estimates),
            "max_estimate": max(estimates),
        }
        for name, value in values.items():
            object.__setattr__(self, name, value)

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "trial_count": self.trial_count,
            "mean_estimate": self.mean_estimate,
            "std_dev_estimate": self.std_dev_estimate,
            "min_estimate": self.min_estimate,
            "max_estimate": self.max_estimate,
            "mean_absolute_error": self.mean_absolute_error,
            "mean_runtime_millis": self.mean_runtime_millis,
        }

    def __str__(self) -> str:
        return (
            f"{self.label} ({self.trial_count} trials) | Mean Est: {self.mean_estimate:.6f} | "
            f"StdDev: {self.std_dev_estimate:.6f} | Mean Error: {self.mean_absolute_error:.6f} | "
            f"Mean Time: {self.mean_runtime_millis:.1f} ms"
        )


def compute_speedup(sequential_millis: float, parallel_millis: float) -> float | None:
    """Sequential runtime over parallel runtime; None when the parallel run measured 0 ms."""
    if parallel_millis <= 0:
        return None
    return sequential_millis / parallel_millis


@dataclass(frozen=True)
class SpeedupRow:
    """A parallel result paired with the sequential run of the same sample size."""

    total_samples: int
    label: str
    worker_count: int
    sequential_millis: int
    parallel_millis: int
    speedup: float | None

    @property
    def efficiency(self) -> float | None:
        """Speedup per worker."""
        if self.speedup is None:
            return None
        return self.speedup / self.worker_count


def speedup_rows(results: Sequence[SingleRunResult]) -> list[SpeedupRow]:
    """Pair each parallel result with the sequential result preceding it.

    Expects the flat ordering produced by ``ExperimentRunner.run_comparison``:
    a sequential result followed by the parallel results for the same size.
    """
    rows: list[SpeedupRow] = []
    baseline: SingleRunResult | None = None
    for result in results:
        if result.label == SEQUENTIAL_LABEL:
            baseline = result
            continue
        if baseline is None or baseline.config.total_samples != result.config.total_samples:
            continue
        rows.append(
            SpeedupRow(
                total_samples=result.config.total_samples,
                label=result.label,
                worker_count=result.config.worker_count,
                sequential_millis=baseline.runtime_millis,
                parallel_millis=result.runtime_millis,
                speedup=compute_speedup(baseline.runtime_millis, result.runtime_millis),
            )
        )
    return rows
