"""Result of a single timed estimation run."""

from __future__ import annotations

from dataclasses import dataclass

from montecarlo.sampling.sample_config import SampleConfig


@dataclass(frozen=True)
class SingleRunResult:
    """One completed run: the estimate, how long it took, and how far off it was."""

    config: SampleConfig
    estimate: float
    runtime_millis: int
    label: str
    reference_value: float

    @property
    def absolute_error(self) -> float:
        return abs(self.estimate - self.reference_value)

    @property
    def relative_error_percent(self) -> float:
        if self.reference_value == 0:
            return 0.0
        return self.absolute_error / abs(self.reference_value) * 100

    def to_dict(self) -> dict:
        """Flat dict for CSV/JSON export."""
        return {
            "label": self.label,
            "total_samples": self.config.total_samples,
            "task_count": self.config.task_count,
            "worker_count": self.config.worker_count,
            "estimate": self.estimate,
            "reference_value": self.reference_value,
            "absolute_error": self.absolute_error,
            "runtime_millis": self.runtime_millis,
        }

    def __str__(self) -> str:
        return (
            f"{self.label} | {self.config} | Est ≈ {self.estimate:.6f} | "
            f"Error: {self.absolute_error:.6f} | Time: {self.runtime_millis:,} ms"
        )
