"""Structured error hierarchy for montecarlo."""

from __future__ import annotations


class MonteCarloError(Exception):
    """Base for all montecarlo errors."""

    pass


class InvalidConfigurationError(MonteCarloError, ValueError):
    """Run parameters out of range (samples, tasks, workers, trials)."""

    pass


class ExecutionFailureError(MonteCarloError):
    """A unit of parallel work failed; the whole run is aborted."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {type(cause).__name__}: {cause}"
        super().__init__(message)


class RunCancelledError(MonteCarloError):
    """Run was cooperatively cancelled before completion."""

    def __init__(self, samples_drawn: int, hits: int, partial_estimate: float | None):
        self.samples_drawn = samples_drawn
        self.hits = hits
        self.partial_estimate = partial_estimate
        super().__init__(f"Run cancelled after {samples_drawn:,} samples")
