"""Monte Carlo estimation of pi and of the integral of x^2 over [0, 1].

Compares a single-threaded sampling loop with a worker-pool fan-out and
reports accuracy and runtime statistics.
"""

from __future__ import annotations

__version__ = "0.1.0"

from montecarlo.config import EstimatorSettings
from montecarlo.errors import (
    ExecutionFailureError,
    InvalidConfigurationError,
    MonteCarloError,
    RunCancelledError,
)
from montecarlo.experiments import ExperimentRunner, SingleRunResult, TrialStatistics
from montecarlo.sampling import (
    CancellationToken,
    ParallelKernel,
    ProblemKind,
    SampleConfig,
    SequentialKernel,
    create_kernel,
    partition_samples,
)

__all__ = [
    "CancellationToken",
    "EstimatorSettings",
    "ExecutionFailureError",
    "ExperimentRunner",
    "InvalidConfigurationError",
    "MonteCarloError",
    "ParallelKernel",
    "ProblemKind",
    "RunCancelledError",
    "SampleConfig",
    "SequentialKernel",
    "SingleRunResult",
    "TrialStatistics",
    "__version__",
    "create_kernel",
    "partition_samples",
]
