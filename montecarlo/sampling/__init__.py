"""Sampling core: configs, problems, partitioning, kernels and aggregation."""

from __future__ import annotations

from montecarlo.sampling.aggregation import ChunkResult, aggregate_chunks, combine
from montecarlo.sampling.cancellation import CancellationToken, RunStatus
from montecarlo.sampling.kernels import (
    ParallelKernel,
    SamplingKernel,
    SequentialKernel,
    create_kernel,
)
from montecarlo.sampling.partition import partition_samples
from montecarlo.sampling.problems import ProblemKind
from montecarlo.sampling.sample_config import SampleConfig

__all__ = [
    "CancellationToken",
    "ChunkResult",
    "ParallelKernel",
    "ProblemKind",
    "RunStatus",
    "SampleConfig",
    "SamplingKernel",
    "SequentialKernel",
    "aggregate_chunks",
    "combine",
    "create_kernel",
    "partition_samples",
]
