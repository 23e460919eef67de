"""Sampling kernels: sequential loop and worker-pool fan-out.

Both variants share the same skeleton (draw a point, test it against the
problem's predicate, count hits, scale the ratio) and differ only in how
the samples are scheduled.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Literal, Protocol, runtime_checkable

from montecarlo.errors import ExecutionFailureError, RunCancelledError
from montecarlo.sampling.aggregation import ChunkResult, aggregate_chunks
from montecarlo.sampling.cancellation import CancellationToken
from montecarlo.sampling.partition import partition_samples
from montecarlo.sampling.problems import ProblemKind
from montecarlo.sampling.sample_config import SampleConfig

logger = logging.getLogger(__name__)

SampleCallback = Callable[[float, float, bool], None]
ExecutorKind = Literal["thread", "process"]


@runtime_checkable
class SamplingKernel(Protocol):
    """Anything that can turn a SampleConfig into an estimate."""

    @property
    def name(self) -> str:
        """Display name, e.g. "Parallel Pi Estimation (Circle)"."""
        ...

    def estimate(self, config: SampleConfig) -> float:
        """Run the sampling and return the scaled estimate."""
        ...

    def warmup(self, config: SampleConfig) -> None:
        """Exercise the sampling path without hooks, seeds or cancellation."""
        ...

def _sample_chunk(
    problem: ProblemKind,
    samples: int,
    seed: int | None,
    cancel_token: CancellationToken | None = None,
) -> ChunkResult:
    """Count hits for one chunk with its own generator.

    Module-level so it can be shipped to a process pool.
    """
    rng = random.Random(seed)
    if cancel_token is None:
        return ChunkResult(samples=samples, hits=problem.count_hits(samples, rng))

    hits = 0
    for drawn in range(samples):
        if cancel_token.cancelled:
            return ChunkResult(samples=drawn, hits=hits, cancelled=True)
        x, y = problem.draw(rng)
        if problem.contains(x, y):
            hits += 1
    return ChunkResult(samples=samples, hits=hits)


def _cancelled(problem: ProblemKind, samples: int, hits: int) -> RunCancelledError:
    partial = problem.estimate_from(hits, samples) if samples > 0 else None
    return RunCancelledError(samples_drawn=samples, hits=hits, partial_estimate=partial)


class _SeededKernel:
    """Shared seeding: a seeded kernel hands out a fresh child seed per call."""

    def __init__(self, problem: ProblemKind, seed: int | None):
        self.problem = problem
        self.seed = seed
        self._seed_source = random.Random(seed) if seed is not None else None

    def _next_seed(self) -> int | None:
        if self._seed_source is None:
            return None
        return self._seed_source.getrandbits(64)


class SequentialKernel(_SeededKernel):
    """Single-threaded sample loop on the calling thread."""

    def __init__(
        self,
        problem: ProblemKind,
        seed: int | None = None,
        cancel_token: CancellationToken | None = None,
        on_sample: SampleCallback | None = None,
    ):
        """
        Args:
            problem: Which predicate and scaling rule to apply
            seed: Optional seed for reproducible runs
            cancel_token: Polled before every sample
            on_sample: Called with (x, y, is_hit) for every sample, on this thread
        """
        super().__init__(problem, seed)
        self.cancel_token = cancel_token
        self.on_sample = on_sample

    @property
    def name(self) -> str:
        return f"Sequential {self.problem.display_name}"

    def estimate(self, config: SampleConfig) -> float:
        rng = random.Random(self._next_seed())
        total = config.total_samples

        if self.cancel_token is None and self.on_sample is None:
            hits = self.problem.count_hits(total, rng)
            return self.problem.estimate_from(hits, total)

        hits = 0
        for drawn in range(total):
            if self.cancel_token is not None and self.cancel_token.cancelled:
                logger.info(f"{self.name} cancelled after {drawn:,} samples")
                raise _cancelled(self.problem, drawn, hits)
            x, y = self.problem.draw(rng)
            is_hit = self.problem.contains(x, y)
            if is_hit:
                hits += 1
            if self.on_sample is not None:
                self.on_sample(x, y, is_hit)

        return self.problem.estimate_from(hits, total)

    def warmup(self, config: SampleConfig) -> None:
        """Untimed pass: no ``on_sample`` calls, no cancellation, seed stream untouched."""
        self.problem.count_hits(config.total_samples, random.Random())


class ParallelKernel(_SeededKernel):
    """Fans chunks out to a worker pool scoped to one ``estimate`` call."""

    def __init__(
        self,
        problem: ProblemKind,
        seed: int | None = None,
        cancel_token: CancellationToken | None = None,
        executor: ExecutorKind = "thread",
        executor_factory: Callable[[int], Executor] | None = None,
    ):
        """
        Args:
            problem: Which predicate and scaling rule to apply
            seed: Optional seed; each chunk gets an independent child seed
            cancel_token: Polled by workers per sample and between chunk completions
            executor: "thread" or "process" pool
            executor_factory: Builds the pool from a worker count (overrides ``executor``)
        """
        super().__init__(problem, seed)
        if executor not in ("thread", "process"):
            raise ValueError(f"Unknown executor kind: {executor}")
        self.cancel_token = cancel_token
        self.executor = executor
        self._executor_factory = executor_factory

    @property
    def name(self) -> str:
        return f"Parallel {self.problem.display_name}"

    def estimate(self, config: SampleConfig) -> float:
        total = self._run(config, self._chunk_seeds(config.task_count), self.cancel_token)

        if total.cancelled:
            logger.info(f"{self.name} cancelled after {total.samples:,} samples")
            raise _cancelled(self.problem, total.samples, total.hits)
        return self.problem.estimate_from(total.hits, config.total_samples)

    def warmup(self, config: SampleConfig) -> None:
        """Untimed pass through a fresh pool; ignores the token and the seed stream."""
        self._run(config, [None] * config.task_count, None)

    def _run(
        self,
        config: SampleConfig,
        seeds: list[int | None],
        cancel_token: CancellationToken | None,
    ) -> ChunkResult:
        chunks = partition_samples(config.total_samples, config.task_count)
        logger.debug(
            f"{self.name}: {len(chunks)} chunks of ~{chunks[0]:,} samples "
            f"on {config.worker_count} {self.executor} workers"
        )

        pool = self._create_pool(config.worker_count)
        try:
            futures = self._submit_all(pool, chunks, seeds, cancel_token)
            return aggregate_chunks(futures, cancel_token)
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

    def _create_pool(self, worker_count: int) -> Executor:
        if self._executor_factory is not None:
            return self._executor_factory(worker_count)
        if self.executor == "process":
            return ProcessPoolExecutor(max_workers=worker_count)
        return ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="montecarlo")

    def _chunk_seeds(self, count: int) -> list[int | None]:
        base = self._next_seed()
        if base is None:
            return [None] * count
        master = random.Random(base)
        return [master.getrandbits(64) for _ in range(count)]

    def _submit_all(
        self,
        pool: Executor,
        chunks: list[int],
        seeds: list[int | None],
        cancel_token: CancellationToken | None,
    ) -> list[Future]:
        # Events can't cross a process boundary; process chunks run to completion.
        token = cancel_token if self.executor == "thread" else None
        futures: list[Future] = []
        for size, seed in zip(chunks, seeds, strict=True):
            try:
                futures.append(pool.submit(_sample_chunk, self.problem, size, seed, token))
            except RuntimeError as exc:
                for future in futures:
                    future.cancel()
                raise ExecutionFailureError("Worker pool rejected task", cause=exc) from exc
        return futures


def create_kernel(
    problem: ProblemKind,
    parallel: bool = False,
    seed: int | None = None,
    cancel_token: CancellationToken | None = None,
    executor: ExecutorKind = "thread",
) -> SamplingKernel:
    """Pick the kernel variant for a problem."""
    if parallel:
        return ParallelKernel(problem, seed=seed, cancel_token=cancel_token, executor=executor)
    return SequentialKernel(problem, seed=seed, cancel_token=cancel_token)
