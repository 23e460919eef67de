"""Tests for the sequential and parallel sampling kernels."""

from __future__ import annotations

import itertools
import math
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from montecarlo.errors import ExecutionFailureError, RunCancelledError
from montecarlo.sampling import (
    CancellationToken,
    ParallelKernel,
    ProblemKind,
    SampleConfig,
    SamplingKernel,
    SequentialKernel,
    create_kernel,
)

PI = ProblemKind.CIRCLE_MEMBERSHIP
CURVE = ProblemKind.CURVE_MEMBERSHIP


class CountdownToken(CancellationToken):
    """Reports cancelled once it has been polled ``polls`` times."""

    def __init__(self, polls: int):
        super().__init__()
        self._reads = itertools.count(1)
        self._polls = polls

    @property
    def cancelled(self) -> bool:
        if next(self._reads) >= self._polls:
            self.cancel()
        return super().cancelled


class RejectingExecutor(ThreadPoolExecutor):
    """Accepts ``accept`` submissions, then behaves like a shut-down pool."""

    def __init__(self, accept: int):
        super().__init__(max_workers=1)
        self._accept = accept

    def submit(self, fn, /, *args, **kwargs):
        if self._accept <= 0:
            raise RuntimeError("cannot schedule new futures after shutdown")
        self._accept -= 1
        return super().submit(fn, *args, **kwargs)


def _failing_count_hits(self, samples, rng):
    if samples == 4:
        raise OSError("entropy source unavailable")
    return samples


class TestKernelProtocol:
    def test_both_kernels_satisfy_protocol(self):
        assert isinstance(SequentialKernel(PI), SamplingKernel)
        assert isinstance(ParallelKernel(PI), SamplingKernel)

    def test_names(self):
        assert SequentialKernel(PI).name == "Sequential Pi Estimation (Circle)"
        assert ParallelKernel(CURVE).name == "Parallel Integration x^2 [0,1]"

    def test_create_kernel(self):
        assert isinstance(create_kernel(PI), SequentialKernel)
        kernel = create_kernel(CURVE, parallel=True, seed=3, executor="process")
        assert isinstance(kernel, ParallelKernel)
        assert kernel.executor == "process"

    def test_unknown_executor(self):
        with pytest.raises(ValueError, match="Unknown executor"):
            ParallelKernel(PI, executor="fiber")


class TestSequentialKernel:
    def test_single_sample_is_zero_or_scale(self):
        assert SequentialKernel(PI).estimate(SampleConfig(1)) in (0.0, 4.0)
        assert SequentialKernel(CURVE).estimate(SampleConfig(1)) in (0.0, 1.0)

    def test_seeded_kernels_reproduce(self):
        config = SampleConfig(20_000)
        first = [SequentialKernel(PI, seed=11).estimate(config) for _ in range(2)]
        second = [SequentialKernel(PI, seed=11).estimate(config) for _ in range(2)]

        assert first == second

    def test_seeded_trials_are_independent(self):
        """Consecutive calls draw fresh child seeds."""
        points = []
        kernel = SequentialKernel(PI, seed=11, on_sample=lambda x, y, hit: points.append((x, y)))
        config = SampleConfig(10)

        kernel.estimate(config)
        kernel.estimate(config)

        assert points[:10] != points[10:]

    def test_hook_path_matches_fast_path(self):
        config = SampleConfig(5_000)
        fast = SequentialKernel(CURVE, seed=5).estimate(config)
        hooked = SequentialKernel(CURVE, seed=5, cancel_token=CancellationToken()).estimate(config)

        assert fast == hooked

    def test_on_sample_sees_every_point(self):
        seen = []
        kernel = SequentialKernel(PI, seed=1, on_sample=lambda x, y, hit: seen.append(hit))

        estimate = kernel.estimate(SampleConfig(1_000))

        assert len(seen) == 1_000
        assert estimate == pytest.approx(4.0 * sum(seen) / 1_000)

    def test_cancel_before_start(self):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(RunCancelledError) as excinfo:
            SequentialKernel(PI, cancel_token=token).estimate(SampleConfig(1_000))

        assert excinfo.value.samples_drawn == 0
        assert excinfo.value.partial_estimate is None

    def test_cancel_mid_run_reports_partial(self):
        token = CountdownToken(polls=501)

        with pytest.raises(RunCancelledError) as excinfo:
            SequentialKernel(PI, seed=2, cancel_token=token).estimate(SampleConfig(10_000))

        error = excinfo.value
        assert error.samples_drawn == 500
        assert error.partial_estimate == pytest.approx(4.0 * error.hits / 500)

    @pytest.mark.statistical
    def test_pi_accuracy_at_one_million(self):
        estimate = SequentialKernel(PI, seed=2024).estimate(SampleConfig(1_000_000))

        assert abs(estimate - math.pi) < 0.01


class TestParallelKernel:
    def test_single_sample(self, executor_factory):
        kernel = ParallelKernel(PI, executor_factory=executor_factory)

        assert kernel.estimate(SampleConfig(1, task_count=1, worker_count=1)) in (0.0, 4.0)

    def test_more_tasks_than_samples(self, executor_factory):
        kernel = ParallelKernel(CURVE, executor_factory=executor_factory)

        estimate = kernel.estimate(SampleConfig(3, task_count=8, worker_count=4))

        assert estimate in (0.0, 1 / 3, 2 / 3, 1.0)
        assert executor_factory.all_shut_down()

    def test_pool_is_scoped_to_one_call(self, executor_factory):
        kernel = ParallelKernel(PI, seed=1, executor_factory=executor_factory)
        config = SampleConfig(10_000, task_count=4, worker_count=2)

        kernel.estimate(config)
        kernel.estimate(config)

        assert len(executor_factory.pools) == 2
        assert executor_factory.all_shut_down()

    def test_seeded_runs_reproduce(self):
        config = SampleConfig(40_000, task_count=8, worker_count=4)

        first = ParallelKernel(CURVE, seed=99).estimate(config)
        second = ParallelKernel(CURVE, seed=99).estimate(config)

        assert first == second

    def test_worker_threads_are_named(self, monkeypatch):
        names = set()

        def record(self, samples, rng):
            names.add(threading.current_thread().name)
            return 0

        monkeypatch.setattr(ProblemKind, "count_hits", record)
        ParallelKernel(PI).estimate(SampleConfig(100, task_count=2, worker_count=2))

        assert names
        assert all(name.startswith("montecarlo") for name in names)

    @pytest.mark.statistical
    @pytest.mark.parametrize("problem", [PI, CURVE])
    def test_trial_means_agree_with_sequential(self, runner, problem):
        trials = 16
        reference = problem.reference_value
        sequential = runner.run_trials(
            SequentialKernel(problem, seed=7),
            SampleConfig(200_000),
            "Sequential",
            reference,
            trials,
        )
        parallel = runner.run_trials(
            ParallelKernel(problem, seed=8),
            SampleConfig(200_000, task_count=8, worker_count=4),
            "Parallel(4 threads)",
            reference,
            trials,
        )

        assert abs(sequential.mean_estimate - parallel.mean_estimate) < 0.005
        assert abs(parallel.mean_estimate - reference) < 0.005

    def test_chunk_failure_aborts_run(self, monkeypatch, executor_factory):
        monkeypatch.setattr(ProblemKind, "count_hits", _failing_count_hits)
        kernel = ParallelKernel(PI, executor_factory=executor_factory)

        with pytest.raises(ExecutionFailureError) as excinfo:
            kernel.estimate(SampleConfig(10, task_count=3, worker_count=2))

        assert isinstance(excinfo.value.cause, OSError)
        assert executor_factory.all_shut_down()

    def test_rejected_submission(self):
        pools = []

        def factory(worker_count):
            pools.append(RejectingExecutor(accept=1))
            return pools[-1]

        kernel = ParallelKernel(PI, executor_factory=factory)

        with pytest.raises(ExecutionFailureError, match="rejected"):
            kernel.estimate(SampleConfig(100, task_count=4, worker_count=2))

        assert pools[0]._shutdown

    def test_cancel_before_start(self, executor_factory):
        token = CancellationToken()
        token.cancel()
        kernel = ParallelKernel(PI, cancel_token=token, executor_factory=executor_factory)

        with pytest.raises(RunCancelledError) as excinfo:
            kernel.estimate(SampleConfig(10_000, task_count=4, worker_count=2))

        assert excinfo.value.samples_drawn == 0
        assert executor_factory.all_shut_down()

    def test_cancel_mid_run(self, executor_factory):
        token = CountdownToken(polls=2_000)
        kernel = ParallelKernel(PI, seed=4, cancel_token=token, executor_factory=executor_factory)

        with pytest.raises(RunCancelledError) as excinfo:
            kernel.estimate(SampleConfig(1_000_000, task_count=4, worker_count=2))

        assert 0 < excinfo.value.samples_drawn < 1_000_000
        assert executor_factory.all_shut_down()

    def test_process_pool(self):
        kernel = ParallelKernel(CURVE, seed=12, executor="process")

        estimate = kernel.estimate(SampleConfig(20_000, task_count=4, worker_count=2))

        assert abs(estimate - 1 / 3) < 0.05
