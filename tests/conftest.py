"""Shared test fixtures for the montecarlo test suite."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from montecarlo.config import EstimatorSettings
from montecarlo.experiments.runner import ExperimentRunner


class FakeClock:
    """Monotonic clock that advances a fixed step on every read."""

    def __init__(self, step_seconds: float = 0.25):
        self.step_seconds = step_seconds
        self.now = 0.0

    def __call__(self) -> float:
        self.now += self.step_seconds
        return self.now


class RecordingExecutorFactory:
    """Builds real thread pools and remembers them for shutdown assertions."""

    def __init__(self):
        self.pools: list[ThreadPoolExecutor] = []

    def __call__(self, worker_count: int) -> ThreadPoolExecutor:
        pool = ThreadPoolExecutor(max_workers=worker_count)
        self.pools.append(pool)
        return pool

    def all_shut_down(self) -> bool:
        """True when every pool was shut down and none of its threads is alive."""
        return all(
            pool._shutdown and not any(t.is_alive() for t in pool._threads)
            for pool in self.pools
        )


@pytest.fixture
def settings() -> EstimatorSettings:
    """Settings with warm-up disabled so kernels run exactly once per result."""
    return EstimatorSettings(warmup_threshold=10**12, warmup_samples=10)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def runner(settings: EstimatorSettings, fake_clock: FakeClock) -> ExperimentRunner:
    """Runner with a deterministic clock: every run takes exactly 250 ms."""
    return ExperimentRunner(settings, clock=fake_clock)


@pytest.fixture
def executor_factory() -> RecordingExecutorFactory:
    return RecordingExecutorFactory()
