"""Test doubles shared across montecarlo test suites.

Plain classes, not unittest.mock.
"""

from __future__ import annotations

from montecarlo.sampling.sample_config import SampleConfig


class ScriptedKernel:
    """Kernel returning a fixed sequence of estimates and recording its calls."""

    def __init__(self, estimates: list[float], name: str = "Scripted"):
        self._estimates = list(estimates)
        self._index = 0
        self.name = name
        self.calls: list[SampleConfig] = []
        self.warmups: list[SampleConfig] = []

    def estimate(self, config: SampleConfig) -> float:
        self.calls.append(config)
        value = self._estimates[self._index % len(self._estimates)]
        self._index += 1
        return value

    def warmup(self, config: SampleConfig) -> None:
        self.warmups.append(config)


class FailingKernel:
    """Kernel whose estimate always raises the given exception."""

    name = "Failing"

    def __init__(self, error: Exception):
        self.error = error

    def estimate(self, config: SampleConfig) -> float:
        raise self.error

    def warmup(self, config: SampleConfig) -> None:
        pass
