"""Experiment runner: timed single runs, repeated trials, and kernel comparisons."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from montecarlo.config import EstimatorSettings
from montecarlo.errors import ExecutionFailureError, InvalidConfigurationError, RunCancelledError
from montecarlo.experiments.analysis import SEQUENTIAL_LABEL, TrialStatistics, compute_speedup
from montecarlo.experiments.results import SingleRunResult
from montecarlo.sampling.cancellation import RunStatus
from montecarlo.sampling.kernels import SamplingKernel
from montecarlo.sampling.sample_config import SampleConfig

logger = logging.getLogger(__name__)

TrialProgress = Callable[[str, int, int], None]


def parallel_label(worker_count: int, executor: str = "thread") -> str:
    unit = "processes" if executor == "process" else "threads"
    return f"Parallel({worker_count} {unit})"


class ExperimentRunner:
    """Executes kernels and turns their estimates into timed, scored results.

    Trials always run one after another on the calling thread; only the
    kernel itself may fan out.
    """

    def __init__(
        self,
        settings: EstimatorSettings | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """Initialize experiment runner.

        Args:
            settings: Warm-up policy and decomposition defaults
            clock: Monotonic clock in seconds (injectable for tests)
        """
        self.settings = settings or EstimatorSettings()
        self._clock = clock
        self._status = RunStatus.NOT_STARTED

    @property
    def status(self) -> RunStatus:
        """Status of the most recent run issued through this runner."""
        return self._status

    def run_once(
        self,
        kernel: SamplingKernel,
        config: SampleConfig,
        label: str,
        reference_value: float,
        warmup: bool | None = None,
    ) -> SingleRunResult:
        """Time exactly one call to ``kernel.estimate``.

        Args:
            kernel: Kernel to run
            config: Sample size and decomposition
            label: Strategy label stored on the result
            reference_value: Known true value, used only for the error
            warmup: Force (True) or skip (False) the untimed ``kernel.warmup`` pass;
                None applies the settings threshold

        Returns:
            SingleRunResult with estimate, runtime and absolute error

        Raises:
            ExecutionFailureError: If the kernel failed
            RunCancelledError: If the run was cancelled
        """
        if warmup is None:
            warmup = config.total_samples > self.settings.warmup_threshold

        self._status = RunStatus.RUNNING
        try:
            if warmup:
                warmup_config = config.with_total_samples(self.settings.warmup_samples)
                logger.debug(f"Warm-up for {label}: {warmup_config}")
                kernel.warmup(warmup_config)

            start = self._clock()
            estimate = kernel.estimate(config)
            elapsed = self._clock() - start
        except RunCancelledError as e:
            self._status = RunStatus.CANCELLED
            logger.warning(f"{label} cancelled: {e}")
            raise
        except ExecutionFailureError as e:
            self._status = RunStatus.FAILED
            logger.error(f"{label} failed: {e}")
            raise
        except Exception:
            self._status = RunStatus.FAILED
            raise

        self._status = RunStatus.COMPLETED
        result = SingleRunResult(
            config=config,
            estimate=estimate,
            runtime_millis=max(0, int(elapsed * 1000)),
            label=label,
            reference_value=reference_value,
        )
        logger.info(str(result))
        return result

    def run_trials(
        self,
        kernel: SamplingKernel,
        config: SampleConfig,
        label: str,
        reference_value: float,
        trial_count: int,
        progress_callback: TrialProgress | None = None,
    ) -> TrialStatistics:
        """Run ``trial_count`` independent trials serially and summarize them.

        Args:
            progress_callback: Optional callback(label, trial_index, trial_count)

        Raises:
            InvalidConfigurationError: If trial_count < 1
        """
        if isinstance(trial_count, bool) or not isinstance(trial_count, int) or trial_count < 1:
            raise InvalidConfigurationError(f"trial_count must be >= 1, got {trial_count!r}")

        logger.info(f"Running {trial_count} trials for {label}...")
        results = []
        for trial in range(trial_count):
            if progress_callback:
                progress_callback(label, trial, trial_count)
            results.append(self.run_once(kernel, config, label, reference_value))

        stats = TrialStatistics(results)
        logger.info(str(stats))
        return stats

    def run_comparison(
        self,
        sample_sizes: Sequence[int],
        worker_counts: Sequence[int],
        sequential_kernel: SamplingKernel,
        parallel_kernel: SamplingKernel,
        reference_value: float,
        tasks_per_worker: int | None = None,
    ) -> list[SingleRunResult]:
        """Sequential vs parallel sweep over sample sizes and worker counts.

        For each sample size: one sequential run, then one parallel run per
        worker count with ``tasks_per_worker`` chunks per worker (settings
        default: 2).

        Returns:
            Flat list: sequential result followed by its parallel results,
            in input order
        """
        if tasks_per_worker is None:
            tasks_per_worker = self.settings.tasks_per_worker
        executor = getattr(parallel_kernel, "executor", "thread")

        logger.info(
            f"=== Monte Carlo Experiments ({sequential_kernel.name} vs {parallel_kernel.name}) ==="
        )
        results: list[SingleRunResult] = []
        for total_samples in sample_sizes:
            logger.info(f"Testing with {total_samples:,} points")

            seq_config = SampleConfig(total_samples=total_samples, task_count=1, worker_count=1)
            seq_result = self.run_once(
                sequential_kernel, seq_config, SEQUENTIAL_LABEL, reference_value
            )
            results.append(seq_result)

            for workers in worker_counts:
                par_config = SampleConfig.for_workers(total_samples, workers, tasks_per_worker)
                label = parallel_label(workers, executor)
                par_result = self.run_once(parallel_kernel, par_config, label, reference_value)
                results.append(par_result)

                speedup = compute_speedup(seq_result.runtime_millis, par_result.runtime_millis)
                speedup_text = f"{speedup:.2f}x" if speedup is not None else "n/a"
                logger.info(f"  {par_result.label}: speedup {speedup_text}")

        return results
