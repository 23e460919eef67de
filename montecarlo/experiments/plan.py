"""Batch experiment plans with YAML support."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from montecarlo.errors import InvalidConfigurationError
from montecarlo.experiments.analysis import TrialStatistics
from montecarlo.experiments.provenance import RunProvenance, capture_provenance
from montecarlo.experiments.report import ReportGenerator
from montecarlo.experiments.results import SingleRunResult
from montecarlo.experiments.runner import ExperimentRunner, parallel_label
from montecarlo.sampling.kernels import ParallelKernel, SequentialKernel
from montecarlo.sampling.problems import ProblemKind
from montecarlo.sampling.sample_config import SampleConfig

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json", "markdown")


@dataclass
class TrialSpec:
    """A repeated-trial block inside a plan."""

    total_samples: int
    trial_count: int = 10
    worker_count: int = 1
    task_count: int | None = None  # defaults to tasks_per_worker * worker_count
    parallel: bool = True

    def sample_config(self, tasks_per_worker: int) -> SampleConfig:
        if not self.parallel:
            return SampleConfig(self.total_samples, task_count=1, worker_count=1)
        if self.task_count is not None:
            return SampleConfig(self.total_samples, self.task_count, self.worker_count)
        return SampleConfig.for_workers(self.total_samples, self.worker_count, tasks_per_worker)

    def label(self, executor: str = "thread") -> str:
        return parallel_label(self.worker_count, executor) if self.parallel else "Sequential"


@dataclass
class ExperimentPlan:
    """A batch of comparison sweeps and trial blocks for one problem.

    Supports loading from YAML or dict.
    """

    name: str
    problem: ProblemKind
    description: str = ""
    sample_sizes: list[int] = field(default_factory=list)
    worker_counts: list[int] = field(default_factory=list)
    trials: list[TrialSpec] = field(default_factory=list)
    seed: int | None = None
    executor: str = "thread"
    output_dir: str = "data/montecarlo"
    formats: list[str] = field(default_factory=lambda: ["csv", "markdown"])

    @classmethod
    def from_yaml(cls, path: str) -> ExperimentPlan:
        """Load a plan from a YAML file.

        Raises:
            FileNotFoundError: If file doesn't exist
            InvalidConfigurationError: If the content is not a valid plan
        """
        import yaml

        with open(path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise InvalidConfigurationError(f"Plan file {path} must contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExperimentPlan:
        """Build a plan from a dictionary.

        Raises:
            InvalidConfigurationError: On missing keys, unknown problem or format
        """
        try:
            name = data["name"]
            if not isinstance(name, str) or not name.strip():
                raise InvalidConfigurationError(
                    f"Plan name must be a non-empty string, got {name!r}"
                )
            problem = ProblemKind.parse(str(data.get("problem", "pi")))
            trials = [
                TrialSpec(
                    total_samples=int(t["total_samples"]),
                    trial_count=int(t.get("trial_count", 10)),
                    worker_count=int(t.get("worker_count", 1)),
                    task_count=int(t["task_count"]) if "task_count" in t else None,
                    parallel=bool(t.get("parallel", True)),
                )
                for t in _list_field(data, "trials")
            ]
            sample_sizes = [int(n) for n in _list_field(data, "sample_sizes")]
            worker_counts = [int(n) for n in _list_field(data, "worker_counts")]
        except InvalidConfigurationError:
            raise
        except KeyError as e:
            raise InvalidConfigurationError(f"Plan is missing required key: {e}") from e
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"Invalid plan: {e}") from e

        formats = _list_field(data, "formats", ["csv", "markdown"])
        unknown = [f for f in formats if f not in SUPPORTED_FORMATS]
        if unknown:
            raise InvalidConfigurationError(
                f"Unknown report formats {unknown}; expected any of {list(SUPPORTED_FORMATS)}"
            )

        executor = data.get("executor", "thread")
        if executor not in ("thread", "process"):
            raise InvalidConfigurationError(
                f"Unknown executor '{executor}'; expected thread or process"
            )

        return cls(
            name=name,
            problem=problem,
            description=data.get("description", ""),
            sample_sizes=sample_sizes,
            worker_counts=worker_counts,
            trials=trials,
            seed=data.get("seed"),
            executor=executor,
            output_dir=data.get("output_dir", "data/montecarlo"),
            formats=formats,
        )


def _list_field(data: dict[str, Any], key: str, default: list | None = None) -> list:
    value = data.get(key, [] if default is None else default)
    if not isinstance(value, list):
        raise InvalidConfigurationError(
            f"Plan field '{key}' must be a list, got {type(value).__name__}: {value!r}"
        )
    return list(value)


@dataclass
class PlanOutcome:
    """Everything a plan produced."""

    comparison: list[SingleRunResult]
    trials: list[TrialStatistics]
    provenance: RunProvenance
    written: list[str] = field(default_factory=list)


def run_plan(
    plan: ExperimentPlan,
    runner: ExperimentRunner | None = None,
    plan_path: str | None = None,
    report: ReportGenerator | None = None,
) -> PlanOutcome:
    """Execute the comparison sweep and trial blocks, then write reports."""
    runner = runner or ExperimentRunner()
    start_time = time.time()
    reference = plan.problem.reference_value

    sequential = SequentialKernel(plan.problem, seed=plan.seed)
    parallel = ParallelKernel(plan.problem, seed=plan.seed, executor=plan.executor)

    comparison: list[SingleRunResult] = []
    if plan.sample_sizes and plan.worker_counts:
        comparison = runner.run_comparison(
            plan.sample_sizes, plan.worker_counts, sequential, parallel, reference
        )

    trial_stats: list[TrialStatistics] = []
    for spec in plan.trials:
        kernel = parallel if spec.parallel else sequential
        config = spec.sample_config(runner.settings.tasks_per_worker)
        trial_stats.append(
            runner.run_trials(
                kernel, config, spec.label(plan.executor), reference, spec.trial_count
            )
        )

    provenance = capture_provenance(
        run_id=str(uuid.uuid4()),
        settings=runner.settings.model_dump(),
        plan_path=plan_path,
        duration_seconds=time.time() - start_time,
    )
    outcome = PlanOutcome(comparison=comparison, trials=trial_stats, provenance=provenance)
    outcome.written = write_reports(plan, outcome, report or ReportGenerator())
    return outcome


def write_reports(
    plan: ExperimentPlan, outcome: PlanOutcome, report: ReportGenerator
) -> list[str]:
    """Write every requested format into ``plan.output_dir``."""
    output_dir = Path(plan.output_dir)
    stem = plan.name.lower().replace(" ", "_")
    written = []

    if "csv" in plan.formats and outcome.comparison:
        path = output_dir / f"{stem}_results.csv"
        report.to_csv(outcome.comparison, str(path))
        written.append(str(path))
    if "json" in plan.formats:
        path = output_dir / f"{stem}.json"
        report.to_json(str(path), outcome.comparison, outcome.trials, outcome.provenance)
        written.append(str(path))
    if "markdown" in plan.formats:
        path = output_dir / f"{stem}_report.md"
        report.to_markdown(
            plan.name, str(path), outcome.comparison, outcome.trials, plan.description
        )
        written.append(str(path))

    for path in written:
        logger.info(f"Wrote {path}")
    return written
