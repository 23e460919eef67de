"""Batch driver for Monte Carlo experiments.

Usage:
    python -m montecarlo estimate --problem pi --samples 1000000 --parallel --workers 4
    python -m montecarlo trials --problem integral --samples 1000000 --workers 4 --trials 10
    python -m montecarlo compare --problem pi --samples 100000 1000000 --workers 2 4 8
    python -m montecarlo run plans/pi_comparison.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
import uuid
from pathlib import Path

from montecarlo.config import EstimatorSettings
from montecarlo.errors import MonteCarloError
from montecarlo.experiments.plan import ExperimentPlan, run_plan
from montecarlo.experiments.provenance import capture_provenance
from montecarlo.experiments.report import ReportGenerator
from montecarlo.experiments.runner import ExperimentRunner, parallel_label
from montecarlo.sampling.kernels import ParallelKernel, SequentialKernel
from montecarlo.sampling.problems import ProblemKind
from montecarlo.sampling.sample_config import SampleConfig


def build_parser(settings: EstimatorSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="montecarlo",
        description="Monte Carlo estimation: sequential vs parallel sampling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--problem",
            default="pi",
            help="pi (circle membership) or integral (area under x^2)",
        )
        sub.add_argument("--seed", type=int, default=settings.seed, help="Random seed")
        sub.add_argument(
            "--executor",
            choices=["thread", "process"],
            default=settings.executor,
            help="Worker pool kind for parallel runs",
        )

    estimate_parser = subparsers.add_parser("estimate", help="Single timed run")
    add_common(estimate_parser)
    estimate_parser.add_argument("--samples", type=int, required=True)
    estimate_parser.add_argument("--parallel", action="store_true", help="Use the worker pool")
    estimate_parser.add_argument("--workers", type=int, default=4)
    estimate_parser.add_argument("--tasks", type=int, help="Chunk count (default 2x workers)")

    trials_parser = subparsers.add_parser("trials", help="Repeated independent trials")
    add_common(trials_parser)
    trials_parser.add_argument("--samples", type=int, required=True)
    trials_parser.add_argument("--sequential", action="store_true", help="Sequential kernel")
    trials_parser.add_argument("--workers", type=int, default=4)
    trials_parser.add_argument("--tasks", type=int, help="Chunk count (default 2x workers)")
    trials_parser.add_argument("--trials", type=int, default=settings.trial_count)

    compare_parser = subparsers.add_parser("compare", help="Sequential vs parallel sweep")
    add_common(compare_parser)
    compare_parser.add_argument("--samples", type=int, nargs="+", default=settings.sample_sizes)
    compare_parser.add_argument("--workers", type=int, nargs="+", default=settings.worker_counts)
    compare_parser.add_argument(
        "--tasks-per-worker", type=int, default=settings.tasks_per_worker
    )
    compare_parser.add_argument("--output", type=str, help="Write <output>.csv and <output>.json")

    run_parser = subparsers.add_parser("run", help="Run experiment plan from YAML")
    run_parser.add_argument("yaml_path", help="Path to experiment plan YAML")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    settings = EstimatorSettings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(name)s - %(levelname)s - %(message)s",
    )

    commands = {
        "estimate": estimate,
        "trials": trials,
        "compare": compare,
        "run": run_experiment,
    }
    if args.command not in commands:
        parser.print_help()
        sys.exit(1)

    try:
        commands[args.command](args, settings)
    except MonteCarloError as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _config(args: argparse.Namespace, settings: EstimatorSettings) -> SampleConfig:
    tasks = args.tasks if args.tasks is not None else args.workers * settings.tasks_per_worker
    return SampleConfig(total_samples=args.samples, task_count=tasks, worker_count=args.workers)


def estimate(args: argparse.Namespace, settings: EstimatorSettings) -> None:
    """Single timed run."""
    problem = ProblemKind.parse(args.problem)
    runner = ExperimentRunner(settings)

    if args.parallel:
        kernel = ParallelKernel(problem, seed=args.seed, executor=args.executor)
        config = _config(args, settings)
        label = parallel_label(config.worker_count, args.executor)
    else:
        kernel = SequentialKernel(problem, seed=args.seed)
        config = SampleConfig(total_samples=args.samples)
        label = "Sequential"

    result = runner.run_once(kernel, config, label, problem.reference_value)
    ReportGenerator().print_results([result], with_speedup=False)
    print(f"Actual value: {problem.reference_value}")


def trials(args: argparse.Namespace, settings: EstimatorSettings) -> None:
    """Repeated-trial statistics for one kernel."""
    problem = ProblemKind.parse(args.problem)
    runner = ExperimentRunner(settings)

    if args.sequential:
        kernel = SequentialKernel(problem, seed=args.seed)
        config = SampleConfig(total_samples=args.samples)
        label = "Sequential"
    else:
        kernel = ParallelKernel(problem, seed=args.seed, executor=args.executor)
        config = _config(args, settings)
        label = parallel_label(config.worker_count, args.executor)

    def progress(label: str, trial: int, total: int) -> None:
        print(f"Running {label} trial {trial + 1}/{total}", end="\r")

    stats = runner.run_trials(
        kernel, config, label, problem.reference_value, args.trials, progress_callback=progress
    )
    print()
    ReportGenerator().print_trials([stats])
    print(f"Actual value: {problem.reference_value}")


def compare(args: argparse.Namespace, settings: EstimatorSettings) -> None:
    """Sequential vs parallel sweep with speedup table."""
    problem = ProblemKind.parse(args.problem)
    runner = ExperimentRunner(settings)
    report = ReportGenerator()

    start_time = time.time()
    results = runner.run_comparison(
        args.samples,
        args.workers,
        SequentialKernel(problem, seed=args.seed),
        ParallelKernel(problem, seed=args.seed, executor=args.executor),
        problem.reference_value,
        tasks_per_worker=args.tasks_per_worker,
    )
    report.print_results(results)
    print(f"Actual value: {problem.reference_value}")

    if args.output:
        provenance = capture_provenance(
            run_id=str(uuid.uuid4()),
            settings=settings.model_dump(),
            duration_seconds=time.time() - start_time,
        )
        output = Path(args.output)
        report.to_csv(results, str(output.with_suffix(".csv")))
        report.to_json(str(output.with_suffix(".json")), results, provenance=provenance)
        print(f"Results: {output.with_suffix('.csv')}, {output.with_suffix('.json')}")


def run_experiment(args: argparse.Namespace, settings: EstimatorSettings) -> None:
    """Run an experiment plan from YAML."""
    yaml_path = Path(args.yaml_path)
    if not yaml_path.exists():
        print(f"Config file not found: {yaml_path}", file=sys.stderr)
        sys.exit(1)

    print(f"Loading experiment from {yaml_path}")
    plan = ExperimentPlan.from_yaml(str(yaml_path))
    print(f"Experiment: {plan.name} ({plan.problem.display_name})")
    print(f"Sample sizes: {plan.sample_sizes}  Workers: {plan.worker_counts}")
    print(f"Trial blocks: {len(plan.trials)}")
    print()

    report = ReportGenerator()
    outcome = run_plan(plan, ExperimentRunner(settings), plan_path=str(yaml_path), report=report)

    if outcome.comparison:
        report.print_results(outcome.comparison)
    if outcome.trials:
        report.print_trials(outcome.trials)

    print(f"Experiment complete: {outcome.provenance.run_id}")
    print(f"Duration: {outcome.provenance.duration_seconds:.2f}s")
    for path in outcome.written:
        print(f"  {path}")


if __name__ == "__main__":
    main()
