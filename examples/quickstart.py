"""montecarlo quickstart: your first estimate

This script estimates pi and the integral of x^2 over [0, 1] with both
kernels, then runs a few trials to show the spread of the estimates.

Run with:
    python examples/quickstart.py
"""

from montecarlo import (
    ExperimentRunner,
    ParallelKernel,
    ProblemKind,
    SampleConfig,
    SequentialKernel,
)
from montecarlo.experiments.report import ReportGenerator


def main():
    runner = ExperimentRunner()
    report = ReportGenerator()

    for problem in ProblemKind:
        print(f"{problem.display_name} (actual value {problem.reference_value:.10f})")

        sequential = SequentialKernel(problem, seed=42)
        parallel = ParallelKernel(problem, seed=42)

        # tasks_per_worker defaults to 2
        results = runner.run_comparison(
            sample_sizes=[200_000],
            worker_counts=[2, 4],
            sequential_kernel=sequential,
            parallel_kernel=parallel,
            reference_value=problem.reference_value,
        )
        report.print_results(results)

        stats = runner.run_trials(
            parallel,
            SampleConfig.for_workers(200_000, worker_count=4),
            "Parallel(4 threads)",
            problem.reference_value,
            trial_count=5,
        )
        report.print_trials([stats])
        print()


if __name__ == "__main__":
    main()
