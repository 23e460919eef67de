"""Throughput benchmarks for the sampling kernels."""

import argparse
import time

from benchmarks.regression import RegressionDetector
from montecarlo.sampling.kernels import ParallelKernel, SequentialKernel
from montecarlo.sampling.problems import ProblemKind
from montecarlo.sampling.sample_config import SampleConfig

BENCHMARK_CONFIGS = {
    "sequential_pi_1m": {
        "problem": "pi",
        "parallel": False,
        "total_samples": 1_000_000,
    },
    "sequential_integral_1m": {
        "problem": "integral",
        "parallel": False,
        "total_samples": 1_000_000,
    },
    "parallel_pi_1m_4_workers": {
        "problem": "pi",
        "parallel": True,
        "total_samples": 1_000_000,
        "worker_count": 4,
    },
    "parallel_pi_1m_8_workers": {
        "problem": "pi",
        "parallel": True,
        "total_samples": 1_000_000,
        "worker_count": 8,
    },
    "parallel_pi_1m_4_processes": {
        "problem": "pi",
        "parallel": True,
        "total_samples": 1_000_000,
        "worker_count": 4,
        "executor": "process",
    },
}


class BenchmarkRunner:
    """Run benchmark suite and track kernel throughput."""

    def __init__(self, configs: dict | None = None, repeats: int = 3):
        self.configs = configs or BENCHMARK_CONFIGS
        self.repeats = repeats

    def run_single(self, name: str, config: dict) -> dict:
        """Run a single benchmark configuration.

        The fastest of ``repeats`` timed calls is kept.

        Args:
            name: Benchmark name
            config: Dict with problem, parallel, total_samples and optional
                worker_count / executor

        Returns:
            Dict with timing results
        """
        print(f"Running {name}...")

        problem = ProblemKind.parse(config["problem"])
        total = config["total_samples"]
        if config.get("parallel"):
            workers = config.get("worker_count", 4)
            kernel = ParallelKernel(problem, seed=42, executor=config.get("executor", "thread"))
            sample_config = SampleConfig.for_workers(total, workers)
        else:
            kernel = SequentialKernel(problem, seed=42)
            sample_config = SampleConfig(total)

        timings = []
        estimate = 0.0
        for _ in range(self.repeats):
            start = time.perf_counter()
            estimate = kernel.estimate(sample_config)
            timings.append(time.perf_counter() - start)

        best_seconds = min(timings)
        ms_per_million = best_seconds * 1000 / (total / 1_000_000)

        result = {
            "best_seconds": round(best_seconds, 4),
            "total_samples": total,
            "ms_per_million_samples": round(ms_per_million, 2),
            "estimate": estimate,
        }

        print(f"  [OK] {name}: {total:,} samples in {best_seconds:.3f}s "
              f"({ms_per_million:.2f}ms per million)")

        return result

    def run_all(self, only: str | None = None) -> dict:
        """Run all benchmarks (or single if --only specified).

        Args:
            only: Optional benchmark name to run in isolation

        Returns:
            Dict of benchmark_name -> result_dict
        """
        results = {}

        if only:
            if only not in self.configs:
                raise ValueError(f"Unknown benchmark: {only}")
            results[only] = self.run_single(only, self.configs[only])
        else:
            for name, config in self.configs.items():
                results[name] = self.run_single(name, config)

        return results

    def print_summary(self, results: dict, warnings: list[str] | None = None) -> None:
        """Print formatted summary of results.

        Args:
            results: Dict of benchmark results
            warnings: Optional list of regression warnings
        """
        print("\n" + "=" * 70)
        print("BENCHMARK SUMMARY")
        print("=" * 70)

        warnings = warnings or []
        for name, result in results.items():
            regressed = any(w.startswith(f"[WARN] {name}:") for w in warnings)
            status = "[WARN]" if regressed else "[OK]"
            print(f"{status} {name}")
            print(f"   {result['total_samples']:,} samples in {result['best_seconds']}s")
            print(f"   {result['ms_per_million_samples']:.2f}ms per million samples")

        if warnings:
            print("\n" + "=" * 70)
            print("REGRESSIONS DETECTED")
            print("=" * 70)
            for warning in warnings:
                print(warning)


def main():
    """CLI entry point for benchmark suite."""
    parser = argparse.ArgumentParser(description="Run montecarlo kernel benchmarks")
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Compare against baseline",
    )
    parser.add_argument(
        "--update-baseline",
        action="store_true",
        help="Save results as new baseline",
    )
    parser.add_argument(
        "--only",
        type=str,
        help="Run only the specified benchmark",
    )
    parser.add_argument(
        "--repeats",
        type=int,
        default=3,
        help="Timed calls per benchmark (fastest is kept)",
    )
    parser.add_argument(
        "--baseline-path",
        type=str,
        default="benchmarks/baseline.json",
        help="Path to baseline file",
    )

    args = parser.parse_args()

    runner = BenchmarkRunner(repeats=args.repeats)
    results = runner.run_all(only=args.only)

    warnings = []
    if args.compare:
        detector = RegressionDetector(baseline_path=args.baseline_path)
        warnings = detector.check(results)

    runner.print_summary(results, warnings)

    if args.update_baseline:
        detector = RegressionDetector(baseline_path=args.baseline_path)
        detector.update_baseline(results)
        print(f"\n[OK] Baseline updated at {args.baseline_path}")


if __name__ == "__main__":
    main()
