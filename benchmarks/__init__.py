"""Benchmarking harness for sampling kernel throughput."""

from benchmarks.benchmark_suite import BenchmarkRunner, BENCHMARK_CONFIGS
from benchmarks.regression import RegressionDetector

__all__ = ["BenchmarkRunner", "BENCHMARK_CONFIGS", "RegressionDetector"]
