"""Regression detection for kernel throughput benchmarks."""

import json
from pathlib import Path

METRIC = "ms_per_million_samples"


class RegressionDetector:
    """Compare current throughput against a stored baseline."""

    def __init__(self, baseline_path: str = "benchmarks/baseline.json", threshold_pct: float = 20.0):
        self.baseline_path = Path(baseline_path)
        self.threshold_pct = threshold_pct
        self.baseline = self._load_baseline()

    def _load_baseline(self) -> dict:
        """Load baseline from disk."""
        if not self.baseline_path.exists():
            return {}
        with open(self.baseline_path, "r") as f:
            return json.load(f)

    def slowdown_pct(self, name: str, current_result: dict) -> float | None:
        """Percent change in time per million samples; None without a usable baseline."""
        baseline_result = self.baseline.get(name)
        if not baseline_result:
            return None
        baseline_ms = baseline_result.get(METRIC, 0)
        if baseline_ms == 0:
            return None
        return ((current_result.get(METRIC, 0) - baseline_ms) / baseline_ms) * 100

    def check(self, results: dict) -> list[str]:
        """Return warnings for benchmarks slower than the threshold.

        Args:
            results: Dict of benchmark_name -> result_dict with a
                'ms_per_million_samples' field

        Returns:
            List of warning strings describing regressions
        """
        warnings = []
        for name, current_result in results.items():
            pct_change = self.slowdown_pct(name, current_result)
            if pct_change is None or pct_change <= self.threshold_pct:
                continue
            warnings.append(
                f"[WARN] {name}: {pct_change:+.1f}% slower "
                f"(baseline: {self.baseline[name][METRIC]:.2f}ms/M, "
                f"current: {current_result[METRIC]:.2f}ms/M)"
            )
        return warnings

    def update_baseline(self, results: dict, path: str | None = None) -> None:
        """Save current results as new baseline.

        Args:
            results: Dict of benchmark_name -> result_dict
            path: Optional custom path (defaults to self.baseline_path)
        """
        save_path = Path(path) if path else self.baseline_path
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            json.dump(results, f, indent=2)
