"""Report generation for estimation results.

Renders plain-text tables to the terminal with Rich and writes CSV,
JSON and Markdown files.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from montecarlo.experiments.analysis import SpeedupRow, TrialStatistics, speedup_rows
from montecarlo.experiments.provenance import RunProvenance
from montecarlo.experiments.results import SingleRunResult

CSV_FIELDS = [
    "label",
    "total_samples",
    "task_count",
    "worker_count",
    "estimate",
    "reference_value",
    "absolute_error",
    "runtime_millis",
]


def _format_speedup(value: float | None) -> str:
    return f"{value:.2f}x" if value is not None else "n/a"


class ReportGenerator:
    """Builds result tables and report files."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Terminal tables
    # ------------------------------------------------------------------

    def results_table(self, results: Sequence[SingleRunResult]) -> Table:
        table = Table(title="Experiment Summary")
        table.add_column("Estimator")
        table.add_column("Points", justify="right")
        table.add_column("Tasks", justify="right")
        table.add_column("Threads", justify="right")
        table.add_column("Estimate", justify="right")
        table.add_column("Error", justify="right")
        table.add_column("Time (ms)", justify="right")

        for r in results:
            table.add_row(
                r.label,
                f"{r.config.total_samples:,}",
                str(r.config.task_count),
                str(r.config.worker_count),
                f"{r.estimate:.10f}",
                f"{r.absolute_error:.10f}",
                f"{r.runtime_millis:,}",
            )
        return table

    def speedup_table(self, rows: Sequence[SpeedupRow]) -> Table:
        table = Table(title="Speedup")
        table.add_column("Points", justify="right")
        table.add_column("Estimator")
        table.add_column("Sequential (ms)", justify="right")
        table.add_column("Parallel (ms)", justify="right")
        table.add_column("Speedup", justify="right")
        table.add_column("Efficiency", justify="right")

        for row in rows:
            efficiency = row.efficiency
            table.add_row(
                f"{row.total_samples:,}",
                row.label,
                f"{row.sequential_millis:,}",
                f"{row.parallel_millis:,}",
                _format_speedup(row.speedup),
                f"{efficiency:.0%}" if efficiency is not None else "n/a",
            )
        return table

    def trials_table(self, stats: Sequence[TrialStatistics]) -> Table:
        table = Table(title="Multi-Trial Experiment Summary")
        table.add_column("Estimator")
        table.add_column("Trials", justify="right")
        table.add_column("Mean Est", justify="right")
        table.add_column("Std Dev", justify="right")
        table.add_column("Mean Error", justify="right")
        table.add_column("Mean Time (ms)", justify="right")

        for s in stats:
            table.add_row(
                s.label,
                str(s.trial_count),
                f"{s.mean_estimate:.8f}",
                f"{s.std_dev_estimate:.8f}",
                f"{s.mean_absolute_error:.8f}",
                f"{s.mean_runtime_millis:.1f}",
            )
        return table

    def print_results(self, results: Sequence[SingleRunResult], with_speedup: bool = True) -> None:
        self.console.print(self.results_table(results))
        rows = speedup_rows(results) if with_speedup else []
        if rows:
            self.console.print(self.speedup_table(rows))

    def print_trials(self, stats: Sequence[TrialStatistics]) -> None:
        self.console.print(self.trials_table(stats))

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def to_csv(self, results: Sequence[SingleRunResult], output_path: str) -> None:
        """Flat CSV with one row per run."""
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for result in results:
                writer.writerow(result.to_dict())

    def to_json(
        self,
        output_path: str,
        results: Sequence[SingleRunResult] = (),
        trials: Sequence[TrialStatistics] = (),
        provenance: RunProvenance | None = None,
    ) -> None:
        """Machine-readable dump of runs, speedups, trial summaries and provenance."""
        data = {
            "runs": [r.to_dict() for r in results],
            "speedups": [
                {
                    "total_samples": row.total_samples,
                    "label": row.label,
                    "worker_count": row.worker_count,
                    "sequential_millis": row.sequential_millis,
                    "parallel_millis": row.parallel_millis,
                    "speedup": row.speedup,
                }
                for row in speedup_rows(results)
            ],
            "trials": [s.to_dict() for s in trials],
        }
        if provenance is not None:
            data["provenance"] = provenance.to_dict()

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def to_markdown(
        self,
        title: str,
        output_path: str,
        results: Sequence[SingleRunResult] = (),
        trials: Sequence[TrialStatistics] = (),
        description: str = "",
    ) -> None:
        """Markdown report with one table per section."""
        lines = [f"# {title}", ""]
        if description:
            lines.extend([f"**Description:** {description}", ""])

        if results:
            lines.append("## Runs")
            lines.append("")
            lines.append("| Estimator | Points | Tasks | Threads | Estimate | Error | Time (ms) |")
            lines.append("|-----------|--------|-------|---------|----------|-------|-----------|")
            for r in results:
                lines.append(
                    f"| {r.label} | {r.config.total_samples:,} | {r.config.task_count} | "
                    f"{r.config.worker_count} | {r.estimate:.6f} | {r.absolute_error:.6f} | "
                    f"{r.runtime_millis:,} |"
                )
            lines.append("")

            rows = speedup_rows(results)
            if rows:
                lines.append("## Speedup")
                lines.append("")
                lines.append("| Points | Estimator | Sequential (ms) | Parallel (ms) | Speedup |")
                lines.append("|--------|-----------|-----------------|---------------|---------|")
                for row in rows:
                    lines.append(
                        f"| {row.total_samples:,} | {row.label} | {row.sequential_millis:,} | "
                        f"{row.parallel_millis:,} | {_format_speedup(row.speedup)} |"
                    )
                lines.append("")

        if trials:
            lines.append("## Trials")
            lines.append("")
            lines.append(
                "| Estimator | Trials | Mean Est | Std Dev | Mean Error | Mean Time (ms) |"
            )
            lines.append(
                "|-----------|--------|----------|---------|------------|----------------|"
            )
            for s in trials:
                lines.append(
                    f"| {s.label} | {s.trial_count} | {s.mean_estimate:.6f} | "
                    f"{s.std_dev_estimate:.6f} | {s.mean_absolute_error:.6f} | "
                    f"{s.mean_runtime_millis:.1f} |"
                )
            lines.append("")

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write("\n".join(lines))
