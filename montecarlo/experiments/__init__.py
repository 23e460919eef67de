"""Experiment layer: timed runs, repeated trials, comparisons and reports."""

from __future__ import annotations

from montecarlo.experiments.analysis import (
    SpeedupRow,
    TrialStatistics,
    compute_speedup,
    speedup_rows,
)
from montecarlo.experiments.plan import ExperimentPlan, PlanOutcome, TrialSpec, run_plan
from montecarlo.experiments.provenance import RunProvenance, capture_provenance
from montecarlo.experiments.report import ReportGenerator
from montecarlo.experiments.results import SingleRunResult
from montecarlo.experiments.runner import ExperimentRunner

__all__ = [
    "ExperimentPlan",
    "ExperimentRunner",
    "PlanOutcome",
    "ReportGenerator",
    "RunProvenance",
    "SingleRunResult",
    "SpeedupRow",
    "TrialSpec",
    "TrialStatistics",
    "capture_provenance",
    "compute_speedup",
    "run_plan",
    "speedup_rows",
]
