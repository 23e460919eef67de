"""Run provenance: enough metadata to tell where a set of timings came from."""

from __future__ import annotations

import hashlib
import os
import platform
import subprocess
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from importlib import metadata
from pathlib import Path


@dataclass
class RunProvenance:
    """Environment and inputs behind one batch of results."""

    run_id: str  # UUID
    timestamp: str  # ISO 8601
    git_commit: str | None  # HEAD SHA (if in a git repo)
    git_dirty: bool  # True if uncommitted changes
    python_version: str  # e.g., "3.12.1"
    platform_info: str  # e.g., "Linux-6.1-x86_64"
    cpu_count: int | None  # timings are meaningless without it
    montecarlo_version: str
    plan_path: str | None  # YAML plan, when run from one
    plan_hash: str | None  # SHA256 of the plan file
    settings: dict  # resolved EstimatorSettings
    duration_seconds: float  # total wall time
    dependencies: dict  # versions of key deps

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> RunProvenance:
        """Create from dictionary."""
        return cls(**data)


def capture_provenance(
    run_id: str,
    settings: dict,
    plan_path: str | None = None,
    duration_seconds: float = 0.0,
) -> RunProvenance:
    """Capture provenance for the current batch.

    Args:
        run_id: Unique identifier for this batch
        settings: Resolved settings dictionary
        plan_path: Path to the YAML plan, if any
        duration_seconds: Total wall time

    Returns:
        RunProvenance with all captured metadata
    """
    return RunProvenance(
        run_id=run_id,
        timestamp=datetime.now(UTC).isoformat(),
        git_commit=_get_git_commit(),
        git_dirty=_is_git_dirty(),
        python_version=platform.python_version(),
        platform_info=platform.platform(),
        cpu_count=os.cpu_count(),
        montecarlo_version=_get_version(),
        plan_path=str(plan_path) if plan_path else None,
        plan_hash=_hash_file(plan_path) if plan_path else None,
        settings=settings,
        duration_seconds=duration_seconds,
        dependencies=_get_dependency_versions(),
    )


def _get_git_commit() -> str | None:
    """Get current git HEAD SHA, or None if not in a repo."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return None


def _is_git_dirty() -> bool:
    """Check if working tree has uncommitted changes."""
    try:
        result = subprocess.run(
            ["git", "status", "--porcelain"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
        if result.returncode == 0:
            return bool(result.stdout.strip())
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return False


def _get_version() -> str:
    from montecarlo import __version__

    return __version__


def _hash_file(path: str) -> str:
    """SHA256 of file contents, or "file_not_found"."""
    try:
        return hashlib.sha256(Path(path).read_bytes()).hexdigest()
    except (FileNotFoundError, OSError):
        return "file_not_found"


def _get_dependency_versions() -> dict:
    """Versions of the libraries that shape the run."""
    deps = {}
    for pkg in ["pydantic", "pydantic-settings", "PyYAML", "rich"]:
        try:
            deps[pkg] = metadata.version(pkg)
        except metadata.PackageNotFoundError:
            deps[pkg] = "not_installed"
    return deps
