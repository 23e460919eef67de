"""Cooperative cancellation for estimation runs."""

from __future__ import annotations

import threading
from enum import Enum


class RunStatus(Enum):
    """Lifecycle of a single run."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED)


class CancellationToken:
    """Advisory flag shared between a caller and a running kernel.

    Setting it never interrupts work; kernels poll it between samples
    and between chunk completions.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
