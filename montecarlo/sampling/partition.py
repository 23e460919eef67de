"""Splitting a sample count into per-task chunks."""

from __future__ import annotations

from montecarlo.errors import InvalidConfigurationError


def partition_samples(total_samples: int, task_count: int) -> list[int]:
    """Split ``total_samples`` into ``task_count`` chunk sizes.

    Every chunk gets ``total_samples // task_count``; the last chunk also
    absorbs the remainder. When there are more tasks than samples the
    leading chunks are empty.

    Raises:
        InvalidConfigurationError: If task_count < 1 or total_samples < 0
    """
    if task_count < 1:
        raise InvalidConfigurationError(f"task_count must be >= 1, got {task_count}")
    if total_samples < 0:
        raise InvalidConfigurationError(f"total_samples must be >= 0, got {total_samples}")

    per_task, remainder = divmod(total_samples, task_count)
    chunks = [per_task] * task_count
    chunks[-1] += remainder
    return chunks
