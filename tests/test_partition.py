"""Tests for splitting samples into chunks."""

from __future__ import annotations

import pytest

from montecarlo.errors import InvalidConfigurationError
from montecarlo.sampling.partition import partition_samples


class TestPartitionSamples:
    """Equal division with the remainder on the last chunk."""

    def test_even_split(self):
        assert partition_samples(100, 4) == [25, 25, 25, 25]

    def test_remainder_goes_to_last_chunk(self):
        assert partition_samples(10, 3) == [3, 3, 4]

    def test_single_task_gets_everything(self):
        assert partition_samples(12_345, 1) == [12_345]

    def test_more_tasks_than_samples_leaves_empty_chunks(self):
        assert partition_samples(3, 5) == [0, 0, 0, 0, 3]

    def test_zero_samples(self):
        assert partition_samples(0, 3) == [0, 0, 0]

    @pytest.mark.parametrize(
        "total,tasks",
        [(0, 1), (1, 1), (7, 2), (99, 10), (1_000_000, 8), (1_000_003, 16), (5, 12)],
    )
    def test_chunks_sum_to_total(self, total, tasks):
        chunks = partition_samples(total, tasks)

        assert len(chunks) == tasks
        assert sum(chunks) == total

    @pytest.mark.parametrize("total,tasks", [(7, 2), (99, 10), (1_000_003, 16), (5, 12)])
    def test_only_last_chunk_differs(self, total, tasks):
        chunks = partition_samples(total, tasks)

        assert len(set(chunks[:-1])) <= 1
        assert chunks[-1] - chunks[0] == total % tasks

    def test_rejects_zero_tasks(self):
        with pytest.raises(InvalidConfigurationError):
            partition_samples(10, 0)

    def test_rejects_negative_total(self):
        with pytest.raises(InvalidConfigurationError):
            partition_samples(-1, 2)
