"""Fan-in of per-chunk hit counts.

Workers never share a counter: each returns an immutable ChunkResult and
the calling thread sums them once they complete.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import Future, as_completed, wait
from dataclasses import dataclass

from montecarlo.errors import ExecutionFailureError
from montecarlo.sampling.cancellation import CancellationToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChunkResult:
    """Outcome of one unit of work.

    ``samples`` is the number of points actually drawn, which is less
    than the chunk size when the chunk stopped early on cancellation.
    """

    samples: int
    hits: int
    cancelled: bool = False

    def __add__(self, other: ChunkResult) -> ChunkResult:
        return ChunkResult(
            samples=self.samples + other.samples,
            hits=self.hits + other.hits,
            cancelled=self.cancelled or other.cancelled,
        )


def combine(chunks: Iterable[ChunkResult]) -> ChunkResult:
    """Order-independent sum of chunk results."""
    total = ChunkResult(samples=0, hits=0)
    for chunk in chunks:
        total = total + chunk
    return total


def aggregate_chunks(
    futures: list[Future],
    cancel_token: CancellationToken | None = None,
) -> ChunkResult:
    """Wait for every submitted chunk and sum the results.

    Any failed chunk aborts the aggregation: pending chunks are cancelled
    and the failure is raised as ExecutionFailureError. Cancellation is
    checked after each completion; once honoured, pending chunks are
    cancelled, running ones are drained, and the partial total is
    returned with ``cancelled=True``.

    Raises:
        ExecutionFailureError: If any chunk raised
    """
    collected: list[ChunkResult] = []
    remaining = set(futures)

    for future in as_completed(futures):
        remaining.discard(future)
        collected.append(_chunk_result(future, futures))

        if cancel_token is not None and cancel_token.cancelled and remaining:
            logger.debug(f"Cancellation requested with {len(remaining)} chunks outstanding")
            collected.extend(_drain(remaining, futures))
            total = combine(collected)
            return ChunkResult(total.samples, total.hits, cancelled=True)

    total = combine(collected)
    if cancel_token is not None and cancel_token.cancelled:
        total = ChunkResult(total.samples, total.hits, cancelled=True)
    logger.debug(f"Aggregated {len(collected)} chunks: {total.hits:,}/{total.samples:,} hits")
    return total


def _chunk_result(future: Future, futures: list[Future]) -> ChunkResult:
    try:
        return future.result()
    except Exception as exc:
        for pending in futures:
            pending.cancel()
        logger.error(f"Chunk failed, aborting run: {exc}")
        raise ExecutionFailureError("Error during parallel execution", cause=exc) from exc


def _drain(remaining: set[Future], futures: list[Future]) -> list[ChunkResult]:
    """Cancel pending chunks and collect the ones already running."""
    for future in remaining:
        future.cancel()
    running = [f for f in remaining if not f.cancelled()]
    wait(running)
    return [_chunk_result(f, futures) for f in running]
