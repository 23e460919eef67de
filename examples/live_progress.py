"""Watching a run sample by sample, and cancelling it.

An interactive front end hooks ``on_sample`` to plot points and holds a
CancellationToken for its Stop button. Here the "front end" is a counter
that stops the run after 50,000 points.

Run with:
    python examples/live_progress.py
"""

from montecarlo import (
    CancellationToken,
    ProblemKind,
    RunCancelledError,
    SampleConfig,
    SequentialKernel,
)


def main():
    token = CancellationToken()
    seen = {"points": 0, "hits": 0}

    def on_sample(x: float, y: float, is_hit: bool) -> None:
        seen["points"] += 1
        seen["hits"] += is_hit
        if seen["points"] % 10_000 == 0:
            running = 4.0 * seen["hits"] / seen["points"]
            print(f"  {seen['points']:>7,} points  pi ≈ {running:.6f}")
        if seen["points"] == 50_000:
            token.cancel()

    kernel = SequentialKernel(
        ProblemKind.CIRCLE_MEMBERSHIP, seed=1, cancel_token=token, on_sample=on_sample
    )

    try:
        kernel.estimate(SampleConfig(total_samples=1_000_000))
    except RunCancelledError as e:
        print(f"Stopped: {e}")
        print(f"Best-effort estimate from {e.samples_drawn:,} points: {e.partial_estimate:.6f}")


if __name__ == "__main__":
    main()
