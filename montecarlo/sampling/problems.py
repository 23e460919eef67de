"""Problem kinds: what a sample point is tested against.

Each kind carries its sampling domain, membership predicate, the rule
that turns a hit ratio into an estimate, and the analytic reference value.
The reference value is only used to report error.
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


def _inside_unit_circle(x: float, y: float) -> bool:
    return x * x + y * y <= 1.0


def _under_parabola(x: float, y: float) -> bool:
    return y < x * x


@dataclass(frozen=True)
class ProblemDefinition:
    """Plain data describing one estimation problem."""

    display_name: str
    low: float  # both coordinates are drawn from [low, high)
    high: float
    predicate: Callable[[float, float], bool]
    scale: float  # estimate = scale * hits / samples
    reference_value: float


class ProblemKind(Enum):
    """Closed set of supported estimation problems.

    Usage: ProblemKind.CIRCLE_MEMBERSHIP.value  # returns "circle_membership"
    """

    CIRCLE_MEMBERSHIP = "circle_membership"
    CURVE_MEMBERSHIP = "curve_membership"

    @classmethod
    def parse(cls, name: str) -> ProblemKind:
        """Resolve a CLI/YAML name ("pi", "integral", or an enum value)."""
        key = name.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            options = sorted(set(_ALIASES) | {k.value for k in cls})
            raise ValueError(f"Unknown problem '{name}'. Expected one of: {options}") from None

    @property
    def definition(self) -> ProblemDefinition:
        return _DEFINITIONS[self]

    @property
    def display_name(self) -> str:
        return self.definition.display_name

    @property
    def reference_value(self) -> float:
        return self.definition.reference_value

    def draw(self, rng: random.Random) -> tuple[float, float]:
        """Draw one uniform point from this problem's domain."""
        d = self.definition
        width = d.high - d.low
        return d.low + rng.random() * width, d.low + rng.random() * width

    def contains(self, x: float, y: float) -> bool:
        return self.definition.predicate(x, y)

    def estimate_from(self, hits: int, samples: int) -> float:
        """Apply the scaling rule to ``hits / samples``."""
        if samples <= 0:
            raise ValueError("samples must be positive to form an estimate")
        return self.definition.scale * hits / samples

    def count_hits(self, samples: int, rng: random.Random) -> int:
        """Tight sampling loop used by the kernels when no hooks are attached."""
        d = self.definition
        low = d.low
        width = d.high - d.low
        predicate = d.predicate
        draw = rng.random
        hits = 0
        for _ in range(samples):
            if predicate(low + draw() * width, low + draw() * width):
                hits += 1
        return hits


_DEFINITIONS: dict[ProblemKind, ProblemDefinition] = {
    ProblemKind.CIRCLE_MEMBERSHIP: ProblemDefinition(
        display_name="Pi Estimation (Circle)",
        low=-1.0,
        high=1.0,
        predicate=_inside_unit_circle,
        scale=4.0,
        reference_value=math.pi,
    ),
    ProblemKind.CURVE_MEMBERSHIP: ProblemDefinition(
        display_name="Integration x^2 [0,1]",
        low=0.0,
        high=1.0,
        predicate=_under_parabola,
        scale=1.0,
        reference_value=1.0 / 3.0,
    ),
}

_ALIASES: dict[str, ProblemKind] = {
    "pi": ProblemKind.CIRCLE_MEMBERSHIP,
    "circle": ProblemKind.CIRCLE_MEMBERSHIP,
    "integral": ProblemKind.CURVE_MEMBERSHIP,
    "curve": ProblemKind.CURVE_MEMBERSHIP,
    "x2": ProblemKind.CURVE_MEMBERSHIP,
}
