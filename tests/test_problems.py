"""Tests for problem kinds: domains, predicates, and scaling."""

from __future__ import annotations

import math
import random

import pytest

from montecarlo.sampling.problems import ProblemKind


class TestParse:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("pi", ProblemKind.CIRCLE_MEMBERSHIP),
            ("circle", ProblemKind.CIRCLE_MEMBERSHIP),
            ("circle_membership", ProblemKind.CIRCLE_MEMBERSHIP),
            ("integral", ProblemKind.CURVE_MEMBERSHIP),
            ("x2", ProblemKind.CURVE_MEMBERSHIP),
            ("  Curve_Membership ", ProblemKind.CURVE_MEMBERSHIP),
        ],
    )
    def test_known_names(self, name, expected):
        assert ProblemKind.parse(name) is expected

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown problem"):
            ProblemKind.parse("sphere")


class TestCircleMembership:
    problem = ProblemKind.CIRCLE_MEMBERSHIP

    def test_reference_value(self):
        assert self.problem.reference_value == math.pi
        assert self.problem.display_name == "Pi Estimation (Circle)"

    def test_boundary_point_counts_as_hit(self):
        assert self.problem.contains(1.0, 0.0)
        assert self.problem.contains(0.0, -1.0)

    def test_outside_point(self):
        assert not self.problem.contains(0.8, 0.8)
        assert not self.problem.contains(-1.0, -1.0)

    def test_scaling(self):
        assert self.problem.estimate_from(785, 1_000) == pytest.approx(3.14)

    def test_draw_stays_in_square(self):
        rng = random.Random(1)
        points = [self.problem.draw(rng) for _ in range(2_000)]

        assert all(-1.0 <= x < 1.0 and -1.0 <= y < 1.0 for x, y in points)
        assert any(x < 0 for x, _ in points)


class TestCurveMembership:
    problem = ProblemKind.CURVE_MEMBERSHIP

    def test_reference_value(self):
        assert self.problem.reference_value == pytest.approx(1 / 3)
        assert self.problem.display_name == "Integration x^2 [0,1]"

    def test_strictly_below_curve(self):
        assert self.problem.contains(0.5, 0.2)
        assert not self.problem.contains(0.5, 0.25)
        assert not self.problem.contains(0.5, 0.3)

    def test_scaling_is_identity(self):
        assert self.problem.estimate_from(333, 1_000) == pytest.approx(0.333)

    def test_draw_stays_in_unit_square(self):
        rng = random.Random(2)
        points = [self.problem.draw(rng) for _ in range(2_000)]

        assert all(0.0 <= x < 1.0 and 0.0 <= y < 1.0 for x, y in points)


class TestCountHits:
    @pytest.mark.parametrize("problem", list(ProblemKind))
    def test_matches_draw_and_contains(self, problem):
        """The fast loop agrees with the per-point path for the same stream."""
        fast = problem.count_hits(5_000, random.Random(42))

        rng = random.Random(42)
        slow = sum(problem.contains(*problem.draw(rng)) for _ in range(5_000))

        assert fast == slow

    def test_zero_samples(self):
        assert ProblemKind.CIRCLE_MEMBERSHIP.count_hits(0, random.Random(0)) == 0

    def test_estimate_from_rejects_zero_samples(self):
        with pytest.raises(ValueError):
            ProblemKind.CIRCLE_MEMBERSHIP.estimate_from(0, 0)
