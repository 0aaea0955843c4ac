"""Tests for the geometry helpers."""
from __future__ import annotations

import pytest

from survival_server.utils.helpers import (
    clamp_to_world,
    in_world,
    is_collision,
    point_segment_distance,
    unit_vector,
)


def test_circle_collision_is_strict() -> None:
    assert is_collision(0, 0, 4, 30, 0, 30)
    assert not is_collision(0, 0, 4, 34, 0, 30)


def test_unit_vector_guards_degenerate_input() -> None:
    assert unit_vector(0, 0) is None
    assert unit_vector(float("inf"), 300) is None
    assert unit_vector(float("nan"), 0) is None
    assert unit_vector(3, 4) == pytest.approx((0.6, 0.8))


def test_point_segment_distance_reports_projection() -> None:
    distance, t = point_segment_distance(50, 10, 0, 0, 100, 0)
    assert distance == pytest.approx(10)
    assert t == pytest.approx(0.5)

    # Behind the origin: perpendicular distance is zero but t is negative
    distance, t = point_segment_distance(-20, 0, 0, 0, 100, 0)
    assert distance == pytest.approx(0)
    assert t < 0


def test_point_segment_distance_degenerate_segment() -> None:
    distance, t = point_segment_distance(3, 4, 0, 0, 0, 0)
    assert distance == pytest.approx(5)
    assert t == 0


def test_clamp_and_bounds() -> None:
    assert clamp_to_world(-50, 900, 20) == (20, 580)
    assert clamp_to_world(400, 300, 20) == (400, 300)
    assert in_world(0, 600)
    assert not in_world(800.1, 300)
