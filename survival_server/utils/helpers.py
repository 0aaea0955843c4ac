# survival_server/utils/helpers.py
"""Utility functions and helpers."""

import math
from typing import Optional, Tuple

from survival_server.config.settings import WORLD_HEIGHT, WORLD_WIDTH


def calculate_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Calculate distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def is_collision(
    x1: float, y1: float, r1: float, x2: float, y2: float, r2: float
) -> bool:
    """Check if two circles are colliding."""
    return calculate_distance(x1, y1, x2, y2) < (r1 + r2)


def unit_vector(dx: float, dy: float) -> Optional[Tuple[float, float]]:
    """Normalize (dx, dy). Returns None for a zero-length or non-finite vector."""
    length = math.hypot(dx, dy)
    if length == 0 or not math.isfinite(length):
        return None
    return dx / length, dy / length


def point_segment_distance(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float
) -> Tuple[float, float]:
    """Distance from (px, py) to the line through the segment, and the projection parameter.

    The parameter ``t`` is 0 at (x1, y1) and 1 at (x2, y2); the closest point
    lies on the segment itself only when 0 <= t <= 1. A degenerate segment
    reports the distance to its single point with t = 0.
    """
    dx = x2 - x1
    dy = y2 - y1
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return calculate_distance(px, py, x1, y1), 0.0
    t = ((px - x1) * dx + (py - y1) * dy) / length_sq
    closest_x = x1 + t * dx
    closest_y = y1 + t * dy
    return calculate_distance(px, py, closest_x, closest_y), t


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_to_world(x: float, y: float, margin: float) -> tuple:
    """Clamp position to world boundaries, keeping ``margin`` from every edge."""
    return (
        clamp(x, margin, WORLD_WIDTH - margin),
        clamp(y, margin, WORLD_HEIGHT - margin),
    )


def in_world(x: float, y: float) -> bool:
    """Check whether a point lies inside the world rectangle (edges included)."""
    return 0 <= x <= WORLD_WIDTH and 0 <= y <= WORLD_HEIGHT


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b by factor t."""
    return a + (b - a) * t
