"""
Vector Geometry
================
2D vector helpers on plain (x, y) tuples.

Everything here is pure. Zero-length vectors are an expected case and
never raise; they normalize to (0, 0) so callers hold their heading.
"""

import math
from typing import Tuple

Vec2 = Tuple[float, float]

ZERO: Vec2 = (0.0, 0.0)


def add(a: Vec2, b: Vec2) -> Vec2:
    return a[0] + b[0], a[1] + b[1]


def sub(a: Vec2, b: Vec2) -> Vec2:
    return a[0] - b[0], a[1] - b[1]


def scale(v: Vec2, factor: float) -> Vec2:
    return v[0] * factor, v[1] * factor


def length(v: Vec2) -> float:
    """Vector magnitude."""
    return math.hypot(v[0], v[1])


def distance_squared(a: Vec2, b: Vec2) -> float:
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    return dx * dx + dy * dy


def distance(a: Vec2, b: Vec2) -> float:
    """Euclidean distance between two points."""
    return math.sqrt(distance_squared(a, b))


def normalize(v: Vec2) -> Vec2:
    """Unit vector in the direction of v, or (0, 0) for a zero vector."""
    mag = length(v)
    if mag > 0:
        return v[0] / mag, v[1] / mag
    return ZERO


def direction_to(from_point: Vec2, to_point: Vec2) -> Vec2:
    """Normalized direction between two points ((0, 0) if they coincide)."""
    return normalize(sub(to_point, from_point))


def move_toward(current: Vec2, target: Vec2, max_delta: float) -> Vec2:
    """
    Move current toward target by at most max_delta.

    Snaps exactly onto target when it is already within max_delta, so
    large steps never overshoot and oscillate around the target.
    """
    if distance_squared(current, target) <= max_delta * max_delta:
        return target

    direction = direction_to(current, target)
    if direction == ZERO:
        return current
    return current[0] + direction[0] * max_delta, current[1] + direction[1] * max_delta


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def toroidal_nearest(origin: Vec2, target: Vec2, width: float, height: float) -> Vec2:
    """
    Return the copy of target nearest to origin on a torus.

    Per axis, when the straight-line delta is more than half the play-area
    extent, the target is shifted by one play-area length toward origin.
    """
    tx, ty = target
    dx = tx - origin[0]
    dy = ty - origin[1]

    if dx > width / 2:
        tx -= width
    elif dx < -width / 2:
        tx += width

    if dy > height / 2:
        ty -= height
    elif dy < -height / 2:
        ty += height

    return tx, ty
