"""Curve approximation for slider paths."""

import math
import struct
from typing import List, Sequence

from .geometry import Vector

_BEZIER_SEGMENTS = 200
_CATMULL_DETAIL = 50


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def bezier_point(control_points: Sequence[Vector], t: float) -> Vector:
    """Weighted point of the control polygon at parameter t."""
    n = len(control_points) - 1
    x = y = 0.0
    for i, point in enumerate(control_points):
        coeff = math.pow(1 - t, n - i) * math.pow(t, i)
        x += coeff * point.x
        y += coeff * point.y
    return Vector(x, y)


def approximate_bezier(control_points: Sequence[Vector]) -> List[Vector]:
    """Sample the curve at 200 evenly spaced parameters in [0, 1)."""
    step = 1.0 / _BEZIER_SEGMENTS
    return [bezier_point(control_points, i * step) for i in range(_BEZIER_SEGMENTS)]


def catmull_point(v1: Vector, v2: Vector, v3: Vector, v4: Vector, t: float) -> Vector:
    """Catmull-Rom point between v2 and v3 at parameter t."""
    t = _f32(t)
    t2 = _f32(t * t)
    t3 = _f32(t * t2)

    def axis(a: float, b: float, c: float, d: float) -> float:
        return 0.5 * (
            2.0 * b
            + (-a + c) * t
            + (2.0 * a - 5.0 * b + 4.0 * c - d) * t2
            + (-a + 3.0 * b - 3.0 * c + d) * t3
        )

    return Vector(axis(v1.x, v2.x, v3.x, v4.x), axis(v1.y, v2.y, v3.y, v4.y))


def approximate_catmull(control_points: Sequence[Vector]) -> List[Vector]:
    """Sample a Catmull-Rom spline; the list starts with one zero vector per sample."""
    if not control_points:
        raise ValueError("at least one control point is required")
    count = len(control_points)
    result = [Vector() for _ in range((count - 1) * _CATMULL_DETAIL * 2)]
    for i in range(count - 1):
        current = control_points[i]
        before = control_points[i - 1] if i > 0 else current
        after = control_points[i + 1]
        if i < count - 2:
            beyond = control_points[i + 2]
        else:
            beyond = Vector(after.x + after.x - current.x, after.y + after.y - current.y)
        for j in range(_CATMULL_DETAIL):
            result.append(catmull_point(before, current, after, beyond, _f32(j / _CATMULL_DETAIL)))
            result.append(catmull_point(before, current, after, beyond, _f32((j + 1) / _CATMULL_DETAIL)))
    return result