import pytest

from cmania.geometry import Vector
from cmania.paths import (
    approximate_bezier,
    approximate_catmull,
    bezier_point,
    catmull_point,
)

PTS = [Vector(0, 0), Vector(10, 5), Vector(20, 0)]


def test_bezier_point_at_start():
    assert bezier_point(PTS, 0) == PTS[0]


def test_bezier_two_points_end():
    p = bezier_point([Vector(1, 2), Vector(7, 9)], 1)
    assert p.x == pytest.approx(7)
    assert p.y == pytest.approx(9)


def test_approximate_bezier_samples():
    samples = approximate_bezier(PTS)
    assert len(samples) == 200
    assert samples[0] == PTS[0]


def test_catmull_point_endpoints():
    v1, v2, v3, v4 = Vector(0, 0), Vector(1, 2), Vector(3, 5), Vector(6, 6)
    start = catmull_point(v1, v2, v3, v4, 0)
    end = catmull_point(v1, v2, v3, v4, 1)
    assert (start.x, start.y) == (v2.x, v2.y)
    assert end.x == pytest.approx(v3.x)
    assert end.y == pytest.approx(v3.y)


def test_approximate_catmull_layout():
    samples = approximate_catmull(PTS)
    padding = (len(PTS) - 1) * 100
    assert len(samples) == 2 * padding
    assert all(v == Vector() for v in samples[:padding])
    assert samples[padding] == PTS[0]


def test_approximate_catmull_collinear_stays_on_line():
    line = [Vector(0, 0), Vector(5, 0), Vector(10, 0)]
    assert all(v.y == 0 for v in approximate_catmull(line))


def test_approximate_catmull_single_point():
    assert approximate_catmull([Vector(1, 1)]) == []


def test_approximate_catmull_empty():
    with pytest.raises(ValueError):
        approximate_catmull([])