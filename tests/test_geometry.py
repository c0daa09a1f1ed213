import math
import statistics

import pytest

from cmania.geometry import Vector, variance


def test_length_of_3_4_triangle():
    v = Vector(3, 4)
    assert v.length() == 5.0
    assert v.squared_length() == 25


def test_arithmetic():
    a, b = Vector(1, 2), Vector(3, 5)
    assert a + b == Vector(4, 7)
    assert b - a == Vector(2, 3)
    assert a * 2 == Vector(2, 4)
    assert 2 * a == Vector(2, 4)
    assert b / 2 == Vector(1.5, 2.5)


def test_dot_and_cross():
    a, b = Vector(1, 0), Vector(0, 1)
    assert a.dot(b) == 0
    assert a.cross(b) == 1
    assert b.cross(a) == -1


def test_normalized_has_unit_length():
    v = Vector(7, -2).normalized()
    assert v.length() == pytest.approx(1.0)


def test_normalizing_zero_vector_raises():
    with pytest.raises(ValueError):
        Vector().normalized()


def test_rotation_quarter_turn():
    v = Vector(1, 0).rotated(math.pi / 2)
    assert v.x == pytest.approx(0.0, abs=1e-12)
    assert v.y == pytest.approx(1.0)


def test_rotation_preserves_length():
    v = Vector(3, 4)
    assert v.rotated(1.234).length() == pytest.approx(v.length())


def test_ordering_uses_length():
    assert Vector(1, 0) < Vector(0, 2)
    assert Vector(0, 3) >= Vector(3, 0)
    assert Vector(0, 3) != Vector(3, 0)


def test_variance_small_inputs():
    assert variance(0, []) == 0
    assert variance(5, [5]) == 0


def test_variance_matches_statistics():
    values = [1.0, 2.0, 4.0, 7.0]
    mean = statistics.mean(values)
    assert variance(mean, values) == pytest.approx(statistics.variance(values))