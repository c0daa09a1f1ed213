"""Two-dimensional vectors and small numeric helpers."""

import math
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Vector:
    """An immutable 2D vector; ordering compares lengths."""

    x: float = 0.0
    y: float = 0.0

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def squared_length(self) -> float:
        return self.x * self.x + self.y * self.y

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Vector":
        return Vector(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Vector":
        return Vector(self.x / divisor, self.y / divisor)

    def dot(self, other: "Vector") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector") -> float:
        return self.x * other.y - self.y * other.x

    def normalized(self) -> "Vector":
        """Return the unit vector in the same direction."""
        length = self.length()
        if length == 0:
            raise ValueError("cannot normalise a zero-length vector")
        return Vector(self.x / length, self.y / length)

    def rotated(self, angle: float) -> "Vector":
        """Return this vector rotated by angle radians."""
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        return Vector(self.x * cos_a - self.y * sin_a, self.x * sin_a + self.y * cos_a)

    def __lt__(self, other: "Vector") -> bool:
        return self.length() < other.length()

    def __gt__(self, other: "Vector") -> bool:
        return self.length() > other.length()

    def __le__(self, other: "Vector") -> bool:
        return self.length() <= other.length()

    def __ge__(self, other: "Vector") -> bool:
        return self.length() >= other.length()


def variance(mean: float, values: Sequence[float]) -> float:
    """Sample variance of values around a given mean; 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return sum((value - mean) ** 2 for value in values) / (len(values) - 1)