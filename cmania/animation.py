"""Easing functions, value animators and transitions."""

import math
from dataclasses import dataclass, field
from typing import Callable

Easing = Callable[[float], float]
DurationFunc = Callable[[float], float]


def linear(t: float) -> float:
    """Linear easing: progress maps to itself."""
    return float(t)


def cubic(t: float) -> float:
    return t * t * t


def power(n: float) -> Easing:
    """Return an easing function t -> t ** n."""

    def ease(t: float) -> float:
        return math.pow(t, n)

    return ease


def ease_out(func: Easing) -> Easing:
    """Return the ease-out form of an easing function."""

    def ease(t: float) -> float:
        return 1.0 - func(1.0 - t)

    return ease


def linear_duration(k: float) -> DurationFunc:
    """Duration proportional to the change in value."""
    return lambda x: k * x


def constant_duration(value: float) -> DurationFunc:
    """Duration that does not depend on the change in value."""
    return lambda x: value


def clamped_duration(minimum: float, maximum: float, base: DurationFunc) -> DurationFunc:
    """Duration from base, clamped into [minimum, maximum]."""
    return lambda x: min(max(base(x), minimum), maximum)


@dataclass
class Animator:
    """Animates a number from one value to another over a duration."""

    easing: Easing
    from_value: float
    to_value: float
    duration: float
    offset: float = 0.0
    clockrate: float = 1.0
    start_time: float = field(default=math.nan, init=False)

    def current_value(self, clock: float) -> float:
        """Return the value at clock; a finished animation stops and holds its end value."""
        if clock <= self.start_time:
            return self.from_value
        elapsed = clock - self.start_time
        if math.isnan(elapsed) or self.duration == 0:
            progress = math.nan if math.isnan(elapsed) or elapsed == 0 else math.inf
        else:
            progress = elapsed / self.duration
        if progress > 1 or math.isnan(progress):
            self.start_time = math.nan
            return self.to_value
        return (
            self.easing(progress) * self.clockrate * (self.to_value - self.from_value)
            + self.from_value
        )

    def update(self, clock: float, setter: Callable[[float], object]) -> None:
        """Pass the current value to setter while the animation is running."""
        if clock > self.start_time:
            setter(self.current_value(clock))

    def start(self, clock: float) -> None:
        self.start_time = clock + self.offset

    def reset(self) -> None:
        self.start_time = math.nan


class Transition:
    """A value that eases towards each new target it is given."""

    def __init__(self, easing: Easing, duration: DurationFunc, initial: float = 0.0) -> None:
        self._duration = duration
        self._animator = Animator(easing, initial, initial, 0.0)

    def set_value(self, clock: float, value: float) -> None:
        animator = self._animator
        if animator.to_value != value:
            animator.from_value = animator.current_value(clock)
            animator.to_value = value
            animator.duration = self._duration(animator.to_value - animator.from_value)
            animator.start(clock)

    def current_value(self, clock: float) -> float:
        return self._animator.current_value(clock)