"""Enumerations, timing windows and constants of the osu! formats and rules."""

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag
from typing import Dict

from .gamebuffer import Color


class HitResult(IntEnum):
    NONE = 0
    MISS = 1
    MEH = 2
    OK = 3
    GOOD = 4
    GREAT = 5
    PERFECT = 6
    SMALL_TICK_MISS = 7
    SMALL_TICK_HIT = 8
    LARGE_TICK_MISS = 9
    LARGE_TICK_HIT = 10
    SMALL_BONUS = 11
    LARGE_BONUS = 12
    IGNORE_MISS = 13
    IGNORE_HIT = 14


class PathType(Enum):
    NONE = ""
    CATMULL = "C"
    BEZIER = "B"
    LINEAR = "L"
    PERFECT_CURVE = "P"


class HitSoundType(IntFlag):
    NONE = 0
    NORMAL = 1
    WHISTLE = 2
    FINISH = 4
    CLAP = 8
    SLIDE = 16
    SLIDE_TICK = 32
    SLIDE_WHISTLE = 64


class HitObjectType(IntFlag):
    CIRCLE = 1
    SLIDER = 1 << 1
    NEW_COMBO = 1 << 2
    SPINNER = 1 << 3
    COMBO_OFFSET = (1 << 4) | (1 << 5) | (1 << 6)
    HOLD = 1 << 7


class SampleBank(IntEnum):
    NONE = 0
    NORMAL = 1
    SOFT = 2
    DRUM = 3


class GameMode(IntEnum):
    STD = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3


class EffectFlags(IntFlag):
    NONE = 0
    KIAI = 1
    OMIT_FIRST_BAR_LINE = 8


@dataclass(frozen=True)
class HitRange:
    """Timing window of a hit result at difficulty 0, 5 and 10."""

    result: HitResult
    minimum: float
    average: float
    maximum: float


OBJECT_RADIUS = 64.0
BASE_SCORING_DISTANCE = 100.0
PREEMPT_MIN = 450.0
DEFAULT_DIFFICULTY = 5.0
FADE_OUT_DURATION = 200.0
FADE_OUT_SCALE = 1.5

_SCALE_FACTOR = struct.unpack("f", struct.pack("f", 0.7))[0]

BASE_HIT_RANGES = (
    HitRange(HitResult.PERFECT, 22.4, 19.4, 13.9),
    HitRange(HitResult.GREAT, 64, 49, 34),
    HitRange(HitResult.GOOD, 97, 82, 67),
    HitRange(HitResult.OK, 127, 112, 97),
    HitRange(HitResult.MEH, 151, 136, 121),
    HitRange(HitResult.MISS, 188, 173, 158),
)


def difficulty_range(difficulty: float, minimum: float, mid: float, maximum: float) -> float:
    """Interpolate a value for a 0-10 difficulty between its 0, 5 and 10 points."""
    if difficulty > 5:
        return mid + (maximum - mid) * (difficulty - 5) / 5
    if difficulty < 5:
        return mid - (mid - minimum) * (5 - difficulty) / 5
    return mid


def hit_ranges(od: float) -> Dict[HitResult, float]:
    """Timing window in milliseconds for each hit result at an overall difficulty."""
    ranges = {r.result: difficulty_range(od, r.minimum, r.average, r.maximum) for r in BASE_HIT_RANGES}
    return dict(sorted(ranges.items()))


def difficulty_fade_in(preempt: float) -> float:
    return 400 * min(1.0, preempt / PREEMPT_MIN)


def difficulty_preempt(ar: float) -> float:
    return difficulty_range(ar, 1800, 1200, PREEMPT_MIN)


def difficulty_scale(cs: float) -> float:
    return (1.0 - _SCALE_FACTOR * (cs - 5) / 5) / 2


def calc_column(xpos: float, keys: int) -> int:
    """Column of a mania object from its x position on the 512-wide playfield."""
    if keys == 0:
        raise ValueError("keys must be non-zero")
    begin = float(int(int(512 / keys) / 2))
    mid = begin
    for column in range(keys):
        if abs(mid - xpos - 1) < begin:
            return column
        mid += begin * 2
    return 0


_NAMES = {
    HitResult.MISS: "Miss",
    HitResult.MEH: "Meh",
    HitResult.OK: "Ok",
    HitResult.GOOD: "Good",
    HitResult.GREAT: "Great",
    HitResult.PERFECT: "Perf",
}

_RULESETS = {0: "Std", 1: "Taiko", 3: "Mania"}

_COLORS = {
    HitResult.MISS: Color(255, 255, 0, 0),
    HitResult.MEH: Color(255, 255, 132, 0),
    HitResult.OK: Color(255, 255, 192, 56),
    HitResult.GOOD: Color(255, 255, 255, 114),
    HitResult.GREAT: Color(255, 0, 192, 255),
    HitResult.PERFECT: Color(255, 147, 228, 255),
}

_SCORES = {
    HitResult.MISS: 0,
    HitResult.MEH: 50,
    HitResult.OK: 100,
    HitResult.GOOD: 200,
    HitResult.GREAT: 300,
    HitResult.PERFECT: 320,
}


def hit_result_name(result: HitResult) -> str:
    return _NAMES.get(result, "Unknown")


def ruleset_name(mode_id: int) -> str:
    return _RULESETS.get(mode_id, "Unknown")


def hit_result_color(result: HitResult) -> Color:
    return _COLORS.get(result, Color(255, 255, 255, 255))


def base_score(result: HitResult) -> int:
    return _SCORES.get(result, 0)