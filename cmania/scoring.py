"""Score processors: combo, accuracy, rating and score from hit results."""

import math
from abc import ABC, abstractmethod
from typing import Dict, List

from .geometry import variance
from .mods import OsuMods, mod_scale
from .objects import ManiaObject
from .osustatic import HitResult, base_score, hit_ranges
from .record import Record


def _ratio(a: float, b: float) -> float:
    if b:
        return a / b
    return math.nan if a == 0 else math.inf


class ScoreProcessor(ABC):
    """Running totals of a play."""

    def __init__(self) -> None:
        self.combo = 0
        self.max_combo = 0
        self.beatmap_max_combo = 0
        self.applied_hit = 0
        self.rating = 0.0
        self.mean = 0.0
        self.error = 0.0
        self.raw_error = 0.0
        self.errors: List[float] = []
        self.result_counter: Dict[HitResult, int] = {}
        self.raw_accuracy = 0
        self.accuracy = 0.0
        self.raw_score = 0
        self.score = 0.0

    @abstractmethod
    def set_difficulty(self, od: float) -> None: ...

    @abstractmethod
    def set_mods(self, mods: OsuMods) -> None: ...

    @abstractmethod
    def health_increase_for(self, result: HitResult) -> float: ...

    @abstractmethod
    def save_record(self, record: Record) -> None: ...

    @abstractmethod
    def apply_beatmap(self, ref_rating: float) -> None: ...

    @abstractmethod
    def apply_hit(self, obj, err: float) -> HitResult: ...


class ManiaScoreProcessor(ScoreProcessor):
    """Scoring rules for mania notes and hold notes."""

    def __init__(self) -> None:
        super().__init__()
        self.wt_mode = False
        self.reference_rating = 1.0
        self.pp_multiplier = 1.0
        self.score_multiplier = 1.0
        for result in (HitResult.PERFECT, HitResult.GREAT, HitResult.GOOD,
                       HitResult.OK, HitResult.MEH, HitResult.MISS):
            self.result_counter[result] = 0
        self.hit_ranges = hit_ranges(0)

    def apply_beatmap(self, ref_rating: float) -> None:
        self.reference_rating = ref_rating ** 3

    def set_mods(self, mods: OsuMods) -> None:
        self.score_multiplier = mod_scale(mods)
        without_rate = int(mods) & ~int(OsuMods.HALF_TIME) & ~int(OsuMods.NIGHTCORE)
        self.pp_multiplier = mod_scale(without_rate)

    def set_wt_mode(self, enable: bool) -> None:
        self.wt_mode = enable

    def set_difficulty(self, od: float) -> None:
        self.hit_ranges = hit_ranges(od)

    def _judge(self, err: float) -> HitResult:
        if math.isnan(err):
            return HitResult.MISS
        result = HitResult.NONE
        for candidate in sorted(self.result_counter):
            if abs(err) < self.hit_ranges.get(candidate, 0.0):
                result = candidate
        return result

    def apply_hit(self, obj: ManiaObject, err: float) -> HitResult:
        """Judge a hit err milliseconds off (NaN for a miss) and update the totals."""
        is_hold = obj.end_time != 0 and not self.wt_mode
        if obj.has_hit and not is_hold:
            return HitResult.NONE
        result = self._judge(err)
        if result <= HitResult.NONE:
            return result
        if obj.has_hit and result != HitResult.MISS:
            obj.has_hold = True
        if is_hold and result == HitResult.MISS:
            obj.hold_broken = True
        obj.has_hit = True

        self.combo += 1
        if result == HitResult.MISS:
            self.combo = 0
        self.max_combo = max(self.combo, self.max_combo)

        great = base_score(HitResult.GREAT)
        self.raw_accuracy += min(base_score(result), great)
        self.applied_hit += 1
        self.accuracy = self.raw_accuracy / self.applied_hit / great

        combo_ratio = _ratio(self.max_combo, self.beatmap_max_combo)
        self.rating = (
            self.reference_rating
            * combo_ratio ** 0.3
            * self.accuracy ** 1.3
            * self.pp_multiplier ** 1.2
            * 0.95 ** self.result_counter.get(HitResult.MISS, 0)
            * (0.75 if self.wt_mode else 1.0)
        )

        self.raw_score += base_score(result)

        if result != HitResult.MISS:
            self.raw_error += err
            self.errors.append(err)
            self.mean = self.raw_error / len(self.errors)
            self.error = variance(self.mean, self.errors)

        score_ratio = _ratio(self.raw_score, self.beatmap_max_combo) / base_score(HitResult.PERFECT)
        self.score = (score_ratio * 0.7 + combo_ratio * 0.3) * self.score_multiplier

        self.result_counter[result] = self.result_counter.get(result, 0) + 1
        return result

    def health_increase_for(self, result: HitResult) -> float:
        return 0.0

    def save_record(self, record: Record) -> None:
        """Copy the final figures into a record."""
        record.rating = self.rating
        record.mean = self.mean
        record.error = self.error
        record.score = self.score
        record.accuracy = self.accuracy
        record.result_counter = dict(self.result_counter)
        record.max_combo = self.max_combo
        record.beatmap_max_combo = self.beatmap_max_combo