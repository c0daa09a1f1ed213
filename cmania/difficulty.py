"""Star rating estimate for mania beatmaps."""

from typing import Sequence

from .objects import ManiaObject


def time_difficulty(t: float) -> float:
    """Strain of a gap of t milliseconds; gaps under half a millisecond count as 0.5."""
    if t > 0.5:
        return 6 / t
    if t < 0:
        return time_difficulty(-t)
    return 6 / 0.5


def _near(a: float, b: float) -> bool:
    return abs(a - b) < 0.1


def calculate_difficulty(objects: Sequence[ManiaObject], mods: int, keys: int) -> float:
    """Estimate the difficulty of a map; maps under 10 objects or with no keys rate 0."""
    if len(objects) < 10 or keys == 0:
        return 0.0
    objs = sorted(objects, key=lambda obj: obj.start_time)
    considered = objs[:-1]
    diffs = []
    for i, ho in enumerate(considered):
        last_judge = ho.end_time if ho.end_time != 0 else ho.start_time
        time_diff = 0.0
        later = considered[i:]
        same_column = next(
            (o.start_time for o in later if o.column == ho.column and o.start_time > last_judge + 1), None
        )
        if same_column is not None:
            time_diff += time_difficulty(same_column - last_judge)
        nearest = next((o.start_time for o in later if o.start_time > last_judge + 1), None)
        if nearest is not None:
            time_diff += time_difficulty(nearest - last_judge)
        nearest_time = -1.0 if nearest is None else nearest
        multi = 1.0
        for j, other in enumerate(considered):
            if j == i:
                continue
            if (
                _near(other.start_time, ho.start_time)
                or (other.end_time != 0 and _near(other.end_time, ho.start_time))
                or (
                    other.end_time != 0
                    and ho.end_time != 0
                    and (_near(other.end_time, ho.end_time) or _near(other.start_time, ho.end_time))
                )
            ):
                multi *= 1.06
            if other.end_time != 0 and other.start_time <= ho.start_time <= other.end_time:
                multi *= 1.06
            if _near(nearest_time, other.start_time):
                multi *= 1 + (other.column - ho.column) ** 2 * 0.04
        diffs.append(time_diff * multi)
    diffs.sort()
    count = len(diffs)
    top_count = count // 5
    top = sum(diffs[count - top_count:])
    average = sum(max(0.003, d) for d in diffs) / count * 0.6
    return (average + top / top_count) * 20