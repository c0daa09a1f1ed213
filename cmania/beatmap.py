"""Reading the osu! beatmap text format."""

import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .osustatic import EffectFlags, GameMode, HitObjectType, HitSoundType, SampleBank

_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _stod(text: str) -> float:
    """Parse the leading floating point number of text."""
    match = _FLOAT_RE.match(text)
    if not match:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def _stoi(text: str) -> int:
    """Parse the leading integer of text."""
    match = _INT_RE.match(text)
    if not match:
        raise ValueError(f"not an integer: {text!r}")
    return int(match.group(1))


def _float_or_zero(text: str) -> float:
    try:
        return _stod(text)
    except ValueError:
        return 0.0


def _int_or_zero(text: str) -> int:
    try:
        return _stoi(text)
    except ValueError:
        return 0


def _enum_or_int(enum_type, value: int):
    try:
        return enum_type(value)
    except ValueError:
        return value


@dataclass
class TimingPoint:
    """A timing or inherited point of the [TimingPoints] section."""

    time: float = 0.0
    beat_length: float = 100.0
    time_signature: int = 4
    sample_bank: SampleBank = SampleBank.NORMAL
    sample_set: int = 0
    sample_volume: float = 0.0
    timing_change: bool = False
    effects: EffectFlags = EffectFlags.NONE

    def bpm(self) -> float:
        return 60000 / self.beat_length

    def speed_multiplier(self) -> float:
        return 100.0 / -self.beat_length if self.beat_length < 0 else 1.0


@dataclass
class BeatmapHitObject:
    """A hit object exactly as written in the [HitObjects] section."""

    x: float = 0.0
    y: float = 0.0
    start_time: float = 0.0
    type: HitObjectType = HitObjectType(0)
    sound_type: HitSoundType = HitSoundType.NONE
    path_record: str = ""
    repeat_count: int = 0
    length: float = math.nan
    end_time: float = 0.0
    custom_sample_volume: float = 0.0
    custom_sample_filename: str = ""
    custom_sample_banks: str = ""

    def object_type(self) -> HitObjectType:
        """The type bits without the combo information."""
        mask = HitObjectType.CIRCLE | HitObjectType.SLIDER | HitObjectType.SPINNER | HitObjectType.HOLD
        return HitObjectType(int(self.type) & int(mask))

    def resolve_custom_sample_banks(self) -> None:
        """Fill the custom sample volume and file name from the sample bank field."""
        args = self.custom_sample_banks.split(":")
        if len(args) > 4:
            self.custom_sample_volume = _stod(args[3])
            if self.custom_sample_volume != 0:
                self.custom_sample_filename = args[4]


@dataclass
class StoryboardSoundSample:
    start_time: float = 0.0
    path: str = ""


@dataclass
class OsuBeatmap:
    """The parts of a beatmap file the game uses."""

    break_periods: List[Tuple[float, float]] = field(default_factory=list)
    timing_points: List[TimingPoint] = field(default_factory=list)
    hit_objects: List[BeatmapHitObject] = field(default_factory=list)
    title: str = ""
    artist: str = ""
    title_unicode: str = ""
    artist_unicode: str = ""
    audio_filename: str = ""
    version: str = ""
    creator: str = ""
    background: str = ""
    video: str = ""
    video_offset: int = 0
    source: str = ""
    tags: str = ""
    preview_time: int = 0
    sample_set: str = ""
    stack_leniency: float = 0.7
    countdown: int = 0
    mode: GameMode = GameMode.STD
    hp_drain_rate: float = 0.0
    circle_size: float = 0.0
    overall_difficulty: float = 0.0
    approach_rate: float = 0.0
    slider_multiplier: float = 0.0
    slider_tick_rate: float = 0.0
    storyboard_samples: List[StoryboardSoundSample] = field(default_factory=list)
    others: List[Tuple[str, str, str]] = field(default_factory=list)


_STRING_KEYS = {
    "AudioFilename": "audio_filename",
    "SampleSet": "sample_set",
    "Tags": "tags",
    "Source": "source",
    "TitleUnicode": "title_unicode",
    "ArtistUnicode": "artist_unicode",
    "Title": "title",
    "Artist": "artist",
    "Creator": "creator",
    "Version": "version",
}
_INT_KEYS = {"PreviewTime": "preview_time", "Countdown": "countdown"}
_FLOAT_KEYS = {
    "StackLeniency": "stack_leniency",
    "HPDrainRate": "hp_drain_rate",
    "CircleSize": "circle_size",
    "OverallDifficulty": "overall_difficulty",
    "ApproachRate": "approach_rate",
    "SliderMultiplier": "slider_multiplier",
    "SliderTickRate": "slider_tick_rate",
}


def _parse_event(bm: OsuBeatmap, line: str) -> None:
    if line[0] == "2":
        args = line.split(",")
        bm.break_periods.append((_stod(args[1]), _stod(args[2])))
    if line[0] == "0":
        args = line.split(",")
        bm.background = args[2].strip('"')
    if line.startswith("Video"):
        args = line.split(",")
        bm.video = args[2].strip('"')
        bm.video_offset = _stoi(args[1])


def _parse_timing_point(line: str) -> TimingPoint:
    args = line.split(",")
    tp = TimingPoint(time=_stod(args[0]), beat_length=_stod(args[1]))
    if len(args) > 2:
        tp.time_signature = _stoi(args[2])
    if len(args) > 3:
        tp.sample_bank = _enum_or_int(SampleBank, _stoi(args[3]))
    if len(args) > 4:
        tp.sample_set = _stoi(args[4])
    if len(args) > 5:
        tp.sample_volume = _stod(args[5])
    if len(args) > 6:
        tp.timing_change = _stoi(args[6]) != 0
    if len(args) > 7:
        tp.effects = EffectFlags(_stoi(args[7]))
    return tp


def _parse_hit_object(bm: OsuBeatmap, line: str) -> None:
    args = line.split(",")
    ho = BeatmapHitObject(
        x=_stod(args[0]),
        y=_stod(args[1]),
        start_time=_stod(args[2]),
        type=HitObjectType(_stoi(args[3])),
        sound_type=HitSoundType(_stoi(args[4])),
    )
    kind = ho.object_type()
    if kind == HitObjectType.CIRCLE:
        if len(args) > 5:
            ho.custom_sample_banks = args[5]
            ho.resolve_custom_sample_banks()
        bm.hit_objects.append(ho)
    elif kind == HitObjectType.SLIDER:
        ho.path_record = args[5]
        ho.repeat_count = _stoi(args[6])
        ho.length = _stod(args[7])
        if len(args) > 10:
            ho.custom_sample_banks = args[10]
            ho.resolve_custom_sample_banks()
        bm.hit_objects.append(ho)
    elif kind == HitObjectType.HOLD:
        end, colon, banks = args[5].partition(":")
        if colon:
            ho.custom_sample_banks = banks
            ho.end_time = _stod(end)
            ho.resolve_custom_sample_banks()
            bm.hit_objects.append(ho)
    elif kind == HitObjectType.SPINNER:
        ho.end_time = _stod(args[5])
        if len(args) > 6:
            ho.custom_sample_banks = args[6]
            ho.resolve_custom_sample_banks()
        bm.hit_objects.append(ho)


def _parse_property(bm: OsuBeatmap, category: str, line: str) -> None:
    key, colon, value = line.partition(":")
    if not colon:
        return
    key = key.strip()
    value = value.strip()
    if key in _STRING_KEYS:
        setattr(bm, _STRING_KEYS[key], value)
    elif key in _INT_KEYS:
        setattr(bm, _INT_KEYS[key], _int_or_zero(value))
    elif key in _FLOAT_KEYS:
        setattr(bm, _FLOAT_KEYS[key], _float_or_zero(value))
    elif key == "Mode":
        bm.mode = _enum_or_int(GameMode, _int_or_zero(value))
    else:
        bm.others.append((category, key, value))


def parse_beatmap(lines: Union[str, Iterable[str]]) -> OsuBeatmap:
    """Parse beatmap text; a malformed line ends parsing and what was read is kept."""
    if isinstance(lines, str):
        lines = lines.splitlines()
    bm = OsuBeatmap()
    category = ""
    try:
        for raw in lines:
            line = raw.rstrip("\r\n")
            if not line:
                continue
            if line[0] == "[" and line[-1] == "]":
                category = line[1:-1]
                continue
            if line.startswith("//"):
                continue
            if category == "Events":
                _parse_event(bm, line)
            elif category == "TimingPoints":
                bm.timing_points.append(_parse_timing_point(line))
            elif category == "HitObjects":
                _parse_hit_object(bm, line)
            else:
                _parse_property(bm, category, line)
    except (ValueError, IndexError):
        pass
    return bm


def load_beatmap(path: Union[str, Path]) -> OsuBeatmap:
    """Read and parse a beatmap file."""
    with open(path, encoding="utf-8-sig", errors="replace") as handle:
        return parse_beatmap(handle)