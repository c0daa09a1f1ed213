"""Indexing hit sound sample files and choosing samples and timing points."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .beatmap import OsuBeatmap, TimingPoint
from .osustatic import HitSoundType, SampleBank

_EXTENSIONS = (".wav", ".ogg", ".mp3")

_BANKS = {"normal": SampleBank.NORMAL, "soft": SampleBank.SOFT, "drum": SampleBank.DRUM}

_SOUND_PREFIXES = (
    ("hitclap", HitSoundType.CLAP),
    ("hitfinish", HitSoundType.FINISH),
    ("hitnormal", HitSoundType.NORMAL),
    ("hitwhistle", HitSoundType.WHISTLE),
    ("sliderslide", HitSoundType.SLIDE),
    ("sliderwhistle", HitSoundType.SLIDE_WHISTLE),
    ("slidertick", HitSoundType.SLIDE_TICK),
)


@dataclass(frozen=True)
class AudioSampleMetadata:
    """What a sample file name says about the sample."""

    sample_bank: SampleBank
    hit_sound_type: HitSoundType
    filename: Path
    sampleset: int


def parse_sample_filename(path: Union[str, Path], default_sampleset: int) -> Optional[AudioSampleMetadata]:
    """Describe a file named like 'soft-hitclap2.wav'; None if it is not a sample file."""
    path = Path(path)
    name = path.name
    if not name.endswith(_EXTENSIONS):
        return None
    dash = name.find("-")
    if dash < 0:
        return None
    bank = _BANKS.get(name[:dash], SampleBank.NONE)
    rest = name[dash + 1:]
    sound = next((kind for prefix, kind in _SOUND_PREFIXES if rest.startswith(prefix)), HitSoundType.NONE)
    sampleset = default_sampleset
    digits = next((i for i in range(dash, len(name)) if name[i].isdigit()), None)
    if digits is not None:
        end = digits
        while end < len(name) and name[end].isdigit():
            end += 1
        sampleset = int(name[digits:end])
    return AudioSampleMetadata(bank, sound, path, sampleset)


def build_sample_index(folder: Union[str, Path], default_sampleset: int) -> List[AudioSampleMetadata]:
    """Index the sample files directly inside folder; a missing folder gives an empty index."""
    folder = Path(folder)
    if not folder.exists():
        return []
    index = []
    for entry in sorted(folder.iterdir()):
        if entry.is_dir():
            continue
        metadata = parse_sample_filename(entry, default_sampleset)
        if metadata is not None:
            index.append(metadata)
    return index


def get_samples(
    metadata: Sequence[AudioSampleMetadata], bank: SampleBank, hit_sound: HitSoundType, sampleset: int
) -> List[Path]:
    """Files of the bank and sample set whose sound type is contained in hit_sound."""
    wanted = int(hit_sound)
    return [
        sample.filename
        for sample in metadata
        if sample.sample_bank == bank
        and (wanted & int(sample.hit_sound_type)) == int(sample.hit_sound_type)
        and sample.sampleset == sampleset
    ]


def get_samples_layered(
    primary: Sequence[AudioSampleMetadata],
    fallback: Sequence[AudioSampleMetadata],
    bank: SampleBank,
    hit_sound: HitSoundType,
    sampleset: int,
) -> List[Path]:
    """Samples from primary, or from fallback's set 0 when primary has none."""
    samples = get_samples(primary, bank, hit_sound, sampleset)
    if not samples:
        if hit_sound == HitSoundType.NONE:
            hit_sound = HitSoundType.NORMAL
        samples = get_samples(fallback, bank, hit_sound, 0)
    return samples


def _first_timing_point(beatmap: OsuBeatmap, time: float, accept) -> TimingPoint:
    if not beatmap.timing_points:
        raise IndexError("beatmap has no timing points")
    for tp in beatmap.timing_points:
        if time > tp.time and accept(tp):
            return tp
    return beatmap.timing_points[0]


def timing_point_at(beatmap: OsuBeatmap, time: float) -> TimingPoint:
    """The first timing point, in file order, that starts before time."""
    return _first_timing_point(beatmap, time, lambda tp: True)


def timing_point_timing(beatmap: OsuBeatmap, time: float) -> TimingPoint:
    """Like timing_point_at, considering only uninherited points."""
    return _first_timing_point(beatmap, time, lambda tp: tp.timing_change)


def timing_point_non_timing(beatmap: OsuBeatmap, time: float) -> TimingPoint:
    """Like timing_point_at, considering only inherited points."""
    return _first_timing_point(beatmap, time, lambda tp: not tp.timing_change)