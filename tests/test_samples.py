from pathlib import Path

import pytest

from cmania.beatmap import OsuBeatmap, TimingPoint
from cmania.osustatic import HitSoundType, SampleBank
from cmania.samples import (
    AudioSampleMetadata,
    build_sample_index,
    get_samples,
    get_samples_layered,
    parse_sample_filename,
    timing_point_at,
    timing_point_non_timing,
    timing_point_timing,
)


def test_parse_plain_sample():
    meta = parse_sample_filename("normal-hitnormal.wav", 1)
    assert meta.sample_bank == SampleBank.NORMAL
    assert meta.hit_sound_type == HitSoundType.NORMAL
    assert meta.sampleset == 1
    assert meta.filename == Path("normal-hitnormal.wav")


def test_parse_sampleset_and_kinds():
    meta = parse_sample_filename("soft-hitclap2.wav", 0)
    assert meta.sample_bank == SampleBank.SOFT
    assert meta.hit_sound_type == HitSoundType.CLAP
    assert meta.sampleset == 2
    slide = parse_sample_filename("drum-sliderslide.ogg", 0)
    assert slide.hit_sound_type == HitSoundType.SLIDE
    assert slide.sample_bank == SampleBank.DRUM


def test_parse_rejects_non_samples():
    assert parse_sample_filename("readme.txt", 0) is None
    assert parse_sample_filename("nodash.wav", 0) is None
    assert parse_sample_filename("other-thing.wav", 0).sample_bank == SampleBank.NONE


def test_build_index(tmp_path):
    (tmp_path / "normal-hitnormal.wav").write_bytes(b"")
    (tmp_path / "soft-hitwhistle.ogg").write_bytes(b"")
    (tmp_path / "notes.txt").write_bytes(b"")
    (tmp_path / "normal-dir.wav").mkdir()
    index = build_sample_index(tmp_path, 0)
    assert sorted(m.filename.name for m in index) == ["normal-hitnormal.wav", "soft-hitwhistle.ogg"]
    assert build_sample_index(tmp_path / "missing", 0) == []


def _meta(bank, kind, name, sampleset):
    return AudioSampleMetadata(bank, kind, Path(name), sampleset)


def test_get_samples_matches_contained_flags():
    index = [
        _meta(SampleBank.NORMAL, HitSoundType.NORMAL, "n.wav", 1),
        _meta(SampleBank.NORMAL, HitSoundType.CLAP, "c.wav", 1),
        _meta(SampleBank.SOFT, HitSoundType.NORMAL, "s.wav", 1),
        _meta(SampleBank.NORMAL, HitSoundType.NORMAL, "n2.wav", 2),
    ]
    wanted = HitSoundType.NORMAL | HitSoundType.CLAP
    assert get_samples(index, SampleBank.NORMAL, wanted, 1) == [Path("n.wav"), Path("c.wav")]
    assert get_samples(index, SampleBank.NORMAL, HitSoundType.WHISTLE, 1) == []


def test_layered_falls_back_with_normal_sound():
    primary = [_meta(SampleBank.NORMAL, HitSoundType.CLAP, "p.wav", 1)]
    fallback = [
        _meta(SampleBank.NORMAL, HitSoundType.NORMAL, "f.wav", 0),
        _meta(SampleBank.NORMAL, HitSoundType.NORMAL, "f1.wav", 1),
    ]
    assert get_samples_layered(primary, fallback, SampleBank.NORMAL, HitSoundType.CLAP, 1) == [Path("p.wav")]
    assert get_samples_layered(primary, fallback, SampleBank.NORMAL, HitSoundType.NONE, 1) == [Path("f.wav")]


def test_timing_point_lookup():
    first = TimingPoint(time=0, timing_change=True)
    second = TimingPoint(time=1000, timing_change=False)
    bm = OsuBeatmap(timing_points=[first, second])
    assert timing_point_at(bm, 500) is first
    assert timing_point_at(bm, -5) is first
    assert timing_point_non_timing(bm, 2000) is second
    assert timing_point_timing(bm, 2000) is first


def test_timing_point_requires_points():
    with pytest.raises(IndexError):
        timing_point_at(OsuBeatmap(), 0)