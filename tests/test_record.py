import io

import pytest

from cmania.console import InputEvent
from cmania.mods import OsuMods
from cmania.osustatic import HitResult, hit_result_name
from cmania.record import Record


def _sample_record():
    return Record(
        mods=OsuMods.HIDDEN | OsuMods.RANDOM_4K,
        score=0.95,
        accuracy=0.98,
        max_combo=120,
        beatmap_max_combo=150,
        beatmap_hash=7,
        rating=3.5,
        mean=-1.25,
        error=40.0,
        beatmap_title="Title",
        beatmap_version="Hard",
        player_name="プレイヤー",
        health_graph=[1.0, 0.5],
        rating_graph=[0.0, 1.5, 2.5],
        result_counter={HitResult.PERFECT: 100, HitResult.MISS: 2},
        events=[InputEvent(0, 10.5, True, 1, 2), InputEvent(-1, 20.0, False, 3, 4)],
    )


def _round_trip(record):
    buffer = io.BytesIO()
    record.write(buffer)
    buffer.seek(0)
    return Record.read(buffer)


def test_round_trip_keeps_every_field():
    record = _sample_record()
    assert _round_trip(record) == record


def test_empty_record_round_trip():
    assert _round_trip(Record()) == Record()


def test_result_counter_keys_are_hit_results():
    restored = _round_trip(_sample_record())
    assert restored.result_counter == {HitResult.PERFECT: 100, HitResult.MISS: 2}
    names = sorted(hit_result_name(key) for key in restored.result_counter)
    assert names == ["Miss", "Perf"]


def test_mods_with_key_bits_survive():
    restored = _round_trip(_sample_record())
    assert int(restored.mods) == int(OsuMods.HIDDEN | OsuMods.RANDOM_4K)


def test_truncated_data_raises():
    buffer = io.BytesIO()
    _sample_record().write(buffer)
    data = buffer.getvalue()
    with pytest.raises(EOFError):
        Record.read(io.BytesIO(data[:-3]))


def test_empty_stream_raises():
    with pytest.raises(EOFError):
        Record.read(io.BytesIO(b""))