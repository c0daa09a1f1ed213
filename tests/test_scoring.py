import math

import pytest

from cmania.mods import OsuMods, mod_scale
from cmania.objects import ManiaObject
from cmania.osustatic import HitResult
from cmania.record import Record
from cmania.scoring import ManiaScoreProcessor


def _processor(max_combo=1):
    processor = ManiaScoreProcessor()
    processor.beatmap_max_combo = max_combo
    return processor


def test_exact_hit_is_perfect():
    processor = _processor()
    note = ManiaObject(start_time=100)
    assert processor.apply_hit(note, 0.0) == HitResult.PERFECT
    assert note.has_hit
    assert processor.combo == 1
    assert processor.accuracy == pytest.approx(1.0)
    assert processor.score == pytest.approx(1.0)


def test_judgement_uses_overall_difficulty_zero_windows():
    processor = _processor()
    assert processor.apply_hit(ManiaObject(), 30.0) == HitResult.GREAT
    assert processor.result_counter[HitResult.GREAT] == 1


def test_nan_is_miss_and_resets_combo():
    processor = _processor(2)
    processor.apply_hit(ManiaObject(), 0.0)
    assert processor.apply_hit(ManiaObject(), math.nan) == HitResult.MISS
    assert processor.combo == 0
    assert processor.max_combo == 1
    assert processor.result_counter[HitResult.MISS] == 1


def test_hit_outside_windows_is_ignored():
    processor = _processor()
    note = ManiaObject()
    assert processor.apply_hit(note, 500.0) == HitResult.NONE
    assert not note.has_hit
    assert processor.applied_hit == 0


def test_note_cannot_be_hit_twice():
    processor = _processor()
    note = ManiaObject()
    processor.apply_hit(note, 0.0)
    assert processor.apply_hit(note, 0.0) == HitResult.NONE
    assert processor.applied_hit == 1


def test_hold_release_miss_breaks_hold():
    processor = _processor(2)
    hold = ManiaObject(start_time=0, end_time=1000)
    assert processor.apply_hit(hold, 0.0) == HitResult.PERFECT
    assert processor.apply_hit(hold, math.nan) == HitResult.MISS
    assert hold.hold_broken
    assert not hold.has_hold


def test_hold_release_on_time_completes_hold():
    processor = _processor(2)
    hold = ManiaObject(start_time=0, end_time=1000)
    processor.apply_hit(hold, 0.0)
    processor.apply_hit(hold, 5.0)
    assert hold.has_hold
    assert not hold.hold_broken


def test_mean_and_error():
    processor = _processor(2)
    processor.apply_hit(ManiaObject(), 10.0)
    processor.apply_hit(ManiaObject(), -10.0)
    assert processor.mean == pytest.approx(0.0)
    assert processor.error == pytest.approx(200.0)


def test_score_multiplier_from_mods():
    processor = _processor()
    processor.set_mods(OsuMods.EASY)
    processor.apply_hit(ManiaObject(), 0.0)
    assert processor.score == pytest.approx(mod_scale(OsuMods.EASY))


def test_rating_is_cube_of_reference():
    processor = _processor()
    processor.apply_beatmap(2.0)
    processor.apply_hit(ManiaObject(), 0.0)
    assert processor.rating == pytest.approx(8.0)


def test_rate_mods_do_not_change_rating_multiplier():
    processor = _processor()
    processor.set_mods(OsuMods.NIGHTCORE)
    assert processor.pp_multiplier == pytest.approx(1.0)
    assert processor.score_multiplier == pytest.approx(mod_scale(OsuMods.NIGHTCORE))


def test_wt_mode_treats_holds_as_notes():
    processor = _processor()
    processor.set_wt_mode(True)
    hold = ManiaObject(end_time=500)
    processor.apply_hit(hold, 0.0)
    assert processor.apply_hit(hold, 0.0) == HitResult.NONE


def test_health_increase_is_zero():
    assert ManiaScoreProcessor().health_increase_for(HitResult.PERFECT) == 0.0


def test_save_record_copies_totals():
    processor = _processor()
    processor.apply_hit(ManiaObject(), 0.0)
    record = Record()
    processor.save_record(record)
    assert record.score == processor.score
    assert record.accuracy == processor.accuracy
    assert record.max_combo == processor.max_combo
    assert record.result_counter == processor.result_counter