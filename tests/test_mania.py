import pytest

from cmania.gamebuffer import GameBuffer
from cmania.inputhandlers import ConsoleInputHandler, RecordInputHandler
from cmania.mania import GameClock, ManiaRuleset
from cmania.mods import OsuMods
from cmania.osustatic import HitResult


class FakeTime:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def write_map(folder, shift=0):
    text = f"""osu file format v14

[General]
AudioFilename: audio.mp3
Mode: 3

[Metadata]
Title:Test Song
Version:Easy

[Difficulty]
CircleSize:4
OverallDifficulty:8

[Events]
0,0,"bg.jpg",0,0

[TimingPoints]
0,500,4,1,0,100,1,0

[HitObjects]
64,192,{1000 + shift},1,0,0:0:0:0:
192,192,{1250 + shift},1,0,0:0:0:0:
320,192,{1500 + shift},1,0,0:0:0:0:
448,192,{2000 + shift},128,0,{2500 + shift}:0:0:0:0:
"""
    path = folder / "map.osu"
    path.write_text(text, encoding="utf-8")
    return path


def make_ruleset(tmp_path, handler=None, shift=0):
    fake = FakeTime()
    ruleset = ManiaRuleset(clock=GameClock(fake))
    ruleset.input_handler = handler if handler is not None else ConsoleInputHandler()
    ruleset.load(write_map(tmp_path, shift))
    return ruleset, fake


def run_until_end(ruleset, fake, limit=20000.0):
    while not ruleset.game_ended and fake.now < limit:
        fake.now += 5
        ruleset.update()


def test_clock_offset_rate_stop_reset():
    fake = FakeTime()
    clock = GameClock(fake)
    assert clock.elapsed() == 0.0
    clock.offset(-3000)
    clock.start()
    fake.now = 100
    assert clock.elapsed() == -2900
    clock.set_rate(2.0)
    fake.now = 200
    assert clock.elapsed() == -2700
    clock.stop()
    fake.now = 1000
    assert clock.elapsed() == -2700
    assert not clock.running
    clock.reset()
    assert clock.elapsed() == 0.0


def test_load_builds_objects(tmp_path):
    ruleset, _ = make_ruleset(tmp_path)
    assert ruleset.game_started
    assert [obj.column for obj in ruleset.beatmap] == [0, 1, 2, 3]
    assert ruleset.beatmap[3].end_time == 2500
    assert ruleset.score_processor.beatmap_max_combo == len(ruleset.beatmap) + 1
    assert ruleset.record.beatmap_title == "Test Song"
    assert ruleset.record.beatmap_version == "Easy"
    assert ruleset.duration() == ruleset.last_object_time - ruleset.first_object_time
    assert ruleset.clock.elapsed() == -4000
    assert ruleset.background_path() == str(tmp_path / "bg.jpg")


def test_load_requires_input_handler(tmp_path):
    ruleset = ManiaRuleset(clock=GameClock(FakeTime()))
    with pytest.raises(ValueError):
        ruleset.load(write_map(tmp_path))


def test_load_missing_file(tmp_path):
    ruleset = ManiaRuleset(clock=GameClock(FakeTime()))
    ruleset.input_handler = ConsoleInputHandler()
    with pytest.raises(ValueError):
        ruleset.load(tmp_path / "missing.osu")


def test_autoplay_record_is_sorted_pairs(tmp_path):
    ruleset, _ = make_ruleset(tmp_path)
    record = ruleset.autoplay_record()
    assert record.player_name == "Autoplay"
    assert len(record.events) == 2 * len(ruleset.beatmap)
    clocks = [event.clock for event in record.events]
    assert clocks == sorted(clocks)
    assert sum(event.pressed for event in record.events) == len(ruleset.beatmap)
    hold_release = [e for e in record.events if e.action == 3 and not e.pressed]
    assert hold_release[0].clock == 2500


def test_autoplay_replay_is_perfect(tmp_path):
    handler = RecordInputHandler()
    ruleset, fake = make_ruleset(tmp_path, handler)
    handler.load_record(ruleset.autoplay_record())
    run_until_end(ruleset, fake)
    processor = ruleset.score_processor
    assert ruleset.game_ended
    assert all(obj.has_hit for obj in ruleset.beatmap)
    assert processor.result_counter[HitResult.MISS] == 0
    assert processor.result_counter[HitResult.PERFECT] == processor.beatmap_max_combo
    assert processor.max_combo == processor.beatmap_max_combo
    assert processor.score == pytest.approx(1.0)
    assert ruleset.beatmap[3].has_hold


def test_no_input_misses_everything(tmp_path):
    ruleset, fake = make_ruleset(tmp_path)
    run_until_end(ruleset, fake)
    processor = ruleset.score_processor
    assert ruleset.game_ended
    assert processor.result_counter[HitResult.MISS] == len(ruleset.beatmap)
    assert processor.combo == 0
    assert ruleset.beatmap[3].hold_broken


def test_process_action_hits_note_and_hold(tmp_path):
    ruleset, _ = make_ruleset(tmp_path)
    ruleset.process_action(0, True, 1000.0)
    assert ruleset.beatmap[0].has_hit
    assert ruleset.last_hit_result == HitResult.PERFECT
    ruleset.process_action(3, True, 2000.0)
    ruleset.process_action(3, False, 2500.0)
    assert ruleset.beatmap[3].has_hold
    assert not ruleset.beatmap[1].has_hit


def test_flashlight():
    ruleset = ManiaRuleset(clock=GameClock(FakeTime()))
    assert ruleset.flashlight(OsuMods.NONE, 0.1) == 1.0
    assert ruleset.flashlight(OsuMods.HIDDEN, 0.0) == 0.0
    assert ruleset.flashlight(OsuMods.HIDDEN, 0.4) == 1.0
    assert ruleset.flashlight(OsuMods.FADE_OUT, 1.0) == 0.0
    assert ruleset.flashlight(OsuMods.FADE_OUT, 0.5) == 1.0


def test_skip_jumps_before_first_note(tmp_path):
    ruleset, _ = make_ruleset(tmp_path, shift=9000)
    ruleset.skip()
    assert ruleset.clock.elapsed() == ruleset.first_object_time - 3000


def test_skip_does_nothing_for_early_notes(tmp_path):
    ruleset, _ = make_ruleset(tmp_path)
    before = ruleset.clock.elapsed()
    ruleset.skip()
    assert ruleset.clock.elapsed() == before


def test_pause_and_resume(tmp_path):
    ruleset, fake = make_ruleset(tmp_path)
    fake.now = 500
    ruleset.pause()
    paused_at = ruleset.clock.elapsed()
    fake.now = 5000
    assert ruleset.clock.elapsed() == paused_at
    assert not ruleset.clock.running
    ruleset.resume()
    assert ruleset.clock.running
    assert ruleset.clock.elapsed() == paused_at - 3000
    assert ruleset.resume_time == paused_at


def test_load_settings_defaults(tmp_path):
    ruleset = ManiaRuleset(clock=GameClock(FakeTime()))
    settings = {}
    ruleset.load_settings(settings)
    assert ruleset.scroll_speed == 500
    assert len(settings["KeyBinds"]) == 18
    assert ruleset.key_layout == settings["KeyBinds"]


def test_load_settings_values():
    ruleset = ManiaRuleset(clock=GameClock(FakeTime()))
    ruleset.load_settings({"ScrollSpeed": 800.0, "WtMode": True, "TailHs": True, "Offset": 12.5})
    assert ruleset.scroll_speed == 800.0
    assert ruleset.wt_mode
    assert ruleset.score_processor.wt_mode
    assert ruleset.tail_hit_sounds
    assert ruleset.offset == 12.5


def test_render_draws_stage(tmp_path):
    ruleset, fake = make_ruleset(tmp_path)
    fake.now = 4800
    buffer = GameBuffer(lambda data: None)
    buffer.resize(80, 40)
    buffer.clear()
    ruleset.render(buffer)
    rails = [cell for _, _, cell in buffer.cells() if cell.char == ord("|")]
    assert len(rails) >= buffer.height
    coloured = [cell for _, _, cell in buffer.cells() if cell.background.alpha > 0]
    assert coloured
    assert ruleset.current_time() == ruleset.clock.elapsed() - ruleset.first_object_time