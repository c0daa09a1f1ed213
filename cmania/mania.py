"""The mania ruleset: loading a beatmap, judging input, scoring and drawing the stage."""

import math
import time as _time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Sequence, Union

from .audio import AudioManager, Channel, Sample
from .beatmap import BeatmapHitObject, OsuBeatmap, load_beatmap
from .console import InputEvent
from .difficulty import calculate_difficulty
from .gamebuffer import Color, GameBuffer, PixelData
from .inputhandlers import InputHandler
from .keybinds import DEFAULT_KEY_BINDS, key_binds_for
from .mods import OsuMods, playback_rate
from .objects import ManiaObject
from .osustatic import (
    HitResult,
    HitSoundType,
    calc_column,
    hit_ranges,
    hit_result_color,
    hit_result_name,
)
from .record import Record
from .samples import build_sample_index, get_samples_layered, timing_point_at
from .scoring import ManiaScoreProcessor, ScoreProcessor

_ACTION_SLOTS = 18
_DEFAULT_SKIN = "Samples/Triangles"
_SYNC_WAIT_SECONDS = 2.0


def _now_ms() -> float:
    return _time.perf_counter() * 1000.0


def _read_all_bytes(path: Union[str, Path]) -> bytes:
    """The whole file, or empty bytes if it cannot be read."""
    try:
        return Path(path).read_bytes()
    except OSError:
        return b""


def _has(mods: Any, flag: Any) -> bool:
    return (int(mods) & int(flag)) == int(flag)


def _as_bool(value: Any) -> bool:
    if isinstance(value, (bytes, bytearray)):
        return any(value)
    return bool(value)


def _as_float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).split(b"\0", 1)[0].decode("utf-8", errors="replace")
    return value or None


class GameClock:
    """A stopwatch in milliseconds whose time can run faster or slower and be shifted."""

    def __init__(self, time_source: Optional[Callable[[], float]] = None) -> None:
        self._source = time_source or _now_ms
        self._base = 0.0
        self._started_at = 0.0
        self._running = False
        self._rate = 1.0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def clock_rate(self) -> float:
        return self._rate

    def elapsed(self) -> float:
        if self._running:
            return self._base + (self._source() - self._started_at) * self._rate
        return self._base

    def start(self) -> None:
        if not self._running:
            self._started_at = self._source()
            self._running = True

    def stop(self) -> None:
        if self._running:
            self._base = self.elapsed()
            self._running = False

    def reset(self) -> None:
        """Set the elapsed time back to zero; a running clock keeps running."""
        self._base = 0.0
        self._started_at = self._source()

    def offset(self, ms: float) -> None:
        """Move the elapsed time by ms."""
        self._base += ms

    def set_rate(self, rate: float) -> None:
        if self._running:
            self._base = self.elapsed()
            self._started_at = self._source()
        self._rate = rate


class _Fade:
    """A value eased from one number to another after start() is called."""

    def __init__(self, easing: Callable[[float], float], start_value: float, end_value: float, duration: float) -> None:
        self.easing = easing
        self.start_value = start_value
        self.end_value = end_value
        self.duration = duration
        self.start_time = math.nan

    def current_value(self, clock: float) -> float:
        if clock <= self.start_time:
            return self.start_value
        progress = (clock - self.start_time) / self.duration if self.duration else math.nan
        if math.isnan(progress) or progress > 1:
            self.start_time = math.nan
            return self.end_value
        return self.easing(progress) * (self.end_value - self.start_value) + self.start_value

    def update(self, clock: float, setter: Callable[[float], Any]) -> None:
        if clock > self.start_time:
            setter(self.current_value(clock))

    def start(self, clock: float) -> None:
        self.start_time = clock

    def reset(self) -> None:
        self.start_time = math.nan


class RulesetBase(ABC):
    """State and operations shared by every ruleset."""

    def __init__(self, clock: Optional[GameClock] = None) -> None:
        self.input_handler: Optional[InputHandler] = None
        self.clock = clock if clock is not None else GameClock()
        self.mods: OsuMods = OsuMods.NONE
        self.game_ended = False
        self.game_started = False
        self.record = Record()
        self.score_processor: Optional[ScoreProcessor] = None
        self.beatmap: List[Any] = []

    @abstractmethod
    def load_settings(self, settings: MutableMapping[str, Any]) -> None: ...

    @abstractmethod
    def load(self, beatmap_path: Union[str, Path]) -> None: ...

    @abstractmethod
    def autoplay_record(self) -> Record: ...

    @abstractmethod
    def update(self) -> None: ...

    @abstractmethod
    def pause(self) -> None: ...

    @abstractmethod
    def render(self, buffer: GameBuffer) -> None: ...

    @abstractmethod
    def resume(self) -> None: ...

    @abstractmethod
    def skip(self) -> None: ...

    @abstractmethod
    def current_time(self) -> float: ...

    @abstractmethod
    def duration(self) -> float: ...

    @abstractmethod
    def background_path(self) -> str: ...


class ManiaRuleset(RulesetBase):
    """Falling notes in columns, hit with one key per column."""

    def __init__(self, audio_manager: Optional[AudioManager] = None, clock: Optional[GameClock] = None) -> None:
        super().__init__(clock)
        self.audio_manager = audio_manager
        self.score_processor: ManiaScoreProcessor = ManiaScoreProcessor()
        self.beatmap: List[ManiaObject] = []
        self.key_highlight = [_Fade(lambda t: t ** 1.5, 180, 0, 150) for _ in range(_ACTION_SLOTS)]
        self.last_hit_result_fade = _Fade(lambda t: t ** 4.0, 255, 0, 400)
        self.last_hit_result = HitResult.NONE
        self.bgm: Optional[Channel] = None
        self.scroll_speed = 500.0
        self.end_time = 0.0
        self.skin_path = _DEFAULT_SKIN
        self.original: OsuBeatmap = OsuBeatmap()
        self.parent_path = Path()
        self.offset = 0.0
        self.first_object_time = 1e300
        self.last_object_time = -1e300
        self.resume_time = -1e300
        self.keys = 0
        self.jump_helper = False
        self.no_hit_sounds = False
        self.wt_mode = False
        self.tail_hit_sounds = False
        self.miss_offset = 200.0
        self.key_layout: List[int] = [int(key) for key in DEFAULT_KEY_BINDS]

    def load_settings(self, settings: MutableMapping[str, Any]) -> None:
        """Read play options from the settings; missing key binds are written back as defaults."""
        self.scroll_speed = _as_float(settings.get("ScrollSpeed"))
        if self.scroll_speed <= 0:
            self.scroll_speed = 500.0
        self.offset = _as_float(settings.get("Offset"))
        self.no_hit_sounds = _as_bool(settings.get("NoBmpHs"))
        self.wt_mode = _as_bool(settings.get("WtMode"))
        self.score_processor.set_wt_mode(self.wt_mode)
        self.jump_helper = _as_bool(settings.get("JumpHelper"))
        self.tail_hit_sounds = _as_bool(settings.get("TailHs"))
        skin = _as_text(settings.get("SkinPath"))
        if skin is None or not Path(skin).exists():
            skin = _DEFAULT_SKIN
        self.skin_path = skin
        binds = settings.get("KeyBinds")
        if not isinstance(binds, (list, tuple)) or len(binds) < len(DEFAULT_KEY_BINDS):
            binds = [int(key) for key in DEFAULT_KEY_BINDS]
            settings["KeyBinds"] = list(binds)
        self.key_layout = [int(key) for key in binds[:len(DEFAULT_KEY_BINDS)]]

    def _load_samples(self, paths: Sequence[str]) -> Dict[str, Sample]:
        caches: Dict[str, Sample] = {}
        if self.audio_manager is None:
            return caches
        for path in sorted(set(paths)):
            data = _read_all_bytes(path)
            if not data:
                continue
            try:
                caches[path] = self.audio_manager.load_sample(data)
            except Exception:
                continue
        return caches

    def _make_object(self, obj: BeatmapHitObject, beatmap_index, skin_index, caches: Dict[str, Sample]) -> ManiaObject:
        mo = ManiaObject(column=calc_column(obj.x, self.keys), start_time=obj.start_time, end_time=obj.end_time)
        self.end_time = max(self.end_time, obj.end_time, obj.start_time)
        self.first_object_time = min(self.first_object_time, obj.start_time)
        self.last_object_time = max(self.last_object_time, obj.start_time)
        if obj.end_time != 0:
            self.last_object_time = max(self.last_object_time, obj.end_time)
        if self.jump_helper:
            mo.multi = any(
                other is not obj
                and (abs(obj.start_time - other.start_time) < 0.5
                     or (other.end_time != 0 and abs(obj.start_time - other.end_time) < 0.5))
                for other in self.original.hit_objects
            )

        def lookup(sound: Any) -> List[Optional[Sample]]:
            if tp is None:
                return []
            found = get_samples_layered(beatmap_index, skin_index, tp.sample_bank, sound, tp.sample_set)
            return [caches.get(str(path)) for path in found]

        tp = timing_point_at(self.original, obj.start_time) if self.original.timing_points else None
        mo.samples.extend(lookup(obj.sound_type))
        if obj.custom_sample_filename:
            mo.samples.append(caches.get(str(self.parent_path / obj.custom_sample_filename)))
        self.score_processor.beatmap_max_combo += 1
        if obj.end_time != 0:
            slides = lookup(HitSoundType.SLIDE)
            if slides:
                mo.slide_sample = slides[0]
            if _has(obj.sound_type, HitSoundType.WHISTLE):
                whistles = lookup(HitSoundType.SLIDE_WHISTLE)
                if whistles:
                    mo.slide_whistle_sample = whistles[0]
            if not self.wt_mode:
                self.score_processor.beatmap_max_combo += 1
        return mo

    def load(self, beatmap_path: Union[str, Path]) -> None:
        """Parse the beatmap, load its sounds, and start the clock a few seconds before the first note."""
        beatmap_path = Path(beatmap_path)
        parent = beatmap_path.parent
        self.parent_path = parent
        if not beatmap_path.is_file():
            raise ValueError("Cannot open file.")
        self.original = load_beatmap(beatmap_path)
        self.record.beatmap_title = self.original.title
        self.record.beatmap_version = self.original.version
        self.record.beatmap_hash = 0
        self.keys = int(self.original.circle_size)

        sample_paths = [str(parent / obj.custom_sample_filename)
                        for obj in self.original.hit_objects if obj.custom_sample_filename]
        sample_paths += [str(parent / item.path) for item in self.original.storyboard_samples]
        beatmap_index = build_sample_index(parent, 1)
        skin_index = build_sample_index(self.skin_path, 0)
        sample_paths += [str(md.filename) for md in beatmap_index]
        sample_paths += [str(md.filename) for md in skin_index]
        caches = self._load_samples(sample_paths)

        self.beatmap.extend(
            self._make_object(obj, beatmap_index, skin_index, caches) for obj in self.original.hit_objects
        )

        if self.audio_manager is not None:
            data = _read_all_bytes(parent / self.original.audio_filename)
            if data:
                self.bgm = self.audio_manager.load(data)

        if self.input_handler is None:
            raise ValueError("input_handler must be set before loading.")
        self.input_handler.set_binds([int(key) for key in key_binds_for(self.keys, self.key_layout)])

        self.record.mods = self.mods
        span = (self.last_object_time - self.first_object_time) + 11000
        self.record.rating_graph = [0.0] * max(0, int(span / 100))

        self.score_processor.set_difficulty(self.original.overall_difficulty)
        self.score_processor.set_mods(self.mods)
        diff = calculate_difficulty(self.beatmap, self.mods, self.keys)
        self.score_processor.apply_beatmap(diff * playback_rate(self.mods))

        self.miss_offset = hit_ranges(self.original.overall_difficulty)[HitResult.MEH]

        self.clock.set_rate(playback_rate(self.mods))
        self.clock.offset(min(self.first_object_time - 5000, -3000.0))
        self.clock.start()
        self.input_handler.set_clock_source(self.clock)
        self.game_started = True

    def _show_result(self, result: HitResult) -> None:
        self.last_hit_result = result
        self.last_hit_result_fade.start(self.clock.elapsed())

    def process_action(self, action: int, pressed: bool, clock: float) -> None:
        """Judge a press or release of a column at the given time."""
        if not pressed:
            hold = next((obj for obj in self.beatmap
                         if obj.column == action and obj.end_time != 0
                         and not (obj.has_hold or obj.hold_broken) and obj.has_hit), None)
            if hold is not None:
                result = self.score_processor.apply_hit(hold, clock - hold.end_time)
                if result != HitResult.NONE:
                    if self.tail_hit_sounds:
                        hold.play_samples()
                    self._show_result(result)
            return
        target = next((obj for obj in self.beatmap if obj.column == action and not obj.has_hit), None)
        if target is not None:
            result = self.score_processor.apply_hit(target, clock - target.start_time)
            target.play_samples()
            if result != HitResult.NONE:
                self._show_result(result)

    @staticmethod
    def _ensure_slide_streams(obj: ManiaObject, create: bool) -> None:
        if create:
            if obj.slide_sample is not None and obj.slide_stream is None:
                obj.slide_stream = obj.slide_sample.generate_stream()
                obj.slide_stream.play()
            if obj.slide_whistle_sample is not None and obj.slide_whistle_stream is None:
                obj.slide_whistle_stream = obj.slide_whistle_sample.generate_stream()
                obj.slide_whistle_stream.play()
        if obj.slide_stream is not None and not obj.slide_stream.is_playing:
            obj.slide_stream.play()
        if obj.slide_whistle_stream is not None and not obj.slide_whistle_stream.is_playing:
            obj.slide_whistle_stream.play()

    @staticmethod
    def _stop_slide_streams(obj: ManiaObject) -> None:
        if obj.slide_stream is not None:
            obj.slide_stream.stop()
            obj.slide_stream = None
        if obj.slide_whistle_stream is not None:
            obj.slide_whistle_stream.stop()
            obj.slide_whistle_stream = None

    def _sync_music(self, now: float) -> None:
        bgm = self.bgm
        if not (-30 < now < bgm.duration * 1000 - 3000):
            return
        if not bgm.is_playing:
            if not bgm.is_paused:
                self.clock.stop()
                bgm.playback_rate = self.clock.clock_rate
                bgm.play()
                deadline = _time.monotonic() + _SYNC_WAIT_SECONDS
                while bgm.current < 0.003 and _time.monotonic() < deadline:
                    pass
                self.clock.reset()
                self.clock.offset(bgm.current * 1000 + self.offset)
                self.clock.start()
            else:
                bgm.pause(False)
        elif abs(now - bgm.current * 1000) > 300:
            bgm.current = now / 1000

    def _update_object(self, obj: ManiaObject, now: float) -> None:
        handler = self.input_handler
        if obj.end_time != 0 and not (obj.has_hold or obj.hold_broken) and not self.wt_mode:
            if now > obj.start_time + self.miss_offset:
                if handler.key_status(obj.column):
                    obj.last_hold_off = now
                if now > obj.end_time + self.miss_offset or (
                        obj.last_hold_off != -1 and now > obj.last_hold_off + self.miss_offset):
                    self.score_processor.apply_hit(obj, math.nan)
                    self._show_result(HitResult.MISS)
                    return
        if not obj.has_hit and now > obj.start_time + self.miss_offset:
            self.score_processor.apply_hit(obj, math.nan)
            self._show_result(HitResult.MISS)
        if obj.has_hit and obj.end_time != 0:
            if self.wt_mode:
                if obj.start_time < now < obj.end_time:
                    self._ensure_slide_streams(obj, True)
                if now > obj.end_time:
                    self._stop_slide_streams(obj)
            elif not (obj.has_hold or obj.hold_broken):
                self._ensure_slide_streams(obj, handler.key_status(obj.column))
            else:
                self._stop_slide_streams(obj)

    def update(self) -> None:
        """Advance one frame: music sync, misses, hold sounds and queued input."""
        if self.game_ended:
            return
        now = self.clock.elapsed()
        handler = self.input_handler
        if not self.wt_mode:
            for action in range(_ACTION_SLOTS):
                if handler.key_status(action):
                    self.key_highlight[action].start(now)
        if now > self.last_object_time + 3000 or (
                self.bgm is not None and now > self.bgm.duration * 1000 + 3000):
            self.game_ended = True
            self.clock.stop()
            return
        if now > self.first_object_time:
            index = int((now - self.first_object_time) / 100)
            if index < len(self.record.rating_graph):
                self.record.rating_graph[index] = self.score_processor.rating
        if now < self.resume_time or not self.clock.running:
            return
        if self.bgm is not None:
            self._sync_music(now)
        for obj in self.beatmap:
            self._update_object(obj, now)
        while True:
            event = handler.poll_event()
            if event is None:
                break
            self.record.events.append(event)
            if not self.wt_mode or event.pressed:
                self.process_action(event.action, event.pressed, event.clock)
            if self.wt_mode and event.pressed and 0 <= event.action < _ACTION_SLOTS:
                self.key_highlight[event.action].start(now)

    def flashlight(self, mods: Any, ratio: float) -> float:
        """Opacity of a note at ratio of the way down the screen under Hidden and FadeOut."""
        if _has(mods, OsuMods.HIDDEN) and ratio < 0.4:
            return (ratio / 0.4) ** 2
        if _has(mods, OsuMods.FADE_OUT) and ratio > 0.6:
            return ((1 - ratio) / 0.4) ** 2
        return 1.0

    def _render_column(self, buffer: GameBuffer, j: int, i: float, key_width: float,
                       key_height: float, judge_height: float, now: float) -> None:
        height = buffer.height
        speed = self.scroll_speed * self.clock.clock_rate
        visible = 0
        for obj in self.beatmap:
            off = obj.start_time - now
            off2 = obj.end_time - now
            if obj.end_time == 0:
                if off > speed or off < -speed / 5:
                    continue
            elif off > speed or off2 < 0:
                continue
            if visible > 20:
                break
            if obj.column != j:
                continue
            ratio = 1 - (obj.start_time - now) / speed
            start_y = ratio * (height - judge_height + 1)
            light = self.flashlight(self.mods, ratio)
            red, green, blue = (204, 187, 102) if obj.multi else (0, 160, 230)
            if obj.end_time != 0 and not obj.has_hold:
                ratio2 = 1 - (obj.end_time - now) / speed
                end_y = ratio2 * (height - judge_height)
                top = min(start_y, height - judge_height) if obj.has_hit and not obj.hold_broken else start_y
                alpha = 180
                if _has(self.mods, OsuMods.FADE_OUT) or _has(self.mods, OsuMods.HIDDEN):
                    alpha = 50
                if obj.hold_broken:
                    alpha = int(alpha * 0.2)
                buffer.fill_rect(i + 1, top - key_height, i + key_width, end_y + key_height,
                                 PixelData(Color(), Color(alpha, red, green, blue), " "))
                alpha = int(255 * light) & 0xFF
                if top >= height - judge_height:
                    alpha = 255
                if obj.hold_broken:
                    alpha = int(alpha * 0.2)
                buffer.fill_rect(i + 1, top - key_height, i + key_width, top + key_height,
                                 PixelData(Color(), Color(alpha, red, green, blue), " "))
                continue
            if not obj.has_hit:
                buffer.fill_rect(i + 1, start_y - key_height, i + key_width, start_y + key_height,
                                 PixelData(Color(), Color(int(255 * light) & 0xFF, red, green, blue), " "))
            visible += 1

        rail = Color(255, 204, 187, 102)
        buffer.draw_line_h(i, 0, height, PixelData(rail, Color(), "|"))
        buffer.draw_line_h(i + key_width, 0, height, PixelData(rail, Color(), "|"))
        buffer.fill_rect(i + 1, height - judge_height + 1, i + key_width, height,
                         PixelData(Color(), Color(120, 255, 255, 255), " "))

        def highlight(value: float) -> None:
            buffer.fill_rect(i + 1, height - judge_height + 1, i + key_width, height,
                             PixelData(Color(), Color(int(value) & 0xFF, 255, 255, 255), " "))
            ratio = value / 240
            lightning = max(15.0, height * 0.3)
            if 0 < ratio < 1:
                reach = ratio * lightning
                for p in range(math.ceil(reach)):
                    alpha = int(value * ((reach - p) / reach) ** 2) & 0xFF
                    buffer.draw_line_v(i + 1, i + key_width, height - judge_height - p,
                                       PixelData(Color(), Color(alpha, 255, 255, 255), " "))

        self.key_highlight[j].update(now, highlight)

    def render(self, buffer: GameBuffer) -> None:
        """Draw the columns, the notes, key highlights and the last judgement."""
        now = self.clock.elapsed()
        if self.keys > 0:
            key_height = float(int(max(buffer.height / 50.0, 0.0)))
            key_width = float(int(min(max(10.0, buffer.width * 0.3 / self.keys),
                                      buffer.width / self.keys * 2 - 3)))
            centre_start = buffer.width / 2 - (self.keys * key_width) / 2
            judge_height = max((key_height + 1) * 2, 4.0)
            for j in range(min(self.keys, _ACTION_SLOTS)):
                self._render_column(buffer, j, centre_start + j * key_width,
                                    key_width, key_height, judge_height, now)

        def show(value: float) -> None:
            if self.last_hit_result == HitResult.NONE:
                return
            label = hit_result_name(self.last_hit_result)
            base = hit_result_color(self.last_hit_result)
            color = Color(int(value) & 0xFF, base.red, base.green, base.blue)
            buffer.draw_string(label, (buffer.width - len(label)) // 2, buffer.height // 2, color, Color())

        self.last_hit_result_fade.update(now, show)

    def pause(self) -> None:
        for light in self.key_highlight:
            light.reset()
        if self.bgm is not None:
            self.bgm.pause(True)
        self.clock.stop()
        for obj in self.beatmap:
            if obj.slide_stream is not None:
                obj.slide_stream.stop()
            if obj.slide_whistle_stream is not None:
                obj.slide_whistle_stream.stop()

    def resume(self) -> None:
        """Continue three seconds before the pause point; judging waits until it is reached."""
        self.resume_time = self.clock.elapsed()
        self.clock.offset(-3000)
        self.clock.start()

    def skip(self) -> None:
        """Jump to three seconds before the first note if that is well ahead."""
        target = self.first_object_time - 3000
        if target > 1000 and self.clock.elapsed() < target:
            self.clock.reset()
            self.clock.offset(target)

    def current_time(self) -> float:
        return self.clock.elapsed() - self.first_object_time

    def duration(self) -> float:
        return self.last_object_time - self.first_object_time

    def background_path(self) -> str:
        return str(self.parent_path / self.original.background)

    def autoplay_record(self) -> Record:
        """A replay that hits every note exactly on time."""
        events: List[InputEvent] = []
        for obj in self.beatmap:
            events.append(InputEvent(obj.column, obj.start_time, True, 0, 0))
            release = obj.end_time if obj.end_time != 0 else obj.start_time + 50
            events.append(InputEvent(obj.column, release, False, 0, 0))
        events.sort(key=lambda event: event.clock)
        return Record(player_name="Autoplay", events=events)