# cmania

A rhythm game engine for osu!mania beatmaps that draws into a text
terminal. The package reads `.osu` files, builds hit sound indexes, rates
difficulty, judges hits and keeps score, records and replays input, and
renders the playfield into a character buffer made of true-colour cells
that it turns into ANSI escape sequences.

## Installing

```
pip install .
```

The package uses only the standard library. The tests need pytest, which
the `test` extra installs:

```
pip install ".[test]"
pytest
```

## What is inside

- `cmania.beatmap`: `parse_beatmap` (from text or an iterable of lines)
  and `load_beatmap` (from a file) give an `OsuBeatmap` with its
  `TimingPoint` and `BeatmapHitObject` entries. A malformed line ends
  parsing; what was read before it is kept.
- `cmania.samples`: `build_sample_index` indexes sample files such as
  `soft-hitclap2.wav` in a folder; `get_samples` and
  `get_samples_layered` choose files for a bank, sound type and sample
  set; `timing_point_at` and its variants look up timing points.
- `cmania.keybinds`: `DEFAULT_KEY_BINDS` and `key_binds_for`, which picks
  the keys for a given column count.
- `cmania.objects`: `HitObject` and `ManiaObject`, the notes and hold
  notes as the game plays them.
- `cmania.difficulty`: `calculate_difficulty` gives a star-style rating
  for a list of `ManiaObject`s; maps with fewer than ten objects rate 0.
- `cmania.scoring`: `ManiaScoreProcessor` judges each hit against the
  windows from `cmania.osustatic.hit_ranges` and tracks combo, accuracy,
  score, mean error, variance and rating.
- `cmania.osustatic`: hit results, sound and object type flags, timing
  windows, column lookup, result names, colours and base scores.
- `cmania.mods`: the `OsuMods` flags, with `mod_scale`, `playback_rate`
  and `mods_abbr`.
- `cmania.record`: `Record` holds a finished play; `Record.write` and
  `Record.read` store it in a binary stream.
- `cmania.inputhandlers`: `ConsoleInputHandler` turns key and mouse
  events (the records in `cmania.console`) into timed action events;
  `RecordInputHandler` plays a `Record` back as its clock passes each
  event.
- `cmania.gamebuffer`: `GameBuffer` is a grid of `PixelData` cells with
  `Color` blending. It draws strings, lines, rectangles, circles and
  polygons; `render` returns the ANSI bytes and `output` passes them to
  the writer it was given.
- `cmania.label`, `cmania.animation`, `cmania.geometry`, `cmania.paths`
  and `cmania.textwidth` are smaller helpers for wrapped text, easing and
  transitions, vectors, curve approximation and terminal character
  widths.
- `cmania.audio`: the abstract `AudioManager`, `Channel` and `Sample`
  interfaces and the `AudioDevice` record.
- `cmania.game`: `Game` broadcasts named events to `Component`s and keeps
  shared features; `BufferController` clears, draws and outputs a
  `GameBuffer` on every `"tick"`, and `FpsOverlay` draws the frame rate.
- `cmania.songcache`: `BeatmapManagementService` scans the folder named
  by the `"SongsPath"` setting into a `SongsCache` and saves it to
  `Songs.bin` (or another path given to it); `scan_song_folder` describes
  one song folder.
- `cmania.mania`: `ManiaRuleset` brings these parts together to run one
  play on a `GameClock`: loading a beatmap, judging input, syncing music,
  drawing the stage and producing an autoplay `Record`.

## A short example

```python
from cmania.beatmap import load_beatmap
from cmania.mods import OsuMods, mods_abbr, playback_rate

beatmap = load_beatmap("song/normal.osu")
print(beatmap.title, beatmap.version, len(beatmap.hit_objects))

mods = OsuMods.HIDDEN | OsuMods.NIGHTCORE
print(mods_abbr(mods), playback_rate(mods))  # NCHD 1.5
```

## What the package does not do

- There is no command to start a game, and no menus, song selection,
  settings or result screens: the package is the engine those would be
  built on.
- It does not read the keyboard, mouse or terminal size itself. A front
  end feeds `ConsoleInputHandler` and raises `"resize"` and `"tick"`
  events on a `Game`, and writes the bytes `GameBuffer` produces.
- It plays no sound on its own. `cmania.audio` only defines the
  interfaces; without an `AudioManager` given to `ManiaRuleset`, a play
  runs silently.
- Settings are a plain dictionary on `Game`; nothing saves them to disk.