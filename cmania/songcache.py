"""Cache of the songs folder: what beatmaps exist and their key figures."""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Callable, List, Optional, Union

from .beatmap import load_beatmap
from .game import Component
from .record import _read, _read_string, _write, _write_string


def _write_strings(stream: BinaryIO, values: List[str]) -> None:
    _write(stream, "I", len(values))
    for value in values:
        _write_string(stream, value)


def _read_strings(stream: BinaryIO) -> List[str]:
    (count,) = _read(stream, "I")
    return [_read_string(stream) for _ in range(count)]


@dataclass
class DifficultyCacheEntry:
    """One difficulty (.osu file) of a song."""

    background: str = ""
    audio: str = ""
    name: str = ""
    preview: float = 0.0
    nps: float = 0.0
    length: float = 0.0
    keys: float = 0.0
    od: float = 0.0
    path: str = ""
    mode: int = 0
    records: List[str] = field(default_factory=list)

    def _write(self, stream: BinaryIO) -> None:
        _write_string(stream, self.background)
        _write_string(stream, self.audio)
        _write_string(stream, self.name)
        _write(stream, "ddddd", self.preview, self.nps, self.length, self.keys, self.od)
        _write_strings(stream, self.records)
        _write(stream, "i", self.mode)
        _write_string(stream, self.path)

    @classmethod
    def _read(cls, stream: BinaryIO) -> "DifficultyCacheEntry":
        background = _read_string(stream)
        audio = _read_string(stream)
        name = _read_string(stream)
        preview, nps, length, keys, od = _read(stream, "ddddd")
        records = _read_strings(stream)
        (mode,) = _read(stream, "i")
        path = _read_string(stream)
        return cls(background, audio, name, preview, nps, length, keys, od, path, mode, records)


@dataclass
class SongsCacheEntry:
    """One song folder; last_changed is its modification time in nanoseconds."""

    last_changed: int = 0
    path: str = ""
    artist: str = ""
    artist_unicode: str = ""
    title: str = ""
    title_unicode: str = ""
    tags: str = ""
    source: str = ""
    difficulties: List[DifficultyCacheEntry] = field(default_factory=list)

    def _write(self, stream: BinaryIO) -> None:
        _write(stream, "q", self.last_changed)
        for text in (self.path, self.artist, self.artist_unicode, self.title,
                     self.title_unicode, self.tags, self.source):
            _write_string(stream, text)
        _write(stream, "I", len(self.difficulties))
        for difficulty in self.difficulties:
            difficulty._write(stream)

    @classmethod
    def _read(cls, stream: BinaryIO) -> "SongsCacheEntry":
        (last_changed,) = _read(stream, "q")
        texts = [_read_string(stream) for _ in range(7)]
        (count,) = _read(stream, "I")
        difficulties = [DifficultyCacheEntry._read(stream) for _ in range(count)]
        return cls(last_changed, *texts, difficulties=difficulties)


@dataclass
class SongsCache:
    """All song entries and the songs folder's modification time."""

    last_changed: int = 0
    caches: List[SongsCacheEntry] = field(default_factory=list)

    def write(self, stream: BinaryIO) -> None:
        _write(stream, "q", self.last_changed)
        _write(stream, "I", len(self.caches))
        for entry in self.caches:
            entry._write(stream)

    @classmethod
    def read(cls, stream: BinaryIO) -> "SongsCache":
        """Read a cache written by write; raises EOFError on truncated data."""
        (last_changed,) = _read(stream, "q")
        (count,) = _read(stream, "I")
        return cls(last_changed, [SongsCacheEntry._read(stream) for _ in range(count)])


def scan_song_folder(folder: Union[str, Path]) -> Optional[SongsCacheEntry]:
    """Describe the playable difficulties in a song folder; None if it has none."""
    folder = Path(folder)
    entry = SongsCacheEntry(path=str(folder))
    for file in sorted(folder.iterdir()):
        if file.is_dir() or not file.name.endswith(".osu"):
            continue
        beatmap = load_beatmap(file)
        if beatmap.circle_size < 1 or not beatmap.hit_objects:
            continue
        entry.artist = beatmap.artist
        entry.title = beatmap.title
        entry.title_unicode = beatmap.title_unicode
        entry.artist_unicode = beatmap.artist_unicode
        entry.tags = beatmap.tags
        entry.source = beatmap.source
        first = beatmap.hit_objects[0].start_time
        length = max(0.0, max(obj.start_time for obj in beatmap.hit_objects)) - first
        count = len(beatmap.hit_objects)
        if length:
            nps = count / length * 1000
        else:
            nps = float("inf")
        entry.difficulties.append(
            DifficultyCacheEntry(
                background=str(file.parent / beatmap.background),
                audio=str(file.parent / beatmap.audio_filename),
                name=beatmap.version,
                preview=float(beatmap.preview_time),
                nps=nps,
                length=length,
                keys=beatmap.circle_size,
                od=beatmap.overall_difficulty,
                path=str(file),
                mode=int(beatmap.mode),
            )
        )
    entry.difficulties.sort(key=lambda difficulty: difficulty.nps)
    return entry if entry.difficulties else None


class BeatmapManagementService(Component):
    """Keeps the songs cache in step with the songs folder named in the settings."""

    def __init__(self, cache_path: Union[str, Path] = "Songs.bin", workers: int = 16) -> None:
        self.cache_path = Path(cache_path)
        self.workers = max(1, workers)
        self._cache = SongsCache()
        self._lock = threading.Lock()

    def process_event(self, event: str, args: Any) -> None:
        if event == "start":
            self.game.register_feature(BeatmapManagementService, self)

    def _songs_path(self) -> Optional[Path]:
        value = self.game.settings.get("SongsPath") if self.game is not None else None
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value).split(b"\0", 1)[0].decode("utf-8", errors="replace")
        return Path(value) if value else None

    def _load_cache_file(self) -> SongsCache:
        if not self.cache_path.exists():
            return SongsCache()
        try:
            with open(self.cache_path, "rb") as handle:
                return SongsCache.read(handle)
        except (EOFError, ValueError):
            return SongsCache()

    def refresh(self, callback: Callable[[bool], Any]) -> threading.Thread:
        """Refresh in a background thread, then call callback with the outcome."""
        thread = threading.Thread(target=lambda: callback(self.refresh_now()), daemon=True)
        thread.start()
        return thread

    def refresh_now(self) -> bool:
        """Rescan changed song folders and save the cache; False if there is no songs folder."""
        songs_path = self._songs_path()
        if songs_path is None or not songs_path.exists():
            return False
        cache = self._load_cache_file()
        folder_time = songs_path.stat().st_mtime_ns
        if folder_time > cache.last_changed:
            known = {entry.path: index for index, entry in enumerate(cache.caches)}
            pending = []
            for song in sorted(p for p in songs_path.iterdir() if p.is_dir()):
                index = known.get(str(song))
                mtime = song.stat().st_mtime_ns
                if index is not None and mtime <= cache.caches[index].last_changed:
                    continue
                pending.append((song, index, mtime))
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                scanned = list(pool.map(lambda item: scan_song_folder(item[0]), pending))
            for (_, index, mtime), entry in zip(pending, scanned):
                if entry is None:
                    continue
                entry.last_changed = mtime
                if index is None:
                    cache.caches.append(entry)
                else:
                    cache.caches[index] = entry
        cache.last_changed = folder_time
        with open(self.cache_path, "wb") as handle:
            cache.write(handle)
        with self._lock:
            self._cache = cache
        return True

    def save(self) -> None:
        with self._lock, open(self.cache_path, "wb") as handle:
            self._cache.write(handle)

    def songs(self) -> List[SongsCacheEntry]:
        return self._cache.caches