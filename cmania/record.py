"""Replay records and the binary encoding used to store them."""

import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, List, Sequence

from .console import InputEvent
from .mods import OsuMods
from .osustatic import HitResult

_EVENT_FORMAT = "idBii"


def _write(stream: BinaryIO, fmt: str, *values) -> None:
    stream.write(struct.pack("<" + fmt, *values))


def _read(stream: BinaryIO, fmt: str) -> tuple:
    size = struct.calcsize("<" + fmt)
    data = stream.read(size)
    if len(data) != size:
        raise EOFError("unexpected end of data")
    return struct.unpack("<" + fmt, data)


def _write_string(stream: BinaryIO, text: str) -> None:
    data = text.encode("utf-8")
    _write(stream, "I", len(data))
    stream.write(data)


def _read_string(stream: BinaryIO) -> str:
    (size,) = _read(stream, "I")
    data = stream.read(size)
    if len(data) != size:
        raise EOFError("unexpected end of data")
    return data.decode("utf-8", errors="replace")


def _write_doubles(stream: BinaryIO, values: Sequence[float]) -> None:
    _write(stream, "I", len(values))
    for value in values:
        _write(stream, "d", value)


def _read_doubles(stream: BinaryIO) -> List[float]:
    (count,) = _read(stream, "I")
    return [_read(stream, "d")[0] for _ in range(count)]


def _to_hit_result(value: int):
    try:
        return HitResult(value)
    except ValueError:
        return value


@dataclass
class Record:
    """The result and input events of one play."""

    mods: OsuMods = OsuMods.NONE
    score: float = 0.0
    accuracy: float = 0.0
    max_combo: int = 0
    beatmap_max_combo: int = 0
    beatmap_hash: int = 0
    rating: float = 0.0
    mean: float = 0.0
    error: float = 0.0
    beatmap_title: str = ""
    beatmap_version: str = ""
    player_name: str = ""
    health_graph: List[float] = field(default_factory=list)
    rating_graph: List[float] = field(default_factory=list)
    result_counter: Dict[HitResult, int] = field(default_factory=dict)
    events: List[InputEvent] = field(default_factory=list)

    def write(self, stream: BinaryIO) -> None:
        """Write the record in its binary form."""
        _write(stream, "Q", int(self.mods))
        _write(stream, "dd", self.score, self.accuracy)
        _write(stream, "II", self.max_combo, self.beatmap_max_combo)
        _write(stream, "ddd", self.rating, self.mean, self.error)
        _write(stream, "I", self.beatmap_hash)
        _write_string(stream, self.beatmap_title)
        _write_string(stream, self.beatmap_version)
        _write_string(stream, self.player_name)
        _write_doubles(stream, self.health_graph)
        _write_doubles(stream, self.rating_graph)
        _write(stream, "I", len(self.result_counter))
        for result, count in sorted(self.result_counter.items()):
            _write(stream, "Ii", int(result), count)
        _write(stream, "I", len(self.events))
        for event in self.events:
            _write(stream, _EVENT_FORMAT, event.action, event.clock, 1 if event.pressed else 0, event.x, event.y)

    @classmethod
    def read(cls, stream: BinaryIO) -> "Record":
        """Read a record written by write; raises EOFError on truncated data."""
        (mods,) = _read(stream, "Q")
        score, accuracy = _read(stream, "dd")
        max_combo, beatmap_max_combo = _read(stream, "II")
        rating, mean, error = _read(stream, "ddd")
        (beatmap_hash,) = _read(stream, "I")
        title = _read_string(stream)
        version = _read_string(stream)
        player = _read_string(stream)
        health = _read_doubles(stream)
        ratings = _read_doubles(stream)
        (count,) = _read(stream, "I")
        counter = {}
        for _ in range(count):
            key, value = _read(stream, "Ii")
            counter[_to_hit_result(key)] = value
        (event_count,) = _read(stream, "I")
        events = []
        for _ in range(event_count):
            action, clock, pressed, x, y = _read(stream, _EVENT_FORMAT)
            events.append(InputEvent(action, clock, bool(pressed), x, y))
        return cls(
            mods=OsuMods(mods),
            score=score,
            accuracy=accuracy,
            max_combo=max_combo,
            beatmap_max_combo=beatmap_max_combo,
            beatmap_hash=beatmap_hash,
            rating=rating,
            mean=mean,
            error=error,
            beatmap_title=title,
            beatmap_version=version,
            player_name=player,
            health_graph=health,
            rating_graph=ratings,
            result_counter=counter,
            events=events,
        )