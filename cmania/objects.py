"""Hit objects as the game plays them."""

from dataclasses import dataclass, field
from typing import List, Optional

from .audio import Channel, Sample

Beatmap = List


@dataclass
class HitObject:
    """An object with a start time and the samples played when it is hit."""

    samples: List[Optional[Sample]] = field(default_factory=list)
    start_time: float = 0.0
    has_hit: bool = False

    def play_samples(self) -> None:
        """Start a fresh stream of every sample."""
        for sample in self.samples:
            if sample is not None:
                sample.generate_stream().play()


@dataclass
class ManiaObject(HitObject):
    """A note or hold note in a mania column; end_time is 0 for plain notes."""

    multi: bool = False
    has_hold: bool = False
    hold_broken: bool = False
    column: int = 0
    slide_sample: Optional[Sample] = None
    slide_stream: Optional[Channel] = None
    slide_whistle_sample: Optional[Sample] = None
    slide_whistle_stream: Optional[Channel] = None
    end_time: float = 0.0
    last_hold_off: float = -1.0