"""Interfaces an audio back end offers to the game."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, List, Optional


class Channel(ABC):
    """A playing or playable audio stream; times are in seconds."""

    @property
    @abstractmethod
    def id(self) -> int: ...

    @property
    @abstractmethod
    def volume(self) -> float: ...

    @volume.setter
    @abstractmethod
    def volume(self, value: float) -> None: ...

    @abstractmethod
    def play(self) -> bool: ...

    @abstractmethod
    def stop(self) -> bool: ...

    @abstractmethod
    def pause(self, paused: bool = True) -> bool: ...

    @property
    @abstractmethod
    def playback_rate(self) -> float: ...

    @playback_rate.setter
    @abstractmethod
    def playback_rate(self, value: float) -> None: ...

    @property
    @abstractmethod
    def current(self) -> float: ...

    @current.setter
    @abstractmethod
    def current(self, value: float) -> None: ...

    @property
    @abstractmethod
    def is_stopped(self) -> bool: ...

    @property
    @abstractmethod
    def is_paused(self) -> bool: ...

    @property
    @abstractmethod
    def is_buffering(self) -> bool: ...

    @property
    @abstractmethod
    def is_playing(self) -> bool: ...

    @property
    @abstractmethod
    def duration(self) -> float: ...


AudioStream = Channel


class Sample(ABC):
    """A short sound that can be played many times at once."""

    @property
    @abstractmethod
    def id(self) -> int: ...

    @abstractmethod
    def generate_stream(self) -> Channel:
        """Return a new stream playing this sample."""


@dataclass(frozen=True)
class AudioDevice:
    """An output device as reported by the back end."""

    id: int
    name: str
    type: str = ""
    is_default: bool = False
    is_enabled: bool = True
    is_initiated: bool = False
    is_loopback: bool = False


class AudioManager(ABC):
    """Loads audio and manages the output device."""

    @abstractmethod
    def load(self, data: bytes) -> Channel:
        """Create a stream from encoded audio data."""

    def load_stream(self, stream: BinaryIO) -> Channel:
        """Create a stream from a binary file object."""
        return self.load(stream.read())

    @abstractmethod
    def load_sample(self, data: bytes) -> Sample: ...

    @abstractmethod
    def audio_devices(self) -> List[AudioDevice]: ...

    @abstractmethod
    def current_device(self) -> Optional[AudioDevice]: ...

    @property
    @abstractmethod
    def is_device_opened(self) -> bool: ...

    @abstractmethod
    def open_device(self, device: Optional[AudioDevice]) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


def default_device(manager: AudioManager) -> Optional[AudioDevice]:
    """The manager's default output device, or None."""
    return next((device for device in manager.audio_devices() if device.is_default), None)