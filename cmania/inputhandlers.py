"""Sources of gameplay input: the console player and recorded replays."""

import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, List, Optional, Protocol, Sequence, Tuple

from .console import InputEvent, MouseKeyEventArgs, MoveEventArgs
from .record import Record

_ACTION_SLOTS = 18
_MOUSE_MOVE_INTERVAL = 20.0


class Clock(Protocol):
    def elapsed(self) -> float: ...


class InputHandler(ABC):
    """Provides action states and timed input events."""

    @abstractmethod
    def key_status(self, action: int) -> bool: ...

    @abstractmethod
    def mouse_position(self) -> Tuple[int, int]: ...

    @abstractmethod
    def poll_event(self) -> Optional[InputEvent]: ...

    @abstractmethod
    def set_clock_source(self, clock: Clock) -> None: ...

    @abstractmethod
    def set_binds(self, binds: Sequence[int]) -> None: ...


class ConsoleInputHandler(InputHandler):
    """Turns console key and mouse events into action events."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._binds: Dict[int, int] = {}
        self._events: Deque[InputEvent] = deque()
        self._position: Tuple[int, int] = (-999, -999)
        self._clock: Optional[Clock] = None
        self._key_map: List[bool] = [False] * 128
        self._last_move = -1e300

    def key_status(self, action: int) -> bool:
        with self._lock:
            return self._key_map[action]

    def mouse_position(self) -> Tuple[int, int]:
        return self._position

    def set_clock_source(self, clock: Clock) -> None:
        self._clock = clock

    def poll_event(self) -> Optional[InputEvent]:
        with self._lock:
            return self._events.popleft() if self._events else None

    def _now(self) -> float:
        if self._clock is None:
            raise RuntimeError("no clock source set")
        return self._clock.elapsed()

    def _action_for(self, code: int) -> int:
        action = -1
        for slot in range(_ACTION_SLOTS):
            if self._binds.get(slot, 0) == code:
                action = slot
        return action

    def _push_action(self, code: int, pressed: bool, x: int = 0, y: int = 0) -> None:
        action = self._action_for(code)
        if action == -1:
            return
        with self._lock:
            if self._key_map[action] != pressed:
                self._key_map[action] = pressed
                self._events.append(InputEvent(action, self._now(), pressed, x, y))

    def on_key_event(self, key: int, pressed: bool) -> None:
        self._push_action(int(key), pressed)

    def on_mouse_key(self, args: MouseKeyEventArgs) -> None:
        self._push_action(int(args.button), args.pressed, args.x, args.y)

    def on_mouse_move(self, args: MoveEventArgs) -> None:
        """Record a move, at most once every 20 ms."""
        now = self._now()
        if now > self._last_move + _MOUSE_MOVE_INTERVAL:
            self._position = (args.x, args.y)
            self._last_move = now
            with self._lock:
                self._events.append(InputEvent(-1, now, False, args.x, args.y))

    def set_binds(self, binds: Sequence[int]) -> None:
        for slot, bind in enumerate(binds):
            self._binds[slot] = int(bind)


class RecordInputHandler(InputHandler):
    """Replays the events of a record as the clock passes them."""

    def __init__(self, record: Optional[Record] = None) -> None:
        self._clock: Optional[Clock] = None
        self._events: Deque[InputEvent] = deque(record.events if record else ())
        self._status: Dict[int, bool] = {}

    def load_record(self, record: Record) -> None:
        self._events = deque(record.events)

    def key_status(self, action: int) -> bool:
        return self._status.get(action, False)

    def mouse_position(self) -> Tuple[int, int]:
        return (0, 0)

    def poll_event(self) -> Optional[InputEvent]:
        if not self._events:
            return None
        if self._clock is None:
            raise RuntimeError("no clock source set")
        if self._clock.elapsed() > self._events[0].clock:
            event = self._events.popleft()
            self._status[event.action] = event.pressed
            return event
        return None

    def set_clock_source(self, clock: Clock) -> None:
        self._clock = clock

    def set_binds(self, binds: Sequence[int]) -> None:
        """Replays do not use key bindings."""