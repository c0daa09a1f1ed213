"""The component host, the frame buffer driver and the FPS overlay."""

import math
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Union

from .gamebuffer import Color, GameBuffer


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


class Component:
    """Something plugged into a game that reacts to named events."""

    game: Optional["Game"] = None

    def attach(self, game: "Game") -> None:
        self.game = game

    def process_event(self, event: str, args: Any) -> None:
        raise NotImplementedError


class Game:
    """Holds components, broadcasts events to them and keeps shared features."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None) -> None:
        self.settings: Dict[str, Any] = settings if settings is not None else {}
        self._components: List[Component] = []
        self._features: Dict[type, Any] = {}

    def use(self, component: Union[Component, Callable[[], Component]]) -> "Game":
        """Add a component, or one made by a factory; returns the game for chaining."""
        instance = component if isinstance(component, Component) else component()
        instance.attach(self)
        self._components.append(instance)
        return self

    def raise_event(self, event: str, args: Any = None) -> None:
        for component in list(self._components):
            component.process_event(event, args)

    def register_feature(self, interface: type, implementation: Any) -> None:
        self._features[interface] = implementation

    def get_feature(self, interface: type) -> Any:
        try:
            return self._features[interface]
        except KeyError:
            raise KeyError(f"no feature registered for {interface.__name__}") from None


class BufferController(Component):
    """Clears, lets components draw into, and outputs the frame buffer on every tick."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.buffer = GameBuffer(self._push)

    def _push(self, data: bytes) -> None:
        if self.game is not None:
            self.game.raise_event("push", data)

    def process_event(self, event: str, args: Any) -> None:
        if event == "start":
            self.game.raise_event("fresize")
            self.buffer.init_console()
        elif event == "tick":
            with self._lock:
                self.buffer.clear()
                self.game.raise_event("draw", self.buffer)
                self.buffer.output()
        elif event == "resize":
            with self._lock:
                self.buffer.resize(args.x, args.y)


class FpsOverlay(Component):
    """Draws the frame rate and the time since the last frame in the bottom right."""

    def __init__(self, clock: Callable[[], float] = _now_ms) -> None:
        self._clock = clock
        self._tick_count = 0
        self._last_count = 0.0
        self._last_tick = 0.0
        self.fps = 0

    def process_event(self, event: str, args: Any) -> None:
        if event == "tick":
            now = float(args)
            if now - self._last_count >= 1000:
                self.fps = int(math.floor(self._tick_count / (now - self._last_count) * 1000 + 0.5))
                self._last_count = now
                self._tick_count = 0
            self._tick_count += 1
        elif event == "draw":
            now = self._clock()
            buffer: GameBuffer = args
            fps_text = f"FPS:{self.fps}"
            latency_text = f"{now - self._last_tick:f}"[:6] + "ms"
            self._last_tick = now
            width = max(len(fps_text), len(latency_text))
            buffer.draw_string(
                fps_text + "\n" + latency_text,
                buffer.width - 1 - width,
                buffer.height - 3,
                Color(240, 0, 170, 255),
                Color(),
            )