"""A text label that wraps inside a rectangle of a frame buffer."""

from dataclasses import dataclass, field

from .gamebuffer import CONTINUATION, Color, GameBuffer, PixelData
from .textwidth import measure


@dataclass
class Label:
    """Text drawn inside a box; overflow on the last line ends with '>'."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    foreground: Color = field(default_factory=Color)
    text: str = ""

    def render(self, buffer: GameBuffer) -> None:
        if self.width == 0 or self.height == 0:
            return
        right = self.x + self.width
        bottom = self.y + self.height
        cx, cy = self.x, self.y
        for ch in self.text:
            if cy > bottom:
                return
            code = ord(ch)
            if code in (10, 13):
                cx = self.x
                cy += 1
                continue
            size = measure(code)
            if size <= 0:
                continue
            while True:
                if cx + size >= right and cy == bottom:
                    buffer.set_pixel(right - 1, cy, PixelData(self.foreground, Color(), ord(">")))
                    return
                if cx + size > right:
                    cx = self.x
                    cy += 1
                    if cy > bottom:
                        return
                    continue
                break
            buffer.set_pixel(cx, cy, PixelData(self.foreground, Color(), code))
            for j in range(1, size):
                buffer.set_pixel(cx + j, cy, PixelData(self.foreground, Color(), CONTINUATION))
            cx += size