"""A character-cell frame buffer with colour blending and ANSI output."""

import struct
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Sequence, Tuple

from .textwidth import measure

CONTINUATION = 8
"""Character code marking the cell covered by the right half of a wide character."""

KEEP_CHAR = 1
"""Character code that leaves the character already in a cell untouched."""

_HEADER = "\x1b[H\x1b[48;2;0;0;0m\x1b[38;2;255;255;255m"
_BLACK_BACKGROUND = "\x1b[48;2;0;0;0m"


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


@dataclass(frozen=True)
class Color:
    """An ARGB colour; the all-zero colour means "no colour"."""

    alpha: int = 0
    red: int = 0
    green: int = 0
    blue: int = 0

    def __add__(self, other: "Color") -> "Color":
        return Color(
            self.alpha,
            (self.red + other.red) & 0xFF,
            (self.green + other.green) & 0xFF,
            (self.blue + other.blue) & 0xFF,
        )

    def __sub__(self, other: "Color") -> "Color":
        return Color(
            self.alpha,
            (self.red - other.red) & 0xFF,
            (self.green - other.green) & 0xFF,
            (self.blue - other.blue) & 0xFF,
        )

    def scaled(self, factor: float) -> "Color":
        """Return this colour with its alpha multiplied by factor."""
        return Color(int(self.alpha * factor) & 0xFF, self.red, self.green, self.blue)

    __mul__ = scaled
    __rmul__ = scaled

    def difference(self, other: "Color") -> float:
        """Mean absolute channel difference, from 0 to 1; alpha is ignored."""
        return (
            abs((self.red - other.red) / 255.0)
            + abs((self.blue - other.blue) / 255.0)
            + abs((self.green - other.green) / 255.0)
        ) / 3.0


EMPTY = Color()


def blend(a: Color, b: Color) -> Color:
    """Draw b over a using b's alpha; alphas add up, capped at 255."""
    if a == EMPTY:
        return b
    if b == EMPTY:
        return a
    alpha = _f32(b.alpha / 255.0)
    inv_alpha = _f32(1.0 - alpha)

    def mix(x: int, y: int) -> int:
        return int(_f32(_f32(x * inv_alpha) + _f32(y * alpha))) & 0xFF

    return Color(
        min(a.alpha + b.alpha, 255),
        mix(a.red, b.red),
        mix(a.green, b.green),
        mix(a.blue, b.blue),
    )


@dataclass
class PixelData:
    """One cell: foreground, background and a Unicode code point (0 for empty)."""

    foreground: Color = field(default_factory=Color)
    background: Color = field(default_factory=Color)
    char: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.char, str):
            self.char = ord(self.char)


class GameBuffer:
    """A grid of cells that renders itself as 24-bit ANSI terminal output."""

    def __init__(self, write: Callable[[bytes], object]) -> None:
        self.write = write
        self.width = 0
        self.height = 0
        self._pixels: List[PixelData] = []
        self._dirty = False

    def _check_buffer(self) -> None:
        if self._dirty:
            target = max(0, self.width * self.height)
            if len(self._pixels) < target:
                self._pixels.extend(PixelData() for _ in range(target - len(self._pixels)))
            self._dirty = False

    def _in_range(self, x: int, y: int) -> bool:
        return -1 < x < self.width and -1 < y < self.height

    def resize(self, width: int, height: int) -> None:
        """Set the size; storage grows on the next clear or output."""
        self.width = width
        self.height = height
        self._dirty = True

    def hide_cursor(self) -> None:
        self.write(b"\x1b[?25l")

    def init_console(self) -> None:
        self.hide_cursor()

    def clear(self) -> None:
        self._check_buffer()
        self._pixels = [PixelData() for _ in self._pixels]

    def render(self) -> bytes:
        """Return the ANSI byte stream for the current contents."""
        self._check_buffer()
        if self.height <= 0 and self.width <= 0:
            return b""
        out = bytearray(_HEADER.encode("ascii"))
        last_fg = Color(255, 255, 255, 255)
        last_bg = Color(255, 0, 0, 0)
        for row in range(self.height):
            for col in range(self.width):
                cell = self._pixels[row * self.width + col]
                code = cell.char
                if code == CONTINUATION:
                    continue
                if code == 0:
                    if last_bg != EMPTY:
                        out += _BLACK_BACKGROUND.encode("ascii")
                        last_bg = EMPTY
                    out += b" "
                    continue
                width = measure(code)
                if width == 0:
                    continue
                if width < 0 or code < 32:
                    out += b"?"
                    continue
                background = blend(Color(255, 0, 0, 0), cell.background)
                if cell.foreground != EMPTY:
                    foreground = blend(background, cell.foreground)
                else:
                    foreground = Color(255, 255, 255, 255)
                if last_fg != foreground:
                    out += f"\x1b[38;2;{foreground.red};{foreground.green};{foreground.blue}m".encode("ascii")
                    last_fg = foreground
                if last_bg != background:
                    out += f"\x1b[48;2;{background.red};{background.green};{background.blue}m".encode("ascii")
                    last_bg = background
                out += chr(code).encode("utf-8", "surrogatepass")
            out += b"\n"
        if out:
            del out[-1]
        return bytes(out)

    def output(self) -> None:
        """Render and pass the bytes to the writer."""
        data = self.render()
        if data:
            self.write(data)

    def set_pixel(self, x: int, y: int, pd: PixelData) -> None:
        """Blend pd into the cell at (x, y); cells outside the buffer are ignored."""
        x, y = int(x), int(y)
        if not self._in_range(x, y):
            return
        self._check_buffer()
        cell = self._pixels[y * self.width + x]
        if cell.char == CONTINUATION:
            cell.char = ord(" ")
        if pd.char != KEEP_CHAR:
            cell.char = pd.char
        cell.background = blend(cell.background, pd.background)
        cell.foreground = blend(cell.foreground, pd.foreground)

    def get_pixel(self, x: int, y: int) -> PixelData:
        """Return a copy of the cell at (x, y)."""
        x, y = int(x), int(y)
        if not self._in_range(x, y):
            raise IndexError("X or Y out of range.")
        self._check_buffer()
        return replace(self._pixels[y * self.width + x])

    def draw_string(self, text: str, start_x: int, start_y: int, fg: Color, bg: Color) -> None:
        """Write text from (start_x, start_y); newlines return to start_x, tabs skip a cell."""
        start_x, start_y = int(start_x), int(start_y)
        x, y = start_x, start_y
        for ch in text:
            code = ord(ch)
            if code == 10:
                x = start_x
                y += 1
                continue
            if code == 9:
                x += 1
                continue
            char_width = measure(code)
            if x + char_width <= self.width:
                self.set_pixel(x, y, PixelData(fg, bg, code))
                for i in range(1, char_width):
                    self.set_pixel(x + i, y, PixelData(Color(), Color(), CONTINUATION))
                x += char_width

    def draw_circle(self, x: int, y: int, size: float, width: float, wh_ratio: float, pd: PixelData) -> None:
        """Draw an anti-aliased ring centred on (x, y)."""
        aa = 4
        size /= 2
        radius = size / 2
        sr = radius * radius * aa
        r2 = int(size + 1) * aa
        r3 = int((size + 1) * wh_ratio * aa)
        faint = PixelData(pd.foreground.scaled(1.0 / aa), pd.background.scaled(1.0 / aa), pd.char)
        for i in range(-r2, r2 + 1):
            for j in range(-r3, r3 + 1):
                dist = (i / aa) ** 2 + (j / wh_ratio / aa) ** 2
                if sr - width * aa <= dist <= sr + width * aa:
                    self.set_pixel(x + _tdiv(j, aa), y + _tdiv(i, aa), faint)

    def fill_circle(self, x: int, y: int, size: float, wh_ratio: float, pd: PixelData) -> None:
        """Fill an anti-aliased disc centred on (x, y)."""
        size /= 2
        aa = 4
        radius = size / 2
        sr = radius * radius * aa
        r2 = int(size) * aa
        r3 = int(size * wh_ratio * aa)
        faint = PixelData(pd.foreground.scaled(1.0 / aa), pd.background.scaled(1.0 / aa), pd.char)
        for i in range(-r2, r2 + 1):
            if -aa < i < 0:
                continue
            for j in range(-r3, r3 + 1):
                if -aa < j < 0:
                    continue
                dist = (i / aa) ** 2 + (j / wh_ratio / aa) ** 2
                if dist <= sr:
                    self.set_pixel(x + _tdiv(j, aa), y + _tdiv(i, aa), faint)

    def fill_polygon(self, points: Sequence[Tuple[int, int]], pd: PixelData) -> None:
        """Scanline-fill a polygon given as (x, y) pairs."""
        pts = [(int(px), int(py)) for px, py in points]
        if len(pts) < 3:
            return
        min_y = min(py for _, py in pts)
        max_y = max(py for _, py in pts)
        edges = list(zip(pts, pts[1:] + pts[:1]))
        for y in range(min_y, max_y + 1):
            xs = sorted(
                x1 + _tdiv((y - y1) * (x2 - x1), y2 - y1)
                for (x1, y1), (x2, y2) in edges
                if ((y1 <= y < y2) or (y2 <= y < y1)) and y1 != y2
            )
            for start, end in zip(xs[0::2], xs[1::2]):
                self.draw_line_v(start, end, y, pd)

    def draw_line_h(self, x: int, y1: int, y2: int, pd: PixelData) -> None:
        """Draw the vertical run of cells in column x from y1 up to, not including, y2."""
        x, y1, y2 = int(x), int(y1), int(y2)
        if y1 > y2:
            y1, y2 = y2, y1
        if y1 == y2:
            self.set_pixel(x, y1, pd)
        for y in range(max(0, y1), min(y2, self.height)):
            self.set_pixel(x, y, pd)

    def draw_line_v(self, x1: int, x2: int, y: int, pd: PixelData) -> None:
        """Draw the horizontal run of cells in row y from x1 up to, not including, x2."""
        x1, x2, y = int(x1), int(x2), int(y)
        if x1 > x2:
            x1, x2 = x2, x1
        if x1 == x2:
            self.set_pixel(x1, y, pd)
        for x in range(max(0, x1), min(x2, self.width)):
            self.set_pixel(x, y, pd)

    def draw_line(self, x1: int, x2: int, y1: int, y2: int, pd: PixelData) -> None:
        """Draw a line from (x1, y1) to (x2, y2)."""
        x1, x2, y1, y2 = int(x1), int(x2), int(y1), int(y2)
        dx = abs(x2 - x1)
        dy = abs(y2 - y1)
        if dx == 0:
            self.draw_line_h(x1, y1, y2, pd)
            return
        if dy == 0:
            self.draw_line_v(x1, x2, y1, pd)
            return
        sx = 1 if x1 < x2 else -1
        sy = 1 if y1 < y2 else -1
        err = dx - dy
        while True:
            self.set_pixel(x1, y1, pd)
            if x1 == x2 and y1 == y2:
                break
            err2 = 2 * err
            if err2 > -dy:
                err -= dy
                x1 += sx
            if err2 < dx:
                err += dx
                y1 += sy

    def fill_rect(self, left: int, top: int, right: int, bottom: int, pd: PixelData) -> None:
        """Fill columns left..right-1 between top and bottom."""
        left, right = int(left), int(right)
        if left > right:
            left, right = right, left
        for x in range(left, right):
            self.draw_line_h(x, top, bottom, pd)

    def cells(self) -> Iterable[Tuple[int, int, PixelData]]:
        """Yield (x, y, cell copy) for every visible cell."""
        for y in range(max(0, self.height)):
            for x in range(max(0, self.width)):
                yield x, y, self.get_pixel(x, y)