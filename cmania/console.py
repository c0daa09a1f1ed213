"""Console keys, modifier state and input event records."""

from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag


class ConsoleKey(IntEnum):
    """Standard console keys, by virtual key code."""

    BACKSPACE = 8
    TAB = 9
    CLEAR = 12
    ENTER = 13
    PAUSE = 19
    ESCAPE = 27
    SPACEBAR = 32
    PAGE_UP = 33
    PAGE_DOWN = 34
    END = 35
    HOME = 36
    LEFT_ARROW = 37
    UP_ARROW = 38
    RIGHT_ARROW = 39
    DOWN_ARROW = 40
    SELECT = 41
    PRINT = 42
    EXECUTE = 43
    PRINT_SCREEN = 44
    INSERT = 45
    DELETE = 46
    HELP = 47
    D0 = 48
    D1 = 49
    D2 = 50
    D3 = 51
    D4 = 52
    D5 = 53
    D6 = 54
    D7 = 55
    D8 = 56
    D9 = 57
    A = 65
    B = 66
    C = 67
    D = 68
    E = 69
    F = 70
    G = 71
    H = 72
    I = 73  # noqa: E741
    J = 74
    K = 75
    L = 76
    M = 77
    N = 78
    O = 79  # noqa: E741
    P = 80
    Q = 81
    R = 82
    S = 83
    T = 84
    U = 85
    V = 86
    W = 87
    X = 88
    Y = 89
    Z = 90
    LEFT_WINDOWS = 91
    RIGHT_WINDOWS = 92
    APPLICATIONS = 93
    SLEEP = 95
    NUMPAD0 = 96
    NUMPAD1 = 97
    NUMPAD2 = 98
    NUMPAD3 = 99
    NUMPAD4 = 100
    NUMPAD5 = 101
    NUMPAD6 = 102
    NUMPAD7 = 103
    NUMPAD8 = 104
    NUMPAD9 = 105
    MULTIPLY = 106
    ADD = 107
    SEPARATOR = 108
    SUBTRACT = 109
    DECIMAL = 110
    DIVIDE = 111
    F1 = 112
    F2 = 113
    F3 = 114
    F4 = 115
    F5 = 116
    F6 = 117
    F7 = 118
    F8 = 119
    F9 = 120
    F10 = 121
    F11 = 122
    F12 = 123
    F13 = 124
    F14 = 125
    F15 = 126
    F16 = 127
    F17 = 128
    F18 = 129
    F19 = 130
    F20 = 131
    F21 = 132
    F22 = 133
    F23 = 134
    F24 = 135
    BROWSER_BACK = 166
    BROWSER_FORWARD = 167
    BROWSER_REFRESH = 168
    BROWSER_STOP = 169
    BROWSER_SEARCH = 170
    BROWSER_FAVORITES = 171
    BROWSER_HOME = 172
    VOLUME_MUTE = 173
    VOLUME_DOWN = 174
    VOLUME_UP = 175
    MEDIA_NEXT = 176
    MEDIA_PREVIOUS = 177
    MEDIA_STOP = 178
    MEDIA_PLAY = 179
    LAUNCH_MAIL = 180
    LAUNCH_MEDIA_SELECT = 181
    LAUNCH_APP1 = 182
    LAUNCH_APP2 = 183
    OEM1 = 186
    OEM_PLUS = 187
    OEM_COMMA = 188
    OEM_MINUS = 189
    OEM_PERIOD = 190
    OEM2 = 191
    OEM3 = 192
    OEM4 = 219
    OEM5 = 220
    OEM6 = 221
    OEM7 = 222
    OEM8 = 223
    OEM102 = 226
    PROCESS = 229
    PACKET = 231
    ATTENTION = 246
    CR_SEL = 247
    EX_SEL = 248
    ERASE_END_OF_FILE = 249
    PLAY = 250
    ZOOM = 251
    NO_NAME = 252
    PA1 = 253
    OEM_CLEAR = 254


class ControlKeyState(IntFlag):
    """Modifier and lock key state bits."""

    NONE = 0
    RIGHT_ALT = 0x1
    LEFT_ALT = 0x2
    RIGHT_CTRL = 0x4
    LEFT_CTRL = 0x8
    SHIFT = 0x10
    NUMLOCK = 0x20
    SCROLLLOCK = 0x40
    CAPSLOCK = 0x80


@dataclass
class KeyEventArgs:
    """A key going down or up, with the modifier state at the time."""

    key_state: ControlKeyState
    pressed: bool
    key: ConsoleKey
    unicode_char: str = ""
    repeat_count: int = 1

    def __post_init__(self) -> None:
        self.key_state = ControlKeyState(int(self.key_state))
        try:
            self.key = ConsoleKey(int(self.key))
        except ValueError:
            self.key = int(self.key)
        if isinstance(self.unicode_char, int):
            self.unicode_char = chr(self.unicode_char)

    def _has(self, flag: ControlKeyState) -> bool:
        return (self.key_state & flag) == flag

    def left_alt_down(self) -> bool:
        return self._has(ControlKeyState.LEFT_ALT)

    def right_alt_down(self) -> bool:
        return self._has(ControlKeyState.RIGHT_ALT)

    def left_ctrl_down(self) -> bool:
        return self._has(ControlKeyState.LEFT_CTRL)

    def right_ctrl_down(self) -> bool:
        return self._has(ControlKeyState.RIGHT_CTRL)

    def numlock(self) -> bool:
        return self._has(ControlKeyState.NUMLOCK)

    def scrolllock(self) -> bool:
        return self._has(ControlKeyState.SCROLLLOCK)

    def capslock(self) -> bool:
        return self._has(ControlKeyState.CAPSLOCK)

    def alt_down(self) -> bool:
        return self.left_alt_down() or self.right_alt_down()

    def ctrl_down(self) -> bool:
        return self.right_ctrl_down() or self.left_ctrl_down()


@dataclass
class MoveEventArgs:
    """The mouse moved to a cell."""

    x: int
    y: int


@dataclass
class ResizeEventArgs:
    """The console was resized to a number of columns and rows."""

    x: int
    y: int


class WheelDirection(Enum):
    VERTICAL = 0
    HORIZONTAL = 1


@dataclass
class WheelEventArgs:
    """The mouse wheel turned; delta is in notches."""

    delta: float
    direction: WheelDirection = WheelDirection.VERTICAL


class MouseButton(IntEnum):
    LEFT = 0
    MIDDLE = 1
    RIGHT = 2
    X1 = 3
    X2 = 4


@dataclass
class MouseKeyEventArgs:
    """A mouse button went down or up at a cell."""

    x: int
    y: int
    button: MouseButton
    pressed: bool


@dataclass
class InputEvent:
    """One input event, from a player or from a replay."""

    action: int = 0
    clock: float = 0.0
    pressed: bool = False
    x: int = 0
    y: int = 0