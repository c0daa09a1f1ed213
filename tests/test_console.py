from cmania.console import (
    ConsoleKey,
    ControlKeyState,
    InputEvent,
    KeyEventArgs,
    MouseButton,
    MouseKeyEventArgs,
    WheelDirection,
    WheelEventArgs,
)


def test_key_codes_match_virtual_keys():
    assert KeyEventArgs(0, True, 65).key is ConsoleKey.A
    assert KeyEventArgs(0, True, 27).key is ConsoleKey.ESCAPE
    assert KeyEventArgs(0, True, 97).key is ConsoleKey.NUMPAD1


def test_key_event_converts_raw_values():
    kea = KeyEventArgs(0x8, True, 13, 13, 1)
    assert kea.key is ConsoleKey.ENTER
    assert kea.key_state == ControlKeyState.LEFT_CTRL
    assert kea.unicode_char == "\r"


def test_unknown_key_code_kept_as_int():
    kea = KeyEventArgs(0, True, 7)
    assert kea.key == 7
    assert not isinstance(kea.key, ConsoleKey)


def test_alt_and_ctrl_detection():
    kea = KeyEventArgs(ControlKeyState.LEFT_ALT, True, ConsoleKey.A)
    assert kea.alt_down() is True
    assert kea.left_alt_down() is True
    assert kea.right_alt_down() is False
    assert kea.ctrl_down() is False

    kea = KeyEventArgs(ControlKeyState.RIGHT_CTRL, True, ConsoleKey.A)
    assert kea.ctrl_down() is True
    assert kea.right_ctrl_down() is True
    assert kea.left_ctrl_down() is False
    assert kea.alt_down() is False


def test_lock_states():
    state = ControlKeyState.CAPSLOCK | ControlKeyState.NUMLOCK
    kea = KeyEventArgs(state, False, ConsoleKey.B)
    assert kea.capslock() is True
    assert kea.numlock() is True
    assert kea.scrolllock() is False


def test_input_event_defaults():
    evt = InputEvent()
    assert (evt.action, evt.clock, evt.pressed, evt.x, evt.y) == (0, 0.0, False, 0, 0)


def test_mouse_and_wheel_args():
    mkea = MouseKeyEventArgs(3, 4, MouseButton.RIGHT, True)
    assert mkea.button == 2
    wea = WheelEventArgs(1.0)
    assert wea.direction is WheelDirection.VERTICAL