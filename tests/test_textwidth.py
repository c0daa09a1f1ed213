import pytest

from cmania.textwidth import measure


@pytest.mark.parametrize("code", [0, 10, 31, 127, 140, 159, -5])
def test_control_characters_are_negative(code):
    assert measure(code) == -1


@pytest.mark.parametrize("char", ["a", "Z", " ", "~", "0"])
def test_ascii_is_single_width(char):
    assert measure(ord(char)) == 1


def test_latin1_after_controls_is_single():
    assert measure(160) == 1


@pytest.mark.parametrize("code", [768, 879, 0x200B, 65279])
def test_combining_marks_have_zero_width(code):
    assert measure(code) == 0


def test_just_after_combining_range_is_single():
    assert measure(880) == 1


@pytest.mark.parametrize("char", ["中", "あ", "한", "！"])
def test_east_asian_wide(char):
    assert measure(ord(char)) == 2


def test_supplementary_planes_are_wide():
    assert measure(65536) == 2
    assert measure(1114111) == 2


def test_combining_wins_over_wide():
    assert measure(65050) == 0
    assert measure(65040) == 2