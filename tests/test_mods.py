import pytest

from cmania.mods import OsuMods, mod_scale, mods_abbr, playback_rate


def test_no_mods():
    assert mod_scale(OsuMods.NONE) == 1.0
    assert playback_rate(OsuMods.NONE) == 1.0
    assert mods_abbr(OsuMods.NONE) == "NM"


def test_reducing_mods_halve_score():
    assert mod_scale(OsuMods.EASY) == 0.5
    assert mod_scale(OsuMods.NO_FALL) == 0.5
    assert mod_scale(OsuMods.EASY | OsuMods.HALF_TIME) == pytest.approx(0.25)


def test_increasing_mods_raise_score():
    assert mod_scale(OsuMods.HIDDEN) > 1.0
    assert mod_scale(OsuMods.HIDDEN | OsuMods.FADE_OUT) > mod_scale(OsuMods.HIDDEN)


def test_playback_rates():
    assert playback_rate(OsuMods.NIGHTCORE) == 1.5
    assert playback_rate(OsuMods.HALF_TIME) == 0.75
    both = playback_rate(OsuMods.NIGHTCORE | OsuMods.HALF_TIME)
    assert both == pytest.approx(
        playback_rate(OsuMods.NIGHTCORE) * playback_rate(OsuMods.HALF_TIME)
    )


def test_abbreviation_order():
    assert mods_abbr(OsuMods.HARDROCK | OsuMods.AUTO) == "ATHR"
    assert mods_abbr(OsuMods.NO_FALL | OsuMods.HIDDEN | OsuMods.EASY) == "EZHDNF"


def test_unshown_mods_give_nm():
    assert mods_abbr(OsuMods.MIRROR | OsuMods.RANDOM) == "NM"


def test_random_key_mods_leave_score_and_rate_alone():
    mods = OsuMods.RANDOM_5K
    assert mod_scale(mods) == 1.0
    assert playback_rate(mods) == 1.0
    assert mods_abbr(mods | OsuMods.HIDDEN) == "HD"
    assert (int(mods) >> 16) & 0xF == 5


def test_plain_int_accepted():
    assert mods_abbr(int(OsuMods.AUTO)) == "AT"
    assert mod_scale(int(OsuMods.EASY)) == mod_scale(OsuMods.EASY)