"""Gameplay modifiers and the values derived from them."""

from enum import IntFlag


class OsuMods(IntFlag):
    """Modifier flags; bits 16-19 carry a key count for random mods."""

    NONE = 0
    EASY = 0b1
    NO_FALL = 0b10
    HALF_TIME = 0b100
    NIGHTCORE = 0b1000
    HARDROCK = 0b10000
    HIDDEN = 0b100000
    FADE_OUT = 0b1000000
    AUTO = 0b100000000
    RELAX = 0b1000000000
    MIRROR = 0b10000000000
    RANDOM = 0b100000000000
    NO_JUMP = 0b1000000000000
    NO_HOLD = 0b10000000000000
    COOP = 0b100000000000000

    RANDOM_1K = RANDOM | (1 << 16)
    RANDOM_2K = RANDOM | (2 << 16)
    RANDOM_3K = RANDOM | (3 << 16)
    RANDOM_4K = RANDOM | (4 << 16)
    RANDOM_5K = RANDOM | (5 << 16)
    RANDOM_6K = RANDOM | (6 << 16)
    RANDOM_7K = RANDOM | (7 << 16)
    RANDOM_8K = RANDOM | (8 << 16)
    RANDOM_9K = RANDOM | (9 << 16)


def _has(mods: int, flag: OsuMods) -> bool:
    return (int(mods) & int(flag)) == int(flag)


def mod_scale(mods: int) -> float:
    """Score multiplier for a set of mods."""
    scale = 1.0
    if _has(mods, OsuMods.FADE_OUT):
        scale += 0.06
    if _has(mods, OsuMods.HIDDEN):
        scale += 0.06
    if _has(mods, OsuMods.HARDROCK):
        scale += 0.06
    if _has(mods, OsuMods.NIGHTCORE):
        scale += 0.12
    if _has(mods, OsuMods.EASY):
        scale *= 0.5
    if _has(mods, OsuMods.HALF_TIME):
        scale *= 0.5
    if _has(mods, OsuMods.NO_FALL):
        scale *= 0.5
    if _has(mods, OsuMods.RELAX):
        scale *= 0.1
    return scale


def playback_rate(mods: int) -> float:
    """Audio and clock speed for a set of mods."""
    rate = 1.0
    if _has(mods, OsuMods.NIGHTCORE):
        rate *= 1.5
    if _has(mods, OsuMods.HALF_TIME):
        rate *= 0.75
    return rate


_ABBREVIATIONS = (
    (OsuMods.AUTO, "AT"),
    (OsuMods.HARDROCK, "HR"),
    (OsuMods.EASY, "EZ"),
    (OsuMods.NIGHTCORE, "NC"),
    (OsuMods.HALF_TIME, "HT"),
    (OsuMods.FADE_OUT, "FO"),
    (OsuMods.HIDDEN, "HD"),
    (OsuMods.NO_FALL, "NF"),
)


def mods_abbr(mods: int) -> str:
    """Short display form of a set of mods, "NM" when none are shown."""
    text = "".join(abbr for flag, abbr in _ABBREVIATIONS if _has(mods, flag))
    return text or "NM"