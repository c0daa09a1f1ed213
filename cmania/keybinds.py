"""Default key layout and the keys used for a given column count."""

from typing import List, Optional, Sequence

from .console import ConsoleKey

DEFAULT_KEY_BINDS: List[ConsoleKey] = [
    ConsoleKey.A, ConsoleKey.S, ConsoleKey.D, ConsoleKey.F,
    ConsoleKey.SPACEBAR,
    ConsoleKey.J, ConsoleKey.K, ConsoleKey.L, ConsoleKey.SEPARATOR,
    ConsoleKey.Q, ConsoleKey.W, ConsoleKey.E, ConsoleKey.R,
    ConsoleKey.M,
    ConsoleKey.U, ConsoleKey.I, ConsoleKey.I, ConsoleKey.P,
]


def key_binds_for(keys: int, binds: Optional[Sequence[ConsoleKey]] = None) -> List[ConsoleKey]:
    """Keys for each column, left to right, taken from an 18-key layout."""
    if binds is None:
        binds = DEFAULT_KEY_BINDS
    if keys == 0:
        return []
    if keys < 0:
        raise ValueError("keys must not be negative")
    half = keys // 2 if keys <= 9 else keys // 4
    if half > 4:
        raise ValueError(f"too many keys: {keys}")
    odd = keys % 2 != 0 if keys <= 9 else keys % 4 != 0
    result = list(binds[4 - half:4])
    if odd:
        result.append(binds[4])
    result.extend(binds[5:5 + half])
    if keys > 9:
        result.extend(binds[13 - half:13])
        if keys % 4 != 0:
            result.append(binds[13])
        result.extend(binds[14:14 + half])
    return result