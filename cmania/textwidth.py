"""Terminal cell width of Unicode code points."""

from bisect import bisect_right

_COMBINING = (
    (768, 879), (1155, 1158), (1160, 1161), (1425, 1469), (1471, 1471),
    (1473, 1474), (1476, 1477), (1479, 1479), (1536, 1539), (1552, 1557),
    (1611, 1630), (1648, 1648), (1750, 1764), (1767, 1768), (1770, 1773),
    (1807, 1807), (1809, 1809), (1840, 1866), (1958, 1968), (2027, 2035),
    (2305, 2306), (2364, 2364), (2369, 2376), (2381, 2381), (2385, 2388),
    (2402, 2403), (2433, 2433), (2492, 2492), (2497, 2500), (2509, 2509),
    (2530, 2531), (2561, 2562), (2620, 2620), (2625, 2626), (2631, 2632),
    (2635, 2637), (2672, 2673), (2689, 2690), (2748, 2748), (2753, 2757),
    (2759, 2760), (2765, 2765), (2786, 2787), (2817, 2817), (2876, 2876),
    (2879, 2879), (2881, 2883), (2893, 2893), (2902, 2902), (2946, 2946),
    (3008, 3008), (3021, 3021), (3134, 3136), (3142, 3144), (3146, 3149),
    (3157, 3158), (3260, 3260), (3263, 3263), (3270, 3270), (3276, 3277),
    (3298, 3299), (3393, 3395), (3405, 3405), (3530, 3530), (3538, 3540),
    (3542, 3542), (3633, 3633), (3636, 3642), (3655, 3662), (3761, 3761),
    (3764, 3769), (3771, 3772), (3784, 3789), (3864, 3865), (3893, 3893),
    (3895, 3895), (3897, 3897), (3953, 3966), (3968, 3972), (3974, 3975),
    (3984, 3991), (3993, 4028), (4038, 4038), (4141, 4144), (4146, 4146),
    (4150, 4151), (4153, 4153), (4184, 4185), (4448, 4607), (4959, 4959),
    (5906, 5908), (5938, 5940), (5970, 5971), (6002, 6003), (6068, 6069),
    (6071, 6077), (6086, 6086), (6089, 6099), (6109, 6109), (6155, 6157),
    (6313, 6313), (6432, 6434), (6439, 6440), (6450, 6450), (6457, 6459),
    (6679, 6680), (6912, 6915), (6964, 6964), (6966, 6970), (6972, 6972),
    (6978, 6978), (7019, 7027), (7616, 7626), (7678, 7679), (8203, 8207),
    (8234, 8238), (8288, 8291), (8298, 8303), (8400, 8431), (11930, 11930),
    (12020, 12031), (12246, 12271), (12284, 12287), (12772, 12783),
    (12831, 12831), (42125, 42127), (43014, 43014), (43019, 43019),
    (43045, 43046), (64286, 64286), (65024, 65039), (65050, 65055),
    (65056, 65059), (65107, 65107), (65127, 65127), (65279, 65279),
    (65529, 65531),
)

_WIDE = (
    (4352, 4447), (8986, 8987), (9001, 9002), (9193, 9196), (9200, 9200),
    (9203, 9203), (9725, 9726), (9748, 9749), (9800, 9811), (9855, 9855),
    (9875, 9875), (9889, 9889), (9898, 9899), (9917, 9918), (9924, 9925),
    (9934, 9934), (9940, 9940), (9962, 9962), (9970, 9971), (9973, 9973),
    (9978, 9978), (9981, 9981), (9989, 9989), (9994, 9995), (10024, 10024),
    (10060, 10060), (10062, 10062), (10067, 10069), (10071, 10071),
    (10133, 10135), (10160, 10160), (10175, 10175), (11035, 11036),
    (11088, 11088), (11093, 11093), (11904, 12350), (12353, 12438),
    (12441, 12543), (12549, 12591), (12593, 12686), (12688, 12871),
    (12880, 19903), (19968, 42182), (43360, 43388), (44032, 55203),
    (63744, 64255), (65040, 65055), (65072, 65131), (65281, 65376),
    (65504, 65510), (65536, 1114111),
)

_COMBINING_STARTS = [start for start, _ in _COMBINING]
_WIDE_STARTS = [start for start, _ in _WIDE]


def _in_table(code: int, starts: list, table: tuple) -> bool:
    index = bisect_right(starts, code) - 1
    return index >= 0 and code <= table[index][1]


def measure(ucs4: int) -> int:
    """Return how many terminal cells a code point takes; -1 for control characters."""
    if ucs4 <= 31:
        return -1
    if 127 <= ucs4 <= 159:
        return -1
    if ucs4 < 127:
        return 1
    if _in_table(ucs4, _COMBINING_STARTS, _COMBINING):
        return 0
    return 2 if _in_table(ucs4, _WIDE_STARTS, _WIDE) else 1