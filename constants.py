import re

# Mode indicators
NUMERIC_MODE = 1 << 0
ALPHANUMERIC_MODE = 1 << 1
EIGHT_BIT_BYTE_MODE = 1 << 2
KANJI_MODE = 1 << 3

MODE_INDICATORS = (
    NUMERIC_MODE,
    ALPHANUMERIC_MODE,
    EIGHT_BIT_BYTE_MODE,
    KANJI_MODE,
)

# Bits of the character count indicator, see Table 3
MODE_SIZE_SMALL = {
    NUMERIC_MODE: 10,
    ALPHANUMERIC_MODE: 9,
    EIGHT_BIT_BYTE_MODE: 8,
    KANJI_MODE: 8,
}
MODE_SIZE_MEDIUM = {
    NUMERIC_MODE: 12,
    ALPHANUMERIC_MODE: 11,
    EIGHT_BIT_BYTE_MODE: 16,
    KANJI_MODE: 10,
}
MODE_SIZE_LARGE = {
    NUMERIC_MODE: 14,
    ALPHANUMERIC_MODE: 13,
    EIGHT_BIT_BYTE_MODE: 16,
    KANJI_MODE: 12,
}

# Error correction level indicators, see Table 25
ERR_CORR_L = 1
ERR_CORR_M = 0
ERR_CORR_Q = 3
ERR_CORR_H = 2

ERR_CORR_LEVELS = {
    'L': ERR_CORR_L,
    'M': ERR_CORR_M,
    'Q': ERR_CORR_Q,
    'H': ERR_CORR_H,
}

# Column of each level in RS_BLOCK_TABLE and LIMIT_LENGTH
ERR_CORR_OFFSET = {
    ERR_CORR_L: 0,
    ERR_CORR_M: 1,
    ERR_CORR_Q: 2,
    ERR_CORR_H: 3,
}

MIN_VERSION = 1
MAX_VERSION = 40

# Padding codewords, 11101100 and 00010001
PAD0 = 0xEC
PAD1 = 0x11

# Prepended to byte segments holding multi-byte characters
UTF8_BOM = (0xEF, 0xBB, 0xBF)

# Characters encodeURI leaves as they are (besides letters and digits)
URI_SAFE = ";,/?:@&=+$-_.!~*'()#"
RE_PERCENT_ESCAPE = re.compile(r'%[0-9a-fA-F]{2}')

# BCH generator polynomials, see Annex C and D
G15 = (
    (1 << 10) | (1 << 8) | (1 << 5) | (1 << 4) | (1 << 2) | (1 << 1) | (1 << 0)
)
G18 = (
    (1 << 12) | (1 << 11) | (1 << 10) | (1 << 9) | (1 << 8) | (1 << 5)
    | (1 << 2) | (1 << 0)
)
G15_MASK = (1 << 14) | (1 << 12) | (1 << 10) | (1 << 4) | (1 << 1)

# Penalty weights, see Table 24
MASK_EVAL_N1 = 3
MASK_EVAL_N2 = 3
MASK_EVAL_N3 = 40
MASK_EVAL_N4 = 10

# Row/column coordinates of alignment pattern centres, indexed by version - 1
PATTERN_POSITION = (
    (),
    (6, 18),
    (6, 22),
    (6, 26),
    (6, 30),
    (6, 34),
    (6, 22, 38),
    (6, 24, 42),
    (6, 26, 46),
    (6, 28, 50),
    (6, 30, 54),
    (6, 32, 58),
    (6, 34, 62),
    (6, 26, 46, 66),
    (6, 26, 48, 70),
    (6, 26, 50, 74),
    (6, 30, 54, 78),
    (6, 30, 56, 82),
    (6, 30, 58, 86),
    (6, 34, 62, 90),
    (6, 28, 50, 72, 94),
    (6, 26, 50, 74, 98),
    (6, 30, 54, 78, 102),
    (6, 28, 54, 80, 106),
    (6, 32, 58, 84, 110),
    (6, 30, 58, 86, 114),
    (6, 34, 62, 90, 118),
    (6, 26, 50, 74, 98, 122),
    (6, 30, 54, 78, 102, 126),
    (6, 26, 52, 78, 104, 130),
    (6, 30, 56, 82, 108, 134),
    (6, 34, 60, 86, 112, 138),
    (6, 30, 58, 86, 114, 142),
    (6, 34, 62, 90, 118, 146),
    (6, 30, 54, 78, 102, 126, 150),
    (6, 24, 50, 76, 102, 128, 154),
    (6, 28, 54, 80, 106, 132, 158),
    (6, 32, 58, 84, 110, 136, 162),
    (6, 26, 54, 82, 110, 138, 166),
    (6, 30, 58, 86, 114, 142, 170),
)

# Byte mode capacity (in characters) per version, columns L, M, Q, H
LIMIT_LENGTH = (
    (17, 14, 11, 7),  # 1
    (32, 26, 20, 14),  # 2
    (53, 42, 32, 24),  # 3
    (78, 62, 46, 34),  # 4
    (106, 84, 60, 44),  # 5
    (134, 106, 74, 58),  # 6
    (154, 122, 86, 64),  # 7
    (192, 152, 108, 84),  # 8
    (230, 180, 130, 98),  # 9
    (271, 213, 151, 119),  # 10
    (321, 251, 177, 137),  # 11
    (367, 287, 203, 155),  # 12
    (425, 331, 241, 177),  # 13
    (458, 362, 258, 194),  # 14
    (520, 412, 292, 220),  # 15
    (586, 450, 322, 250),  # 16
    (644, 504, 364, 280),  # 17
    (718, 560, 394, 310),  # 18
    (792, 624, 442, 338),  # 19
    (858, 666, 482, 382),  # 20
    (929, 711, 509, 403),  # 21
    (1003, 779, 565, 439),  # 22
    (1091, 857, 611, 461),  # 23
    (1171, 911, 661, 511),  # 24
    (1273, 997, 715, 535),  # 25
    (1367, 1059, 751, 593),  # 26
    (1465, 1125, 805, 625),  # 27
    (1528, 1190, 868, 658),  # 28
    (1628, 1264, 908, 698),  # 29
    (1732, 1370, 982, 742),  # 30
    (1840, 1452, 1030, 790),  # 31
    (1952, 1538, 1112, 842),  # 32
    (2068, 1628, 1168, 898),  # 33
    (2188, 1722, 1228, 958),  # 34
    (2303, 1809, 1283, 983),  # 35
    (2431, 1911, 1351, 1051),  # 36
    (2563, 1989, 1423, 1093),  # 37
    (2699, 2099, 1499, 1139),  # 38
    (2809, 2213, 1579, 1219),  # 39
    (2953, 2331, 1663, 1273),  # 40
)

# (block count, total codewords, data codewords) groups per version, rows L, M, Q, H
# See Table 9
RS_BLOCK_TABLE = (
    # 1
    (1, 26, 19),
    (1, 26, 16),
    (1, 26, 13),
    (1, 26, 9),

    # 2
    (1, 44, 34),
    (1, 44, 28),
    (1, 44, 22),
    (1, 44, 16),

    # 3
    (1, 70, 55),
    (1, 70, 44),
    (2, 35, 17),
    (2, 35, 13),

    # 4
    (1, 100, 80),
    (2, 50, 32),
    (2, 50, 24),
    (4, 25, 9),

    # 5
    (1, 134, 108),
    (2, 67, 43),
    (2, 33, 15, 2, 34, 16),
    (2, 33, 11, 2, 34, 12),

    # 6
    (2, 86, 68),
    (4, 43, 27),
    (4, 43, 19),
    (4, 43, 15),

    # 7
    (2, 98, 78),
    (4, 49, 31),
    (2, 32, 14, 4, 33, 15),
    (4, 39, 13, 1, 40, 14),

    # 8
    (2, 121, 97),
    (2, 60, 38, 2, 61, 39),
    (4, 40, 18, 2, 41, 19),
    (4, 40, 14, 2, 41, 15),

    # 9
    (2, 146, 116),
    (3, 58, 36, 2, 59, 37),
    (4, 36, 16, 4, 37, 17),
    (4, 36, 12, 4, 37, 13),

    # 10
    (2, 86, 68, 2, 87, 69),
    (4, 69, 43, 1, 70, 44),
    (6, 43, 19, 2, 44, 20),
    (6, 43, 15, 2, 44, 16),

    # 11
    (4, 101, 81),
    (1, 80, 50, 4, 81, 51),
    (4, 50, 22, 4, 51, 23),
    (3, 36, 12, 8, 37, 13),

    # 12
    (2, 116, 92, 2, 117, 93),
    (6, 58, 36, 2, 59, 37),
    (4, 46, 20, 6, 47, 21),
    (7, 42, 14, 4, 43, 15),

    # 13
    (4, 133, 107),
    (8, 59, 37, 1, 60, 38),
    (8, 44, 20, 4, 45, 21),
    (12, 33, 11, 4, 34, 12),

    # 14
    (3, 145, 115, 1, 146, 116),
    (4, 64, 40, 5, 65, 41),
    (11, 36, 16, 5, 37, 17),
    (11, 36, 12, 5, 37, 13),

    # 15
    (5, 109, 87, 1, 110, 88),
    (5, 65, 41, 5, 66, 42),
    (5, 54, 24, 7, 55, 25),
    (11, 36, 12),

    # 16
    (5, 122, 98, 1, 123, 99),
    (7, 73, 45, 3, 74, 46),
    (15, 43, 19, 2, 44, 20),
    (3, 45, 15, 13, 46, 16),

    # 17
    (1, 135, 107, 5, 136, 108),
    (10, 74, 46, 1, 75, 47),
    (1, 50, 22, 15, 51, 23),
    (2, 42, 14, 17, 43, 15),

    # 18
    (5, 150, 120, 1, 151, 121),
    (9, 69, 43, 4, 70, 44),
    (17, 50, 22, 1, 51, 23),
    (2, 42, 14, 19, 43, 15),

    # 19
    (3, 141, 113, 4, 142, 114),
    (3, 70, 44, 11, 71, 45),
    (17, 47, 21, 4, 48, 22),
    (9, 39, 13, 16, 40, 14),

    # 20
    (3, 135, 107, 5, 136, 108),
    (3, 67, 41, 13, 68, 42),
    (15, 54, 24, 5, 55, 25),
    (15, 43, 15, 10, 44, 16),

    # 21
    (4, 144, 116, 4, 145, 117),
    (17, 68, 42),
    (17, 50, 22, 6, 51, 23),
    (19, 46, 16, 6, 47, 17),

    # 22
    (2, 139, 111, 7, 140, 112),
    (17, 74, 46),
    (7, 54, 24, 16, 55, 25),
    (34, 37, 13),

    # 23
    (4, 151, 121, 5, 152, 122),
    (4, 75, 47, 14, 76, 48),
    (11, 54, 24, 14, 55, 25),
    (16, 45, 15, 14, 46, 16),

    # 24
    (6, 147, 117, 4, 148, 118),
    (6, 73, 45, 14, 74, 46),
    (11, 54, 24, 16, 55, 25),
    (30, 46, 16, 2, 47, 17),

    # 25
    (8, 132, 106, 4, 133, 107),
    (8, 75, 47, 13, 76, 48),
    (7, 54, 24, 22, 55, 25),
    (22, 45, 15, 13, 46, 16),

    # 26
    (10, 142, 114, 2, 143, 115),
    (19, 74, 46, 4, 75, 47),
    (28, 50, 22, 6, 51, 23),
    (33, 46, 16, 4, 47, 17),

    # 27
    (8, 152, 122, 4, 153, 123),
    (22, 73, 45, 3, 74, 46),
    (8, 53, 23, 26, 54, 24),
    (12, 45, 15, 28, 46, 16),

    # 28
    (3, 147, 117, 10, 148, 118),
    (3, 73, 45, 23, 74, 46),
    (4, 54, 24, 31, 55, 25),
    (11, 45, 15, 31, 46, 16),

    # 29
    (7, 146, 116, 7, 147, 117),
    (21, 73, 45, 7, 74, 46),
    (1, 53, 23, 37, 54, 24),
    (19, 45, 15, 26, 46, 16),

    # 30
    (5, 145, 115, 10, 146, 116),
    (19, 75, 47, 10, 76, 48),
    (15, 54, 24, 25, 55, 25),
    (23, 45, 15, 25, 46, 16),

    # 31
    (13, 145, 115, 3, 146, 116),
    (2, 74, 46, 29, 75, 47),
    (42, 54, 24, 1, 55, 25),
    (23, 45, 15, 28, 46, 16),

    # 32
    (17, 145, 115),
    (10, 74, 46, 23, 75, 47),
    (10, 54, 24, 35, 55, 25),
    (19, 45, 15, 35, 46, 16),

    # 33
    (17, 145, 115, 1, 146, 116),
    (14, 74, 46, 21, 75, 47),
    (29, 54, 24, 19, 55, 25),
    (11, 45, 15, 46, 46, 16),

    # 34
    (13, 145, 115, 6, 146, 116),
    (14, 74, 46, 23, 75, 47),
    (44, 54, 24, 7, 55, 25),
    (59, 46, 16, 1, 47, 17),

    # 35
    (12, 151, 121, 7, 152, 122),
    (12, 75, 47, 26, 76, 48),
    (39, 54, 24, 14, 55, 25),
    (22, 45, 15, 41, 46, 16),

    # 36
    (6, 151, 121, 14, 152, 122),
    (6, 75, 47, 34, 76, 48),
    (46, 54, 24, 10, 55, 25),
    (2, 45, 15, 64, 46, 16),

    # 37
    (17, 152, 122, 4, 153, 123),
    (29, 74, 46, 14, 75, 47),
    (49, 54, 24, 10, 55, 25),
    (24, 45, 15, 46, 46, 16),

    # 38
    (4, 152, 122, 18, 153, 123),
    (13, 74, 46, 32, 75, 47),
    (48, 54, 24, 14, 55, 25),
    (42, 45, 15, 32, 46, 16),

    # 39
    (20, 147, 117, 4, 148, 118),
    (40, 75, 47, 7, 76, 48),
    (43, 54, 24, 22, 55, 25),
    (10, 45, 15, 67, 46, 16),

    # 40
    (19, 148, 118, 6, 149, 119),
    (18, 75, 47, 31, 76, 48),
    (34, 54, 24, 34, 55, 25),
    (20, 45, 15, 61, 46, 16),
)
