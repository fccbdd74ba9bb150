# -*- coding: utf-8 -*-
"""
QR Code Functional Areas Module

This module classifies every module of a QR symbol into the structural region
it belongs to according to ISO/IEC 18004: finder patterns, timing patterns,
alignment patterns, format information, version information, or data.

Functions:
    compute_alignment_centers: Look up alignment pattern center positions
    classify: Map a single module coordinate to its Region
    build_region_map: Classify every module of a symbol
    version_from_size: Derive the QR version from the symbol size
"""

import math
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Region(str, Enum):
    """Structural role of a module inside a QR symbol."""
    FINDER_TL = 'finder-tl'
    FINDER_TR = 'finder-tr'
    FINDER_BL = 'finder-bl'
    TIMING = 'timing'
    ALIGNMENT = 'alignment'
    FORMAT = 'format'
    VERSION = 'version'
    DATA = 'data'


# Human readable labels used by the status readout and the legend
REGION_LABELS: Dict[Region, str] = {
    Region.FINDER_TL: 'Finder Pattern',
    Region.FINDER_TR: 'Finder Pattern',
    Region.FINDER_BL: 'Finder Pattern',
    Region.TIMING: 'Timing Pattern',
    Region.ALIGNMENT: 'Alignment Pattern',
    Region.FORMAT: 'Format Info',
    Region.VERSION: 'Version Info',
    Region.DATA: 'Data / EC',
}

# Alignment pattern center coordinates per version (ISO/IEC 18004:2015 Annex E).
# The same axis values apply to rows and columns; centers are the cross product.
ALIGNMENT_PATTERN_TABLE: Dict[int, Tuple[int, ...]] = {
    2: (6, 18), 3: (6, 22), 4: (6, 26), 5: (6, 30), 6: (6, 34),
    7: (6, 22, 38), 8: (6, 24, 42), 9: (6, 26, 46), 10: (6, 28, 50),
    11: (6, 30, 54), 12: (6, 32, 58), 13: (6, 34, 62), 14: (6, 26, 46, 66),
    15: (6, 26, 48, 70), 16: (6, 26, 50, 74), 17: (6, 30, 54, 78),
    18: (6, 30, 56, 82), 19: (6, 30, 58, 86), 20: (6, 34, 62, 90),
    21: (6, 28, 50, 72, 94), 22: (6, 26, 50, 74, 98), 23: (6, 30, 54, 78, 102),
    24: (6, 28, 54, 80, 106), 25: (6, 32, 58, 84, 110), 26: (6, 30, 58, 86, 114),
    27: (6, 34, 62, 90, 118), 28: (6, 26, 50, 74, 98, 122),
    29: (6, 30, 54, 78, 102, 126), 30: (6, 26, 52, 78, 104, 130),
    31: (6, 30, 56, 82, 108, 134), 32: (6, 34, 60, 86, 112, 138),
    33: (6, 30, 58, 86, 114, 142), 34: (6, 34, 62, 90, 118, 146),
    35: (6, 30, 54, 78, 102, 126, 150), 36: (6, 24, 50, 76, 102, 128, 154),
    37: (6, 28, 54, 80, 106, 132, 158), 38: (6, 32, 58, 84, 110, 136, 162),
    39: (6, 26, 54, 82, 110, 138, 166), 40: (6, 30, 58, 86, 114, 142, 170),
}

MIN_SIZE = 21
MAX_SIZE = 177


def compute_alignment_centers(version: int) -> Tuple[int, ...]:
    """
    Return the alignment pattern center coordinates for a given QR version.

    Alignment patterns are 5x5 marks used to correct for distortion in larger
    symbols. Version 1 has none.

    Args:
        version (int): QR code version (1-40)

    Returns:
        Tuple[int, ...]: Axis coordinates of the centers, empty for version 1
        or for versions outside the table

    Example:
        >>> compute_alignment_centers(7)
        (6, 22, 38)
    """
    return ALIGNMENT_PATTERN_TABLE.get(version, ())


def version_from_size(size: int) -> int:
    """
    Derive the QR version from the number of modules per side.

    Args:
        size (int): Symbol size in modules (21 for v1, 25 for v2, ...)

    Returns:
        int: QR version, never lower than 1

    Note:
        Rounds half up so that sizes between two versions resolve the same
        way regardless of the platform's rounding mode.
    """
    return max(1, int(math.floor((size - 21) / 4 + 0.5)) + 1)


def _finder_zone(row: int, col: int, size: int) -> Optional[Region]:
    """Return the finder region containing (row, col), or None."""
    if row < 9 and col < 9:
        return Region.FINDER_TL
    if row < 9 and col >= size - 8:
        return Region.FINDER_TR
    if row >= size - 8 and col < 9:
        return Region.FINDER_BL
    return None


def _in_alignment(row: int, col: int, size: int, version: int) -> bool:
    centers = compute_alignment_centers(version)
    for ar in centers:
        for ac in centers:
            # Centers that would collide with a finder pattern are not placed
            if _finder_zone(ar, ac, size) is not None:
                continue
            if abs(row - ar) <= 2 and abs(col - ac) <= 2:
                return True
    return False


def in_format_strip(row: int, col: int, size: int) -> bool:
    """
    Return True if (row, col) lies on one of the format information strips.

    The row 8 strip covers columns < 9 and >= size - 8. The column 8 strip
    covers rows < 9 and >= size - 7: module (size - 8, 8) is the always-dark
    module and belongs to neither strip.
    """
    if row == 8 and (col < 9 or col >= size - 8):
        return True
    if col == 8 and (row < 9 or row >= size - 7):
        return True
    return False


def classify(row: int, col: int, size: int, version: int) -> Region:
    """
    Classify a module into the structural region it belongs to.

    Rules are evaluated in strict precedence order, first match wins:

    1. Finder patterns plus separators and format strip (9x9 corners)
    2. Timing patterns (row 6 and column 6)
    3. Alignment patterns (5x5 around each center, v2+)
    4. Format information (row 8 and column 8 strips)
    5. Version information (two 6x3 blocks, v7+)
    6. Data / error correction

    Args:
        row (int): Module row
        col (int): Module column
        size (int): Symbol size in modules
        version (int): QR code version (1-40)

    Returns:
        Region: The module's region

    Example:
        >>> classify(0, 0, 21, 1)
        <Region.FINDER_TL: 'finder-tl'>
        >>> classify(6, 10, 21, 1)
        <Region.TIMING: 'timing'>

    Note:
        The column 8 format strip ends at ``size - 7`` while the row 8 strip
        starts at ``size - 8``. Module (size - 8, 8) is the always-dark
        module and is not part of the format strip.
    """
    finder = _finder_zone(row, col, size)
    if finder is not None:
        return finder

    if row == 6 or col == 6:
        return Region.TIMING

    if version >= 2 and _in_alignment(row, col, size, version):
        return Region.ALIGNMENT

    if in_format_strip(row, col, size):
        return Region.FORMAT

    if version >= 7:
        if row < 6 and size - 11 <= col < size - 8:
            return Region.VERSION
        if col < 6 and size - 11 <= row < size - 8:
            return Region.VERSION

    return Region.DATA


def build_region_map(size: int, version: int) -> List[List[Region]]:
    """
    Classify every module of a symbol.

    Args:
        size (int): QR code size in modules
        version (int): QR code version (1-40)

    Returns:
        List[List[Region]]: region_map[r][c] is the region of module (r, c)

    Example:
        >>> regions = build_region_map(25, 2)
        >>> regions[18][18]
        <Region.ALIGNMENT: 'alignment'>
    """
    return [[classify(r, c, size, version) for c in range(size)] for r in range(size)]


# QR Code structure (Version 2, 25x25), as classified above:
"""
   0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4
 0 F F F F F F F F F D D D D D D D D F F F F F F F F
 1 F F F F F F F F F D D D D D D D D F F F F F F F F
 2 F F F F F F F F F D D D D D D D D F F F F F F F F
 3 F F F F F F F F F D D D D D D D D F F F F F F F F
 4 F F F F F F F F F D D D D D D D D F F F F F F F F
 5 F F F F F F F F F D D D D D D D D F F F F F F F F
 6 F F F F F F F F F T T T T T T T T F F F F F F F F
 7 F F F F F F F F F D D D D D D D D F F F F F F F F
 8 F F F F F F F F F D D D D D D D D F F F F F F F F
 9 D D D D D D T D D D D D D D D D D D D D D D D D D
10 D D D D D D T D D D D D D D D D D D D D D D D D D
11 D D D D D D T D D D D D D D D D D D D D D D D D D
12 D D D D D D T D D D D D D D D D D D D D D D D D D
13 D D D D D D T D D D D D D D D D D D D D D D D D D
14 D D D D D D T D D D D D D D D D D D D D D D D D D
15 D D D D D D T D D D D D D D D D D D D D D D D D D
16 D D D D D D T D D D D D D D D D A A A A A D D D D
17 F F F F F F F F F D D D D D D D A A A A A D D D D
18 F F F F F F F F F D D D D D D D A A A A A D D D D
19 F F F F F F F F F D D D D D D D A A A A A D D D D
20 F F F F F F F F F D D D D D D D A A A A A D D D D
21 F F F F F F F F F D D D D D D D D D D D D D D D D
22 F F F F F F F F F D D D D D D D D D D D D D D D D
23 F F F F F F F F F D D D D D D D D D D D D D D D D
24 F F F F F F F F F D D D D D D D D D D D D D D D D

Legend:
F = Finder region (finder pattern, separator and adjacent format strip)
T = Timing pattern (row/column 6)
A = Alignment pattern (5x5, v2+)
D = Data/ECC area
"""
