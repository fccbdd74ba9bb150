# -*- coding: utf-8 -*-
"""
QR Code Generator Module

This module wraps the segno library to turn a payload into the boolean module
matrix the grid inspector works with. Encoding itself (data modes, error
correction coding, masking) is entirely delegated to segno.

Classes:
    QRSymbol: Encoded symbol (matrix, version, error correction level)
    EncodingError: Raised when a payload cannot be encoded

Functions:
    encode: Encode text at a given error correction level
    matrix_from_rows: Normalize any row iterable into an immutable matrix
    symbol_metrics: Module statistics for the info bar
"""

import logging
from typing import Any, Dict, Iterable, NamedTuple, Tuple

import segno

from .functional_areas import MAX_SIZE, MIN_SIZE, version_from_size

logger = logging.getLogger(__name__)

Matrix = Tuple[Tuple[bool, ...], ...]

EC_LEVELS = ('L', 'M', 'Q', 'H')

EC_LABELS = {
    'L': 'Low',
    'M': 'Medium',
    'Q': 'Quartile',
    'H': 'High',
}

DEFAULT_EC_LEVEL = 'M'


class EncodingError(ValueError):
    """The payload could not be encoded with the requested parameters."""


class QRSymbol(NamedTuple):
    matrix: Matrix
    version: int
    ec_level: str

    @property
    def size(self) -> int:
        return len(self.matrix)


def matrix_from_rows(rows: Iterable[Iterable[Any]]) -> Matrix:
    """
    Convert an iterable of rows into an immutable boolean matrix.

    Accepts segno's tuple of bytearrays as well as plain nested lists.

    Args:
        rows: Iterable of rows (truthy = dark module)

    Returns:
        Matrix: Tuple of tuples of bool

    Raises:
        ValueError: If the matrix is not square, its size is even or it is
            outside the standard QR range (21-177 modules)
    """
    matrix = tuple(tuple(bool(v) for v in row) for row in rows)
    size = len(matrix)
    if any(len(row) != size for row in matrix):
        raise ValueError("QR matrix must be square")
    if size % 2 == 0 or not MIN_SIZE <= size <= MAX_SIZE:
        raise ValueError(f"Unsupported QR matrix size: {size}")
    return matrix


def encode(text: str, ec_level: str = DEFAULT_EC_LEVEL) -> QRSymbol:
    """
    Encode text into a QR symbol.

    The smallest version that fits the payload at the requested error
    correction level is used. The level is never boosted, so the symbol
    matches the caller's choice exactly.

    Args:
        text (str): The data to encode
        ec_level (str): Error correction level ('L', 'M', 'Q', 'H')
            - L: ~7% recovery capability
            - M: ~15% recovery capability
            - Q: ~25% recovery capability
            - H: ~30% recovery capability

    Returns:
        QRSymbol: Matrix, version (derived from the matrix size) and level

    Raises:
        EncodingError: If the text is empty, the level is unknown or the
            payload exceeds the capacity of a version 40 symbol

    Example:
        >>> symbol = encode("https://example.com", 'M')
        >>> symbol.version, symbol.size
        (2, 25)
    """
    ecc = (ec_level or DEFAULT_EC_LEVEL).strip().upper()
    if ecc not in EC_LEVELS:
        raise EncodingError(f"Unknown error correction level: {ec_level!r}")
    if not text:
        raise EncodingError("Nothing to encode: the text is empty")

    try:
        qr = segno.make(text, error=ecc, micro=False, boost_error=False)
    except segno.DataOverflowError as exc:
        raise EncodingError(f"Data too large for error correction level {ecc}: {exc}") from exc
    except ValueError as exc:
        raise EncodingError(str(exc)) from exc

    matrix = matrix_from_rows(qr.matrix)
    version = version_from_size(len(matrix))
    logger.info(f"Encoded {len(text)} chars as version {version} ({len(matrix)}x{len(matrix)}, ecc={ecc})")
    return QRSymbol(matrix=matrix, version=version, ec_level=ecc)


def symbol_metrics(symbol: QRSymbol) -> Dict[str, Any]:
    """
    Calculate the module statistics shown next to the grid.

    Returns:
        Dict[str, Any]: size, modules, version, ec_level, ec_label,
        dark/light module counts and their rounded percentages
    """
    size = symbol.size
    total = size * size
    dark = sum(sum(1 for v in row if v) for row in symbol.matrix)
    light = total - dark
    return {
        'size': size,
        'modules': total,
        'version': symbol.version,
        'ec_level': symbol.ec_level,
        'ec_label': EC_LABELS[symbol.ec_level],
        'dark_modules': dark,
        'light_modules': light,
        'dark_percent': int(dark * 100 / total + 0.5),
        'light_percent': int(light * 100 / total + 0.5),
    }
