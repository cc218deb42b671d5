# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""Fixed-width field formatting for the legacy DSSP format.

All functions here are pure: they turn one value into the exact token the
legacy format expects and never log.
"""

import math

from .constants import kHeaderMarkerColumn
from .errors import FormatIncompatibility


def format_int(value: int, width: int) -> str:
    """Right-aligns an integer in `width` columns.

    Raises:
        FormatIncompatibility: If the number needs more than `width` columns.
    """
    text = f"{int(value):>{width}d}"
    if len(text) > width:
        raise FormatIncompatibility(
            f"Value {value} does not fit in a field of width {width}"
        )
    return text


def format_real(value: float, width: int, precision: int) -> str:
    """Right-aligns a real with fixed decimals; wider values are not truncated."""
    return f"{value:>{width}.{precision}f}"


def letter(k: int, lowercase: bool = False) -> str:
    """Maps a 1-based index onto 'A'..'Z' (or 'a'..'z'), wrapping after 26."""
    base = ord('a') if lowercase else ord('A')
    return chr(base + (k - 1) % 26)


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up (7.5 -> 8), unlike `round`."""
    return int(math.floor(value + 0.5))


def terminate(text: str, column: int = kHeaderMarkerColumn, marker: str = '.') -> str:
    """Pads a header text to `column` and appends the end-of-line marker.

    A single space always separates the text from the padding, so text that
    already reaches the marker column is not truncated.
    """
    return f"{text} ".ljust(column) + marker


def fit(text: str, column: int = kHeaderMarkerColumn, marker: str = '.') -> str:
    """Truncates or pads `text` to exactly `column` characters plus the marker."""
    return f"{text:<{column}.{column}}" + marker
