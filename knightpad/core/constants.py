"""Shared constants for the knight-move keypad counter."""

from __future__ import annotations

from typing import Tuple

# (row offset, col offset) pairs of a chess knight move.
KNIGHT_STEPS: Tuple[Tuple[int, int], ...] = (
    (1, 2), (1, -2), (-1, 2), (-1, -2),
    (2, 1), (2, -1), (-2, 1), (-2, -1),
)

# (label, row, col, is_vowel) for the 18-key pad. Row 4 sits under columns 2-4.
KEY_LAYOUT: Tuple[Tuple[str, int, int, bool], ...] = (
    ("A", 1, 1, True), ("B", 1, 2, False), ("C", 1, 3, False), ("D", 1, 4, False), ("E", 1, 5, True),
    ("F", 2, 1, False), ("G", 2, 2, False), ("H", 2, 3, False), ("I", 2, 4, True), ("J", 2, 5, False),
    ("K", 3, 1, False), ("L", 3, 2, False), ("M", 3, 3, False), ("N", 3, 4, False), ("O", 3, 5, True),
    ("1", 4, 2, False), ("2", 4, 3, False), ("3", 4, 4, False),
)

DEFAULT_VOWEL_BUDGET = 2
DEFAULT_SPLIT_DEPTH = 2
DEFAULT_RECURSION_BAND = 200

# Cache lock stripes per pool worker.
STRIPES_PER_WORKER = 4

U64_MAX = 2**64 - 1
