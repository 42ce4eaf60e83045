"""
Board geometry and bit layout.

Each player owns one integer grid:
- Bit 62: set if it's this player's turn
- Bit 61: set once this player has connected four
- Bits 41 -> 35: top row
- ...
- Bits 6 -> 0: bottom row

Within a row, column 0 maps to the highest bit.
"""

from __future__ import annotations

import numbers

ROWS = 6
COLS = 7
WIN_LENGTH = 4

TURN_BIT = 1 << 62
WIN_BIT = 1 << 61

ROW_MASK = (1 << COLS) - 1
TOP_ROW_MASK = ROW_MASK << (COLS * (ROWS - 1))
CELLS_MASK = (1 << (ROWS * COLS)) - 1


def cell_offset(col: int, row: int) -> int:
    """Bit index of the cell at (col, row), row 0 being the bottom."""
    return (row + 1) * COLS - col - 1


def is_valid_column(col) -> bool:
    """Whether 'col' is an integer column index in [0, COLS)."""
    if isinstance(col, bool) or not isinstance(col, numbers.Integral):
        return False
    return 0 <= col < COLS
