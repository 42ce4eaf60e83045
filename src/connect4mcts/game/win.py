"""
Incremental four-in-a-row detection.

Only the lines passing through the most recently dropped disk are scanned,
so a check costs at most four short walks instead of a full-board rescan.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from .layout import ROWS, COLS, WIN_LENGTH, cell_offset

Cell = Tuple[int, int]


def _has_disk(grid: int, col: int, row: int) -> bool:
    return (grid >> cell_offset(col, row)) & 1 == 1


def _longest_run(grid: int, cells: Iterable[Cell]) -> int:
    """Longest run of consecutive set cells along 'cells' (stops early at WIN_LENGTH)."""
    best = 0
    run = 0
    for col, row in cells:
        if _has_disk(grid, col, row):
            run += 1
            if run > best:
                best = run
                if best >= WIN_LENGTH:
                    break
        else:
            run = 0
    return best


def _horizontal(row: int) -> Iterator[Cell]:
    for c in range(COLS):
        yield c, row


def _diagonal_up_right(col: int, row: int) -> Iterator[Cell]:
    # Walk back to the nearest edge first so the scan never wraps a column
    dist = min(row, col)
    c, r = col - dist, row - dist
    while c < COLS and r < ROWS:
        yield c, r
        c += 1
        r += 1


def _diagonal_up_left(col: int, row: int) -> Iterator[Cell]:
    dist = min(row, COLS - 1 - col)
    c, r = col + dist, row - dist
    while c >= 0 and r < ROWS:
        yield c, r
        c -= 1
        r += 1


def vertical_run(grid: int, col: int, row: int) -> int:
    """Number of consecutive disks from (col, row) downwards."""
    count = 0
    for r in range(row, -1, -1):
        if not _has_disk(grid, col, r):
            break
        count += 1
    return count


def makes_connect4(grid: int, col: int, row: int) -> bool:
    """
    Check whether the disk at (col, row) completes four in a row.

    Args:
        grid: Bit grid of the player who just moved (including the new disk)
        col: Column of the new disk (0-6)
        row: Row of the new disk, i.e. occupancy[col] - 1 after the drop

    Returns:
        True if any line through the new disk holds WIN_LENGTH or more
        consecutive disks of that player
    """
    if vertical_run(grid, col, row) >= WIN_LENGTH:
        return True
    if _longest_run(grid, _horizontal(row)) >= WIN_LENGTH:
        return True
    if _longest_run(grid, _diagonal_up_right(col, row)) >= WIN_LENGTH:
        return True
    return _longest_run(grid, _diagonal_up_left(col, row)) >= WIN_LENGTH
