"""
Tree reuse across moves, with transposition recombination.

When a move C is committed at the root, the subtree under C becomes the
new root and every sibling subtree is released. Before the siblings go,
their evidence is salvaged: for any other columns Y and X, the position
reached by root -> Y -> X -> C holds the same disks as root -> C -> X -> Y,
so the statistics of the former are added along the path of the latter.

This is not canonical MCTS. Merges from different (Y, X) pairs can count
overlapping evidence more than once, so win rates after recombination are
inflated confidence figures rather than calibrated probabilities.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from ..errors import AllocationError, IllegalMoveError, InvalidArgumentError
from ..game import COLS, is_valid_column, play_auto

if TYPE_CHECKING:
    from .search import MCTS


def ensure_path(mcts: MCTS, start: int, cols: Iterable[int]) -> Optional[int]:
    """
    Follow 'cols' from 'start', creating missing nodes along the way.

    Returns:
        Index of the final node, or None if some move on the path is illegal
    """
    index: Optional[int] = start
    for col in cols:
        index = mcts.ensure_child(index, col)
        if index is None:
            return None
    return index


def merge_transpositions(mcts: MCTS, col: int) -> int:
    """
    Merge root -> Y -> X -> col statistics into root -> col -> X -> Y.

    Returns:
        Number of merges performed
    """
    arena = mcts.arena
    root_index = mcts.root
    root = mcts.root_node
    merges = 0

    for y in range(COLS):
        if y == col or root.children[y] is None:
            continue
        y_node = arena[root.children[y]]

        for x in range(COLS):
            if x in (col, y) or y_node.children[x] is None:
                continue
            source_index = arena[y_node.children[x]].children[col]
            if source_index is None:
                continue
            source = arena[source_index]
            wins, visits = source.wins, source.visits
            if visits == 0 and wins == 0:
                continue

            try:
                target = ensure_path(mcts, root_index, (col, x, y))
            except AllocationError as e:
                if mcts.logger is not None:
                    mcts.logger.log_warning(f"Recombination stopped early: {e}")
                return merges
            if target is None:
                continue

            mcts.backpropagate(target, wins, visits)
            merges += 1

    return merges


def advance_root(mcts: MCTS, col: int, recombine: bool = True) -> int:
    """
    Make the child for 'col' the new root and release everything else.

    The child is created from scratch if it does not exist yet.

    Args:
        mcts: Search whose tree is advanced
        col: Column just played at the root
        recombine: Salvage sibling statistics first (see module docstring)

    Returns:
        Index of the new root

    Raises:
        InvalidArgumentError: if 'col' is not a column index
        IllegalMoveError: if 'col' cannot be played at the root
        AllocationError: if the new root cannot be created
    """
    if not is_valid_column(col):
        raise InvalidArgumentError(f"Invalid column {col!r}, must be 0-{COLS-1}")
    col = int(col)

    old_root = mcts.root
    root = mcts.root_node
    new_state = root.state.copy()
    result = play_auto(new_state, col)
    if not result.accepted:
        raise IllegalMoveError(f"Column {col} cannot be played: {result.name}", result)

    if recombine:
        merge_transpositions(mcts, col)

    child = root.children[col]
    root.children[col] = None
    mcts.arena.release(old_root)
    mcts.root = None

    if child is None:
        mcts.root = mcts.create_and_simulate(new_state, None)
    else:
        mcts.arena[child].parent = None
        mcts.root = child
    return mcts.root

