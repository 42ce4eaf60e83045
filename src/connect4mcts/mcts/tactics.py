"""
Tactical shortcuts checked before running a search.

Both checks work on throwaway copies of the position and never touch the
search tree.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..game import (
    COLS,
    GameState,
    Outcome,
    Player,
    current_player,
    is_terminal,
    play_copy_auto,
    winner,
)

WIN = "win"
BLOCK = "block"


def find_immediate_win(state: GameState, player: Player) -> Optional[int]:
    """Lowest column that wins on the spot for 'player', if any."""
    if is_terminal(state) or current_player(state) != player:
        return None

    target = Outcome.for_player(player)
    for col in range(COLS):
        after = play_copy_auto(state, col)
        if after is not None and winner(after) is target:
            return col
    return None


def find_forced_block(state: GameState, player: Player) -> Optional[int]:
    """
    Column the opponent threatens to win in, if any.

    Tries every move of 'player' followed by every different reply of the
    opponent; the first reply that wins for the opponent is returned as
    the column 'player' must occupy now.
    """
    if is_terminal(state) or current_player(state) != player:
        return None

    threat = Outcome.for_player(player.other)
    for mine in range(COLS):
        after_mine = play_copy_auto(state, mine)
        if after_mine is None or is_terminal(after_mine):
            continue
        for theirs in range(COLS):
            if theirs == mine:
                continue
            after_theirs = play_copy_auto(after_mine, theirs)
            if after_theirs is not None and winner(after_theirs) is threat:
                return theirs
    return None


def tactical_move(state: GameState, player: Player) -> Optional[Tuple[int, str]]:
    """
    Returns:
        (column, WIN) for an immediate win, (column, BLOCK) for a forced
        block, or None if neither applies
    """
    col = find_immediate_win(state, player)
    if col is not None:
        return col, WIN
    col = find_forced_block(state, player)
    if col is not None:
        return col, BLOCK
    return None
