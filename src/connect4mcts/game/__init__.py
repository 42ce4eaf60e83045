"""Game module - Connect 4 rules on bitboards."""

from .layout import (
    ROWS,
    COLS,
    WIN_LENGTH,
    cell_offset,
    is_valid_column,
)

from .bitboard import (
    Player,
    MoveResult,
    Outcome,
    GameState,
    initial_state,
    current_player,
    winner,
    is_terminal,
    play,
    play_auto,
    play_copy_auto,
    legal_moves,
    legal_moves_list,
    to_array,
)

from .win import makes_connect4

__all__ = [
    "ROWS",
    "COLS",
    "WIN_LENGTH",
    "cell_offset",
    "is_valid_column",
    "Player",
    "MoveResult",
    "Outcome",
    "GameState",
    "initial_state",
    "current_player",
    "winner",
    "is_terminal",
    "play",
    "play_auto",
    "play_copy_auto",
    "legal_moves",
    "legal_moves_list",
    "to_array",
    "makes_connect4",
]
