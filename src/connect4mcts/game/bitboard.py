"""
Connect 4 game logic on bitboards.

Board representation:
- One integer grid per player (see layout.py for the bit layout)
- A 7-element column occupancy counter (0-6 disks per column)

Player A always owns grid_a. Exactly one grid carries the turn bit at any
time; it moves to the other grid after each accepted move. Once a grid
carries the win bit, no further moves are accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

import numpy as np

from .layout import (
    ROWS,
    COLS,
    TURN_BIT,
    WIN_BIT,
    TOP_ROW_MASK,
    cell_offset,
    is_valid_column,
)
from .win import makes_connect4


class Player(IntEnum):
    """The two sides of a game. A moves first unless told otherwise."""

    A = 0
    B = 1

    @property
    def other(self) -> Player:
        return Player.B if self is Player.A else Player.A


class MoveResult(IntEnum):
    """Outcome of a call to play()."""

    WIN = 1
    VALID = 0
    DRAW = 2  # accepted, and the board is now full
    NOT_YOUR_TURN = -1
    COLUMN_FULL = -2
    GAME_FINISHED = -3
    INVALID_ARGS = -64

    @property
    def accepted(self) -> bool:
        return self in (MoveResult.WIN, MoveResult.VALID, MoveResult.DRAW)


class Outcome(Enum):
    PLAYER_A = "A"
    PLAYER_B = "B"
    DRAW = "draw"
    ONGOING = "ongoing"

    @classmethod
    def for_player(cls, player: Player) -> Outcome:
        return cls.PLAYER_A if player == Player.A else cls.PLAYER_B


@dataclass
class GameState:
    """Mutable game state. Use copy() before handing it to anyone who plays on it."""

    grid_a: int = 0
    grid_b: int = 0
    occupancy: List[int] = field(default_factory=lambda: [0] * COLS)

    def copy(self) -> GameState:
        return GameState(grid_a=self.grid_a, grid_b=self.grid_b, occupancy=list(self.occupancy))

    def key(self) -> Tuple[int, int]:
        """Hashable identity of the position (grids include turn and win bits)."""
        return self.grid_a, self.grid_b

    @property
    def num_disks(self) -> int:
        return sum(self.occupancy)


def initial_state(starting_player: Player = Player.A) -> GameState:
    """Create an empty board with 'starting_player' to move."""
    if starting_player not in (Player.A, Player.B):
        raise ValueError(f"Invalid starting player {starting_player!r}")
    state = GameState()
    if starting_player == Player.A:
        state.grid_a = TURN_BIT
    else:
        state.grid_b = TURN_BIT
    return state


def current_player(state: GameState) -> Player:
    """Player whose turn it is."""
    return Player.A if state.grid_a & TURN_BIT else Player.B


def winner(state: GameState) -> Outcome:
    """
    Result of the game so far.

    A draw is declared once the top row is full and nobody has won.
    """
    if state.grid_a & WIN_BIT:
        return Outcome.PLAYER_A
    if state.grid_b & WIN_BIT:
        return Outcome.PLAYER_B
    if (state.grid_a | state.grid_b) & TOP_ROW_MASK == TOP_ROW_MASK:
        return Outcome.DRAW
    return Outcome.ONGOING


def is_terminal(state: GameState) -> bool:
    return winner(state) is not Outcome.ONGOING


def play(state: GameState, player: Player, col: int) -> MoveResult:
    """
    Drop a disk for 'player' in column 'col', updating 'state' in place.

    The state is only modified when the move is accepted (WIN, VALID or DRAW);
    every rejection leaves it untouched.

    Args:
        state: Current game state
        player: Player attempting the move
        col: Column index (0-6)

    Returns:
        MoveResult describing what happened
    """
    if state is None or player not in (Player.A, Player.B) or not is_valid_column(col):
        return MoveResult.INVALID_ARGS
    col = int(col)

    if is_terminal(state):
        return MoveResult.GAME_FINISHED
    if state.occupancy[col] >= ROWS:
        return MoveResult.COLUMN_FULL
    if current_player(state) != player:
        return MoveResult.NOT_YOUR_TURN

    bit = 1 << cell_offset(col, state.occupancy[col])
    state.occupancy[col] += 1
    row = state.occupancy[col] - 1

    if player == Player.A:
        grid = (state.grid_a | bit) & ~TURN_BIT
        state.grid_b |= TURN_BIT
        if makes_connect4(grid, col, row):
            grid |= WIN_BIT
        state.grid_a = grid
    else:
        grid = (state.grid_b | bit) & ~TURN_BIT
        state.grid_a |= TURN_BIT
        if makes_connect4(grid, col, row):
            grid |= WIN_BIT
        state.grid_b = grid

    if grid & WIN_BIT:
        return MoveResult.WIN
    if winner(state) is Outcome.DRAW:
        return MoveResult.DRAW
    return MoveResult.VALID


def play_auto(state: GameState, col: int) -> MoveResult:
    """Like play(), for whichever player is to move."""
    if state is None:
        return MoveResult.INVALID_ARGS
    return play(state, current_player(state), col)


def play_copy_auto(state: GameState, col: int) -> Optional[GameState]:
    """
    Apply a move to a copy of 'state'.

    Returns:
        The new state if the move was accepted (even if it ends the game),
        None otherwise. 'state' is never modified.
    """
    if state is None:
        return None
    new_state = state.copy()
    if not play_auto(new_state, col).accepted:
        return None
    return new_state


def legal_moves(state: GameState) -> np.ndarray:
    """
    Return a boolean mask of length 7 indicating legal moves.
    No move is legal once the game is over.
    """
    if is_terminal(state):
        return np.zeros(COLS, dtype=bool)
    return np.array(state.occupancy, dtype=np.int8) < ROWS


def legal_moves_list(state: GameState) -> list[int]:
    """Return list of legal column indices."""
    mask = legal_moves(state)
    return [i for i in range(COLS) if mask[i]]


def to_array(state: GameState) -> np.ndarray:
    """
    Board as a (6, 7) int8 array for display.

    Row 0 is the top row; +1 marks player A, -1 marks player B, 0 is empty.
    """
    board = np.zeros((ROWS, COLS), dtype=np.int8)
    for row in range(ROWS):
        for col in range(COLS):
            bit = 1 << cell_offset(col, row)
            if state.grid_a & bit:
                board[ROWS - 1 - row, col] = 1
            elif state.grid_b & bit:
                board[ROWS - 1 - row, col] = -1
    return board
