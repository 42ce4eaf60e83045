"""
Uniform random playouts.

A playout copies the state and keeps dropping disks until the game ends.
Each move starts from a uniformly random column and scans forward (with
wraparound) to the first column that still has room.
"""

from __future__ import annotations

import random
from enum import IntEnum

from ..game import (
    COLS,
    GameState,
    MoveResult,
    Outcome,
    Player,
    play_auto,
    winner,
)


class SimulationResult(IntEnum):
    FAVORABLE = 1
    UNFAVORABLE = 0
    FAILED = -1


def classify(outcome: Outcome, searcher: Player) -> SimulationResult:
    """Map a finished game to the searcher's point of view. Draws count as unfavorable."""
    if outcome is Outcome.for_player(searcher):
        return SimulationResult.FAVORABLE
    return SimulationResult.UNFAVORABLE


def random_move(state: GameState, rng: random.Random) -> MoveResult:
    """Play one uniformly random legal move in place."""
    start = rng.randrange(COLS)
    result = MoveResult.COLUMN_FULL
    for step in range(COLS):
        result = play_auto(state, (start + step) % COLS)
        if result != MoveResult.COLUMN_FULL:
            break
    return result


def simulate(state: GameState, searcher: Player, rng: random.Random) -> SimulationResult:
    """
    Run one random playout from 'state'.

    Args:
        state: Starting position (never modified)
        searcher: The side the search plays for
        rng: Random source

    Returns:
        FAVORABLE if the searcher won, UNFAVORABLE on a loss or draw,
        FAILED if the playout could not be carried out
    """
    if state is None:
        return SimulationResult.FAILED

    outcome = winner(state)
    if outcome is not Outcome.ONGOING:
        return classify(outcome, searcher)

    try:
        playout = state.copy()
    except MemoryError:
        return SimulationResult.FAILED

    while outcome is Outcome.ONGOING:
        result = random_move(playout, rng)
        if result == MoveResult.INVALID_ARGS:
            return SimulationResult.FAILED
        if result == MoveResult.COLUMN_FULL:
            # Every column is full without a winner
            return SimulationResult.UNFAVORABLE
        outcome = winner(playout)

    return classify(outcome, searcher)
