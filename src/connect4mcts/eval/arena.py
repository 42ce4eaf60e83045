"""
Arena for evaluating engine settings through head-to-head matches.

Players share the Engine surface (initialize / submit_opponent_move /
teardown), so an engine can face another engine or a random mover.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Optional

from ..engine import Engine
from ..errors import IllegalMoveError
from ..game import (
    GameState,
    MoveResult,
    Outcome,
    Player,
    initial_state,
    is_terminal,
    legal_moves_list,
    play_auto,
    winner,
)
from ..utils.config import SearchConfig


@dataclass
class ArenaResult:
    """Results from arena evaluation."""

    wins: int
    losses: int
    draws: int
    total_games: int
    win_rate: float

    @property
    def score(self) -> float:
        """Win rate counting draws as half."""
        return (self.wins + 0.5 * self.draws) / self.total_games if self.total_games > 0 else 0.0


class RandomMover:
    """Opponent that plays uniformly random legal moves."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.state: Optional[GameState] = None

    def _move(self) -> int:
        col = self.rng.choice(legal_moves_list(self.state))
        play_auto(self.state, col)
        return col

    def initialize(self, side, budget: Optional[int] = None) -> Optional[int]:
        self.state = initial_state(Player.A)
        if Player(side) == Player.A:
            return self._move()
        return None

    def submit_opponent_move(self, column: int) -> Optional[int]:
        play_auto(self.state, column)
        if is_terminal(self.state):
            return None
        return self._move()

    def teardown(self) -> None:
        self.state = None


def play_match(player_a, player_b) -> Outcome:
    """
    Play one complete game, player_a moving first.

    Both players are torn down afterwards.
    """
    state = initial_state(Player.A)
    try:
        player_b.initialize(Player.B)
        move = player_a.initialize(Player.A)
        waiting = player_b

        while True:
            result = play_auto(state, move)
            if not result.accepted:
                raise IllegalMoveError(f"Player produced illegal move {move}", result)
            if result != MoveResult.VALID:
                break
            move = waiting.submit_opponent_move(move)
            if move is None:
                break
            waiting = player_a if waiting is player_b else player_b
    finally:
        player_a.teardown()
        player_b.teardown()

    return winner(state)


class Arena:
    """
    Arena for engine evaluation matches.

    Args:
        config: Search settings of the engine under test
        rng: Random source shared by every player the arena creates
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or SearchConfig()
        self.rng = rng or random.Random()

    def _run(
        self,
        make_opponent: Callable[[], object],
        num_games: int,
        progress_callback: Callable[[int, str], None] = None,
    ) -> ArenaResult:
        wins = 0
        losses = 0
        draws = 0

        for i in range(num_games):
            candidate = Engine(self.config, rng=self.rng)
            opponent = make_opponent()

            # Alternate who plays first
            if i % 2 == 0:
                outcome = play_match(candidate, opponent)
                candidate_side = Outcome.PLAYER_A
            else:
                outcome = play_match(opponent, candidate)
                candidate_side = Outcome.PLAYER_B

            if outcome is candidate_side:
                wins += 1
                result = "W"
            elif outcome is Outcome.DRAW:
                draws += 1
                result = "D"
            else:
                losses += 1
                result = "L"

            if progress_callback:
                progress_callback(i + 1, result)

        total = wins + losses + draws
        win_rate = wins / total if total > 0 else 0.0

        return ArenaResult(
            wins=wins,
            losses=losses,
            draws=draws,
            total_games=total,
            win_rate=win_rate,
        )

    def evaluate(
        self,
        opponent_config: SearchConfig,
        num_games: int = 20,
        progress_callback: Callable[[int, str], None] = None,
    ) -> ArenaResult:
        """
        Evaluate the engine against an engine with other settings.

        Returns:
            ArenaResult from the candidate's perspective
        """
        return self._run(
            lambda: Engine(opponent_config, rng=self.rng),
            num_games,
            progress_callback,
        )

    def evaluate_vs_random(
        self,
        num_games: int = 20,
        progress_callback: Callable[[int, str], None] = None,
    ) -> ArenaResult:
        """
        Evaluate the engine against a uniformly random player.

        Returns:
            ArenaResult from the engine's perspective
        """
        return self._run(lambda: RandomMover(self.rng), num_games, progress_callback)


def should_accept(result: ArenaResult, threshold: float = 0.55) -> bool:
    """Whether the candidate settings scored at least 'threshold'."""
    return result.score >= threshold
