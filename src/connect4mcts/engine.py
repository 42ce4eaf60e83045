"""
Game-playing engine: the request/response surface around the search.

An Engine plays one side of one match at a time:

    engine = Engine(SearchConfig(budget=2000), rng=make_rng(0))
    first = engine.initialize(Player.B)      # None: wait for the opponent
    reply = engine.submit_opponent_move(3)   # engine's answer, a column 0-6
    snapshot = engine.query_state()
    engine.teardown()

The search tree's root always holds the live game position. Each move,
whoever plays it, is committed to the tree so statistics gathered for
that line are reused on the next decision.
"""

from __future__ import annotations

import numbers
import random
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .errors import EngineError, IllegalMoveError, InvalidArgumentError
from .game import (
    COLS,
    Outcome,
    Player,
    current_player,
    initial_state,
    is_valid_column,
    play,
    to_array,
    winner,
)
from .mcts import MCTS, tactical_move
from .mcts.tactics import WIN
from .utils.config import SearchConfig
from .utils.logging import Logger, SearchMetrics

SEARCH = "search"


@dataclass
class EngineSnapshot:
    """Display-oriented view of the current match."""

    board: np.ndarray  # (6, 7) int8, row 0 on top, +1 = A, -1 = B
    outcome: Outcome
    to_move: Player
    win_rate: float  # root wins / visits from the engine's point of view
    visits: int
    nodes: int


def parse_side(side) -> Player:
    """Accept Player, 0/1 or "A"/"B"."""
    if isinstance(side, str):
        name = side.strip().upper()
        if name in ("A", "B"):
            return Player[name]
    elif isinstance(side, numbers.Integral) and not isinstance(side, bool) and side in (0, 1):
        return Player(int(side))
    raise InvalidArgumentError(f"Invalid side {side!r}, must be A or B")


class Engine:
    """
    MCTS Connect 4 opponent.

    Args:
        config: Search parameters; config.budget is the default visit budget
        rng: Random source for every playout and tie-break
        logger: Optional Logger receiving a SearchMetrics per decision
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[Logger] = None,
    ):
        self.config = config or SearchConfig()
        self.rng = rng or random.Random()
        self.logger = logger
        self.budget = self.config.budget
        self.mcts: Optional[MCTS] = None
        self.last_metrics: Optional[SearchMetrics] = None

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, *exc) -> None:
        self.teardown()

    @property
    def is_initialized(self) -> bool:
        return self.mcts is not None

    @property
    def side(self) -> Player:
        return self._require_mcts().searcher

    def _require_mcts(self) -> MCTS:
        if self.mcts is None or self.mcts.root is None:
            raise EngineError("Engine is not initialized")
        return self.mcts

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------

    def initialize(self, engine_side, budget: Optional[int] = None) -> Optional[int]:
        """
        Start a new match with the engine playing 'engine_side'.

        Player A always moves first. Any previous match is torn down.

        Args:
            engine_side: Player.A / Player.B (or 0/1, "A"/"B")
            budget: Root visit budget per decision (default: config.budget)

        Returns:
            The engine's opening column if it plays A, None if it waits
            for the opponent

        Raises:
            InvalidArgumentError: bad side or budget below config.min_budget
            AllocationError: the root node could not be created
        """
        side = parse_side(engine_side)
        if budget is None:
            budget = self.config.budget
        if (
            isinstance(budget, bool)
            or not isinstance(budget, numbers.Integral)
            or budget < self.config.min_budget
        ):
            raise InvalidArgumentError(
                f"Invalid budget {budget!r}, must be an integer >= {self.config.min_budget}"
            )

        self.teardown()
        mcts = MCTS(side, config=self.config, rng=self.rng, logger=self.logger)
        mcts.set_root(initial_state(Player.A))
        self.mcts = mcts
        self.budget = int(budget)

        if side == Player.A:
            return self._respond()
        return None

    def submit_opponent_move(self, column: int) -> Optional[int]:
        """
        Apply the opponent's move and answer it.

        Returns:
            The engine's reply column, or None if the opponent's move ended
            the game

        Raises:
            InvalidArgumentError: column is not in [0, 6]
            IllegalMoveError: wrong turn, full column or finished game
                (nothing is changed)
            SearchFailure: no reply could be found
        """
        mcts = self._require_mcts()
        if not is_valid_column(column):
            raise InvalidArgumentError(f"Invalid column {column!r}, must be 0-{COLS-1}")
        column = int(column)

        result = play(mcts.root_node.state.copy(), mcts.searcher.other, column)
        if not result.accepted:
            raise IllegalMoveError(f"Opponent cannot play column {column}: {result.name}", result)

        mcts.commit(column)
        if winner(mcts.root_node.state) is not Outcome.ONGOING:
            return None
        return self._respond()

    def query_state(self) -> EngineSnapshot:
        mcts = self._require_mcts()
        root = mcts.root_node
        return EngineSnapshot(
            board=to_array(root.state),
            outcome=winner(root.state),
            to_move=current_player(root.state),
            win_rate=root.win_rate,
            visits=root.visits,
            nodes=len(mcts.arena),
        )

    def teardown(self) -> None:
        """Release the whole tree. Safe to call more than once."""
        if self.mcts is not None:
            self.mcts.arena.clear()
            self.mcts.root = None
            self.mcts = None

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def decide(self) -> Tuple[int, str, int]:
        """
        Pick the engine's move without committing it.

        Returns:
            (column, source, iterations) where source is "win" or "block"
            for tactical shortcuts and "search" otherwise
        """
        mcts = self._require_mcts()
        if self.config.tactics:
            hit = tactical_move(mcts.root_node.state, mcts.searcher)
            if hit is not None:
                column, source = hit
                return column, source, 0

        iterations = mcts.run(self.budget)
        return mcts.best_column(), SEARCH, iterations

    def _respond(self) -> int:
        mcts = self._require_mcts()
        start = time.perf_counter()
        column, source, iterations = self.decide()

        root = mcts.root_node
        metrics = SearchMetrics(
            column=column,
            source=source,
            iterations=iterations,
            root_visits=root.visits,
            root_wins=root.wins,
            tree_nodes=len(mcts.arena),
            elapsed_sec=time.perf_counter() - start,
        )

        # A winning move ends the game, nothing left to salvage
        mcts.commit(column, recombine=self.config.recombine and source != WIN)

        self.last_metrics = metrics
        if self.logger is not None:
            self.logger.log_search(metrics)
        return column
