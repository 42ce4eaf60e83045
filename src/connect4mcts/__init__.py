"""
Connect 4 against a Monte Carlo Tree Search engine.

The game model packs each player's disks into one integer; the engine runs
UCB1 tree search with random playouts, full-width expansion, tree reuse
between moves and tactical win/block shortcuts.

Usage:
    from connect4mcts import Engine, Player
    from connect4mcts.utils import SearchConfig, make_rng

    engine = Engine(SearchConfig(budget=2000), rng=make_rng(0))
    engine.initialize(Player.B)
    reply = engine.submit_opponent_move(3)
"""

__version__ = "0.1.0"

from . import game
from . import mcts
from . import utils
from .engine import Engine, EngineSnapshot
from .errors import (
    EngineError,
    InvalidArgumentError,
    IllegalMoveError,
    AllocationError,
    SearchFailure,
)
from .game import Player, MoveResult, Outcome

__all__ = [
    "game",
    "mcts",
    "utils",
    "Engine",
    "EngineSnapshot",
    "EngineError",
    "InvalidArgumentError",
    "IllegalMoveError",
    "AllocationError",
    "SearchFailure",
    "Player",
    "MoveResult",
    "Outcome",
    "__version__",
]
