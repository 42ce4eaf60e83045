"""MCTS module."""

from .node import Node, NodeArena
from .rollout import SimulationResult, simulate
from .search import MCTS
from .reuse import advance_root, merge_transpositions
from .tactics import find_immediate_win, find_forced_block, tactical_move

__all__ = [
    "Node",
    "NodeArena",
    "SimulationResult",
    "simulate",
    "MCTS",
    "advance_root",
    "merge_transpositions",
    "find_immediate_win",
    "find_forced_block",
    "tactical_move",
]
