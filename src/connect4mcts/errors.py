"""
Exceptions raised by the search engine.

Game-model functions report rejected moves through MoveResult codes; the
engine turns those into exceptions at its API boundary.
"""

from __future__ import annotations

from typing import Optional

from .game import MoveResult


class EngineError(Exception):
    """Base class for engine errors, also used for calls on an uninitialized engine."""


class InvalidArgumentError(EngineError, ValueError):
    """Bad column, side or search budget."""


class IllegalMoveError(EngineError, ValueError):
    """Move rejected by the game rules. The game state is unchanged."""

    def __init__(self, message: str, result: Optional[MoveResult] = None):
        super().__init__(message)
        self.result = result


class AllocationError(EngineError, MemoryError):
    """The node arena refused to allocate a new node."""


class SearchFailure(EngineError, RuntimeError):
    """The search finished without any viable root child."""
