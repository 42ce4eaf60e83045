"""Evaluation module."""

from .arena import Arena, ArenaResult, RandomMover, play_match, should_accept

__all__ = [
    "Arena",
    "ArenaResult",
    "RandomMover",
    "play_match",
    "should_accept",
]
