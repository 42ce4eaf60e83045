"""Utilities module."""

from .config import (
    Config,
    SearchConfig,
    PlayConfig,
    ArenaConfig,
    Difficulty,
    DIFFICULTY_BUDGETS,
    get_difficulty_budget,
)
from .seed import make_rng
from .logging import (
    Logger,
    SearchMetrics,
    console,
    create_progress,
    print_config,
    print_board,
    render_board,
)

__all__ = [
    "Config",
    "SearchConfig",
    "PlayConfig",
    "ArenaConfig",
    "Difficulty",
    "DIFFICULTY_BUDGETS",
    "get_difficulty_budget",
    "make_rng",
    "Logger",
    "SearchMetrics",
    "console",
    "create_progress",
    "print_config",
    "print_board",
    "render_board",
]
