"""
Configuration management for the Connect 4 MCTS engine.

Uses dataclasses for clean configuration with sensible defaults.
Supports loading from YAML files.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class SearchConfig:
    """MCTS configuration."""

    budget: int = 2000  # Root visit count to reach before answering
    min_budget: int = 8
    budget_offset: int = 7  # Search runs while root visits < budget - budget_offset
    terminal_bonus: int = 7  # Visits (and wins) credited when a finished game is selected
    exploration: float = 2.0  # c in sqrt(c * ln(N) / n)
    max_iterations: int = 20_000  # Safety cap on select/expand/backprop rounds
    max_nodes: Optional[int] = None  # Arena capacity (None = unbounded)
    recombine: bool = True  # Merge transposed grandchildren when committing a move
    tactics: bool = True  # Immediate win / forced block before searching

    def __post_init__(self):
        if self.min_budget < 1:
            raise ValueError("min_budget must be at least 1")
        if self.budget_offset < 0 or self.terminal_bonus < 0:
            raise ValueError("budget_offset and terminal_bonus must be non-negative")
        if self.exploration < 0:
            raise ValueError("exploration must be non-negative")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")


@dataclass
class PlayConfig:
    """Interactive play configuration."""

    engine_side: str = "B"  # "A" moves first
    show_stats: bool = True

    def __post_init__(self):
        self.engine_side = self.engine_side.upper()
        if self.engine_side not in ("A", "B"):
            raise ValueError("engine_side must be 'A' or 'B'")


@dataclass
class ArenaConfig:
    """Evaluation configuration."""

    num_games: int = 20
    opponent_budget: Optional[int] = None  # None = uniform random opponent


@dataclass
class Config:
    """Full configuration."""

    search: SearchConfig = field(default_factory=SearchConfig)
    play: PlayConfig = field(default_factory=PlayConfig)
    arena: ArenaConfig = field(default_factory=ArenaConfig)

    # Random seed (None = nondeterministic)
    seed: Optional[int] = None

    # JSONL search logs are written here when set
    log_dir: Optional[str] = None

    def save(self, path: str) -> None:
        """Save config to YAML file."""
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str) -> Config:
        """Load config from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # Parse nested configs
        return cls(
            search=SearchConfig(**data.get("search", {})),
            play=PlayConfig(**data.get("play", {})),
            arena=ArenaConfig(**data.get("arena", {})),
            seed=data.get("seed"),
            log_dir=data.get("log_dir"),
        )

    def ensure_dirs(self) -> None:
        """Create the log directory if one is configured."""
        if self.log_dir:
            Path(self.log_dir).mkdir(parents=True, exist_ok=True)


class Difficulty(Enum):
    """Preset difficulty levels."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    IMPOSSIBLE = "impossible"


DIFFICULTY_BUDGETS: dict[Difficulty, int] = {
    Difficulty.EASY: 20,
    Difficulty.MEDIUM: 2_000,
    Difficulty.HARD: 20_000,
    Difficulty.IMPOSSIBLE: 200_000,
}


def get_difficulty_budget(difficulty: Difficulty | str) -> int:
    """Search budget for a preset, accepting the enum or its name."""
    if isinstance(difficulty, str):
        try:
            difficulty = Difficulty(difficulty.lower())
        except ValueError:
            valid = ", ".join(d.value for d in Difficulty)
            raise ValueError(f"Unknown difficulty: {difficulty}. Valid options: {valid}")
    return DIFFICULTY_BUDGETS[difficulty]
