"""
Logging utilities with rich formatting.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Any

import numpy as np
from rich.console import Console
from rich.table import Table
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
    MofNCompleteColumn,
)
from rich.panel import Panel


console = Console()

DISK_SYMBOLS = {0: "_", 1: "●", -1: "○"}


@dataclass
class SearchMetrics:
    """Metrics for one engine decision."""

    column: int
    source: str  # "win", "block" or "search"
    iterations: int
    root_visits: int
    root_wins: int
    tree_nodes: int
    elapsed_sec: float
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    @property
    def confidence(self) -> float:
        return self.root_wins / self.root_visits if self.root_visits > 0 else 0.0


class Logger:
    """
    Engine logger with rich output and optional JSON logging.

    Args:
        log_dir: Directory for log files (None = console only)
        verbose: Whether to print to console
    """

    def __init__(self, log_dir: Optional[str] = None, verbose: bool = True):
        self.verbose = verbose
        self.log_file: Optional[Path] = None

        if log_dir is not None:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.log_file = self.log_dir / f"search_{timestamp}.jsonl"

        self.metrics_history: list[SearchMetrics] = []

    def log_search(self, metrics: SearchMetrics) -> None:
        """Log metrics for one decision."""
        self.metrics_history.append(metrics)

        if self.log_file is not None:
            with open(self.log_file, "a") as f:
                f.write(json.dumps(asdict(metrics)) + "\n")

        if self.verbose:
            self._print_search(metrics)

    def _print_search(self, m: SearchMetrics) -> None:
        """Print decision summary to console."""
        table = Table(title=f"Engine plays column {m.column}", show_header=False, box=None)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Source", m.source)
        table.add_row("Iterations", str(m.iterations))
        table.add_row("Root Visits", str(m.root_visits))
        table.add_row("Confidence", f"{m.confidence:.3f}")
        table.add_row("Tree Nodes", str(m.tree_nodes))
        table.add_row("Time", f"{m.elapsed_sec:.2f}s")

        console.print(table)
        console.print()

    def log_message(self, message: str, style: str = "white") -> None:
        """Log a message."""
        if self.verbose:
            console.print(f"[{style}]{message}[/]")

    def log_warning(self, message: str) -> None:
        """Log warning message."""
        self.log_message(message, "yellow")


def create_progress() -> Progress:
    """Create a rich progress bar with elapsed time."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_config(config: Any) -> None:
    """Print configuration in a nice format."""
    table = Table(title="Configuration", show_header=True)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    def add_dict(d: dict, prefix: str = "") -> None:
        for k, v in d.items():
            key = f"{prefix}{k}" if prefix else k
            if isinstance(v, dict):
                add_dict(v, f"{key}.")
            else:
                table.add_row(key, str(v))

    add_dict(asdict(config))
    console.print(table)


def render_board(board: np.ndarray) -> str:
    """
    Text rendering of a (6, 7) board array (row 0 on top).

    ● = player A, ○ = player B, _ = empty
    """
    lines = [" ".join(str(c) for c in range(board.shape[1]))]
    for row in board:
        lines.append(" ".join(DISK_SYMBOLS[int(v)] for v in row))
    return "\n".join(lines)


def print_board(board: np.ndarray, title: str = "Board") -> None:
    """Print a game board in a panel."""
    console.print(Panel(render_board(board), title=title, border_style="blue", expand=False))
