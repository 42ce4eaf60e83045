"""
MCTS node data structure and the arena that owns every node.

Each node represents a game state and stores:
- visits: number of playouts accounted for below this node
- wins: how many of them ended in the searcher's favor
- parent: index of the parent node (None for the root)
- children[c]: index of the node reached by playing column c, or None

Nodes are addressed by stable integer indices into a NodeArena. Parent
links are plain indices used for backpropagation only; ownership flows
strictly downwards, and releasing a node releases its whole subtree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ..errors import AllocationError
from ..game import GameState, COLS


@dataclass
class Node:
    """MCTS tree node."""

    state: GameState
    parent: Optional[int] = None
    visits: int = 0
    wins: int = 0
    children: List[Optional[int]] = field(default_factory=lambda: [None] * COLS)

    @property
    def win_rate(self) -> float:
        """wins / visits, or 0.0 for an unvisited node."""
        return self.wins / self.visits if self.visits > 0 else 0.0

    def has_children(self) -> bool:
        return any(c is not None for c in self.children)

    def child_columns(self) -> list[int]:
        """Columns that have a child node."""
        return [col for col, c in enumerate(self.children) if c is not None]


class NodeArena:
    """
    Index-addressed node storage with a free-list.

    Args:
        max_nodes: Maximum number of live nodes (None = unbounded).
            allocate() raises AllocationError once the limit is reached.
    """

    def __init__(self, max_nodes: Optional[int] = None):
        self.max_nodes = max_nodes
        self._nodes: List[Optional[Node]] = []
        self._free: List[int] = []
        self._live = 0

    def __len__(self) -> int:
        return self._live

    def __contains__(self, index: object) -> bool:
        return (
            isinstance(index, int)
            and 0 <= index < len(self._nodes)
            and self._nodes[index] is not None
        )

    def __getitem__(self, index: int) -> Node:
        node = self._nodes[index] if 0 <= index < len(self._nodes) else None
        if node is None:
            raise KeyError(f"No live node at index {index}")
        return node

    def allocate(self, state: GameState, parent: Optional[int] = None) -> int:
        """Store a fresh, unvisited node and return its index."""
        if self.max_nodes is not None and self._live >= self.max_nodes:
            raise AllocationError(f"Node arena is full ({self.max_nodes} nodes)")

        node = Node(state=state, parent=parent)
        if self._free:
            index = self._free.pop()
            self._nodes[index] = node
        else:
            index = len(self._nodes)
            self._nodes.append(node)
        self._live += 1
        return index

    def release(self, index: Optional[int]) -> int:
        """
        Release a node and its whole subtree.

        Uses an explicit stack, so deep trees cannot exhaust the interpreter's
        recursion limit. Releasing None or an already-released index is a no-op.

        Returns:
            Number of nodes released
        """
        if index is None or index not in self:
            return 0

        released = 0
        stack = [index]
        while stack:
            i = stack.pop()
            node = self._nodes[i]
            if node is None:
                continue
            stack.extend(c for c in node.children if c is not None)
            self._nodes[i] = None
            self._free.append(i)
            released += 1

        self._live -= released
        return released

    def clear(self) -> None:
        """Drop every node."""
        self._nodes.clear()
        self._free.clear()
        self._live = 0

    def ancestors(self, index: int) -> Iterator[int]:
        """Yield 'index' and then each ancestor up to and including the root."""
        current: Optional[int] = index
        while current is not None:
            yield current
            current = self[current].parent

    def subtree_size(self, index: Optional[int]) -> int:
        if index is None:
            return 0
        count = 0
        stack = [index]
        while stack:
            node = self[stack.pop()]
            count += 1
            stack.extend(c for c in node.children if c is not None)
        return count
