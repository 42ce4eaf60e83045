"""
MCTS search with UCB1 selection and full-width expansion.

The search:
1. Select: from the root, follow the child with the highest UCB1 score
   until reaching a leaf (at most one visit, or no children)
2. Expand: create a child for every legal column of the leaf; each new
   child runs one random playout as it is created
3. Backup: add the new evidence to the leaf and every ancestor

Statistics are always kept from the searcher's point of view. At nodes
where the opponent is to move, selection uses 1 - win rate so the opponent
is modeled as minimizing the searcher's chances.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Tuple

from .node import Node, NodeArena
from .reuse import advance_root
from .rollout import SimulationResult, simulate
from ..errors import AllocationError, SearchFailure
from ..game import (
    COLS,
    GameState,
    Outcome,
    Player,
    current_player,
    play_copy_auto,
    winner,
)
from ..utils.config import SearchConfig


class MCTS:
    """
    Monte Carlo Tree Search over a NodeArena.

    Args:
        searcher: The side this search plays for
        config: Search parameters (budget, constants, safety caps)
        rng: Random source for playouts and tie-breaks
        arena: Node storage (a fresh one is created if omitted)
        logger: Optional Logger for warnings
    """

    def __init__(
        self,
        searcher: Player,
        config: Optional[SearchConfig] = None,
        rng: Optional[random.Random] = None,
        arena: Optional[NodeArena] = None,
        logger=None,
    ):
        self.searcher = Player(searcher)
        self.config = config or SearchConfig()
        self.rng = rng or random.Random()
        self.arena = arena or NodeArena(max_nodes=self.config.max_nodes)
        self.logger = logger
        self.root: Optional[int] = None

    # ------------------------------------------------------------------
    # Node lifecycle
    # ------------------------------------------------------------------

    def node(self, index: int) -> Node:
        return self.arena[index]

    @property
    def root_node(self) -> Node:
        if self.root is None:
            raise SearchFailure("Search tree has no root")
        return self.arena[self.root]

    def create_and_simulate(self, state: GameState, parent: Optional[int]) -> int:
        """
        Allocate a node for 'state' and run exactly one playout from it.

        A failed playout leaves the node at zero visits and zero wins
        rather than raising.

        Raises:
            AllocationError: if the arena is full
        """
        index = self.arena.allocate(state, parent)
        node = self.arena[index]
        result = simulate(state, self.searcher, self.rng)
        if result == SimulationResult.FAILED:
            node.visits = 0
            node.wins = 0
        else:
            node.visits = 1
            node.wins = int(result)
        return index

    def destroy(self, index: Optional[int]) -> int:
        """Release a subtree. Safe on None."""
        if index is not None and index == self.root:
            self.root = None
        return self.arena.release(index)

    def set_root(self, state: GameState) -> int:
        """Discard any existing tree and start a new one at 'state'."""
        self.destroy(self.root)
        self.root = self.create_and_simulate(state, None)
        return self.root

    def ensure_child(self, index: int, col: int) -> Optional[int]:
        """
        Return the child of 'index' for column 'col', creating it if needed.

        A newly created child's own playout is backpropagated to its
        ancestors. Returns None if the move is not legal.
        """
        node = self.arena[index]
        if node.children[col] is not None:
            return node.children[col]

        new_state = play_copy_auto(node.state, col)
        if new_state is None:
            return None

        child = self.create_and_simulate(new_state, index)
        node.children[col] = child
        created = self.arena[child]
        self.backpropagate(index, created.wins, created.visits)
        return child

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def is_leaf(self, index: int) -> bool:
        node = self.arena[index]
        return node.visits <= 1 or not node.has_children()

    def ucb_score(self, child_index: int, parent_index: int) -> float:
        """
        UCB1 score of a child as seen from its parent.

        Returns 0.0 when either node has no visits yet.
        """
        child = self.arena[child_index]
        parent = self.arena[parent_index]
        if child.visits == 0 or parent.visits == 0:
            return 0.0

        exploit = child.wins / child.visits
        if current_player(parent.state) != self.searcher:
            exploit = 1.0 - exploit
        explore = math.sqrt(self.config.exploration * math.log(parent.visits) / child.visits)
        return exploit + explore

    def select(self, index: Optional[int] = None) -> int:
        """
        Descend from 'index' (default: root) to a leaf.

        Unvisited children are never compared; ties between the best
        children are broken uniformly at random.
        """
        if index is None:
            if self.root is None:
                raise SearchFailure("Search tree has no root")
            index = self.root

        while not self.is_leaf(index):
            node = self.arena[index]
            best_score = -math.inf
            best: list[int] = []
            for child_index in node.children:
                if child_index is None or self.arena[child_index].visits == 0:
                    continue
                score = self.ucb_score(child_index, index)
                if score > best_score:
                    best_score = score
                    best = [child_index]
                elif score == best_score:
                    best.append(child_index)

            if not best:
                break
            index = best[0] if len(best) == 1 else self.rng.choice(best)

        return index

    # ------------------------------------------------------------------
    # Expansion and backup
    # ------------------------------------------------------------------

    def expand(self, index: int) -> list[int]:
        """
        Create a child for every legal, not-yet-present column of 'index'.

        Illegal moves and failed allocations leave the slot empty.

        Returns:
            Indices of the newly created children
        """
        node = self.arena[index]
        created = []
        for col in range(COLS):
            if node.children[col] is not None:
                continue
            new_state = play_copy_auto(node.state, col)
            if new_state is None:
                continue
            try:
                child = self.create_and_simulate(new_state, index)
            except AllocationError as e:
                if self.logger is not None:
                    self.logger.log_warning(f"Skipping column {col}: {e}")
                continue
            node.children[col] = child
            created.append(child)
        return created

    def leaf_delta(self, index: int, created: list[int]) -> Tuple[int, int]:
        """
        Evidence (wins, visits) to add after expanding 'index'.

        A won or lost game is credited a fixed bonus so resolved branches
        stop attracting selection; otherwise the new children's playouts
        are summed. A drawn leaf has no children and adds nothing.
        """
        outcome = winner(self.arena[index].state)
        bonus = self.config.terminal_bonus
        if outcome is Outcome.for_player(self.searcher):
            return bonus, bonus
        if outcome is Outcome.for_player(self.searcher.other):
            return 0, bonus

        wins = 0
        visits = 0
        for child_index in created:
            child = self.arena[child_index]
            wins += child.wins
            visits += child.visits
        return wins, visits

    def backpropagate(self, index: int, wins: int, visits: int) -> None:
        """Add (wins, visits) to 'index' and every ancestor up to the root."""
        for i in self.arena.ancestors(index):
            node = self.arena[i]
            node.wins += wins
            node.visits += visits

    def iterate(self) -> int:
        """Run one select/expand/backup round. Returns the selected leaf."""
        leaf = self.select()
        created = self.expand(leaf)
        wins, visits = self.leaf_delta(leaf, created)
        self.backpropagate(leaf, wins, visits)
        return leaf

    def run(self, budget: Optional[int] = None) -> int:
        """
        Search until the root reaches 'budget - budget_offset' visits or
        the iteration cap is hit. A root without children is always
        expanded, however small the budget.

        Returns:
            Number of iterations performed
        """
        budget = self.config.budget if budget is None else budget
        target = budget - self.config.budget_offset
        root = self.root_node
        if winner(root.state) is not Outcome.ONGOING:
            return 0

        iterations = 0
        while (
            root.visits < target or not root.has_children()
        ) and iterations < self.config.max_iterations:
            self.iterate()
            iterations += 1
        return iterations

    def best_column(self) -> int:
        """
        Most visited root child, ties broken by wins.

        Raises:
            SearchFailure: if the root has no children
        """
        root = self.root_node
        best_col = -1
        best_key = (-1, -1)
        for col in root.child_columns():
            child = self.arena[root.children[col]]
            key = (child.visits, child.wins)
            if key > best_key:
                best_key = key
                best_col = col

        if best_col < 0:
            raise SearchFailure("No root child to choose from")
        return best_col

    # ------------------------------------------------------------------
    # Tree reuse
    # ------------------------------------------------------------------

    def commit(self, col: int, recombine: Optional[bool] = None) -> int:
        """Advance the tree by one move. See reuse.advance_root."""
        if recombine is None:
            recombine = self.config.recombine
        return advance_root(self, col, recombine=recombine)
