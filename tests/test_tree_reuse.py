"""Tests for tree reuse and transposition recombination."""

import random

import pytest

from connect4mcts.errors import IllegalMoveError, InvalidArgumentError
from connect4mcts.game import MoveResult, Player, initial_state, play_auto, play_copy_auto
from connect4mcts.mcts import MCTS, advance_root, merge_transpositions
from connect4mcts.mcts.reuse import ensure_path
from connect4mcts.utils import SearchConfig


def play_sequence(cols):
    state = initial_state()
    for c in cols:
        play_auto(state, c)
    return state


def make_mcts(searcher=Player.A, seed=0, **config):
    return MCTS(searcher, config=SearchConfig(**config), rng=random.Random(seed))


def stats(mcts, index):
    node = mcts.node(index)
    return node.wins, node.visits


class TestAdvanceRoot:
    def test_existing_child_becomes_root(self):
        mcts = make_mcts(budget=300)
        mcts.set_root(initial_state())
        mcts.run()
        child = mcts.root_node.children[3]
        before = stats(mcts, child)
        subtree = mcts.arena.subtree_size(child)

        new_root = advance_root(mcts, 3, recombine=False)

        assert new_root == child
        assert mcts.root == child
        assert mcts.root_node.parent is None
        assert stats(mcts, new_root) == before
        assert len(mcts.arena) == subtree

    def test_missing_child_is_created(self):
        mcts = make_mcts()
        mcts.set_root(initial_state())

        advance_root(mcts, 4)

        assert len(mcts.arena) == 1
        assert mcts.root_node.state == play_copy_auto(initial_state(), 4)
        assert mcts.root_node.parent is None

    def test_siblings_released(self):
        mcts = make_mcts()
        root = mcts.set_root(initial_state())
        created = mcts.expand(root)
        advance_root(mcts, 0, recombine=False)
        assert len(mcts.arena) == 1
        assert root not in mcts.arena
        assert all(c not in mcts.arena for c in created[1:])

    def test_full_column_rejected(self):
        mcts = make_mcts()
        root = mcts.set_root(play_sequence([0] * 6))
        mcts.expand(root)
        size = len(mcts.arena)

        with pytest.raises(IllegalMoveError) as excinfo:
            advance_root(mcts, 0)

        assert excinfo.value.result == MoveResult.COLUMN_FULL
        assert mcts.root == root
        assert len(mcts.arena) == size

    @pytest.mark.parametrize("col", [-1, 7, "2", None])
    def test_invalid_column_rejected(self, col):
        mcts = make_mcts()
        root = mcts.set_root(initial_state())
        with pytest.raises(InvalidArgumentError):
            advance_root(mcts, col)
        assert mcts.root == root

    def test_commit_uses_config(self):
        mcts = make_mcts(recombine=False)
        mcts.set_root(initial_state())
        mcts.commit(2)
        assert mcts.root_node.state == play_copy_auto(initial_state(), 2)

    def test_sequence_of_commits_tracks_game(self):
        mcts = make_mcts(budget=100)
        mcts.set_root(initial_state())
        moves = [3, 3, 4, 2]
        for col in moves:
            mcts.run()
            mcts.commit(col)
        assert mcts.root_node.state == play_sequence(moves)
        assert mcts.arena.subtree_size(mcts.root) == len(mcts.arena)


class TestMergeTranspositions:
    def test_single_path(self):
        mcts = make_mcts()
        root = mcts.set_root(initial_state())
        # root -> 1 -> 2 -> 0 holds the same disks as root -> 0 -> 2 -> 1
        source = ensure_path(mcts, root, (1, 2, 0))
        mcts.node(source).visits = 50
        mcts.node(source).wins = 30

        assert merge_transpositions(mcts, 0) == 1

        target = ensure_path(mcts, root, (0, 2, 1))
        assert mcts.node(target).state.key() == mcts.node(source).state.key()
        wins, visits = stats(mcts, target)
        assert visits >= 50
        assert wins >= 30
        assert stats(mcts, mcts.root_node.children[0])[1] >= 50

    def test_empty_sources_skipped(self):
        mcts = make_mcts()
        root = mcts.set_root(initial_state())
        source = ensure_path(mcts, root, (1, 2, 0))
        mcts.node(source).visits = 0
        mcts.node(source).wins = 0

        assert merge_transpositions(mcts, 0) == 0
        assert mcts.root_node.children[0] is None

    def test_no_grandchildren(self):
        mcts = make_mcts()
        root = mcts.set_root(initial_state())
        mcts.expand(root)
        assert merge_transpositions(mcts, 3) == 0

    def test_chosen_subtree_only_grows(self):
        mcts = make_mcts(budget=1500, seed=3)
        mcts.set_root(initial_state())
        mcts.run()

        col = mcts.best_column()
        chosen = mcts.root_node.children[col]
        watched = [chosen] + [c for c in mcts.node(chosen).children if c is not None]
        before = {i: stats(mcts, i) for i in watched}

        assert merge_transpositions(mcts, col) > 0

        for i in watched:
            wins, visits = stats(mcts, i)
            assert visits >= before[i][1]
            assert wins >= before[i][0]

    def test_parents_cover_children_after_merge(self):
        mcts = make_mcts(budget=800, seed=5)
        mcts.set_root(initial_state())
        mcts.run()
        merge_transpositions(mcts, mcts.best_column())

        stack = [mcts.root]
        while stack:
            node = mcts.node(stack.pop())
            children = [mcts.node(c) for c in node.children if c is not None]
            assert node.visits >= sum(c.visits for c in children)
            assert node.wins >= sum(c.wins for c in children)
            stack.extend(c for c in node.children if c is not None)

    def test_arena_full_stops_early(self):
        mcts = make_mcts(max_nodes=4)
        root = mcts.set_root(initial_state())
        source = ensure_path(mcts, root, (1, 2, 0))
        mcts.node(source).visits = 5
        assert merge_transpositions(mcts, 0) == 0
        assert len(mcts.arena) == 4
