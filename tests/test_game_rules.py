"""Tests for Connect 4 game rules."""

import random

import numpy as np
import pytest

from connect4mcts.game import (
    ROWS,
    COLS,
    GameState,
    MoveResult,
    Outcome,
    Player,
    cell_offset,
    current_player,
    initial_state,
    is_terminal,
    legal_moves,
    legal_moves_list,
    play,
    play_auto,
    play_copy_auto,
    to_array,
    winner,
)

# Fills the board row by row without ever lining up four
DRAW_SEQUENCE = [0, 2, 1, 3, 4, 6, 5] * ROWS


def play_sequence(cols, state=None):
    state = state or initial_state()
    results = [play_auto(state, c) for c in cols]
    return state, results


def full_column_state():
    state, _ = play_sequence([0] * ROWS)
    return state


class TestInitialState:
    def test_empty_board(self):
        state = initial_state()
        assert state.occupancy == [0] * COLS
        assert np.all(to_array(state) == 0)
        assert winner(state) is Outcome.ONGOING

    def test_player_a_starts_by_default(self):
        assert current_player(initial_state()) == Player.A

    def test_player_b_can_start(self):
        state = initial_state(Player.B)
        assert current_player(state) == Player.B
        assert play(state, Player.A, 3) == MoveResult.NOT_YOUR_TURN
        assert play(state, Player.B, 3) == MoveResult.VALID

    def test_all_moves_legal(self):
        state = initial_state()
        assert np.all(legal_moves(state))
        assert legal_moves_list(state) == list(range(COLS))


class TestPlay:
    def test_piece_drops_to_bottom(self):
        state = initial_state()
        assert play(state, Player.A, 3) == MoveResult.VALID
        assert state.grid_a & (1 << cell_offset(3, 0))
        assert state.occupancy[3] == 1
        # Row 0 of the display array is the top row
        assert to_array(state)[ROWS - 1, 3] == 1

    def test_bit_layout(self):
        assert cell_offset(0, 0) == 6
        assert cell_offset(6, 0) == 0
        assert cell_offset(0, 5) == 41

    def test_pieces_stack(self):
        state, results = play_sequence([3, 3])
        assert results == [MoveResult.VALID, MoveResult.VALID]
        board = to_array(state)
        assert board[ROWS - 1, 3] == 1
        assert board[ROWS - 2, 3] == -1
        assert state.occupancy[3] == 2

    def test_turn_alternates(self):
        state = initial_state()
        for i in range(6):
            expected = Player.A if i % 2 == 0 else Player.B
            assert current_player(state) == expected
            play_auto(state, i)

    def test_not_your_turn_leaves_state_unchanged(self):
        state = initial_state()
        before = state.copy()
        assert play(state, Player.B, 0) == MoveResult.NOT_YOUR_TURN
        assert state == before

    def test_column_full(self):
        state = full_column_state()
        assert not legal_moves(state)[0]
        before = state.copy()
        assert play_auto(state, 0) == MoveResult.COLUMN_FULL
        assert state == before

    @pytest.mark.parametrize("col", [-1, 7, 3.0, "3", None, True])
    def test_invalid_column(self, col):
        state = initial_state()
        before = state.copy()
        assert play(state, Player.A, col) == MoveResult.INVALID_ARGS
        assert state == before

    def test_invalid_player(self):
        state = initial_state()
        assert play(state, 2, 0) == MoveResult.INVALID_ARGS
        assert play(None, Player.A, 0) == MoveResult.INVALID_ARGS

    def test_numpy_column_accepted(self):
        state = initial_state()
        assert play_auto(state, np.int64(4)) == MoveResult.VALID
        assert state.occupancy[4] == 1

    def test_finished_game_rejects_moves(self):
        state, results = play_sequence([0, 6, 0, 6, 0, 6, 0])
        assert results[-1] == MoveResult.WIN
        before = state.copy()
        assert play_auto(state, 3) == MoveResult.GAME_FINISHED
        assert play(state, Player.A, 3) == MoveResult.GAME_FINISHED
        assert state == before
        assert not np.any(legal_moves(state))

    def test_occupancy_tracks_accepted_moves(self):
        rng = random.Random(7)
        for _ in range(20):
            state = initial_state()
            accepted = 0
            previous_total = 0
            while not is_terminal(state):
                result = play_auto(state, rng.randrange(-1, COLS + 1))
                if result.accepted:
                    accepted += 1
                total = sum(state.occupancy)
                assert total == accepted
                assert total >= previous_total
                assert all(0 <= n <= ROWS for n in state.occupancy)
                assert state.grid_a & state.grid_b & ((1 << ROWS * COLS) - 1) == 0
                previous_total = total


class TestOutcome:
    def test_example_vertical_win(self):
        state = initial_state()
        moves = [(Player.A, 0), (Player.B, 6)] * 3 + [(Player.A, 0)]
        results = [play(state, p, c) for p, c in moves]
        assert results[:-1] == [MoveResult.VALID] * 6
        assert results[-1] == MoveResult.WIN
        assert winner(state) is Outcome.PLAYER_A

    def test_player_b_wins(self):
        state, results = play_sequence([1, 0, 2, 0, 1, 0, 2, 0])
        assert results[-1] == MoveResult.WIN
        assert winner(state) is Outcome.PLAYER_B

    def test_full_board_draw(self):
        state, results = play_sequence(DRAW_SEQUENCE)
        assert results[:-1] == [MoveResult.VALID] * (len(DRAW_SEQUENCE) - 1)
        assert results[-1] == MoveResult.DRAW
        assert winner(state) is Outcome.DRAW
        assert is_terminal(state)
        assert play_auto(state, 0) == MoveResult.GAME_FINISHED


class TestCopy:
    def test_copy_is_independent(self):
        state, _ = play_sequence([3, 2])
        clone = state.copy()
        assert clone == state

        play_auto(clone, 3)
        assert clone != state
        assert state.occupancy[3] == 1

        play_auto(state, 5)
        assert clone.occupancy[5] == 0

    def test_play_copy_auto_leaves_input(self):
        state = initial_state()
        new_state = play_copy_auto(state, 2)
        assert new_state is not None
        assert new_state.occupancy[2] == 1
        assert state == initial_state()

    def test_play_copy_auto_rejects_illegal(self):
        state = full_column_state()
        assert play_copy_auto(state, 0) is None
        assert play_copy_auto(state, 9) is None

    def test_key_identifies_transpositions(self):
        a, _ = play_sequence([0, 1, 2])
        b, _ = play_sequence([2, 1, 0])
        assert a.key() == b.key()
        c, _ = play_sequence([1, 0, 2])
        assert a.key() != c.key()


class TestToArray:
    def test_signs(self):
        state, _ = play_sequence([0, 6])
        board = to_array(state)
        assert board.shape == (ROWS, COLS)
        assert board.dtype == np.int8
        assert board[ROWS - 1, 0] == 1
        assert board[ROWS - 1, 6] == -1
        assert np.count_nonzero(board) == 2

    def test_state_from_fields(self):
        state = GameState()
        assert to_array(state).sum() == 0
