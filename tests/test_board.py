"""
Tests for board state and the column drop.
"""

import random

import numpy as np
import pytest

from bitfour.game.board import (Board, MoveError, new_board, drop, check_move,
                                landing_cell, valid_moves, last_row, board_from_moves)
from bitfour.utils import Side, popcount, cell_index
from tests.conftest import play


def snapshot(board):
    return (board.occupied, board.color, board.turn)


class TestNewBoard:

    def test_empty_with_red_to_move(self, table):
        board = new_board(table)
        assert board.occupied == 0
        assert board.color == 0
        assert board.turn == Side.RED
        assert board.move_count == 0

    def test_without_table(self):
        assert snapshot(new_board()) == (0, 0, Side.RED)


class TestDrop:
    """Gravity drop and turn handling."""

    def test_first_drop_lands_bottom(self, table):
        board = new_board(table)
        assert drop(board, 3, table) is True
        assert board.occupied == 1 << 3
        assert board.color == 0
        assert board.turn == Side.YELLOW

    def test_pieces_stack_and_yellow_sets_color(self, table):
        board = play(new_board(table), [0, 0, 0], table)
        assert board.occupied == (1 << 0) | (1 << 7) | (1 << 14)
        assert board.color == 1 << 7
        assert board.cell(0, 0) == Side.RED
        assert board.cell(1, 0) == Side.YELLOW
        assert board.cell(2, 0) == Side.RED
        assert board.cell(3, 0) is None

    @pytest.mark.parametrize("column", range(7))
    def test_full_column_rejects_seventh_drop(self, table, column):
        board = new_board(table)
        for _ in range(6):
            assert drop(board, column, table)
        assert board.occupied == table.column_masks[column]

        before = snapshot(board)
        assert drop(board, column, table) is False
        assert snapshot(board) == before
        assert check_move(board, column, table) == MoveError.COLUMN_FULL

    @pytest.mark.parametrize("column", [-1, 7, 100])
    def test_out_of_range_column(self, table, column):
        board = play(new_board(table), [2, 4], table)
        before = snapshot(board)
        assert drop(board, column, table) is False
        assert snapshot(board) == before
        assert check_move(board, column, table) == MoveError.INVALID_COLUMN

    @pytest.mark.parametrize("column", ["3", 3.0, None, True])
    def test_non_integer_column(self, table, column):
        board = new_board(table)
        assert drop(board, column, table) is False
        assert snapshot(board) == (0, 0, Side.RED)

    def test_numpy_integer_column(self, table):
        board = new_board(table)
        assert drop(board, np.int64(5), table) is True
        assert board.cell(0, 5) == Side.RED

    def test_turn_alternates(self, table):
        rng = random.Random(7)
        board = new_board(table)
        for n in range(1, 43):
            assert drop(board, rng.choice(valid_moves(board, table)), table)
            assert board.move_count == n
            assert (board.turn == Side.RED) == (n % 2 == 0)
        assert valid_moves(board, table) == []

    def test_failed_drop_keeps_turn(self, table):
        board = play(new_board(table), [1], table)
        assert drop(board, 9, table) is False
        assert board.turn == Side.YELLOW

    def test_only_yellow_sets_color_bits(self, table):
        board = play(new_board(table), [0, 1, 2, 3], table)
        assert board.color == (1 << 1) | (1 << 3)
        assert popcount(board.red_pieces) == 2
        assert popcount(board.yellow_pieces) == 2


class TestQueries:

    def test_check_move_legal(self, table):
        assert check_move(new_board(table), 0, table) is None

    def test_landing_cell(self, table):
        board = play(new_board(table), [4, 4], table)
        assert landing_cell(board, 4, table) == cell_index(2, 4)
        assert landing_cell(board, 0, table) == 0
        assert landing_cell(board, 7, table) is None

    def test_valid_moves_skip_full_columns(self, table):
        board = play(new_board(table), [2] * 6, table)
        assert valid_moves(board, table) == [0, 1, 3, 4, 5, 6]

    def test_last_row(self, table):
        board = play(new_board(table), [6, 6, 6], table)
        assert last_row(board, 6) == 2
        assert last_row(board, 0) is None

    def test_get_state_top_row_first(self, table):
        board = play(new_board(table), [0, 0], table)
        grid = board.get_state()
        assert grid.shape == (6, 7)
        assert grid.dtype == np.int8
        assert grid[5, 0] == 1
        assert grid[4, 0] == 2
        assert grid.sum() == 3

    def test_color_outside_occupied_is_ignored(self):
        board = Board(occupied=1, color=0b110)
        assert board.cell(0, 0) == Side.RED
        assert board.cell(0, 1) is None
        assert board == Board(occupied=1, color=0)

    def test_copy_is_independent(self, table):
        board = play(new_board(table), [3], table)
        clone = board.copy()
        drop(clone, 3, table)
        assert board.move_count == 1
        assert clone.move_count == 2


class TestBoardFromMoves:

    def test_replays_all(self, table):
        board, applied = board_from_moves([0, 1, 2], table)
        assert applied == 3
        assert board.turn == Side.YELLOW

    def test_stops_at_first_illegal(self, table):
        board, applied = board_from_moves([0] * 7 + [1], table)
        assert applied == 6
        assert board.occupied == table.column_masks[0]


class TestRender:

    def test_plain_render(self, table):
        board = play(new_board(table), [0, 1], table)
        lines = str(board).splitlines()
        assert lines[0] == "  1   2   3   4   5   6   7"
        assert lines[1].startswith("╭───┬")
        assert lines[-3] == "│ X │ O │   │   │   │   │   │"
        assert lines[-1] == "Turn: red"

    def test_color_render(self, table):
        board = play(new_board(table), [0, 1], table)
        text = board.render(show_turn=False)
        assert "\033[30;91m O \033[0m" in text
        assert "\033[30;93m O \033[0m" in text
        assert "Turn:" not in text
