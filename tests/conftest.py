import pytest

from bitfour.game.board import Board
from bitfour.game.patterns import build_pattern_table
from bitfour.utils import ROWS, COLS, FULL_BOARD, Side, cell_index


@pytest.fixture(scope="session")
def table():
    """Standard 6x7 connect-4 pattern table, shared like a host program would."""
    return build_pattern_table()


def draw_position(turn: Side = Side.RED) -> Board:
    """
    Full board with no four in a row.

    Colors come in vertical pairs and alternate across columns, so every run
    of four cells in any direction holds both colors.
    """
    color = 0
    for row in range(ROWS):
        for col in range(COLS):
            if ((row // 2) + col) % 2:
                color |= 1 << cell_index(row, col)
    return Board(occupied=FULL_BOARD, color=color, turn=turn)


def play(board, columns, table):
    """Drop into each column in turn, asserting every drop succeeds."""
    from bitfour.game.board import drop
    for column in columns:
        assert drop(board, column, table), f"drop into column {column} failed"
    return board
