"""
board.py - Bit-packed board state and the column drop

A Board is two bit sets over the cells plus the side to move. ``occupied``
marks filled cells; ``color`` marks Yellow pieces and is only meaningful where
``occupied`` is set. Pieces fall to the lowest empty cell of a column, which is
the least significant empty bit of that column's mask.
"""

from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from bitfour.debug import debug
from bitfour.game.patterns import PatternTable
from bitfour.utils import (ROWS, COLS, Side, lowest_set_bit, popcount, query_bit,
                           cell_index, cell_position, render_board)


class MoveError(Enum):
    """Why a drop was refused. The caller's remedy is the same for both."""
    INVALID_COLUMN = "invalid column"
    COLUMN_FULL = "column full"

    def __str__(self):
        return self.value


class Board:
    """
    Mutable board state for one game.

    Only ``drop`` changes a board during play. Fields are plain ints so a board
    can be copied or compared cheaply.
    """

    __slots__ = ("occupied", "color", "turn", "rows", "cols")

    def __init__(self, occupied: int = 0, color: int = 0, turn: Side = Side.RED,
                 rows: int = ROWS, cols: int = COLS):
        self.occupied = occupied
        self.color = color
        self.turn = turn
        self.rows = rows
        self.cols = cols

    def copy(self) -> 'Board':
        return Board(self.occupied, self.color, self.turn, self.rows, self.cols)

    @property
    def move_count(self) -> int:
        """Number of pieces on the board."""
        return popcount(self.occupied)

    @property
    def red_pieces(self) -> int:
        return self.occupied & ~self.color

    @property
    def yellow_pieces(self) -> int:
        return self.occupied & self.color

    def cell(self, row: int, col: int) -> Optional[Side]:
        """Owner of the piece at (row, col), or None if empty."""
        pos = cell_index(row, col, self.cols)
        if not query_bit(self.occupied, pos):
            return None
        return Side.YELLOW if query_bit(self.color, pos) else Side.RED

    def get_state(self) -> np.ndarray:
        """
        Get the board as a numpy grid.

        Returns:
            (rows, cols) int8 array, top row first: 0 empty, 1 red, 2 yellow
        """
        grid = np.zeros((self.rows, self.cols), dtype=np.int8)
        for row in range(self.rows):
            for col in range(self.cols):
                side = self.cell(row, col)
                if side is not None:
                    grid[self.rows - 1 - row, col] = side.value + 1
        return grid

    def render(self, show_turn: bool = True, use_color: bool = True, highlight=()) -> str:
        return render_board(self.occupied, self.color, self.rows, self.cols,
                            turn=self.turn if show_turn else None,
                            use_color=use_color, highlight=highlight)

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return (self.occupied == other.occupied
                and self.color & self.occupied == other.color & other.occupied
                and self.turn == other.turn
                and (self.rows, self.cols) == (other.rows, other.cols))

    def __repr__(self):
        return (f"Board(occupied={self.occupied:#x}, color={self.color:#x}, "
                f"turn={self.turn.name})")

    def __str__(self):
        return self.render(use_color=False)


def new_board(table: Optional[PatternTable] = None) -> Board:
    """Return an empty board with Red to move."""
    if table is None:
        return Board()
    return Board(rows=table.rows, cols=table.cols)


def check_move(board: Board, column, table: PatternTable) -> Optional[MoveError]:
    """
    Validate a drop without applying it.

    Args:
        board: The board
        column: Column index (0-based); anything but an int is invalid
        table: Pattern table for the board geometry

    Returns:
        The reason the move is illegal, or None if it is legal
    """
    if isinstance(column, bool) or not isinstance(column, (int, np.integer)):
        return MoveError.INVALID_COLUMN
    if not 0 <= column < table.cols:
        return MoveError.INVALID_COLUMN
    if not table.column_masks[column] & ~board.occupied:
        return MoveError.COLUMN_FULL
    return None


def landing_cell(board: Board, column: int, table: PatternTable) -> Optional[int]:
    """Cell index a drop into ``column`` would fill, or None if illegal."""
    if check_move(board, column, table) is not None:
        return None
    free = table.column_masks[column] & ~board.occupied
    return lowest_set_bit(free).bit_length() - 1


def drop(board: Board, column, table: PatternTable) -> bool:
    """
    Drop a piece for the side to move.

    The piece lands in the lowest empty cell of the column; Yellow pieces also
    set their color bit. The turn then passes to the other side. An illegal
    move leaves the board untouched.

    Args:
        board: The board to modify
        column: Column index (0-based)
        table: Pattern table for the board geometry

    Returns:
        True if the piece was placed, False otherwise
    """
    error = check_move(board, column, table)
    if error is not None:
        debug.debug(f"Rejected drop into column {column}: {error}", "board")
        return False

    column = int(column)
    position = lowest_set_bit(table.column_masks[column] & ~board.occupied)

    board.occupied |= position
    if board.turn == Side.YELLOW:
        board.color |= position

    debug.trace(f"{board.turn.label} dropped at "
                f"{cell_position(position.bit_length() - 1, board.cols)}", "board")
    board.turn = board.turn.other()
    return True


def valid_moves(board: Board, table: PatternTable) -> List[int]:
    """Columns that still have an empty cell."""
    return [col for col in range(table.cols)
            if table.column_masks[col] & ~board.occupied]


def last_row(board: Board, column: int) -> Optional[int]:
    """Row of the topmost piece in a column, or None if the column is empty."""
    for row in range(board.rows - 1, -1, -1):
        if query_bit(board.occupied, cell_index(row, column, board.cols)):
            return row
    return None


def board_from_moves(moves, table: PatternTable) -> Tuple[Board, int]:
    """
    Replay 0-based columns on a fresh board.

    Returns:
        The board and the number of moves applied before the first illegal one
    """
    board = new_board(table)
    for applied, column in enumerate(moves):
        if not drop(board, column, table):
            return board, applied
    return board, len(moves)
