"""
evaluator.py - Win and draw detection over the pattern table

The evaluator is a pure function of (board, table). Red and Yellow piece sets
are derived by masking ``color`` with ``occupied``; a side has won when some
pattern is wholly contained in its set.
"""

from typing import List, Optional, Tuple

import numpy as np

from bitfour.debug import debug
from bitfour.game.board import Board
from bitfour.game.patterns import PatternTable, cells_of
from bitfour.utils import Side, GameResult, Direction, cell_position


def _first_match(board: Board, table: PatternTable) -> Optional[Tuple[Side, int]]:
    """
    Index of the first pattern either side completes.

    Patterns are scanned in table order, Red before Yellow at each pattern.
    """
    if not len(table):
        return None

    patterns = table.pattern_array
    red = np.uint64(board.occupied & ~board.color)
    yellow = np.uint64(board.occupied & board.color)

    red_hits = (patterns & red) == patterns
    yellow_hits = (patterns & yellow) == patterns
    hits = np.flatnonzero(red_hits | yellow_hits)
    if hits.size == 0:
        return None

    index = int(hits[0])
    return (Side.RED if red_hits[index] else Side.YELLOW), index


def check_winner(board: Board, table: PatternTable) -> Optional[Side]:
    """
    Find the side with a completed run.

    Returns:
        The winning side, or None if no side has won yet
    """
    match = _first_match(board, table)
    return match[0] if match else None


def winning_pattern(board: Board, table: PatternTable) -> Optional[Tuple[Side, int, Direction]]:
    """First completed pattern as (side, pattern, direction), or None."""
    match = _first_match(board, table)
    if match is None:
        return None
    side, index = match
    return side, table.patterns[index], table.directions[index]


def winning_cells(board: Board, table: PatternTable) -> List[Tuple[int, int]]:
    """(row, col) cells of the first completed run, empty if there is none."""
    found = winning_pattern(board, table)
    if found is None:
        return []
    return [cell_position(pos, table.cols) for pos in cells_of(found[1])]


def is_full(board: Board, table: PatternTable) -> bool:
    return board.occupied == table.full_mask


def evaluate(board: Board, table: PatternTable) -> GameResult:
    """
    Classify a board.

    A win takes precedence over a full board; a full board without a win is a
    draw. Anything else is still in progress.
    """
    winner = check_winner(board, table)
    if winner is not None:
        debug.debug(f"{winner.label} has four in a row", "evaluator")
        return GameResult.won_by(winner)
    if is_full(board, table):
        debug.debug("Board full with no winner", "evaluator")
        return GameResult.DRAW
    return GameResult.IN_PROGRESS
