"""
patterns.py - Precomputed win patterns and column masks

A PatternTable is built once from the board geometry and then shared, read
only, by every board and evaluation call. Each win pattern is a bit set with
exactly ``connect_n`` bits: one straight run of cells.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from bitfour.debug import debug
from bitfour.utils import (ROWS, COLS, CONNECT_N, Direction, DIRECTION_VECTORS,
                           bit_positions, cell_index)

MAX_CELLS = 64  # pattern_array is uint64


@dataclass(frozen=True)
class PatternTable:
    """Immutable win-pattern table and column masks for one board geometry."""
    rows: int
    cols: int
    connect_n: int
    patterns: Tuple[int, ...]
    directions: Tuple[Direction, ...]
    column_masks: Tuple[int, ...]
    full_mask: int
    pattern_array: np.ndarray = field(repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.patterns)

    def patterns_for(self, direction: Direction) -> List[int]:
        """All patterns of one orientation, in table order."""
        return [p for p, d in zip(self.patterns, self.directions) if d == direction]


def _start_cells(direction: Direction, rows: int, cols: int, n: int) -> List[Tuple[int, int]]:
    """
    First cell of every run of ``n`` cells in the given direction.

    Horizontal and diagonal runs are listed row by row; vertical runs column
    by column.
    """
    if direction == Direction.HORIZONTAL:
        return [(r, c) for r in range(rows) for c in range(cols - n + 1)]
    if direction == Direction.VERTICAL:
        return [(r, c) for c in range(cols) for r in range(rows - n + 1)]
    if direction == Direction.DIAGONAL_DOWN_RIGHT:
        return [(r, c) for r in range(rows - n + 1) for c in range(cols - n + 1)]
    return [(r, c) for r in range(rows - n + 1) for c in range(n - 1, cols)]


def _run_mask(row: int, col: int, direction: Direction, n: int, cols: int) -> int:
    dr, dc = DIRECTION_VECTORS[direction]
    mask = 0
    for i in range(n):
        mask |= 1 << cell_index(row + i * dr, col + i * dc, cols)
    return mask


def column_mask(col: int, rows: int = ROWS, cols: int = COLS) -> int:
    """Bit set of every cell in one column."""
    mask = 0
    for row in range(rows):
        mask |= 1 << cell_index(row, col, cols)
    return mask


def build_pattern_table(rows: int = ROWS, cols: int = COLS,
                        connect_n: int = CONNECT_N) -> PatternTable:
    """
    Enumerate every winning run for the given geometry.

    Patterns are ordered horizontal, vertical, down-right diagonal, down-left
    diagonal. The result depends only on the arguments, so building it twice
    gives equal tables.

    Args:
        rows: Board height
        cols: Board width
        connect_n: Length of a winning run

    Returns:
        The pattern table

    Raises:
        ValueError: If the geometry is unusable
    """
    if rows < 1 or cols < 1:
        raise ValueError("Board dimensions must be at least 1x1")
    if connect_n < 1:
        raise ValueError("Connect length must be at least 1")
    if connect_n > max(rows, cols):
        raise ValueError("Connect length cannot exceed board dimensions")
    if rows * cols > MAX_CELLS:
        raise ValueError(f"Board cannot have more than {MAX_CELLS} cells")

    debug.start_timer("pattern_table")

    patterns: List[int] = []
    directions: List[Direction] = []
    seen = set()
    for direction in Direction:
        for row, col in _start_cells(direction, rows, cols, connect_n):
            mask = _run_mask(row, col, direction, connect_n, cols)
            # a run of one cell is the same pattern in every direction
            if mask in seen:
                continue
            seen.add(mask)
            patterns.append(mask)
            directions.append(direction)

    masks = tuple(column_mask(col, rows, cols) for col in range(cols))

    table = PatternTable(
        rows=rows,
        cols=cols,
        connect_n=connect_n,
        patterns=tuple(patterns),
        directions=tuple(directions),
        column_masks=masks,
        full_mask=(1 << (rows * cols)) - 1,
        pattern_array=np.array(patterns, dtype=np.uint64),
    )
    table.pattern_array.setflags(write=False)

    debug.info(f"Built {len(table)} win patterns for {rows}x{cols}, connect {connect_n}",
               "patterns")
    debug.end_timer("pattern_table", "patterns")
    return table


def cells_of(pattern: int) -> List[int]:
    """Cell indices of a pattern, ascending."""
    return list(bit_positions(pattern))
