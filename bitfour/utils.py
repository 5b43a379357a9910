"""
utils.py - Constants, enumerations and bit helpers for the bitfour engine

Cells are indexed row-major with row 0 at the bottom of the board, so the
cell at (row, col) owns bit ``row * COLS + col`` of a board bit set.
"""

from enum import Enum, auto
from typing import Iterable, Iterator, Optional, Tuple

# Game constants
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a row to win
CELLS = ROWS * COLS
FULL_BOARD = (1 << CELLS) - 1  # 42 bits set

# ANSI escapes used by the terminal renderer
RESET = "\033[0m"
RED_DISC = "\033[30;91m"
YELLOW_DISC = "\033[30;93m"
HIGHLIGHT = "\033[7m"


class Side(Enum):
    """The two sides. The value is the color bit a side's pieces carry."""
    RED = 0
    YELLOW = 1

    def other(self) -> 'Side':
        """Get the other side."""
        return Side.YELLOW if self == Side.RED else Side.RED

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self):
        return self.name.lower()


class GameResult(Enum):
    """Game-level state: in progress or one of the terminal outcomes."""
    IN_PROGRESS = auto()
    RED_WON = auto()
    YELLOW_WON = auto()
    DRAW = auto()

    @classmethod
    def won_by(cls, side: Side) -> 'GameResult':
        return cls.RED_WON if side == Side.RED else cls.YELLOW_WON

    @property
    def winner(self) -> Optional[Side]:
        if self == GameResult.RED_WON:
            return Side.RED
        if self == GameResult.YELLOW_WON:
            return Side.YELLOW
        return None

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameResult.IN_PROGRESS


class Direction(Enum):
    """Orientation of a winning run, stepping towards higher row indices."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_DOWN_RIGHT = auto()  # (row + i, col + i)
    DIAGONAL_DOWN_LEFT = auto()   # (row + i, col - i)


# Direction vectors (row, col) for each direction
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_DOWN_RIGHT: (1, 1),
    Direction.DIAGONAL_DOWN_LEFT: (1, -1)
}


# --- Bit set helpers ---


def set_bit(bits: int, pos: int) -> int:
    return bits | (1 << pos)


def clear_bit(bits: int, pos: int) -> int:
    return bits & ~(1 << pos)


def query_bit(bits: int, pos: int) -> bool:
    return (bits >> pos) & 1 == 1


def lowest_set_bit(bits: int) -> int:
    """Isolate the least significant set bit (0 if ``bits`` is empty)."""
    return bits & -bits


def popcount(bits: int) -> int:
    return bin(bits).count("1")


def bit_positions(bits: int) -> Iterator[int]:
    """Yield the positions of the set bits in ascending order."""
    while bits:
        low = bits & -bits
        yield low.bit_length() - 1
        bits ^= low


def cell_index(row: int, col: int, cols: int = COLS) -> int:
    return row * cols + col


def cell_position(index: int, cols: int = COLS) -> Tuple[int, int]:
    """Convert a cell index back to (row, col)."""
    return divmod(index, cols)


def render_board(occupied: int, color: int,
                 rows: int = ROWS, cols: int = COLS,
                 turn: Optional[Side] = None,
                 use_color: bool = True,
                 highlight: Iterable[int] = ()) -> str:
    """
    Render a board as a box-drawn grid, top row first.

    Args:
        occupied: Occupied bit set
        color: Color bit set (only read where occupied)
        rows: Board height
        cols: Board width
        turn: Side to move; adds a "Turn:" line when given
        use_color: Draw ANSI colored discs instead of X/O letters
        highlight: Cell indices to emphasise (e.g. a winning run)

    Returns:
        The rendered board
    """
    marked = set(highlight)
    lines = ["".join(f"  {(col + 1) % 10} " for col in range(cols)).rstrip()]
    lines.append("╭" + "┬".join(["───"] * cols) + "╮")

    for row in range(rows - 1, -1, -1):
        line = ""
        for col in range(cols):
            pos = cell_index(row, col, cols)
            line += "│" + _render_cell(occupied, color, pos, use_color, pos in marked)
        lines.append(line + "│")
        if row > 0:
            lines.append("├" + "┼".join(["───"] * cols) + "┤")

    lines.append("╰" + "┴".join(["───"] * cols) + "╯")

    if turn is not None:
        lines.append(f"Turn: {turn}")

    return "\n".join(lines)


def _render_cell(occupied: int, color: int, pos: int, use_color: bool, marked: bool) -> str:
    if not query_bit(occupied, pos):
        return "   "

    yellow = query_bit(color, pos)
    if use_color:
        style = YELLOW_DISC if yellow else RED_DISC
        if marked:
            style += HIGHLIGHT
        return f"{style} O {RESET}"

    glyph = "O" if yellow else "X"
    return f"({glyph})" if marked else f" {glyph} "
