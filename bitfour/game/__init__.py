"""
bitfour.game - Board engine for Connect Four

Pattern table construction, bit-packed board state, the column drop, win and
draw evaluation, and the game-level state machine built from them.
"""

from bitfour.game.patterns import PatternTable, build_pattern_table
from bitfour.game.board import Board, MoveError, new_board, drop, check_move
from bitfour.game.evaluator import check_winner, is_full, evaluate
from bitfour.game.rules import ConnectFourGame, ConnectFourEnv

__all__ = ['PatternTable', 'build_pattern_table', 'Board', 'MoveError', 'new_board',
           'drop', 'check_move', 'check_winner', 'is_full', 'evaluate',
           'ConnectFourGame', 'ConnectFourEnv']
