"""
rules.py - Game state machine and Gymnasium environment for Connect Four

This module provides:
1. ConnectFourGame, which drives the board engine through a game and stops
   accepting moves once a terminal state is reached
2. A gymnasium-compatible environment over the same engine
"""

from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from bitfour.debug import debug
from bitfour.utils import Side, GameResult
from bitfour.game.board import Board, new_board, drop, valid_moves, last_row
from bitfour.game.evaluator import evaluate, winning_cells
from bitfour.game.patterns import PatternTable, build_pattern_table


class ConnectFourGame:
    """
    One game of Connect Four.

    Owns a board and the pattern table it is evaluated against. The result is
    recomputed after every successful drop: IN_PROGRESS until a side completes
    a run (RED_WON / YELLOW_WON) or the board fills up (DRAW).
    """

    def __init__(self, table: Optional[PatternTable] = None):
        """
        Initialize a new game.

        Args:
            table: Shared pattern table; the standard 6x7 table is built if omitted
        """
        debug.debug("Initializing ConnectFourGame", "game")
        self.table = table if table is not None else build_pattern_table()
        self.reset()

    def reset(self) -> None:
        """Start over with an empty board."""
        self.board = new_board(self.table)
        self.result = GameResult.IN_PROGRESS
        self.last_move: Optional[Tuple[int, int]] = None

    def make_move(self, column: int) -> bool:
        """
        Drop a piece for the side to move.

        Args:
            column: Column to play (0-indexed)

        Returns:
            True if the move was applied, False if it was refused
        """
        if self.result.is_game_over():
            debug.debug(f"Move in column {column} refused: game is over ({self.result.name})",
                        "game")
            return False

        mover = self.board.turn
        if not drop(self.board, column, self.table):
            return False

        self.last_move = (last_row(self.board, column), column)
        self.result = evaluate(self.board, self.table)
        if self.result.is_game_over():
            debug.info(f"Game over after {self.board.move_count} moves: {self.result.name}",
                       "game")
        else:
            debug.debug(f"{mover.label} played column {column}", "game")
        return True

    def is_game_over(self) -> bool:
        return self.result.is_game_over()

    def get_winner(self) -> Optional[Side]:
        """The winning side, or None while in progress or after a draw."""
        return self.result.winner

    def get_current_player(self) -> Side:
        return self.board.turn

    def get_valid_moves(self) -> List[int]:
        if self.is_game_over():
            return []
        return valid_moves(self.board, self.table)

    def get_winning_line(self) -> List[Tuple[int, int]]:
        return winning_cells(self.board, self.table)

    def get_state(self) -> Board:
        return self.board

    def render(self, show_turn: bool = True, use_color: bool = False) -> str:
        return self.board.render(show_turn=show_turn, use_color=use_color)


class ConnectFourEnv(gym.Env):
    """
    Connect Four environment following the Gymnasium interface.

    Both sides act through ``step``; rewards are from Red's point of view.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    reward_win = 1.0
    reward_lose = -1.0
    reward_draw = 0.1
    reward_invalid_move = -0.5
    reward_step = -0.01

    def __init__(self, render_mode: Optional[str] = None,
                 table: Optional[PatternTable] = None):
        debug.debug("Initializing ConnectFourEnv", "env")
        self.game = ConnectFourGame(table)
        rows, cols = self.game.table.rows, self.game.table.cols

        self.action_space = spaces.Discrete(cols)
        # 0 empty, 1 red, 2 yellow
        self.observation_space = spaces.Box(low=0, high=2, shape=(rows, cols), dtype=np.int8)
        self.render_mode = render_mode

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        debug.debug("Resetting environment", "env")
        super().reset(seed=seed)
        self.game.reset()

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Play ``action`` for the side to move.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        if not self.game.make_move(action):
            debug.warning(f"Invalid action: {action}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        result = self.game.result
        reward = self.reward_step
        if result == GameResult.RED_WON:
            reward = self.reward_win
        elif result == GameResult.YELLOW_WON:
            reward = self.reward_lose
        elif result == GameResult.DRAW:
            reward = self.reward_draw

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), reward, result.is_game_over(), False, self._get_info()

    def render(self) -> Optional[Union[str, np.ndarray]]:
        if self.render_mode == "ascii":
            return self.game.render()
        if self.render_mode == "human":
            print(self.game.render())
        return None

    def _get_observation(self) -> np.ndarray:
        return self.game.board.get_state()

    def _get_info(self) -> Dict:
        moves = self.game.get_valid_moves()
        return {
            'valid_moves': moves,
            'num_valid_moves': len(moves),
            'current_player': self.game.get_current_player().name,
            'game_result': self.game.result.name,
            'moves_made': self.game.board.move_count,
            'winning_line': self.game.get_winning_line(),
            'last_move': self.game.last_move,
        }
