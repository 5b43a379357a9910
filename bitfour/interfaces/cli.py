"""
cli.py - Terminal interface for the bitfour engine

Two players share one terminal. Each turn the board is evaluated, drawn, and
a 1-based column is read; bad input is erased and asked for again. The
``show`` and ``benchmark`` commands replay move lists and time the engine.
"""

import argparse
import random
import sys
from typing import List, Optional

from bitfour.debug import debug, DebugLevel, COMPONENTS
from bitfour.utils import GameResult, cell_index
from bitfour.game.board import check_move, board_from_moves, valid_moves
from bitfour.game.evaluator import check_winner, evaluate, winning_cells
from bitfour.game.patterns import build_pattern_table
from bitfour.game.rules import ConnectFourGame

CLEAR_SCREEN = "\033[H\033[2J"
ERASE_LINE = "\033[F\033[K"  # cursor up one line, clear it


def outcome_message(result: GameResult) -> str:
    """Final line printed for a terminal result."""
    if result.winner is not None:
        return f"{result.winner.label} wins!"
    if result == GameResult.DRAW:
        return "Tie"
    return "Game in progress"


def component_list(value: str) -> List[str]:
    """argparse type for --components: known component names, comma-separated."""
    names = [name.strip() for name in value.split(',') if name.strip()]
    unknown = [name for name in names if name not in COMPONENTS]
    if unknown:
        raise argparse.ArgumentTypeError(f"unknown component(s): {', '.join(unknown)}")
    return names


class TerminalCLI:
    """Command-line front end: argument parsing, the play loop and tools."""

    def __init__(self, argv: Optional[List[str]] = None):
        self.argv = argv
        self.args = None
        self.table = build_pattern_table()

    def parse_args(self) -> None:
        """Parse command-line arguments and configure logging."""
        parser = argparse.ArgumentParser(description='Two-player Connect Four')
        parser.add_argument('--debug', action='store_true', help='Log at debug level')
        parser.add_argument('--debug-level', default='warning',
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Log level (default: warning)')
        parser.add_argument('--log-file', help='Also write log messages to this file')
        parser.add_argument('--components', type=component_list,
                            help='Comma-separated components to log for: ' + ', '.join(COMPONENTS))
        parser.set_defaults(no_clear=False, no_color=False)

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a game (default)')
        play_parser.add_argument('--no-clear', action='store_true',
                                 help='Do not clear the screen between moves')
        play_parser.add_argument('--no-color', action='store_true',
                                 help='Draw pieces as X/O instead of colored discs')

        show_parser = subparsers.add_parser('show', help='Replay moves and show the result')
        show_parser.add_argument('--moves', required=True,
                                 help='Comma-separated 1-based columns, e.g. 4,4,3')
        show_parser.add_argument('--no-color', action='store_true',
                                 help='Draw pieces as X/O instead of colored discs')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark the engine')
        benchmark_parser.add_argument('--iterations', type=int, default=1000,
                                      help='Number of iterations for benchmarking')
        benchmark_parser.add_argument('--seed', type=int, help='Random seed')

        self.args = parser.parse_args(self.argv)

        level = DebugLevel.DEBUG if self.args.debug else DebugLevel[self.args.debug_level.upper()]
        debug.configure(level=level, log_file=self.args.log_file, components=self.args.components)

    def run(self) -> int:
        """Run the selected command and return the exit status."""
        if not self.args:
            self.parse_args()

        if self.args.command == 'show':
            return self.show_moves()
        if self.args.command == 'benchmark':
            return self.benchmark()
        return self.play_game()

    # --- play ---

    def _clear(self) -> None:
        if not self.args.no_clear:
            print(CLEAR_SCREEN, end="")

    def read_column(self, game: ConnectFourGame) -> int:
        """
        Prompt until the player names a playable column.

        Returns:
            A 0-based column that accepts a drop

        Raises:
            EOFError: If input runs out
        """
        cols = self.table.cols
        while True:
            user_input = input(f"Move (1-{cols}): ")
            try:
                column = int(user_input.strip()) - 1
            except ValueError:
                debug.debug(f"Non-numeric input: {user_input!r}", "cli")
                self._reject(f"Not a column number: {user_input.strip()}")
                continue

            error = check_move(game.board, column, self.table)
            if error is None:
                return column

            debug.debug(f"Rejected column {column + 1}: {error}", "cli")
            self._reject(f"Invalid move ({error}): {column + 1}")

    def _reject(self, message: str) -> None:
        # in place: wipe the prompt line; plain mode: say why instead
        if self.args.no_clear:
            print(message)
        else:
            print(ERASE_LINE, end="")

    def play_game(self) -> int:
        """Play one game. Returns 0 when the game ends, 1 if abandoned."""
        game = ConnectFourGame(self.table)
        use_color = not self.args.no_color
        debug.info("Starting a new game", "cli")

        try:
            while True:
                self._clear()
                if game.is_game_over():
                    break
                print(game.board.render(show_turn=True, use_color=use_color))
                game.make_move(self.read_column(game))
        except (EOFError, KeyboardInterrupt):
            print("\nGame abandoned.")
            debug.info("Game abandoned before a result", "cli")
            return 1

        highlight = [cell_index(row, col, self.table.cols)
                     for row, col in game.get_winning_line()]
        print(game.board.render(show_turn=False, use_color=use_color, highlight=highlight))
        print(outcome_message(game.result))
        return 0

    # --- show ---

    def show_moves(self) -> int:
        """Replay a comma-separated list of 1-based columns."""
        try:
            moves = [int(c) - 1 for c in self.args.moves.split(',') if c.strip()]
        except ValueError as e:
            print(f"Error parsing moves: {e}", file=sys.stderr)
            return 2

        board, applied = board_from_moves(moves, self.table)
        if applied < len(moves):
            print(f"Move {applied + 1} (column {moves[applied] + 1}) is invalid: "
                  f"{check_move(board, moves[applied], self.table)}", file=sys.stderr)
            return 2

        result = evaluate(board, self.table)
        line = winning_cells(board, self.table)
        highlight = [cell_index(row, col, self.table.cols) for row, col in line]
        print(board.render(show_turn=not result.is_game_over(),
                           use_color=not self.args.no_color, highlight=highlight))
        print(outcome_message(result))
        if line:
            print("Winning cells: " + ", ".join(f"({row}, {col})" for row, col in line))
        if not result.is_game_over():
            print("Valid moves: " + ", ".join(str(c + 1) for c in valid_moves(board, self.table)))
        return 0

    # --- benchmark ---

    def benchmark(self) -> int:
        """Time pattern table construction, drops and winner checks."""
        iterations = max(1, self.args.iterations)
        rng = random.Random(self.args.seed)
        print(f"Running benchmark with {iterations} iterations...")

        debug.start_timer("table_build")
        for _ in range(iterations):
            build_pattern_table()
        build_time = debug.end_timer("table_build")
        print(f"Pattern table build: {build_time:.6f} seconds total, "
              f"{build_time / iterations * 1000:.6f} ms per table")

        debug.start_timer("game_simulation")
        games_played = total_moves = 0
        for _ in range(iterations):
            game = ConnectFourGame(self.table)
            while not game.is_game_over():
                game.make_move(rng.choice(game.get_valid_moves()))
                total_moves += 1
            games_played += 1
        simulation_time = debug.end_timer("game_simulation")
        print(f"Played {games_played} random games with {total_moves} moves: "
              f"{simulation_time:.6f} seconds total, "
              f"{simulation_time / total_moves * 1000:.6f} ms per move (drop + evaluate)")

        game = ConnectFourGame(self.table)
        for _ in range(20):
            moves = game.get_valid_moves()
            if not moves:
                break
            game.make_move(rng.choice(moves))

        debug.start_timer("win_check")
        for _ in range(iterations):
            check_winner(game.board, self.table)
        check_time = debug.end_timer("win_check")
        print(f"Winner check over {len(self.table)} patterns: {check_time:.6f} seconds total, "
              f"{check_time / iterations * 1000:.6f} ms per check")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = TerminalCLI(argv)
    cli.parse_args()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
