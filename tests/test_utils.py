"""
Tests for bit helpers, enumerations and logging.
"""

import logging

from bitfour.debug import DebugManager, DebugLevel
from bitfour import utils
from bitfour.utils import Side, GameResult


class TestBitHelpers:

    def test_set_clear_query(self):
        bits = utils.set_bit(0, 5)
        assert bits == 32
        assert utils.query_bit(bits, 5)
        assert not utils.query_bit(bits, 4)
        assert utils.clear_bit(bits, 5) == 0

    def test_lowest_set_bit(self):
        assert utils.lowest_set_bit(0b101000) == 0b1000
        assert utils.lowest_set_bit(0) == 0

    def test_popcount_and_positions(self):
        assert utils.popcount(utils.FULL_BOARD) == 42
        assert list(utils.bit_positions(0b1001010)) == [1, 3, 6]

    def test_cell_index_round_trip(self):
        assert utils.cell_index(2, 3) == 17
        assert utils.cell_position(17) == (2, 3)


class TestEnums:

    def test_side(self):
        assert Side.RED.other() == Side.YELLOW
        assert Side.YELLOW.other() == Side.RED
        assert Side.RED.label == "Red"
        assert str(Side.YELLOW) == "yellow"

    def test_game_result(self):
        assert GameResult.won_by(Side.YELLOW) == GameResult.YELLOW_WON
        assert GameResult.RED_WON.winner == Side.RED
        assert GameResult.DRAW.winner is None
        assert GameResult.DRAW.is_game_over()
        assert not GameResult.IN_PROGRESS.is_game_over()


class TestDebugManager:

    def test_level_and_component_filtering(self):
        manager = DebugManager("bitfour.test")
        manager.configure(level=DebugLevel.INFO, components=["board"])
        assert manager._should_log(DebugLevel.INFO, "board")
        assert not manager._should_log(DebugLevel.DEBUG, "board")
        assert not manager._should_log(DebugLevel.INFO, "game")

    def test_set_from_string(self):
        manager = DebugManager("bitfour.test")
        assert manager.set_from_string("trace")
        assert manager.level == DebugLevel.TRACE
        assert not manager.set_from_string("loud")
        assert manager.level == DebugLevel.TRACE

    def test_timers(self):
        manager = DebugManager("bitfour.test")
        assert manager.end_timer("missing") is None
        manager.start_timer("work")
        assert manager.end_timer("work") >= 0.0

    def test_one_console_handler_per_logger(self):
        DebugManager("bitfour.test.handlers")
        DebugManager("bitfour.test.handlers")
        handlers = logging.getLogger("bitfour.test.handlers").handlers
        assert len([h for h in handlers if type(h) is logging.StreamHandler]) == 1

    def test_file_logging(self, tmp_path):
        manager = DebugManager("bitfour.test.file")
        log_file = tmp_path / "bitfour.log"
        manager.configure(level=DebugLevel.INFO, log_file=str(log_file))
        manager.info("hello", "board")
        manager.configure(log_file="")
        assert "[board] hello" in log_file.read_text()
