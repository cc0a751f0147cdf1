"""Tests for logging configuration."""

import io
import logging

import pytest

from prereq.logs import ExitStreamHandler, LevelFormatter, fatal, levels, setup_logging


class TestLevels:
    @pytest.mark.parametrize(
        "verbose, expected",
        [(None, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
    )
    def test_log_level(self, verbose, expected) -> None:
        assert levels(verbose, False)[0] == expected

    def test_exit_level(self) -> None:
        assert levels(None, False)[1] == logging.ERROR
        assert levels(None, True)[1] == logging.FATAL


class TestHandlers:
    def test_plain_format(self) -> None:
        record = logging.LogRecord("x", logging.WARNING, "", 0, "hi %s", ("there",), None)
        assert LevelFormatter(use_color=False).format(record) == "prq: warning: hi there"

    def test_color_format(self) -> None:
        record = logging.LogRecord("x", logging.INFO, "", 0, "hi", None, None)
        assert LevelFormatter(use_color=True).format(record) == "prq: \x1b[32;1minfo\x1b[0m: hi"

    def test_exit_after_severe_log(self) -> None:
        stream = io.StringIO()
        setup_logging(stream, logging.INFO, logging.ERROR)
        logging.warning("careful")
        with pytest.raises(SystemExit):
            logging.error("broken")
        assert stream.getvalue() == "prq: warning: careful\nprq: error: broken\n"

    def test_handler_default_exit_level(self) -> None:
        assert ExitStreamHandler(io.StringIO()).exit_level == logging.FATAL

    def test_fatal_exits_without_setup(self) -> None:
        with pytest.raises(SystemExit) as info:
            fatal("gone %s", "away")
        assert info.value.code == 1
