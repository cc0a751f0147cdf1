"""Logging configuration for the prq command."""

import logging
from logging import Formatter, LogRecord, StreamHandler
import sys
from typing import NoReturn, Optional, TextIO, Tuple

PROG = "prq"


class LevelFormatter(Formatter):

    """Formats records as "prq: level: message".

    On a terminal the level name is bold and colored.
    """

    COLORS = {
        logging.FATAL: 31,
        logging.ERROR: 31,
        logging.WARNING: 33,
        logging.INFO: 32,
        logging.DEBUG: 35,
    }

    def __init__(self, use_color: bool):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: LogRecord) -> str:
        level = record.levelname.lower()
        code = self.COLORS.get(record.levelno)
        if self.use_color and code:
            level = f"\x1b[{code};1m{level}\x1b[0m"
        return f"{PROG}: {level}: {super().format(record)}"


class ExitStreamHandler(StreamHandler):

    """Stream handler that exits with status 1 after logs at exit_level or above."""

    def __init__(
        self, stream: Optional[TextIO] = None, exit_level: int = logging.FATAL
    ):
        super().__init__(stream)
        self.exit_level = exit_level

    def emit(self, record: LogRecord):
        super().emit(record)
        if record.levelno >= self.exit_level:
            sys.exit(1)


def levels(verbose: Optional[int], keep_going: bool) -> Tuple[int, int]:
    """Return (log_level, exit_level) for command-line flags.

    Warnings are shown by default, and each -v shows one more level. Errors
    cause an exit unless keep_going is set, in which case only fatal logs do.
    """
    log_level = logging.WARNING
    if verbose == 1:
        log_level = logging.INFO
    elif verbose and verbose >= 2:
        log_level = logging.DEBUG
    exit_level = logging.FATAL if keep_going else logging.ERROR
    return log_level, exit_level


def setup_logging(stream: TextIO, log_level: int, exit_level: int):
    """Send root logger records to stream, exiting at exit_level.

    The log_level must not be higher than exit_level, and exit_level must not
    be higher than FATAL.
    """
    assert log_level <= exit_level <= logging.FATAL
    logger = logging.getLogger()
    logger.setLevel(log_level)
    handler = ExitStreamHandler(stream, exit_level)
    handler.setFormatter(LevelFormatter(use_color=stream.isatty()))
    logger.addHandler(handler)
    logging.addLevelName(logging.FATAL, "FATAL")


def fatal(msg: str, *args, **kwargs) -> NoReturn:
    """Log msg at FATAL level and exit with status 1.

    Exits even when setup_logging was never called.
    """
    logging.fatal(msg, *args, **kwargs)
    sys.exit(1)
