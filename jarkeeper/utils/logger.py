"""
Logging utilities for jarkeeper.

Every module logs through ``get_logger(__name__)``-style names under the
``jarkeeper`` namespace. Nothing is printed until the CLI calls
:func:`setup_logging`; library users get a ``NullHandler`` and can attach
their own handlers to the ``jarkeeper`` logger.

The CLI maps ``-v`` flags to levels::

    (none)  WARNING   retries and cleanup problems only
    -v      INFO      fetched documents, downloads, closure sizes
    -vv     DEBUG     every URL probed, POM merges, timestamps and names
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Dict, Optional

from jarkeeper.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

_ROOT_LOGGER_NAME = "jarkeeper"

_lock = threading.Lock()


def level_for_verbosity(verbosity: int) -> int:
    """Translate a ``-v`` count into a logging level."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def _stream_supports_color(stream: IO[str]) -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return stream.isatty()
    except (AttributeError, ValueError, OSError):
        return False


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps the level name in an ANSI color.

    Whether to color is decided once, for the stream the handler writes
    to. The record is restored after formatting so other handlers see the
    plain level name.
    """

    LEVEL_COLORS: Dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    @classmethod
    def for_stream(cls, fmt: str, stream: IO[str]) -> "ColoredFormatter":
        return cls(fmt, datefmt=LOG_DATE_FORMAT, use_color=_stream_supports_color(stream))

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_color else None
        if color is None:
            return super().format(record)

        levelname = record.levelname
        record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(verbosity: int = 0, *, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Send jarkeeper log records to ``stream`` (``sys.stderr`` by default).

    Calling it again replaces the previous handler, so the CLI can be
    invoked repeatedly in one process (as the tests do).

    Args:
        verbosity: Number of ``-v`` flags; see :func:`level_for_verbosity`.
            From ``-vv`` on, records carry a timestamp and logger name.
        stream: Destination stream.

    Returns:
        The ``jarkeeper`` root logger.
    """
    level = level_for_verbosity(verbosity)
    target = stream or sys.stderr
    fmt = LOG_VERBOSE_FORMAT if level <= logging.DEBUG else LOG_DEFAULT_FORMAT

    handler = logging.StreamHandler(target)
    handler.setFormatter(ColoredFormatter.for_stream(fmt, target))

    with _lock:
        root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
        for previous in list(root_logger.handlers):
            root_logger.removeHandler(previous)
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        root_logger.propagate = False

    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the jarkeeper namespace.

    Args:
        name: Relative (``"resolver"``) or qualified
            (``"jarkeeper.resolver"``) name; ``None`` for the root.
    """
    if not name or name == _ROOT_LOGGER_NAME:
        qualified = _ROOT_LOGGER_NAME
    elif name.startswith(f"{_ROOT_LOGGER_NAME}."):
        qualified = name
    else:
        qualified = f"{_ROOT_LOGGER_NAME}.{name}"

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    return logging.getLogger(qualified)
