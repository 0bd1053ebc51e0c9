from __future__ import annotations

import io
import logging
from typing import Generator
from unittest.mock import MagicMock

import pytest

from jarkeeper.utils.logger import (
    ColoredFormatter,
    _stream_supports_color,
    get_logger,
    level_for_verbosity,
    setup_logging,
)


@pytest.fixture
def clean_logger_state() -> Generator[None, None, None]:
    """Reset the jarkeeper logger before and after each test."""
    root_logger = logging.getLogger("jarkeeper")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)

    yield

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="jarkeeper.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


@pytest.mark.unit
class TestLevelForVerbosity:
    """Tests for mapping -v counts to levels."""

    @pytest.mark.parametrize(
        "verbosity,expected",
        [
            (-1, logging.WARNING),
            (0, logging.WARNING),
            (1, logging.INFO),
            (2, logging.DEBUG),
            (5, logging.DEBUG),
        ],
    )
    def test_levels(self, verbosity: int, expected: int) -> None:
        assert level_for_verbosity(verbosity) == expected


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter ANSI color formatting."""

    def test_format_with_color(self) -> None:
        """Test levelname is wrapped in ANSI codes when color applies."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=True)

        result = formatter.format(_record(logging.WARNING, "retrying"))

        assert result.startswith(ColoredFormatter.LEVEL_COLORS[logging.WARNING])
        assert f"WARNING{ColoredFormatter.RESET}: retrying" in result

    def test_format_restores_levelname(self) -> None:
        """Test the record is not left colored for other handlers."""
        formatter = ColoredFormatter("%(levelname)s", use_color=True)
        record = _record(logging.ERROR, "boom")

        formatter.format(record)

        assert record.levelname == "ERROR"

    def test_format_without_color(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=False)

        assert formatter.format(_record(logging.INFO, "hello")) == "INFO: hello"

    def test_custom_level_is_left_plain(self) -> None:
        """Test levels without a color entry format normally."""
        formatter = ColoredFormatter("%(levelname)s", use_color=True)

        assert formatter.format(_record(25, "x")) == "Level 25"

    def test_for_stream_plain_buffer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)

        formatter = ColoredFormatter.for_stream("%(message)s", io.StringIO())

        assert formatter.use_color is False


@pytest.mark.unit
class TestStreamSupportsColor:
    """Tests for per-stream color detection."""

    @pytest.mark.parametrize("var", ["NO_COLOR", "CI"])
    def test_environment_disables_color(self, monkeypatch: pytest.MonkeyPatch, var: str) -> None:
        """Test NO_COLOR and CI turn colors off even on a terminal."""
        monkeypatch.setenv(var, "1")
        stream = MagicMock()
        stream.isatty.return_value = True

        assert _stream_supports_color(stream) is False

    def test_terminal_enables_color(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)
        stream = MagicMock()
        stream.isatty.return_value = True

        assert _stream_supports_color(stream) is True

    def test_closed_stream(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a stream whose isatty() fails counts as plain."""
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)
        stream = io.StringIO()
        stream.close()

        assert _stream_supports_color(stream) is False


@pytest.mark.unit
@pytest.mark.usefixtures("clean_logger_state")
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_messages_reach_stream(self) -> None:
        """Test one -v shows INFO records on the given stream."""
        stream = io.StringIO()

        setup_logging(1, stream=stream)
        get_logger("resolver").info("Resolved %d dependencies", 3)

        assert stream.getvalue() == "INFO: Resolved 3 dependencies\n"

    def test_default_shows_warnings_only(self) -> None:
        stream = io.StringIO()

        setup_logging(0, stream=stream)
        get_logger("http").info("hidden")
        get_logger("http").warning("shown")

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()

    def test_debug_format_includes_logger_name(self) -> None:
        stream = io.StringIO()

        setup_logging(2, stream=stream)
        get_logger("pom").debug("parsing")

        assert "jarkeeper.pom - DEBUG - parsing" in stream.getvalue()

    def test_reconfiguration_replaces_handler(self) -> None:
        """Test repeated setup doesn't duplicate output."""
        stream = io.StringIO()

        setup_logging(1, stream=stream)
        setup_logging(1, stream=stream)
        get_logger().info("once")

        assert stream.getvalue().count("once") == 1

    def test_returns_root_logger(self) -> None:
        root_logger = setup_logging(stream=io.StringIO())

        assert root_logger is logging.getLogger("jarkeeper")
        assert root_logger.propagate is False
        assert len(root_logger.handlers) == 1


@pytest.mark.unit
@pytest.mark.usefixtures("clean_logger_state")
class TestGetLogger:
    """Tests for logger naming."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            (None, "jarkeeper"),
            ("jarkeeper", "jarkeeper"),
            ("resolver", "jarkeeper.resolver"),
            ("jarkeeper.http", "jarkeeper.http"),
        ],
    )
    def test_names_are_namespaced(self, name, expected: str) -> None:
        assert get_logger(name).name == expected

    def test_unconfigured_root_gets_null_handler(self) -> None:
        get_logger("resolver")

        handlers = logging.getLogger("jarkeeper").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.NullHandler)
