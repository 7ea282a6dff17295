"""Tests for logging configuration."""

import io
import logging

import pytest

from splitkeeper.logging import LogLevel, configure_logging, resolve_level


@pytest.fixture(autouse=True)
def _restore_logger():
    """Leave the package logger as we found it."""
    package_logger = logging.getLogger("splitkeeper")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


class TestResolveLevel:
    """Tests for mapping CLI flags to levels."""

    def test_default_is_normal(self) -> None:
        assert resolve_level() is LogLevel.NORMAL

    def test_verbose(self) -> None:
        assert resolve_level(verbosity=1) is LogLevel.VERBOSE
        assert resolve_level(verbosity=3) is LogLevel.VERBOSE

    def test_quiet_wins(self) -> None:
        assert resolve_level(verbosity=2, quiet=True) is LogLevel.QUIET


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_messages_reach_stream(self) -> None:
        stream = io.StringIO()
        configure_logging(stream=stream, no_color=True)
        logging.getLogger("splitkeeper.core.timer").info("Started attempt 1")
        assert "Started attempt 1" in stream.getvalue()

    def test_debug_hidden_by_default(self) -> None:
        stream = io.StringIO()
        configure_logging(stream=stream, no_color=True)
        logging.getLogger("splitkeeper.core.timer").debug("Ignoring split")
        assert "Ignoring split" not in stream.getvalue()

    def test_verbose_shows_debug(self) -> None:
        stream = io.StringIO()
        configure_logging(verbosity=1, stream=stream, no_color=True)
        logging.getLogger("splitkeeper.core.timer").debug("Ignoring split")
        assert "Ignoring split" in stream.getvalue()

    def test_reconfiguring_replaces_handler(self) -> None:
        configure_logging(stream=io.StringIO())
        configure_logging(stream=io.StringIO())
        assert len(logging.getLogger("splitkeeper").handlers) == 1
