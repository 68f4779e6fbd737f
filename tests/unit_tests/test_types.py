from __future__ import annotations

import inspect
import logging

import pytest

from logpump import CallSite, Destination, InvalidLevelError, Level, LogPumpError, LogRecord


class TestLevelOrdering:
    """Level ordering and labels"""

    def test_levels_are_totally_ordered(self) -> None:
        ordered = [Level.TRACE, Level.DEBUG, Level.INFO, Level.WARN, Level.ERROR, Level.FATAL, Level.OFF]
        assert sorted(reversed(ordered)) == ordered

    def test_labels(self) -> None:
        assert [lvl.label for lvl in Level] == ["TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL", ""]


class TestLevelParse:
    """Level.parse accepts names, aliases and numbers"""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("info", Level.INFO),
            (" Debug ", Level.DEBUG),
            ("WARNING", Level.WARN),
            ("critical", Level.FATAL),
            ("off", Level.OFF),
            (4, Level.ERROR),
            (Level.TRACE, Level.TRACE),
        ],
    )
    def test_valid_values(self, value, expected: Level) -> None:
        assert Level.parse(value) is expected

    @pytest.mark.parametrize("value", ["verbose", 7, -1, None, True, 1.5])
    def test_invalid_values_raise(self, value) -> None:
        with pytest.raises(InvalidLevelError) as exc_info:
            Level.parse(value)
        assert exc_info.value.code == "INVALID_LEVEL"
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, LogPumpError)


class TestStdlibMapping:
    """Mapping to and from stdlib logging numbers"""

    @pytest.mark.parametrize(
        ("levelno", "expected"),
        [
            (5, Level.TRACE),
            (logging.DEBUG, Level.DEBUG),
            (logging.INFO, Level.INFO),
            (logging.WARNING, Level.WARN),
            (logging.ERROR, Level.ERROR),
            (logging.CRITICAL, Level.FATAL),
            (99, Level.FATAL),
        ],
    )
    def test_from_stdlib(self, levelno: int, expected: Level) -> None:
        assert Level.from_stdlib(levelno) is expected

    def test_off_is_above_every_stdlib_level(self) -> None:
        assert Level.OFF.to_stdlib() > logging.CRITICAL


class TestCallSite:
    """Call-site capture from the calling frame"""

    def test_here_captures_caller(self) -> None:
        line = inspect.currentframe().f_lineno + 1
        site = CallSite.here()
        assert site.function == "test_here_captures_caller"
        assert site.line == line
        assert site.file.endswith("test_types.py")

    def test_here_with_depth_skips_frames(self) -> None:
        def helper() -> CallSite:
            return CallSite.here(1)

        line = inspect.currentframe().f_lineno + 1
        site = helper()
        assert site.function == "test_here_with_depth_skips_frames"
        assert site.line == line

    def test_record_is_immutable(self) -> None:
        record = LogRecord(Level.INFO, CallSite("a.py", 1, "f"), "text\n", Destination.CONSOLE)
        with pytest.raises(AttributeError):
            record.text = "other"  # type: ignore[misc]
