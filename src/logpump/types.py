from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

from .exceptions import InvalidLevelError


class Level(IntEnum):
    """Ordered severity levels.

    ``OFF`` is only ever used as a threshold: it suppresses every record and is
    never attached to a message.
    """

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5
    OFF = 6

    @property
    def label(self) -> str:
        return "" if self is Level.OFF else self.name

    @classmethod
    def parse(cls, value: Any) -> Level:
        """Interpret a ``Level``, an ``int`` or a case-insensitive name."""
        if isinstance(value, Level):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise InvalidLevelError(value) from None
        if isinstance(value, str):
            name = value.strip().upper()
            name = _LEVEL_ALIASES.get(name, name)
            try:
                return cls[name]
            except KeyError:
                raise InvalidLevelError(value) from None
        raise InvalidLevelError(value)

    @classmethod
    def from_stdlib(cls, levelno: int) -> Level:
        """Map a stdlib ``logging`` level number onto the nearest level."""
        if levelno >= 50:
            return cls.FATAL
        if levelno >= 40:
            return cls.ERROR
        if levelno >= 30:
            return cls.WARN
        if levelno >= 20:
            return cls.INFO
        if levelno >= 10:
            return cls.DEBUG
        return cls.TRACE

    def to_stdlib(self) -> int:
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS = {
    Level.TRACE: 1,
    Level.DEBUG: 10,
    Level.INFO: 20,
    Level.WARN: 30,
    Level.ERROR: 40,
    Level.FATAL: 50,
    Level.OFF: 51,
}

_LEVEL_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}


class Destination(Enum):
    """Sink a record is routed to."""

    CONSOLE = "console"
    FILE = "file"


@dataclass(frozen=True)
class CallSite:
    """Source location of a log call."""

    file: str
    line: int
    function: str

    @classmethod
    def here(cls, depth: int = 0) -> CallSite:
        """Capture the location of the caller.

        ``depth=0`` is the function calling ``here``; every extra level walks
        one more frame outwards.
        """
        frame = inspect.currentframe()
        try:
            target = frame.f_back if frame is not None else None
            for _ in range(depth):
                if target is None or target.f_back is None:
                    break
                target = target.f_back
            if target is None:
                return cls(file="<unknown>", line=0, function="<unknown>")
            return cls(
                file=target.f_code.co_filename,
                line=target.f_lineno,
                function=target.f_code.co_name,
            )
        finally:
            del frame


@dataclass(frozen=True)
class LogRecord:
    """A rendered log line waiting in the queue for its sink."""

    level: Level
    call_site: CallSite
    text: str
    destination: Destination
