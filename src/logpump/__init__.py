"""
Asynchronous logging for logpump.

Records are rendered on the calling thread and handed to a single background
worker that writes them, in order, to:
- console: ANSI colored lines on stdout
- file: append-only, timestamped lines (text or JSON)

Design Pattern: producer/consumer queue with Strategy Pattern sinks.
Library: orjson for JSON file lines, pydantic-settings for configuration,
structlog/stdlib logging front ends via ``logpump.interceptors``.
"""

from .core import (
    Engine,
    debug,
    error,
    fatal,
    fdebug,
    ferror,
    ffatal,
    finfo,
    ftrace,
    fwarn,
    get_engine,
    info,
    set_engine,
    shutdown,
    trace,
    warn,
)
from .exceptions import InvalidLevelError, LogPumpError
from .types import CallSite, Destination, Level, LogRecord

__all__ = [
    "CallSite",
    "Destination",
    "Engine",
    "InvalidLevelError",
    "Level",
    "LogPumpError",
    "LogRecord",
    "debug",
    "error",
    "fatal",
    "fdebug",
    "ferror",
    "ffatal",
    "finfo",
    "ftrace",
    "fwarn",
    "get_engine",
    "info",
    "set_engine",
    "shutdown",
    "trace",
    "warn",
]
