"""
Front ends routing stdlib ``logging`` and ``structlog`` events into an engine.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.typing import EventDict, WrappedLogger

from .core import Engine
from .types import CallSite, Level

# =============================================================================
# Stdlib logging
# =============================================================================


class EngineHandler(logging.Handler):
    """
    Redirect standard library logging records to an engine.
    The record's own pathname/lineno/funcName become the call site.
    """

    def __init__(self, engine: Engine, level: int = logging.NOTSET):
        super().__init__(level)
        self.engine = engine

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Format message using stdlib's formatting (handles %s args and exc_info)
            msg = self.format(record)
            call_site = CallSite(file=record.pathname, line=record.lineno, function=record.funcName)
            self.engine.log(Level.from_stdlib(record.levelno), call_site, msg)
        except Exception:
            self.handleError(record)


def install_stdlib_handler(engine: Engine, level: Level | str | int = Level.TRACE) -> EngineHandler:
    """Replace the root logger's handlers with a single ``EngineHandler``."""
    handler = EngineHandler(engine)
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(Level.parse(level).to_stdlib())
    return handler


# =============================================================================
# structlog
# =============================================================================

_METHOD_LEVELS = {
    "trace": Level.TRACE,
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "msg": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "exception": Level.ERROR,
    "critical": Level.FATAL,
    "fatal": Level.FATAL,
}

# structlog only builds filtering loggers for the standard stdlib levels
_STRUCTLOG_MIN_LEVELS = {
    Level.TRACE: logging.NOTSET,
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
    Level.FATAL: logging.CRITICAL,
    Level.OFF: logging.CRITICAL,
}

_CALLSITE_KEYS = {"pathname", "lineno", "func_name"}
_EXCLUDED_KEYS = _CALLSITE_KEYS | {"event", "level", "exception", "_name"}


class EngineRenderer:
    """Final structlog processor: forward the event to an engine.

    Extra keys are appended as ``key=value`` pairs. Returns an empty string so
    the wrapped logger has nothing to print.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        level = _METHOD_LEVELS.get(method_name, Level.INFO)

        call_site = CallSite(
            file=str(event_dict.get("pathname", "<structlog>")),
            line=int(event_dict.get("lineno", 0)),
            function=str(event_dict.get("func_name", "<unknown>")),
        )

        message = str(event_dict.get("event", ""))
        extras = [f"{k}={v}" for k, v in event_dict.items() if k not in _EXCLUDED_KEYS]
        if extras:
            message = f"{message} " + " ".join(extras)
        if event_dict.get("exception"):
            message = f"{message}\n{event_dict['exception']}"

        self.engine.log(level, call_site, message)
        return ""


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=_NOP_FILE)


def configure_structlog(engine: Engine, level: Level | str | int = Level.TRACE) -> None:
    """Configure structlog so every bound logger feeds ``engine``."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            CallsiteParameterAdder(
                {
                    CallsiteParameter.PATHNAME,
                    CallsiteParameter.LINENO,
                    CallsiteParameter.FUNC_NAME,
                }
            ),
            structlog.processors.format_exc_info,
            EngineRenderer(engine),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_STRUCTLOG_MIN_LEVELS[Level.parse(level)]),
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
