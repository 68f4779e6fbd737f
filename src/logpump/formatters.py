"""
Log line rendering and color tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Mapping, Sequence

import orjson

from .types import CallSite, Level

FileFormat = Literal["text", "json"]

DEFAULT_ROOT_MARKER = "src/"

# =============================================================================
# ANSI Color Codes
# =============================================================================

RESET = "\x1b[0m"

LEVEL_COLORS: dict[Level, str] = {
    Level.TRACE: "\x1b[90m",  # Grey
    Level.DEBUG: "\x1b[34m",  # Blue
    Level.INFO: "\x1b[32m",  # Green
    Level.WARN: "\x1b[33m",  # Yellow
    Level.ERROR: "\x1b[31m",  # Red
    Level.FATAL: "\x1b[41;97m",  # White on red
}


def level_color(level: Level) -> str:
    """Escape sequence for a level; ``OFF`` maps to reset."""
    return LEVEL_COLORS.get(level, RESET)


# =============================================================================
# Helpers
# =============================================================================


def shorten_path(path: str, root_marker: str = DEFAULT_ROOT_MARKER) -> str:
    """Trim a source path to start at the project root marker, or its base name."""
    normalized = path.replace("\\", "/")
    if root_marker:
        index = normalized.find(root_marker)
        if index != -1:
            return normalized[index:]
    return normalized.rsplit("/", 1)[-1]


def format_message(template: str, args: Sequence[Any] = (), kwargs: Mapping[str, Any] | None = None) -> str:
    """Substitute ``str.format`` placeholders; templates without arguments are kept verbatim."""
    if not args and not kwargs:
        return template
    return template.format(*args, **(kwargs or {}))


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Formatters
# =============================================================================


class ConsoleFormatter:
    """Colored console line, no timestamp."""

    TEMPLATE = "{color}[{level}] {path}:{line} in function {reset}'{function}'{color}: {message}{reset}\n"

    @classmethod
    def format(cls, level: Level, call_site: CallSite, message: str, *, root_marker: str = DEFAULT_ROOT_MARKER) -> str:
        color = level_color(level)
        return cls.TEMPLATE.format(
            color=color,
            reset=RESET,
            level=level.label,
            path=shorten_path(call_site.file, root_marker),
            line=call_site.line,
            function=call_site.function,
            message=message,
        )


class FileFormatter:
    """Plain, timestamped file line (text or JSON)."""

    TEMPLATE = "[{timestamp}] - [{level}] {path}:{line} in function '{function}': {message}\n"

    @classmethod
    def format(
        cls,
        level: Level,
        call_site: CallSite,
        message: str,
        *,
        root_marker: str = DEFAULT_ROOT_MARKER,
        now: datetime | None = None,
        file_format: FileFormat = "text",
    ) -> str:
        now = now or datetime.now()
        path = shorten_path(call_site.file, root_marker)
        if file_format == "json":
            payload = {
                "timestamp": now.isoformat(),
                "level": level.label,
                "file": path,
                "line": call_site.line,
                "function": call_site.function,
                "message": message,
            }
            return orjson_dumps(payload) + "\n"
        return cls.TEMPLATE.format(
            timestamp=now.ctime(),
            level=level.label,
            path=path,
            line=call_site.line,
            function=call_site.function,
            message=message,
        )


def render(
    level: Level,
    call_site: CallSite,
    template: str,
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
    *,
    for_file: bool = False,
    root_marker: str = DEFAULT_ROOT_MARKER,
    now: datetime | None = None,
    file_format: FileFormat = "text",
) -> str:
    """Render one newline-terminated log line.

    Args:
        level: Severity of the record.
        call_site: Where the log call was made.
        template: ``str.format`` template; a mismatch with ``args``/``kwargs``
            raises the usual ``IndexError``/``KeyError``.
        args: Positional placeholder values.
        kwargs: Named placeholder values.
        for_file: Render the file variant instead of the console variant.
        root_marker: Path fragment marking the project root.
        now: Timestamp for the file variant (defaults to the current local time).
        file_format: ``text`` or ``json`` for the file variant.
    """
    message = format_message(template, args, kwargs)
    if for_file:
        return FileFormatter.format(
            level, call_site, message, root_marker=root_marker, now=now, file_format=file_format
        )
    return ConsoleFormatter.format(level, call_site, message, root_marker=root_marker)
