"""
Engine facade and process-wide lifecycle.
"""

from __future__ import annotations

import atexit
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from .formatters import DEFAULT_ROOT_MARKER, FileFormat, render
from .message_queue import MessageQueue
from .sinks import BaseSink, ConsoleSink, FileSink
from .types import CallSite, Destination, Level, LogRecord
from .worker import AttachFile, Barrier, DetachFile, Worker

if TYPE_CHECKING:
    from .config import LoggingSettings

DEFAULT_FILE_PATH = "./log.txt"

MSG_FILE_NOT_ENABLED = "cannot log to file if it was not previously enabled"

# =============================================================================
# Engine
# =============================================================================


class Engine:
    """Asynchronous logging engine.

    Producers render their record on the calling thread and push it onto an
    unbounded queue; a single worker thread drains the queue in order and writes
    each record to the console or to the log file.

    Args:
        level: Minimum level that is emitted.
        file_path: Path opened (append mode) when file logging is enabled.
        console: Console sink, or a text stream to wrap in one (default stdout).
        root_marker: Path fragment marking the project root in call sites.
        file_format: ``text`` or ``json`` lines in the log file.
        release: Strip the TRACE..WARN helper methods, as a release build would.
        start: Spawn the worker immediately.
    """

    def __init__(
        self,
        *,
        level: Level | str | int = Level.TRACE,
        file_path: str | Path = DEFAULT_FILE_PATH,
        console: BaseSink | TextIO | None = None,
        root_marker: str = DEFAULT_ROOT_MARKER,
        file_format: FileFormat = "text",
        release: bool = False,
        start: bool = True,
    ):
        self._level = Level.parse(level)
        self._file_path = Path(file_path)
        self._file_enabled = False
        self._root_marker = root_marker
        self._file_format: FileFormat = file_format
        self._release = release

        self._console = console if isinstance(console, BaseSink) else ConsoleSink(console)
        self._queue = MessageQueue()
        self._worker = Worker(self._queue, self._console, root_marker=root_marker)
        self._config_lock = threading.Lock()
        self._inline_lock = threading.Lock()
        self._running = True
        self._shutdown_timeout: float | None = None

        if start:
            self.start()

    @classmethod
    def from_settings(cls, settings: LoggingSettings, *, console: BaseSink | TextIO | None = None) -> Engine:
        """Build an engine from ``LoggingSettings`` and apply its file toggle."""
        engine = cls(
            level=settings.level,
            file_path=settings.file_path,
            console=console if console is not None else settings.console_stream(),
            root_marker=settings.root_marker,
            file_format=settings.file_format,
            release=settings.release,
        )
        if settings.file_enabled:
            engine.enable_file_logging(True)
        return engine

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def level(self) -> Level:
        return self._level

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def file_logging_enabled(self) -> bool:
        return self._file_enabled

    @property
    def running(self) -> bool:
        return self._running

    def is_enabled_for(self, level: Level) -> bool:
        return level is not Level.OFF and level >= self._level

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_level(self, level: Level | str | int) -> None:
        self._level = Level.parse(level)

    def set_log_file_path(self, path: str | Path) -> None:
        """Store the path used by the next ``enable_file_logging(True)``."""
        self._file_path = Path(path)

    def enable_file_logging(self, enable: bool = True) -> None:
        """Open (append) or close the log file. Same-state calls are no-ops.

        A path that cannot be opened is reported as an ERROR console record and
        file logging stays disabled.
        """
        with self._config_lock:
            if enable == self._file_enabled:
                return

            if not enable:
                self._file_enabled = False
                self._submit(DetachFile())
                return

            if not self._running:
                self.log(Level.WARN, CallSite.here(), "cannot enable file logging after shutdown")
                return

            try:
                sink = FileSink(self._file_path)
            except (OSError, ValueError) as exc:
                reason = getattr(exc, "strerror", None) or str(exc)
                self.log(Level.ERROR, CallSite.here(), "Failed to open log file '{}': {}", self._file_path, reason)
                return

            self._file_enabled = True
            self._submit(AttachFile(sink))

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    def log(self, level: Level, call_site: CallSite, template: str, /, *args: Any, **kwargs: Any) -> None:
        """Queue a console record if ``level`` passes the threshold."""
        if not self.is_enabled_for(level):
            return
        text = render(level, call_site, template, args, kwargs, root_marker=self._root_marker)
        self._submit(LogRecord(level, call_site, text, Destination.CONSOLE))

    def log_to_file(self, level: Level, call_site: CallSite, template: str, /, *args: Any, **kwargs: Any) -> None:
        """Queue a file record; requires file logging to be enabled."""
        if not self.is_enabled_for(level):
            return
        # Enabled state is snapshotted here; a later disable is queued behind this record
        if not self._file_enabled:
            self.log(Level.WARN, CallSite.here(), MSG_FILE_NOT_ENABLED)
            return
        text = render(
            level,
            call_site,
            template,
            args,
            kwargs,
            for_file=True,
            root_marker=self._root_marker,
            file_format=self._file_format,
        )
        self._submit(LogRecord(level, call_site, text, Destination.FILE))

    def _emit(self, level: Level, to_file: bool, template: str, args: tuple, kwargs: dict) -> None:
        # Shared by the level helpers; the caller sits two frames up
        if self._release and level <= Level.WARN:
            return
        if not self.is_enabled_for(level):
            return
        call_site = CallSite.here(2)
        if to_file:
            self.log_to_file(level, call_site, template, *args, **kwargs)
        else:
            self.log(level, call_site, template, *args, **kwargs)

    def trace(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.TRACE, False, template, args, kwargs)

    def debug(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.DEBUG, False, template, args, kwargs)

    def info(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.INFO, False, template, args, kwargs)

    def warn(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.WARN, False, template, args, kwargs)

    def error(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.ERROR, False, template, args, kwargs)

    def fatal(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.FATAL, False, template, args, kwargs)

    def ftrace(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.TRACE, True, template, args, kwargs)

    def fdebug(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.DEBUG, True, template, args, kwargs)

    def finfo(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.INFO, True, template, args, kwargs)

    def fwarn(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.WARN, True, template, args, kwargs)

    def ferror(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.ERROR, True, template, args, kwargs)

    def ffatal(self, template: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(Level.FATAL, True, template, args, kwargs)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        if self._running:
            self._worker.start()

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until everything queued before this call has been written."""
        done = threading.Event()
        if self._submit(Barrier(done)):
            return done.wait(timeout)
        return True

    def shutdown(self, timeout: float | None = None) -> None:
        """Stop the worker after it has drained every pending record and closed the file."""
        with self._config_lock:
            if not self._running:
                return
            self._running = False
            self._file_enabled = False
            self._shutdown_timeout = timeout
        self._worker.stop(timeout)

    def _submit(self, item: Any) -> bool:
        """Queue ``item``; once shut down, process it on the calling thread.

        Waits for the worker no longer than the timeout given to ``shutdown``;
        a worker still stuck on a sink after that no longer orders later output.
        Returns ``True`` when the item went through the queue.
        """
        if self._queue.push(item):
            return True
        self._worker.join(self._shutdown_timeout)
        with self._inline_lock:
            self._worker.process([item])
        return False

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()


# =============================================================================
# Process-wide Default
# =============================================================================

_default_engine: Engine | None = None
_default_lock = threading.Lock()


def get_engine() -> Engine:
    """Return the process default engine, building it from settings on first use."""
    global _default_engine
    if _default_engine is None:
        with _default_lock:
            if _default_engine is None:
                from .config import get_settings

                _default_engine = Engine.from_settings(get_settings())
                atexit.register(shutdown)
    return _default_engine


def set_engine(engine: Engine | None) -> Engine | None:
    """Replace the process default engine and return the previous one (not shut down)."""
    global _default_engine
    with _default_lock:
        previous, _default_engine = _default_engine, engine
    return previous


def shutdown() -> None:
    """Shut the process default engine down, if one was created."""
    engine = _default_engine
    if engine is not None:
        engine.shutdown()


def trace(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.TRACE, False, template, args, kwargs)


def debug(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.DEBUG, False, template, args, kwargs)


def info(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.INFO, False, template, args, kwargs)


def warn(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.WARN, False, template, args, kwargs)


def error(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.ERROR, False, template, args, kwargs)


def fatal(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.FATAL, False, template, args, kwargs)


def ftrace(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.TRACE, True, template, args, kwargs)


def fdebug(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.DEBUG, True, template, args, kwargs)


def finfo(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.INFO, True, template, args, kwargs)


def fwarn(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.WARN, True, template, args, kwargs)


def ferror(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.ERROR, True, template, args, kwargs)


def ffatal(template: str, /, *args: Any, **kwargs: Any) -> None:
    get_engine()._emit(Level.FATAL, True, template, args, kwargs)
