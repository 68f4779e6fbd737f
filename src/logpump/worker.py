"""
Background worker draining the message queue into the sinks.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterable

from .formatters import DEFAULT_ROOT_MARKER, render
from .message_queue import MessageQueue
from .sinks import BaseSink
from .types import CallSite, Destination, Level, LogRecord

# =============================================================================
# Control Items
# =============================================================================


@dataclass(frozen=True)
class AttachFile:
    """Hand an opened file sink over to the worker."""

    sink: BaseSink


@dataclass(frozen=True)
class DetachFile:
    """Close the current file sink, if any."""


@dataclass(frozen=True)
class Barrier:
    """Set ``event`` once every item queued before it has been processed."""

    event: threading.Event


# =============================================================================
# Worker
# =============================================================================


class Worker:
    """Single consumer of a ``MessageQueue``.

    The file sink is owned exclusively by the worker once attached; the console
    sink is shared with the engine only for records written after shutdown.
    """

    THREAD_NAME = "logpump-worker"

    def __init__(self, queue: MessageQueue, console: BaseSink, *, root_marker: str = DEFAULT_ROOT_MARKER):
        self._queue = queue
        self._console = console
        self._root_marker = root_marker
        self._file: BaseSink | None = None
        self._thread = threading.Thread(target=self._run, name=self.THREAD_NAME, daemon=True)
        self._finished = threading.Event()

    @property
    def started(self) -> bool:
        return self._thread.ident is not None

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    @property
    def has_file(self) -> bool:
        return self._file is not None

    def start(self) -> None:
        if not self.started:
            self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Close the queue and wait for the terminal drain to complete."""
        self._queue.close()
        if self.started:
            if threading.current_thread() is not self._thread:
                self._thread.join(timeout)
        elif not self.finished:
            # Never started: run the terminal phase on the calling thread
            self._terminate()

    def join(self, timeout: float | None = None) -> None:
        if self.started and threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    # -------------------------------------------------------------------------
    # Loop
    # -------------------------------------------------------------------------

    def _run(self) -> None:
        try:
            while not self._queue.closed:
                self._queue.wait()
                self.process(self._queue.drain_all())
        finally:
            self._terminate()

    def _terminate(self) -> None:
        # Covers anything pushed between the last wake and the close
        try:
            self.process(self._queue.drain_all())
            self._close_file()
        finally:
            self._finished.set()

    def process(self, batch: Iterable[Any]) -> None:
        for item in batch:
            try:
                self._handle(item)
            except Exception as exc:
                # One bad item must not end the loop or strand a flush barrier
                self._diagnose(Level.ERROR, f"Failed to process {type(item).__name__}: {exc!r}")
                if isinstance(item, Barrier):
                    item.event.set()

    def _handle(self, item: Any) -> None:
        if isinstance(item, LogRecord):
            self._deliver(item)
        elif isinstance(item, AttachFile):
            self._close_file()
            self._file = item.sink
        elif isinstance(item, DetachFile):
            self._close_file()
        elif isinstance(item, Barrier):
            item.event.set()

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def _deliver(self, record: LogRecord) -> None:
        if record.destination is Destination.CONSOLE:
            self._write_console(record.text)
            return

        if self._file is None:
            self._diagnose(Level.WARN, "file sink is not open, writing file record to console")
            self._write_console(record.text)
            return

        try:
            self._file.write(record.text)
        except (OSError, ValueError) as exc:
            self._diagnose(Level.ERROR, f"Failed to write log file: {exc}")
            self._write_console(record.text)

    def _write_console(self, text: str) -> None:
        try:
            self._console.write(text)
        except (OSError, ValueError):
            pass  # Console unusable or text unencodable: nowhere left to report to

    def _diagnose(self, level: Level, message: str) -> None:
        self._write_console(render(level, CallSite.here(1), message, root_marker=self._root_marker))

    def _close_file(self) -> None:
        if self._file is None:
            return
        sink, self._file = self._file, None
        try:
            sink.close()
        except (OSError, ValueError) as exc:
            self._diagnose(Level.ERROR, f"Failed to close log file: {exc}")
