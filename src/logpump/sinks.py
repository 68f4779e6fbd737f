"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any

# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Write an already rendered line to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class ConsoleSink(BaseSink):
    """Text stream sink, ``sys.stdout`` unless another stream is given.

    The stream is looked up at write time when none was given, so redirections
    of ``sys.stdout`` (pytest's ``capsys`` included) are honoured.
    """

    def __init__(self, stream: Any = None):
        self._stream = stream

    @property
    def stream(self) -> Any:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        stream = self.stream
        stream.write(text)
        stream.flush()

    def close(self) -> None:
        # Never close a stream we do not own
        pass


class FileSink(BaseSink):
    """Append-mode UTF-8 file.

    Opening happens in the constructor so that failures surface to whoever
    enables file logging; afterwards the sink is only touched by the worker.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file: IO[str] | None = open(self._path, "a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._file is None

    def write(self, text: str) -> None:
        if self._file is None:
            raise ValueError(f"write to closed log file {self._path}")
        self._file.write(text)
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
