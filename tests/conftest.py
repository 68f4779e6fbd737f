import io
import typing as t

import pytest

from logpump import CallSite, Engine
from logpump.sinks import ConsoleSink


@pytest.fixture
def console() -> io.StringIO:
    """In-memory console stream."""
    return io.StringIO()


@pytest.fixture
def engine(console: io.StringIO, tmp_path) -> t.Iterator[Engine]:
    """
    Function-scoped engine writing to the in-memory console.
    The log file defaults to a path inside tmp_path and is never opened unless a test enables it.
    """
    eng = Engine(console=ConsoleSink(console), file_path=tmp_path / "log.txt")
    yield eng
    eng.shutdown()


@pytest.fixture
def call_site() -> CallSite:
    return CallSite(file="/home/dev/project/src/app/main.py", line=42, function="main")
