from __future__ import annotations

import typing as t

import pytest

import logpump
from logpump import Engine, Level
from logpump import config as config_module
from logpump import core as core_module


@pytest.fixture
def fresh_default(monkeypatch, tmp_path) -> t.Iterator[None]:
    """
    Isolate the process default engine and settings cache.
    The default engine built during the test is shut down afterwards.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "_SETTINGS", None)
    monkeypatch.setattr(core_module.atexit, "register", lambda fn: fn)
    previous = logpump.set_engine(None)
    yield
    logpump.shutdown()
    logpump.set_engine(previous)


class TestDefaultEngine:
    """Init-once process default"""

    def test_get_engine_returns_same_instance(self, fresh_default) -> None:
        assert logpump.get_engine() is logpump.get_engine()

    def test_default_engine_uses_settings(self, fresh_default, monkeypatch) -> None:
        monkeypatch.setenv("LOGPUMP_LEVEL", "warning")
        monkeypatch.setenv("LOGPUMP_FILE_PATH", "logs/app.log")
        monkeypatch.setenv("LOGPUMP_FILE_ENABLED", "true")

        engine = logpump.get_engine()
        assert engine.level is Level.WARN
        assert engine.file_logging_enabled
        assert str(engine.file_path) == "logs/app.log"

    def test_module_helpers_write_to_stdout(self, fresh_default, capsys) -> None:
        logpump.info("hello {}", "world")
        logpump.debug("details")
        logpump.get_engine().flush()
        out = capsys.readouterr().out
        assert "[INFO]" in out and "hello world" in out
        assert "[DEBUG]" in out
        assert "'test_module_helpers_write_to_stdout'" in out

    def test_module_file_helper(self, fresh_default, tmp_path) -> None:
        logpump.get_engine().enable_file_logging(True)
        logpump.fwarn("to file")
        logpump.shutdown()
        content = (tmp_path / "log.txt").read_text(encoding="utf-8")
        assert "[WARN]" in content and "to file" in content

    def test_shutdown_without_default_is_noop(self, fresh_default) -> None:
        logpump.shutdown()

    def test_set_engine_installs_instance(self, fresh_default, console) -> None:
        engine = Engine(console=console)
        logpump.set_engine(engine)
        logpump.error("routed")
        engine.flush()
        assert "routed" in console.getvalue()
