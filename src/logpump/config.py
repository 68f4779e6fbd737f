"""
Logging Configuration.
"""

from __future__ import annotations

import sys
from typing import Any, Literal, Optional, TextIO

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .formatters import DEFAULT_ROOT_MARKER, FileFormat
from .types import Level

ConsoleStream = Literal["stdout", "stderr"]


class LoggingSettings(BaseSettings):
    """Initial engine configuration, loaded from ``LOGPUMP_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LOGPUMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: Level = Field(default=Level.TRACE, description="Minimum level emitted")
    file_path: str = Field(default="./log.txt", description="Log file path")
    file_enabled: bool = Field(default=False, description="Open the log file at startup")
    file_format: FileFormat = Field(default="text", description="Log file line format (text, json)")
    root_marker: str = Field(default=DEFAULT_ROOT_MARKER, description="Project root marker in source paths")
    release: bool = Field(default=False, description="Strip TRACE..WARN helpers")
    stream: ConsoleStream = Field(default="stdout", description="Console stream")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Level:
        return Level.parse(value)

    def console_stream(self) -> Optional[TextIO]:
        """Stream for the console sink; ``None`` follows ``sys.stdout``."""
        if self.stream == "stderr":
            return sys.stderr
        return None


_SETTINGS: Optional[LoggingSettings] = None


def get_settings(force_reload: bool = False) -> LoggingSettings:
    """Return the cached settings, rebuilding them when ``force_reload`` is set."""
    global _SETTINGS
    if _SETTINGS is None or force_reload:
        _SETTINGS = LoggingSettings()
    return _SETTINGS


__all__ = ["LoggingSettings", "get_settings"]
