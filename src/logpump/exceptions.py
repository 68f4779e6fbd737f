"""
Exception hierarchy for logpump.

Logging calls never raise these back to application code; they surface only
while parsing configuration values (levels, settings).
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LogPumpError(Exception):
    """Base class for all logpump errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class InvalidLevelError(LogPumpError, ValueError):
    """Raised when a value cannot be interpreted as a log level."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Unknown log level {value!r}",
            code="INVALID_LEVEL",
            details={"value": value},
        )
