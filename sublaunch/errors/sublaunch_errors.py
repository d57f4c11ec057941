"""Exception hierarchy for the subprocess launcher.

Child-process failures (missing executable, non-zero exit) are reported
through the output sink and never raised; the exceptions here cover
problems that are detected before a process exists.
"""

from __future__ import annotations

from typing import Any


class SublaunchError(Exception):
    """Base exception for all launcher errors.

    Carries a machine-readable ``error_code`` and a ``details`` mapping so
    callers can turn the error into a protocol response.
    """

    error_code = "SublaunchError"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(SublaunchError):
    """Raised when a launch configuration is invalid."""

    error_code = "ConfigurationError"

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details=details)
        self.config_key = config_key


class LaunchError(SublaunchError):
    """Raised when no launcher is able to start a configuration."""

    error_code = "LaunchError"

    def __init__(
        self,
        message: str,
        *,
        console: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if console:
            details["console"] = console
        super().__init__(message, details=details)
        self.console = console
