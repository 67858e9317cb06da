"""
Custom exception hierarchy for scriptcheck.

Provides domain-specific exceptions with rich error context.
"""

from __future__ import annotations

from typing import Any


class ScriptCheckError(Exception):
    """Base exception for all scriptcheck errors."""

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize exception with message and context.

        Args:
            message: Human-readable error message
            **context: Additional error context for logging
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class PathResolutionError(ScriptCheckError):
    """Raised when the directory to scan cannot be resolved."""


class SettingsLoadError(ScriptCheckError):
    """Raised when the analyzer settings document cannot be loaded."""


class UnsupportedSettingsFormatError(SettingsLoadError):
    """Raised when the settings document has an unknown file format."""


class AnalyzerEngineError(ScriptCheckError):
    """Raised when the analyzer itself fails on a file."""

