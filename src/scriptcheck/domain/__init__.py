"""Domain models and business entities."""

from __future__ import annotations

from .models import (
    AnalyzerSettings,
    Diagnostic,
    FileReport,
    FilterCriteria,
    RunResult,
    Severity,
    SeverityCounts,
)

__all__ = [
    "AnalyzerSettings",
    "Diagnostic",
    "FileReport",
    "FilterCriteria",
    "RunResult",
    "Severity",
    "SeverityCounts",
]
