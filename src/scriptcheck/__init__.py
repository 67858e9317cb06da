"""
scriptcheck - PSScriptAnalyzer driver for PowerShell projects.

Selects script files with include/exclude patterns, analyzes each one and
turns the findings into a single exit code.
"""

from __future__ import annotations

__version__ = "1.0.0"

from .core.config import settings
from .domain.models import (
    AnalyzerSettings,
    Diagnostic,
    FileReport,
    FilterCriteria,
    RunResult,
    Severity,
    SeverityCounts,
)
from .services.driver import analyze_scripts

__all__ = [
    "__version__",
    "settings",
    "analyze_scripts",
    "AnalyzerSettings",
    "Diagnostic",
    "FileReport",
    "FilterCriteria",
    "RunResult",
    "Severity",
    "SeverityCounts",
]
