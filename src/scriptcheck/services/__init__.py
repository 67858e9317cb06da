"""Business services: file selection, analysis and orchestration."""

from __future__ import annotations

from .driver import AnalysisDriver, analyze_scripts, read_ignore_file
from .runner import AnalysisRunner
from .selector import FileSelector, select_files
from .settings_loader import load_analyzer_settings, try_load_analyzer_settings

__all__ = [
    "AnalysisDriver",
    "AnalysisRunner",
    "FileSelector",
    "analyze_scripts",
    "load_analyzer_settings",
    "read_ignore_file",
    "select_files",
    "try_load_analyzer_settings",
]
