"""Analyzer backends."""

from __future__ import annotations

from .base import Analyzer
from .pwsh import PwshScriptAnalyzer

__all__ = ["Analyzer", "PwshScriptAnalyzer"]
