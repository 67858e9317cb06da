"""Analyzer protocol shared by every analysis backend."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from ..domain.models import AnalyzerSettings, Diagnostic


@runtime_checkable
class Analyzer(Protocol):
    """
    A static analyzer that checks one file at a time.

    Implementations raise ``AnalyzerEngineError`` when the analyzer itself
    fails (missing executable, parse failure, malformed output). Findings are
    returned, never raised.
    """

    name: str

    def analyze(
        self,
        path: Path,
        *,
        settings: AnalyzerSettings | None = None,
        fix: bool = False,
    ) -> Sequence[Diagnostic]:
        """
        Analyze a single file.

        Args:
            path: File to analyze
            settings: Analyzer settings (analyzer defaults if None)
            fix: Ask the analyzer to correct fixable findings in place

        Returns:
            Diagnostics found in the file (empty when clean)
        """
        ...
