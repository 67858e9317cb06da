"""
Pytest configuration and fixtures.

Provides shared fixtures and configuration for all tests.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Sequence

import pytest
from rich.console import Console

from scriptcheck.core.config import Settings
from scriptcheck.core.exceptions import AnalyzerEngineError
from scriptcheck.domain.models import AnalyzerSettings, Diagnostic


class FakeAnalyzer:
    """In-memory analyzer returning canned results keyed by file name."""

    name = "FakeAnalyzer"

    def __init__(self, results: dict[str, Sequence[Diagnostic] | Exception] | None = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[Path, AnalyzerSettings | None, bool]] = []

    def analyze(
        self,
        path: Path,
        *,
        settings: AnalyzerSettings | None = None,
        fix: bool = False,
    ) -> list[Diagnostic]:
        self.calls.append((path, settings, fix))
        outcome = self.results.get(path.name, [])
        if isinstance(outcome, Exception):
            raise outcome
        return list(outcome)


@pytest.fixture
def script_tree(tmp_path: Path) -> Path:
    """Create a small project with script and non-script files."""
    root = tmp_path / "project"
    (root / "sub").mkdir(parents=True)
    (root / "a.ps1").write_text("Write-Output 'a'\n")
    (root / "b.txt").write_text("not a script\n")
    (root / "sub" / "c.ps1").write_text("Write-Output 'c'\n")
    return root


@pytest.fixture
def fake_analyzer() -> FakeAnalyzer:
    """Provide an analyzer that reports no findings."""
    return FakeAnalyzer()


@pytest.fixture
def make_analyzer():
    """Factory for analyzers with canned results."""
    return FakeAnalyzer


@pytest.fixture
def quiet_console() -> Console:
    """Console that records output without writing to the terminal."""
    return Console(file=io.StringIO(), record=True, width=120)


@pytest.fixture
def mock_settings() -> Settings:
    """Provide mock settings for testing."""
    return Settings(
        environment="testing",
        log_level="DEBUG",
        max_table_rows=5,
    )


@pytest.fixture
def engine_error() -> AnalyzerEngineError:
    """Provide a typical analyzer failure."""
    return AnalyzerEngineError("PSScriptAnalyzer failed", returncode=1)


@pytest.fixture
def make_diagnostic():
    """Factory for diagnostics with sensible defaults."""

    def _make(severity: str, rule: str = "PSAvoidUsingWriteHost", line: int = 1) -> Diagnostic:
        return Diagnostic(
            severity=severity,
            rule_name=rule,
            message=f"{rule} triggered",
            line=line,
            column=1,
        )

    return _make
