"""
Integration tests for the command-line interface.

The PowerShell process is replaced so the full CLI -> driver -> backend path
runs without PowerShell installed.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest
from typer.testing import CliRunner

from scriptcheck.cli.app import app
from scriptcheck.core.config import settings
from scriptcheck.core.logging import configure_logging

runner = CliRunner()

WARNING_RECORD = {
    "RuleName": "PSAvoidUsingWriteHost",
    "Severity": "Warning",
    "Line": 1,
    "Column": 1,
    "Message": "Avoid Write-Host.",
}


def fake_pwsh(findings: dict[str, list[dict]]):
    """Build a subprocess.run replacement answering per script name."""

    def _run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        script = cmd[-1]
        for name, records in findings.items():
            if name in script:
                return subprocess.CompletedProcess(cmd, 0, json.dumps(records), "")
        return subprocess.CompletedProcess(cmd, 0, "[]", "")

    return _run


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_clean_project_exits_zero(
        self,
        script_tree: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that a project without findings exits 0."""
        monkeypatch.chdir(script_tree)
        monkeypatch.setattr(subprocess, "run", fake_pwsh({}))

        result = runner.invoke(app, ["analyze"])

        assert result.exit_code == 0

    def test_findings_exit_one_and_report(
        self,
        script_tree: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that findings exit 1 and are written to the JSON report."""
        monkeypatch.chdir(script_tree)
        monkeypatch.setattr(subprocess, "run", fake_pwsh({"c.ps1": [WARNING_RECORD]}))
        report = tmp_path / "report.json"

        result = runner.invoke(app, ["analyze", "-d", str(script_tree), "--report", str(report)])

        assert result.exit_code == 1
        data = json.loads(report.read_text())
        assert data["counts"] == {"error": 0, "warning": 1, "information": 0}
        assert [f["rel_path"] for f in data["files"]] == ["a.ps1", "sub/c.ps1"]

    def test_excludes_and_ignore_file(
        self,
        script_tree: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that CLI excludes and the ignore file remove files."""
        monkeypatch.chdir(script_tree)
        monkeypatch.setattr(subprocess, "run", fake_pwsh({"c.ps1": [WARNING_RECORD]}))
        (script_tree / ".psscriptanalyzerignore").write_text("/sub/\n")

        result = runner.invoke(app, ["analyze", "-e", "nothing-matches"])

        assert result.exit_code == 0

    def test_no_files_exits_zero(
        self,
        script_tree: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that an empty selection exits 0."""
        monkeypatch.chdir(script_tree)

        result = runner.invoke(app, ["analyze", "-i", "no-such-path"])

        assert result.exit_code == 0
        assert "No files found" in result.output

    def test_missing_directory_exits_one(self, tmp_path: Path) -> None:
        """Test that an unresolvable directory exits 1."""
        result = runner.invoke(app, ["analyze", "-d", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Cannot scan directory" in result.output

    def test_verbose_leaves_settings_untouched(self, tmp_path: Path) -> None:
        """Test that --verbose does not change the shared settings."""
        before = settings.log_level

        try:
            result = runner.invoke(app, ["analyze", "-v", "-d", str(tmp_path / "missing")])
        finally:
            configure_logging()

        assert result.exit_code == 1
        assert settings.log_level == before

    def test_engine_failure_exits_one(
        self,
        script_tree: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that an analyzer failure exits 1."""
        monkeypatch.chdir(script_tree)

        def failing(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            return subprocess.CompletedProcess(cmd, 1, "", "Import-Module failed")

        monkeypatch.setattr(subprocess, "run", failing)

        result = runner.invoke(app, ["analyze"])

        assert result.exit_code == 1


class TestInfoCommands:
    """Tests for version and config commands."""

    def test_version(self) -> None:
        """Test the version command."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "scriptcheck" in result.output

    def test_config(self) -> None:
        """Test the config command."""
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "PowerShell" in result.output
