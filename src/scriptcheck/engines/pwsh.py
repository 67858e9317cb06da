"""
PSScriptAnalyzer backend.

Runs ``Invoke-ScriptAnalyzer`` in a PowerShell subprocess for each file and
parses the JSON it emits into ``Diagnostic`` models.
"""

from __future__ import annotations

import json
import re
import subprocess
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..core.config import settings as app_settings
from ..core.exceptions import AnalyzerEngineError
from ..core.logging import LoggerMixin
from ..domain.models import AnalyzerSettings, Diagnostic

# Properties copied out of each DiagnosticRecord; Severity is an enum in
# PowerShell and would otherwise serialize as an integer.
_RECORD_PROPERTIES = (
    "RuleName, "
    "@{Name='Severity'; Expression={ $_.Severity.ToString() }}, "
    "Line, Column, Message, ScriptPath"
)

# PowerShell closes a single-quoted string on any of these quote characters.
_SINGLE_QUOTES = re.compile("(['\u2018\u2019\u201a\u201b])")

# Wildcard metacharacters understood by -Path, escaped with a backtick.
_WILDCARD_CHARS = re.compile(r"([`\[\]*?])")


def to_powershell_literal(value: Any) -> str:
    """
    Render a JSON-compatible value as a PowerShell expression.

    Args:
        value: None, bool, number, string, list or dict

    Returns:
        PowerShell source for the value

    Raises:
        TypeError: For values with no PowerShell equivalent here
    """
    if value is None:
        return "$null"
    if isinstance(value, bool):
        return "$true" if value else "$false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return "'" + _SINGLE_QUOTES.sub(r"\1\1", value) + "'"
    if isinstance(value, dict):
        entries = "; ".join(
            f"{to_powershell_literal(str(k))} = {to_powershell_literal(v)}"
            for k, v in value.items()
        )
        return "@{" + entries + "}"
    if isinstance(value, (list, tuple)):
        return "@(" + ", ".join(to_powershell_literal(v) for v in value) + ")"
    raise TypeError(f"cannot render {type(value).__name__} as PowerShell")


def escape_wildcards(path: str) -> str:
    """Escape ``path`` so that ``-Path`` matches it literally."""
    return _WILDCARD_CHARS.sub(r"`\1", path)


def parse_diagnostics(output: str) -> list[Diagnostic]:
    """
    Parse ``ConvertTo-Json`` output into diagnostics.

    A lone JSON object is treated as a one-element list.

    Raises:
        AnalyzerEngineError: If the output is not a list of diagnostic records
    """
    text = output.strip()
    if not text:
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AnalyzerEngineError(
            "Analyzer produced invalid JSON",
            error=str(e),
        ) from e

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise AnalyzerEngineError(
            "Analyzer output is not a list of records",
            output_type=type(data).__name__,
        )

    try:
        return [Diagnostic.model_validate(item) for item in data]
    except ValidationError as e:
        raise AnalyzerEngineError(
            "Analyzer produced malformed diagnostic records",
            error=str(e),
        ) from e


class PwshScriptAnalyzer(LoggerMixin):
    """Runs PSScriptAnalyzer through a PowerShell executable."""

    name = "PSScriptAnalyzer"

    def __init__(self, executable: str | None = None) -> None:
        """
        Args:
            executable: PowerShell executable (settings default if None)
        """
        self.executable = executable or app_settings.pwsh_executable

    def build_script(
        self,
        path: Path,
        *,
        settings: AnalyzerSettings | None = None,
        fix: bool = False,
    ) -> str:
        """Build the PowerShell script that analyzes ``path``."""
        path_literal = to_powershell_literal(escape_wildcards(str(path)))
        lines = [
            "$ErrorActionPreference = 'Stop'",
            "Import-Module PSScriptAnalyzer",
            f"$params = @{{ Path = {path_literal} }}",
        ]
        if fix:
            lines.append("$params.Fix = $true")
        if settings is not None:
            settings_literal = to_powershell_literal(settings.to_analyzer_dict())
            lines.append(f"$params.Settings = {settings_literal}")
        lines.extend(
            [
                f"$records = @(Invoke-ScriptAnalyzer @params | Select-Object {_RECORD_PROPERTIES})",
                "ConvertTo-Json -InputObject $records -Depth 5 -Compress",
            ]
        )
        return "\n".join(lines)

    def build_command(
        self,
        path: Path,
        *,
        settings: AnalyzerSettings | None = None,
        fix: bool = False,
    ) -> list[str]:
        """Build the full command line for one file."""
        return [
            self.executable,
            "-NoLogo",
            "-NoProfile",
            "-NonInteractive",
            "-Command",
            self.build_script(path, settings=settings, fix=fix),
        ]

    def analyze(
        self,
        path: Path,
        *,
        settings: AnalyzerSettings | None = None,
        fix: bool = False,
    ) -> list[Diagnostic]:
        """
        Analyze one file with PSScriptAnalyzer.

        Raises:
            AnalyzerEngineError: If PowerShell cannot be started, exits with
                a non-zero status, or emits unparseable output
        """
        cmd = self.build_command(path, settings=settings, fix=fix)
        self.logger.debug(
            "invoking_analyzer",
            path=str(path),
            fix=fix,
            has_settings=settings is not None,
        )

        try:
            completed = subprocess.run(
                cmd,
                text=True,
                capture_output=True,
                check=False,
                stdin=subprocess.DEVNULL,
            )
        except OSError as e:
            raise AnalyzerEngineError(
                "Could not start PowerShell",
                executable=self.executable,
                error=str(e),
            ) from e

        if completed.returncode != 0:
            raise AnalyzerEngineError(
                "PSScriptAnalyzer failed",
                file=str(path),
                returncode=completed.returncode,
                stderr=(completed.stderr or "").strip(),
            )

        diagnostics = parse_diagnostics(completed.stdout or "")
        self.logger.debug("analyzer_finished", path=str(path), count=len(diagnostics))
        return diagnostics
