"""
Domain models using Pydantic V2.

Defines the core data structures for scriptcheck with:
- Strict type validation
- Immutability for values produced by a run
- Rich serialization support
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    """Diagnostic severities reported by the analyzer."""

    ERROR = "Error"
    WARNING = "Warning"
    INFORMATION = "Information"

    @classmethod
    def parse(cls, value: str | None) -> Severity | None:
        """Match a severity name case-insensitively, or return None."""
        if value is None:
            return None
        wanted = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


class FilterCriteria(BaseModel):
    """
    Include/exclude patterns used to select files.

    Attributes:
        includes: Patterns a path must match (None means include everything)
        excludes: Patterns that remove a path regardless of includes
    """

    model_config = ConfigDict(frozen=True)

    includes: list[str] | None = Field(
        default=None,
        description="Include patterns; an empty list selects nothing",
    )

    excludes: list[str] = Field(
        default_factory=list,
        description="Exclude patterns; always win over includes",
    )

    def with_excludes(self, extra: Iterable[str]) -> FilterCriteria:
        """Return a copy with ``extra`` appended after the current excludes."""
        return self.model_copy(update={"excludes": [*self.excludes, *extra]})


class Diagnostic(BaseModel):
    """
    A single finding reported by the analyzer for one file.

    Field aliases follow the PSScriptAnalyzer ``DiagnosticRecord`` property
    names so the analyzer's JSON output validates directly.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    severity: str = Field(..., alias="Severity", min_length=1)
    message: str = Field(default="", alias="Message")
    rule_name: str | None = Field(default=None, alias="RuleName")
    script_path: str | None = Field(default=None, alias="ScriptPath")
    line: int | None = Field(default=None, alias="Line")
    column: int | None = Field(default=None, alias="Column")

    @field_validator("severity", mode="before")
    @classmethod
    def coerce_severity(cls, v: Any) -> Any:
        """Accept enum members as well as raw strings."""
        if isinstance(v, Severity):
            return v.value
        return v

    @property
    def level(self) -> Severity | None:
        """Severity as an enum member (None for severities outside the three known)."""
        return Severity.parse(self.severity)

    @property
    def location(self) -> str:
        """Human-readable ``line:column`` location."""
        if self.line is None:
            return ""
        if self.column is None:
            return str(self.line)
        return f"{self.line}:{self.column}"


class SeverityCounts(BaseModel):
    """
    Per-severity diagnostic counts.

    Counts are immutable values; totals are built by adding them together.
    """

    model_config = ConfigDict(frozen=True)

    error: int = Field(default=0, ge=0)
    warning: int = Field(default=0, ge=0)
    information: int = Field(default=0, ge=0)

    @classmethod
    def from_diagnostics(cls, diagnostics: Iterable[Diagnostic]) -> SeverityCounts:
        """Count diagnostics by case-insensitive severity match."""
        levels = [d.level for d in diagnostics]
        return cls(
            error=levels.count(Severity.ERROR),
            warning=levels.count(Severity.WARNING),
            information=levels.count(Severity.INFORMATION),
        )

    def __add__(self, other: SeverityCounts) -> SeverityCounts:
        if not isinstance(other, SeverityCounts):
            return NotImplemented
        return SeverityCounts(
            error=self.error + other.error,
            warning=self.warning + other.warning,
            information=self.information + other.information,
        )

    @property
    def total(self) -> int:
        """Sum of all three counts."""
        return self.error + self.warning + self.information


class FileReport(BaseModel):
    """
    Outcome of analyzing a single file.

    Attributes:
        path: Absolute path of the analyzed file
        rel_path: Path relative to the scanned directory
        diagnostics: Findings returned by the analyzer
        counts: Severity counts for this file
        error: Engine error message if the analyzer failed on this file
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    rel_path: str = Field(..., min_length=1)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    counts: SeverityCounts = Field(default_factory=SeverityCounts)
    error: str | None = None

    @field_validator("rel_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure path uses forward slashes."""
        return v.replace("\\", "/")

    @property
    def failed(self) -> bool:
        """Whether this file forces a failing run (engine error or any diagnostic)."""
        return self.error is not None or bool(self.diagnostics)


class RunResult(BaseModel):
    """
    Aggregate result of one analysis run.

    Attributes:
        exit_code: 0 when no file failed, 1 otherwise
        counts: Severity counts summed over all files
        files: Per-file reports in analysis order
    """

    model_config = ConfigDict(frozen=True)

    exit_code: Literal[0, 1] = 0
    counts: SeverityCounts = Field(default_factory=SeverityCounts)
    files: list[FileReport] = Field(default_factory=list)

    @property
    def failed_files(self) -> list[FileReport]:
        """Reports for files that failed the run."""
        return [f for f in self.files if f.failed]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "exit_code": self.exit_code,
            "counts": self.counts.model_dump(),
            "files": [f.model_dump(mode="json") for f in self.files],
        }


class AnalyzerSettings(BaseModel):
    """
    Typed PSScriptAnalyzer settings.

    Field aliases are the analyzer's own setting keys, so documents may use
    either ``IncludeRules`` or ``include_rules``.

    Attributes:
        include_rules: Only run these rules
        exclude_rules: Never run these rules
        severity: Only report findings of these severities
        rules: Per-rule configuration tables
        include_default_rules: Run built-in rules alongside custom ones
        custom_rule_path: Paths to custom rule modules
        recurse_custom_rule_path: Search custom rule paths recursively
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="forbid",
    )

    include_rules: list[str] = Field(default_factory=list, alias="IncludeRules")
    exclude_rules: list[str] = Field(default_factory=list, alias="ExcludeRules")
    severity: list[Severity] = Field(default_factory=list, alias="Severity")
    rules: dict[str, dict[str, Any]] = Field(default_factory=dict, alias="Rules")
    include_default_rules: bool | None = Field(default=None, alias="IncludeDefaultRules")
    custom_rule_path: list[str] = Field(default_factory=list, alias="CustomRulePath")
    recurse_custom_rule_path: bool | None = Field(
        default=None, alias="RecurseCustomRulePath"
    )

    @field_validator("severity", mode="before")
    @classmethod
    def parse_severity(cls, v: Any) -> Any:
        """Match severity names case-insensitively."""
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            return v
        parsed = []
        for item in v:
            level = Severity.parse(item) if isinstance(item, str) else item
            if level is None:
                raise ValueError(f"unknown severity: {item!r}")
            parsed.append(level)
        return parsed

    @field_validator("include_rules", "exclude_rules", "custom_rule_path", mode="before")
    @classmethod
    def single_string_to_list(cls, v: Any) -> Any:
        """Allow a single string where a list is expected."""
        return [v] if isinstance(v, str) else v

    def to_analyzer_dict(self) -> dict[str, Any]:
        """Settings keyed by analyzer names, omitting unset values."""
        dumped = self.model_dump(mode="json", by_alias=True)
        return {k: v for k, v in dumped.items() if v not in (None, [], {})}
