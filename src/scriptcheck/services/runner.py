"""
Per-file analysis and result aggregation.

Every file is analyzed in order and turned into a ``FileReport``. The run's
totals are the sum of the per-file counts, and any failing file (engine error
or at least one diagnostic of any severity) makes the exit code 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.config import settings as app_settings
from ..core.exceptions import AnalyzerEngineError
from ..core.logging import LoggerMixin
from ..domain.models import (
    AnalyzerSettings,
    Diagnostic,
    FileReport,
    RunResult,
    Severity,
    SeverityCounts,
)
from ..engines.base import Analyzer

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "cyan",
}


class AnalysisRunner(LoggerMixin):
    """Runs an analyzer over a list of files and aggregates the results."""

    def __init__(
        self,
        analyzer: Analyzer,
        *,
        root: Path | None = None,
        console: Console | None = None,
        max_table_rows: int | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            analyzer: Backend used for every file
            root: Directory file headers are shown relative to (cwd if None)
            console: Console for progress output
            max_table_rows: Diagnostics rows printed per file (settings default if None)
        """
        self.analyzer = analyzer
        self.root = root or Path.cwd()
        self.console = console or Console()
        if max_table_rows is None:
            max_table_rows = app_settings.max_table_rows
        self.max_table_rows = max_table_rows

    def relative_path(self, path: Path) -> str:
        """Path relative to the root, or as given when outside it."""
        try:
            return path.resolve().relative_to(self.root.resolve()).as_posix()
        except ValueError:
            return str(path)

    def analyze_file(
        self,
        path: Path,
        *,
        fix: bool = False,
        settings: AnalyzerSettings | None = None,
    ) -> FileReport:
        """
        Analyze a single file and print its outcome.

        Engine errors are reported and recorded on the returned report rather
        than raised.
        """
        rel_path = self.relative_path(path)
        self.console.rule(f"[bold]{escape(rel_path)}", align="left", style="blue")

        try:
            diagnostics = list(self.analyzer.analyze(path, settings=settings, fix=fix))
        except AnalyzerEngineError as e:
            self.console.print(f"❌ [red]Analyzer failed:[/red] {escape(str(e))}")
            self.logger.error("analyzer_failed", file=rel_path, error=str(e))
            return FileReport(path=path, rel_path=rel_path, error=str(e))

        if not diagnostics:
            self.console.print("✅ [green]No errors[/green]")
            return FileReport(path=path, rel_path=rel_path)

        counts = SeverityCounts.from_diagnostics(diagnostics)
        self.print_diagnostics(diagnostics)
        self.console.print(
            f"[yellow]{len(diagnostics)} finding(s):[/yellow] "
            f"{counts.error} error(s), {counts.warning} warning(s), "
            f"{counts.information} information"
        )
        self.logger.info(
            "diagnostics_found",
            file=rel_path,
            error=counts.error,
            warning=counts.warning,
            information=counts.information,
        )
        return FileReport(
            path=path,
            rel_path=rel_path,
            diagnostics=diagnostics,
            counts=counts,
        )

    def run(
        self,
        files: Iterable[Path],
        *,
        fix: bool = False,
        settings: AnalyzerSettings | None = None,
    ) -> RunResult:
        """
        Analyze ``files`` in order and aggregate the outcome.

        Args:
            files: Files to analyze (already filtered)
            fix: Ask the analyzer to fix findings in place
            settings: Analyzer settings (analyzer defaults if None)

        Returns:
            Run result with exit code, totals and per-file reports
        """
        reports = [
            self.analyze_file(Path(path), fix=fix, settings=settings) for path in files
        ]
        result = RunResult(
            exit_code=1 if any(r.failed for r in reports) else 0,
            counts=sum((r.counts for r in reports), SeverityCounts()),
            files=reports,
        )
        self.print_summary(result)
        return result

    def print_diagnostics(self, diagnostics: list[Diagnostic]) -> None:
        """Print diagnostics as a table."""
        table = Table(
            box=box.ROUNDED,
            show_header=True,
            header_style="bold cyan",
            border_style="cyan",
        )
        table.add_column("Severity", width=12)
        table.add_column("Rule", style="magenta")
        table.add_column("Line", justify="right", style="green", width=8)
        table.add_column("Message", style="white", no_wrap=False)

        for diagnostic in diagnostics[: self.max_table_rows]:
            table.add_row(
                escape(diagnostic.severity),
                escape(diagnostic.rule_name or ""),
                diagnostic.location,
                escape(diagnostic.message),
                style=SEVERITY_STYLES.get(diagnostic.level, ""),
            )

        if len(diagnostics) > self.max_table_rows:
            table.add_row(
                "...",
                f"+{len(diagnostics) - self.max_table_rows} more",
                "",
                "",
                style="dim",
            )

        self.console.print(table)

    def print_summary(self, result: RunResult) -> None:
        """Print the aggregate summary for a run."""
        counts = result.counts
        failed = len(result.failed_files)
        lines = [
            f"Files analyzed: {len(result.files)}",
            f"Files failing:  {failed}",
            f"Errors:         {counts.error}",
            f"Warnings:       {counts.warning}",
            f"Information:    {counts.information}",
        ]
        if result.exit_code:
            title, style = "❌ Analysis failed", "red"
        else:
            title, style = "✅ Analysis passed", "green"

        self.console.print(
            Panel("\n".join(lines), title=title, border_style=style, expand=False)
        )
        self.logger.info(
            "run_completed",
            exit_code=result.exit_code,
            files=len(result.files),
            failed=failed,
        )
