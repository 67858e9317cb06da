"""
Main analysis orchestration service.

Resolves the directory to scan, loads optional analyzer settings, merges the
ignore file into the exclude patterns, selects files and runs the analyzer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from ..core.config import Settings, settings
from ..core.logging import LoggerMixin, get_logger
from ..domain.models import FilterCriteria, RunResult
from ..engines.base import Analyzer
from ..engines.pwsh import PwshScriptAnalyzer
from .runner import AnalysisRunner
from .selector import FileSelector, resolve_directory
from .settings_loader import try_load_analyzer_settings

logger = get_logger(__name__)


def read_ignore_file(path: str | Path) -> list[str]:
    """
    Read exclude patterns from an ignore file, one per line.

    Lines are kept verbatim; blank lines are skipped. A missing or
    unreadable file yields no patterns.
    """
    path = Path(path)
    if not path.is_file():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("ignore_file_unreadable", path=str(path), error=str(e))
        return []
    return [line for line in text.splitlines() if line.strip()]


class AnalysisDriver(LoggerMixin):
    """
    Orchestrates one analysis run.

    This service manages the complete pipeline:
    1. Directory resolution
    2. Analyzer settings loading
    3. Ignore file merging
    4. File selection
    5. Per-file analysis and aggregation
    """

    def __init__(
        self,
        analyzer: Analyzer | None = None,
        *,
        console: Console | None = None,
        config: Settings | None = None,
    ) -> None:
        """
        Initialize the driver.

        Args:
            analyzer: Analysis backend (PSScriptAnalyzer via PowerShell if None)
            console: Console for progress output
            config: Application settings (module settings if None)
        """
        self.config = config or settings
        self.analyzer = analyzer or PwshScriptAnalyzer(self.config.pwsh_executable)
        self.console = console or Console()

    def run(
        self,
        directory: str | Path = ".",
        *,
        includes: Sequence[str] | None = None,
        excludes: Sequence[str] = (),
        ignore_file: str | Path | None = None,
        settings_file: str | Path | None = None,
        fix: bool = False,
    ) -> RunResult:
        """
        Execute an analysis run.

        Args:
            directory: Directory to scan
            includes: Include patterns (None includes everything)
            excludes: Exclude patterns
            ignore_file: File of extra exclude patterns (default name if None)
            settings_file: Analyzer settings document (default name if None)
            fix: Ask the analyzer to fix findings in place

        Returns:
            Run result; exit code 0 with no files when nothing was selected

        Raises:
            PathResolutionError: If ``directory`` cannot be resolved
        """
        root = resolve_directory(directory)

        settings_path = Path(settings_file or self.config.settings_file_name)
        analyzer_settings = try_load_analyzer_settings(settings_path)
        if analyzer_settings is None:
            self.console.print(
                f"[dim]No analyzer settings loaded from {escape(str(settings_path))}; "
                "using analyzer defaults[/dim]"
            )

        ignore_path = Path(ignore_file or self.config.ignore_file_name)
        ignored = read_ignore_file(ignore_path)
        criteria = FilterCriteria(
            includes=None if includes is None else list(includes),
            excludes=list(excludes),
        ).with_excludes(ignored)

        self.logger.info(
            "starting_run",
            directory=str(root),
            includes=criteria.includes,
            excludes=criteria.excludes,
            fix=fix,
        )

        files = FileSelector(self.config.script_extensions).select(root, criteria)
        if not files:
            self.console.print("[yellow]No files found to analyze[/yellow]")
            return RunResult()

        self.console.print(f"[cyan]Analyzing {len(files)} file(s) with {self.analyzer.name}[/cyan]")
        runner = AnalysisRunner(
            self.analyzer,
            root=root,
            console=self.console,
            max_table_rows=self.config.max_table_rows,
        )
        return runner.run(files, fix=fix, settings=analyzer_settings)


def analyze_scripts(
    directory: str | Path = ".",
    *,
    includes: Sequence[str] | None = None,
    excludes: Sequence[str] = (),
    fix: bool = False,
    analyzer: Analyzer | None = None,
) -> RunResult:
    """
    High-level convenience function to analyze a directory.

    Example:
        >>> result = analyze_scripts("src", excludes=["/vendor/"])
        >>> result.exit_code
    """
    return AnalysisDriver(analyzer).run(
        directory,
        includes=includes,
        excludes=excludes,
        fix=fix,
    )
