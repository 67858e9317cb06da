"""
CLI application using Typer and Rich.

Provides:
- The ``analyze`` command that drives PSScriptAnalyzer over a directory
- Formatted tables for findings and configuration
- An exit code suitable for CI and git hooks
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.config import settings
from ..core.exceptions import PathResolutionError, ScriptCheckError
from ..core.logging import configure_logging, get_logger
from ..services.driver import AnalysisDriver

# Initialize CLI components
app = typer.Typer(
    name="scriptcheck",
    help="Run PSScriptAnalyzer over the PowerShell scripts in a project",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()
logger = get_logger(__name__)


@app.command()
def analyze(
    directory: Annotated[
        Path,
        typer.Option(
            "--directory",
            "-d",
            help="Directory to scan for script files",
        ),
    ] = Path("."),
    include: Annotated[
        Optional[list[str]],
        typer.Option(
            "--include",
            "-i",
            help="Only analyze paths containing this pattern (repeatable)",
        ),
    ] = None,
    exclude: Annotated[
        Optional[list[str]],
        typer.Option(
            "--exclude",
            "-e",
            help="Skip paths containing this pattern (repeatable)",
        ),
    ] = None,
    ignore_file: Annotated[
        Optional[Path],
        typer.Option(
            "--ignore-file",
            help=f"File of extra exclude patterns [default: ./{settings.ignore_file_name}]",
        ),
    ] = None,
    settings_file: Annotated[
        Optional[Path],
        typer.Option(
            "--settings-file",
            help=f"Analyzer settings document [default: ./{settings.settings_file_name}]",
        ),
    ] = None,
    fix: Annotated[
        bool,
        typer.Option(
            "--fix",
            help="Let the analyzer fix findings in place",
        ),
    ] = False,
    report: Annotated[
        Optional[Path],
        typer.Option(
            "--report",
            "-o",
            help="Write the run result as JSON to this file",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging",
        ),
    ] = False,
) -> None:
    """
    Analyze the script files under a directory.

    Exits with 0 when no file has findings (or no files match) and with 1
    when any file has a finding of any severity or the analyzer fails.
    """
    if verbose:
        configure_logging(settings.model_copy(update={"log_level": "DEBUG"}))

    driver = AnalysisDriver(console=console)

    try:
        result = driver.run(
            directory,
            includes=include or None,
            excludes=exclude or [],
            ignore_file=ignore_file,
            settings_file=settings_file,
            fix=fix,
        )
    except PathResolutionError as e:
        console.print(f"\n❌ [red]Cannot scan directory:[/red] {escape(e.message)}")
        logger.error("directory_unresolvable", error=str(e))
        raise typer.Exit(1)
    except ScriptCheckError as e:
        console.print(f"\n❌ [red]Analysis failed:[/red] {escape(e.message)}")
        if verbose and e.context:
            console.print(f"[dim]Context: {escape(str(e.context))}[/dim]")
        logger.error("analysis_failed", error=str(e))
        raise typer.Exit(1)

    if report:
        report.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        console.print(f"\n💾 [green]Report saved to:[/green] {escape(str(report))}")

    raise typer.Exit(result.exit_code)


@app.command()
def version() -> None:
    """Display version information."""
    version_text = Text()
    version_text.append(f"{settings.app_name}\n", style="bold blue")
    version_text.append(f"Version: {settings.app_version}\n", style="green")
    version_text.append(f"Environment: {settings.environment}\n", style="yellow")
    version_text.append(f"PowerShell: {settings.pwsh_executable}\n", style="cyan")

    console.print(Panel(version_text, border_style="blue"))


@app.command()
def config() -> None:
    """Display current configuration."""
    config_table = Table(
        title="⚙️  Current Configuration",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="yellow")
    config_table.add_column("Value", style="green")

    config_items = [
        ("Environment", settings.environment),
        ("Log Level", settings.log_level),
        ("PowerShell", settings.pwsh_executable),
        ("Script Extensions", ", ".join(settings.script_extensions)),
        ("Ignore File", settings.ignore_file_name),
        ("Settings File", settings.settings_file_name),
        ("Max Table Rows", str(settings.max_table_rows)),
    ]

    for key, value in config_items:
        config_table.add_row(key, str(value))

    console.print(config_table)


def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
