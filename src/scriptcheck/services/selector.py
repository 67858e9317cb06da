"""
Script file discovery and include/exclude filtering.

Patterns use "contains" semantics: a pattern matches when it appears anywhere
in the path. Each path is tested in two forms, once with forward slashes and
once with backslashes, so patterns written for either platform apply. The
usual ``*``/``?`` wildcards are honoured inside a pattern, and matching is
case-insensitive.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable

from ..core.config import settings
from ..core.exceptions import PathResolutionError
from ..core.logging import LoggerMixin
from ..domain.models import FilterCriteria


def resolve_directory(directory: str | Path) -> Path:
    """
    Resolve ``directory`` to an absolute, existing directory.

    Raises:
        PathResolutionError: If the path does not exist or is not a directory
    """
    try:
        root = Path(directory).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise PathResolutionError(
            "Directory could not be resolved",
            directory=str(directory),
            error=str(e),
        ) from e

    if not root.is_dir():
        raise PathResolutionError("Not a directory", directory=str(root))
    return root


def normalized_forms(path: str) -> tuple[str, str]:
    """Return ``path`` with all-forward and all-back slashes."""
    return path.replace("\\", "/"), path.replace("/", "\\")


def pattern_matches(pattern: str, path: str) -> bool:
    """Check whether ``pattern`` occurs in either normalized form of ``path``."""
    wanted = f"*{pattern.lower()}*"
    return any(fnmatchcase(form.lower(), wanted) for form in normalized_forms(path))


def matches_any(patterns: Iterable[str], path: str) -> bool:
    """Check whether any of ``patterns`` matches ``path``."""
    return any(pattern_matches(p, path) for p in patterns)


def is_selected(path: str, criteria: FilterCriteria) -> bool:
    """
    Decide whether a single path passes the filter.

    Includes default to everything when ``criteria.includes`` is None; an
    exclude match always removes the path.
    """
    included = criteria.includes is None or matches_any(criteria.includes, path)
    if not included:
        return False
    return not matches_any(criteria.excludes, path)


class FileSelector(LoggerMixin):
    """
    Selects script files under a directory.

    Patterns are matched against the absolute path of each candidate, so
    directories above the scanned root take part in matching too.
    """

    def __init__(self, extensions: Iterable[str] | None = None) -> None:
        """
        Args:
            extensions: Allowed file extensions (settings default if None)
        """
        chosen = settings.extension_set if extensions is None else extensions
        self.extensions = frozenset(ext.lower() for ext in chosen)

    def discover(self, root: Path) -> list[Path]:
        """List script files under ``root`` recursively, in sorted order."""
        return sorted(
            p
            for p in root.rglob("*")
            if p.suffix.lower() in self.extensions and p.is_file()
        )

    def select(self, directory: str | Path, criteria: FilterCriteria) -> list[Path]:
        """
        Select files under ``directory`` that pass ``criteria``.

        Args:
            directory: Directory to scan
            criteria: Include/exclude patterns

        Returns:
            Absolute paths in deterministic (sorted) order

        Raises:
            PathResolutionError: If ``directory`` cannot be resolved
        """
        root = resolve_directory(directory)

        if criteria.includes is not None and not criteria.includes:
            self.logger.info("empty_include_list", directory=str(root))
            return []

        candidates = self.discover(root)
        selected = [
            path
            for path in candidates
            if is_selected(str(path), criteria)
        ]

        self.logger.info(
            "files_selected",
            directory=str(root),
            discovered=len(candidates),
            selected=len(selected),
        )
        return selected


def select_files(directory: str | Path, criteria: FilterCriteria | None = None) -> list[Path]:
    """
    Convenience function to select script files with default extensions.

    Example:
        >>> select_files(".", FilterCriteria(excludes=["/build/"]))
    """
    return FileSelector().select(directory, criteria or FilterCriteria())
