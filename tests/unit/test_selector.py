"""
Unit tests for file selection.

Tests discovery, include/exclude filtering and directory resolution.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from scriptcheck.core.exceptions import PathResolutionError
from scriptcheck.domain.models import FilterCriteria
from scriptcheck.services.selector import (
    FileSelector,
    is_selected,
    normalized_forms,
    pattern_matches,
    resolve_directory,
    select_files,
)


def names(root: Path, paths: list[Path]) -> list[str]:
    return [p.relative_to(root).as_posix() for p in paths]


class TestPatternMatching:
    """Tests for pattern matching helpers."""

    def test_normalized_forms(self) -> None:
        """Test both slash normalizations."""
        assert normalized_forms(r"/a\b/c") == ("/a/b/c", r"\a\b\c")

    def test_backslash_pattern_matches_forward_path(self) -> None:
        """Test that Windows-style patterns match POSIX paths."""
        assert pattern_matches("\\Tests\\", "/Tests/unit.ps1")

    def test_forward_pattern_matches_backslash_path(self) -> None:
        """Test that POSIX-style patterns match Windows paths."""
        assert pattern_matches("/Tests/", r"\Tests\unit.ps1")

    def test_contains_semantics(self) -> None:
        """Test that a pattern matches anywhere in the path."""
        assert pattern_matches("odul", "/modules/x.psm1")
        assert not pattern_matches("vendor", "/modules/x.psm1")

    def test_case_insensitive(self) -> None:
        """Test that matching ignores case."""
        assert pattern_matches("BUILD", "/build/x.ps1")

    def test_wildcards_inside_pattern(self) -> None:
        """Test that * inside a pattern spans characters."""
        assert pattern_matches("/sub/*.psm1", "/sub/deep/x.psm1")
        assert not pattern_matches("/sub/*.psm1", "/sub/deep/x.ps1")


class TestIsSelected:
    """Tests for the include/exclude decision."""

    def test_no_includes_selects(self) -> None:
        """Test that a null include list selects everything."""
        assert is_selected("/a.ps1", FilterCriteria())

    def test_include_must_match(self) -> None:
        """Test that includes restrict selection."""
        criteria = FilterCriteria(includes=["/src/"])

        assert is_selected("/src/a.ps1", criteria)
        assert not is_selected("/other/a.ps1", criteria)

    def test_any_include_matches(self) -> None:
        """Test that includes combine as a logical OR."""
        criteria = FilterCriteria(includes=["/nope/", "/src/"])

        assert is_selected("/src/a.ps1", criteria)

    def test_exclude_wins_over_include(self) -> None:
        """Test that a matching exclude removes an included path."""
        criteria = FilterCriteria(includes=["/src/"], excludes=["a.ps1"])

        assert not is_selected("/src/a.ps1", criteria)


class TestFileSelector:
    """Tests for FileSelector."""

    def test_discovers_scripts_recursively(self, script_tree: Path) -> None:
        """Test default selection skips non-script files."""
        selected = FileSelector().select(script_tree, FilterCriteria())

        assert names(script_tree, selected) == ["a.ps1", "sub/c.ps1"]

    def test_include_subdirectory(self, script_tree: Path) -> None:
        """Test that an include pattern restricts to a subdirectory."""
        selected = FileSelector().select(script_tree, FilterCriteria(includes=["/sub/"]))

        assert names(script_tree, selected) == ["sub/c.ps1"]

    def test_empty_includes_select_nothing(self, script_tree: Path) -> None:
        """Test that an empty include list selects nothing."""
        selected = FileSelector().select(script_tree, FilterCriteria(includes=[]))

        assert selected == []

    def test_exclude_dominates(self, script_tree: Path) -> None:
        """Test that exclude wins even when an include also matches."""
        criteria = FilterCriteria(includes=["c.ps1"], excludes=["/sub/"])

        assert FileSelector().select(script_tree, criteria) == []

    def test_all_extensions(self, script_tree: Path) -> None:
        """Test that module and data files are discovered too."""
        (script_tree / "mod.psm1").write_text("")
        (script_tree / "mod.psd1").write_text("@{}")
        (script_tree / "UPPER.PS1").write_text("")

        selected = FileSelector().select(script_tree, FilterCriteria())

        assert names(script_tree, selected) == [
            "UPPER.PS1",
            "a.ps1",
            "mod.psd1",
            "mod.psm1",
            "sub/c.ps1",
        ]

    def test_custom_extensions(self, script_tree: Path) -> None:
        """Test selecting with an explicit extension list."""
        selected = FileSelector([".txt"]).select(script_tree, FilterCriteria())

        assert names(script_tree, selected) == ["b.txt"]

    def test_patterns_see_absolute_path(self, tmp_path: Path) -> None:
        """Test that directories above the root take part in matching."""
        root = tmp_path / "vendor" / "proj"
        root.mkdir(parents=True)
        (root / "a.ps1").write_text("")

        assert FileSelector().select(root, FilterCriteria(excludes=["/vendor/"])) == []
        assert FileSelector().select(root, FilterCriteria(includes=["\\vendor\\proj\\"])) == [
            root.resolve() / "a.ps1"
        ]

    def test_idempotent(self, script_tree: Path) -> None:
        """Test that repeated selection yields the same result."""
        criteria = FilterCriteria(excludes=["/nothing/"])
        selector = FileSelector()

        assert selector.select(script_tree, criteria) == selector.select(script_tree, criteria)

    def test_returns_absolute_paths(self, script_tree: Path) -> None:
        """Test that selected paths are absolute."""
        selected = select_files(script_tree)

        assert all(p.is_absolute() for p in selected)

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test that a missing directory raises PathResolutionError."""
        with pytest.raises(PathResolutionError):
            FileSelector().select(tmp_path / "missing", FilterCriteria())

    def test_file_is_not_directory(self, script_tree: Path) -> None:
        """Test that a file path raises PathResolutionError."""
        with pytest.raises(PathResolutionError):
            resolve_directory(script_tree / "a.ps1")

    def test_does_not_modify_tree(self, script_tree: Path) -> None:
        """Test that selection leaves file contents untouched."""
        before = (script_tree / "a.ps1").read_text()

        FileSelector().select(script_tree, FilterCriteria())

        assert (script_tree / "a.ps1").read_text() == before
