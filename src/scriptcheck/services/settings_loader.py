"""
Loading of the analyzer settings document.

Supports TOML and JSON documents whose top-level table holds
PSScriptAnalyzer setting keys.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..core.exceptions import SettingsLoadError, UnsupportedSettingsFormatError
from ..core.logging import get_logger
from ..domain.models import AnalyzerSettings

logger = get_logger(__name__)


def _parse_document(path: Path, text: str) -> Any:
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return tomllib.loads(text)
        if suffix == ".json":
            return json.loads(text)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise SettingsLoadError(
            "Settings document is not well-formed",
            path=str(path),
            error=str(e),
        ) from e
    raise UnsupportedSettingsFormatError(
        "Unsupported settings format",
        path=str(path),
        suffix=suffix or "<none>",
    )


def load_analyzer_settings(path: str | Path) -> AnalyzerSettings:
    """
    Load and validate an analyzer settings document.

    Args:
        path: TOML or JSON settings document

    Returns:
        Validated analyzer settings

    Raises:
        SettingsLoadError: If the file is missing, unreadable, malformed or
            contains invalid settings
    """
    path = Path(path)
    if not path.is_file():
        raise SettingsLoadError("Settings file not found", path=str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SettingsLoadError(
            "Settings file could not be read",
            path=str(path),
            error=str(e),
        ) from e

    data = _parse_document(path, text)
    if not isinstance(data, dict):
        raise SettingsLoadError(
            "Settings document must be a table of settings",
            path=str(path),
        )

    try:
        return AnalyzerSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsLoadError(
            "Invalid analyzer settings",
            path=str(path),
            error=str(e),
        ) from e


def try_load_analyzer_settings(path: str | Path | None) -> AnalyzerSettings | None:
    """
    Load analyzer settings, falling back to None on any load failure.

    The analyzer then runs with its own defaults.
    """
    if path is None:
        return None
    try:
        loaded = load_analyzer_settings(path)
    except SettingsLoadError as e:
        logger.info("analyzer_settings_not_loaded", reason=str(e))
        return None
    logger.info("analyzer_settings_loaded", path=str(path))
    return loaded
