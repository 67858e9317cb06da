"""Core application components."""

from __future__ import annotations

from .config import settings
from .exceptions import ScriptCheckError
from .logging import get_logger

__all__ = ["settings", "ScriptCheckError", "get_logger"]
