"""
Core configuration management using Pydantic V2 Settings.

This module provides type-safe, validated configuration management with support for:
- Environment variables (``SCRIPTCHECK_`` prefix)
- .env file loading
- Runtime validation
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide configuration with environment variable support.

    All settings can be overridden via ``SCRIPTCHECK_*`` environment variables
    or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRIPTCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ═══════════════════════════════════════════════════════════════════════
    # Application Configuration
    # ═══════════════════════════════════════════════════════════════════════
    app_name: str = Field(
        default="scriptcheck",
        description="Application display name",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Application version",
    )

    environment: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Runtime environment",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # ═══════════════════════════════════════════════════════════════════════
    # Analyzer Configuration
    # ═══════════════════════════════════════════════════════════════════════
    pwsh_executable: str = Field(
        default="pwsh",
        min_length=1,
        description="PowerShell executable used to run PSScriptAnalyzer",
    )

    script_extensions: list[str] = Field(
        default_factory=lambda: [".ps1", ".psm1", ".psd1"],
        min_length=1,
        description="File extensions selected for analysis",
    )

    ignore_file_name: str = Field(
        default=".psscriptanalyzerignore",
        description="Default ignore file (one exclude pattern per line)",
    )

    settings_file_name: str = Field(
        default="PSScriptAnalyzerSettings.toml",
        description="Default analyzer settings document",
    )

    max_table_rows: int = Field(
        default=200,
        ge=1,
        description="Maximum diagnostics rows printed per file",
    )

    # ═══════════════════════════════════════════════════════════════════════
    # Logging Configuration
    # ═══════════════════════════════════════════════════════════════════════
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )

    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # ═══════════════════════════════════════════════════════════════════════
    # Validators
    # ═══════════════════════════════════════════════════════════════════════
    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is uppercase."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("script_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lowercase extensions and make sure each has a leading dot."""
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        if not normalized:
            raise ValueError("at least one script extension is required")
        return normalized

    # ═══════════════════════════════════════════════════════════════════════
    # Helper Methods
    # ═══════════════════════════════════════════════════════════════════════
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def extension_set(self) -> frozenset[str]:
        """Script extensions as a lookup set."""
        return frozenset(self.script_extensions)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Settings: Singleton settings object
    """
    return Settings()


# Convenience export
settings: Settings = get_settings()
