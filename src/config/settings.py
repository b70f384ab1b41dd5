# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM ===
    llm_provider: str = "google"
    default_model: str = "gemini-2.0-flash"
    analysis_timeout_s: float = 60.0
    connectivity_timeout_s: float = 30.0

    # === Cache ===
    cache_enabled: bool = True
    cache_dir: Path = Path(".cache")
    cache_filename: str = "document-cache.json"

    # === Preprocessing ===
    max_preprocess_pages: int = 3

    # === Credentials ===
    credential_env_var: str = "GOOGLE_GENERATIVE_AI_API_KEY"
    secret_cli: str = "op"
    secret_item: str = "Google AI Studio Key"
    secret_vault: str = "Development"
    secret_field_id: str = "notesPlain"
    secret_timeout_s: float = 30.0

    # === Sample scan (`test` command) ===
    sample_dirs: str = "~/Downloads,~/Desktop"
    sample_limit: int = 3

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator(
        "analysis_timeout_s", "connectivity_timeout_s", "secret_timeout_s"
    )
    @classmethod
    def validate_timeout(cls, v: float, info) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("max_preprocess_pages", "sample_limit")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not self.credential_env_var.strip():
            errors.append("CREDENTIAL_ENV_VAR must not be empty")

        if not self.cache_filename.strip() or "/" in self.cache_filename:
            errors.append("CACHE_FILENAME must be a plain file name")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def cache_file(self) -> Path:
        """Full path of the persisted cache store."""
        return self.cache_dir.expanduser() / self.cache_filename

    @property
    def temp_dir(self) -> Path:
        """Reserved subtree for preprocessing artifacts."""
        return self.cache_dir.expanduser() / "temp"

    @property
    def sample_dirs_list(self) -> list[Path]:
        """Parse comma-separated sample directories."""
        return [
            Path(d.strip()).expanduser()
            for d in self.sample_dirs.split(",")
            if d.strip()
        ]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
