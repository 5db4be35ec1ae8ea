"""Configuration management for the diffview application."""

from pathlib import Path
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from diffview.models import ViewMode


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Uses DIFFVIEW_ prefix for all environment variables.
    Supports loading from .env file.

    Examples:
        DIFFVIEW_DEBUG=true
        DIFFVIEW_PORT=8080
        DIFFVIEW_DEFAULT_VIEW_MODE=split
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DIFFVIEW_",
        case_sensitive=False,
    )

    # Server configuration
    host: str = Field(
        default="127.0.0.1",
        description="Server host address",
    )
    port: Optional[int] = Field(
        default=None,
        description="Server port (auto-assigned if not specified)",
        ge=1,
        le=65535,
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    # Diff configuration
    repo_path: Optional[Path] = Field(
        default=None,
        description="Git repository to diff (defaults to the working directory)",
    )
    context_lines: int = Field(
        default=3,
        description="Unchanged lines of context around each change",
        ge=0,
        le=100,
    )
    default_view_mode: ViewMode = Field(
        default=ViewMode.UNIFIED,
        description="View mode used when a request does not name one",
    )
    show_line_numbers: bool = Field(
        default=True,
        description="Render line numbers in diff views",
    )

    @field_validator("repo_path", mode="before")
    @classmethod
    def validate_path(cls, v: Optional[str | Path]) -> Optional[Path]:
        """Convert string paths to Path objects."""
        if v is None or isinstance(v, Path):
            return v
        return Path(v)

    def resolved_repo_path(self) -> Path:
        return self.repo_path if self.repo_path else Path.cwd()


# Global settings instance
settings = Settings()
