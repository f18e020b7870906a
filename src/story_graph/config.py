"""Configuration management for Story Graph."""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Repository settings
    repo_path: Path = Field(
        default_factory=Path.cwd,
        description="Path to the repository containing the stories",
    )
    storybook_stories_path: Path | None = Field(
        default=None,
        description="Directory searched for *.stories.* files (defaults to the whole repository)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Output settings
    output_path: Path = Field(
        default=Path(".storygraph") / "story-graph.json",
        description="Where the finished graph is written (relative to repo_path)",
    )

    # Traversal settings
    max_depth: int = Field(
        default=256,
        ge=1,
        le=512,
        description="Maximum usage tree depth walked for a single story before giving up on it",
    )
    max_tree_nodes: int = Field(
        default=10_000,
        ge=1,
        description="Maximum number of usage tree nodes built for a single story",
    )

    # Watcher settings
    debounce_seconds: float = Field(
        default=2.0,
        description="Debounce delay for file watcher in seconds",
    )

    @field_validator("repo_path", mode="before")
    @classmethod
    def validate_repo_path(cls, v: str | Path) -> Path:
        """Convert string to Path and validate it exists."""
        path = Path(v) if isinstance(v, str) else v
        if not path.exists():
            raise ValueError(f"Repository path does not exist: {path}")
        if not path.is_dir():
            raise ValueError(f"Repository path is not a directory: {path}")
        return path.resolve()

    @field_validator("storybook_stories_path", mode="before")
    @classmethod
    def validate_stories_path(cls, v: str | Path | None) -> Path | None:
        """Treat an empty value as unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return Path(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @property
    def graph_output_path(self) -> Path:
        """Get the absolute path of the graph JSON file."""
        return self.repo_path / self.output_path


def setup_logging(level: str) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
