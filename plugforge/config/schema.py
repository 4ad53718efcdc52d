"""Configuration schema using Pydantic."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_WORKING_DIRS = [
    "storage/logs",
    "storage/framework/views",
    "storage/framework/cache",
    "storage/framework/sessions",
]

DEFAULT_GENERATOR_FILES = [
    "app/Commands/NewCommand.php",
    "app/Commands/InspireCommand.php",
    "app/Commands/SetupCommand.php",
]


class ScaffoldConfig(BaseModel):
    """Template materialization settings."""
    marker_suffix: str = ".stub"
    keep_file: str = ".gitkeep"  # Zero-byte marker so git keeps empty dirs
    working_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_WORKING_DIRS))
    excluded_dirs: list[str] = Field(default_factory=lambda: [".git", "node_modules", "vendor"])
    templates_dir: str | None = None  # Overrides the packaged templates
    default_template: str = "base"
    previous_binary: str = "wp-laracode"  # Binary shipped by the skeleton checkout
    generator_files: list[str] = Field(default_factory=lambda: list(DEFAULT_GENERATOR_FILES))

    @property
    def templates_path(self) -> Path | None:
        if not self.templates_dir:
            return None
        return Path(self.templates_dir).expanduser()


class InstallConfig(BaseModel):
    """Dependency installation settings."""
    enabled: bool = True
    new_command: list[str] = Field(default_factory=lambda: ["composer", "install", "--no-dev"])
    setup_command: list[str] = Field(default_factory=lambda: ["composer", "update"])
    new_timeout: float = 300
    setup_timeout: float = 600


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file_enabled: bool = False
    file_path: str = "~/.plugforge/logs/plugforge.log"
    rotation: str = "10 MB"
    retention: str = "7 days"


class Config(BaseSettings):
    """Root configuration for plugforge."""
    scaffold: ScaffoldConfig = Field(default_factory=ScaffoldConfig)
    install: InstallConfig = Field(default_factory=InstallConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="PLUGFORGE_",
        env_nested_delimiter="__",
    )
