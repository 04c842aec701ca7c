"""Settings for devtool-runners.

Settings are read from ``.devtool-runners.yaml``::

    logging:
      level: DEBUG
      file: .devtool-runners.log

    tsc:
      command: [npx, tsc]
      timeout: 60

    bun:
      timeout: 45
      low_coverage_threshold: 80

Every section and key is optional.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from devtool_runners.exceptions import ConfigError

DEFAULT_CONFIG_FILE = ".devtool-runners.yaml"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class _Section(BaseModel):
    """Base for settings sections; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(_Section):
    """Log level and optional log file."""

    level: LogLevel = "INFO"
    file: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class TscSettings(_Section):
    """How tsc is invoked."""

    command: list[str] = Field(default_factory=lambda: ["bunx", "tsc"])
    timeout: float = Field(default=30.0, gt=0)


class BiomeSettings(_Section):
    """How Biome is invoked."""

    command: list[str] = Field(default_factory=lambda: ["bunx", "@biomejs/biome"])
    timeout: float = Field(default=120.0, gt=0)


class BunSettings(_Section):
    """How bun test is invoked and when coverage counts as low."""

    command: list[str] = Field(default_factory=lambda: ["bun", "test"])
    timeout: float = Field(default=30.0, gt=0)
    coverage_timeout: float = Field(default=60.0, gt=0)
    low_coverage_threshold: float = Field(default=50.0, ge=0, le=100)


class RunnerSettings(_Section):
    """All settings, one section per concern."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    tsc: TscSettings = Field(default_factory=TscSettings)
    biome: BiomeSettings = Field(default_factory=BiomeSettings)
    bun: BunSettings = Field(default_factory=BunSettings)


def load_settings(path: Path | None = None) -> RunnerSettings:
    """Load settings from a YAML file.

    Args:
        path: Settings file. When None, ``.devtool-runners.yaml`` in the
            current directory is used if it exists.

    Returns:
        The validated settings (defaults when no file applies).

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = Path(DEFAULT_CONFIG_FILE)
        if not path.is_file():
            return RunnerSettings()
    elif not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read settings from {path}: {e}") from e

    if data is None:
        return RunnerSettings()
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    try:
        return RunnerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e
