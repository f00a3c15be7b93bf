"""Configuration management for routeshift."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from routeshift.errors import ConfigurationError
from routeshift.parsing.source import DEFAULT_EXCLUDE_PATTERNS

CONFIG_FILE_NAMES = (".routeshift.yml", ".routeshift.yaml")

LOG_LEVEL_ENV = "ROUTESHIFT_LOG_LEVEL"


class ScannerConfig(BaseModel):
    """Configuration for directory walks."""

    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Patterns to exclude from analysis",
    )


class DataConfig(BaseModel):
    """Overrides for the packaged lookup tables."""

    known_replacements: Path | None = Field(
        default=None,
        description="JSON table of package replacements",
    )
    transform_rules: Path | None = Field(
        default=None,
        description="JSON table of import rewrite rules",
    )


class OutputConfig(BaseModel):
    """Configuration for printed results."""

    indent: int = Field(default=2, ge=0, description="JSON indentation")


class RouteshiftConfig(BaseModel):
    """Complete routeshift configuration."""

    version: int = Field(default=1, description="Configuration file version")
    log_level: str = Field(default="INFO", description="Log level")
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of: {sorted(allowed)}")
        return v.upper()


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find the nearest .routeshift.yml configuration file.

    Searches from start_path up to the root directory.

    Args:
        start_path: Starting directory for search (defaults to cwd).

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.exists():
                return config_path

        current = current.parent

    return None


def load_config(config_path: Path | None = None) -> RouteshiftConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Defaults

    Args:
        config_path: Path to config file (searches if not provided).

    Returns:
        Loaded configuration.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation.
    """
    config_data: dict[str, Any] = {}

    if config_path is None:
        config_path = find_config_file()

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                file_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {config_path}: {e}",
                "Run 'routeshift config init' to see a valid example.",
            ) from e
        if file_data:
            if not isinstance(file_data, dict):
                raise ConfigurationError(f"Configuration in {config_path} must be a mapping")
            config_data = file_data

    log_level = os.environ.get(LOG_LEVEL_ENV)
    if log_level:
        config_data["log_level"] = log_level

    try:
        return RouteshiftConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            f"Check {config_path or 'the ' + LOG_LEVEL_ENV + ' variable'}.",
        ) from e


def generate_example_config() -> str:
    """Generate an example configuration file.

    Returns:
        YAML string of example configuration.
    """
    example = """# Routeshift Configuration

version: 1

# Log level: DEBUG, INFO, WARNING, ERROR (ROUTESHIFT_LOG_LEVEL overrides)
log_level: INFO

# Directory walk settings
scanner:
  # Path components matching these patterns are skipped
  exclude_patterns:
    - node_modules
    - .git
    - .next
    # Build output can be skipped too, unless a route uses the same name
    # - dist
    # - coverage

# Replace the packaged lookup tables (paths relative to the working directory)
data:
  # e.g. ./migration/known_replacements.json
  known_replacements: null
  # e.g. ./migration/transform_rules.json
  transform_rules: null

# Printed results
output:
  # JSON indentation
  indent: 2
"""
    return example
