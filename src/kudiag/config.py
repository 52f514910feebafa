"""Configuration management for kudiag using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DIAG_DIR = "diag"
KUDO_DIR = "diag/kudo"
CONFIG_FILE_NAME = ".kudiag.json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class OutputConfig(BaseModel):
    """Output configuration section."""
    dir: str = DIAG_DIR
    dir_mode: int = Field(alias="dirMode", default=0o700)

    @field_validator("dir_mode")
    @classmethod
    def validate_dir_mode(cls, v):
        if not (0 <= v <= 0o777):
            raise ValueError(f"dir_mode must be between 0 and 0o777, got: {oct(v)}")
        return v

    model_config = ConfigDict(populate_by_name=True)


class LogConfig(BaseModel):
    """Pod log copying configuration section."""
    buffer_size: int = Field(alias="bufferSize", default=2048)

    @field_validator("buffer_size")
    @classmethod
    def validate_buffer_size(cls, v):
        if v < 1:
            raise ValueError("buffer_size must be >= 1")
        return v

    model_config = ConfigDict(populate_by_name=True)


class SchemeConfig(BaseModel):
    """Kind resolution configuration section."""
    pre_resolved_groups: list[str] = Field(
        alias="preResolvedGroups", default_factory=lambda: ["kudo.dev"]
    )

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True)


class KudiagConfig(BaseModel):
    """Complete kudiag configuration model."""
    output: OutputConfig = Field(default_factory=OutputConfig)
    log: LogConfig = Field(default_factory=LogConfig)
    scheme: SchemeConfig = Field(default_factory=SchemeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> KudiagConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .kudiag.json

    Returns:
        KudiagConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return KudiagConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
    else:
        return KudiagConfig()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .kudiag.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None
