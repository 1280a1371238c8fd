"""Configuration management for bpax using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILE_NAME = ".bpax.json"


class OutputFormat(str, Enum):
    """Output format types."""
    JSON = "json"
    TABLE = "table"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class IntakeConfig(BaseModel):
    """File intake configuration section."""
    max_file_size_mb: int = Field(alias="maxFileSizeMb", default=50)
    allowed_extensions: list[str] = Field(alias="allowedExtensions", default_factory=lambda: [
        ".bpprocess",
        ".bpobject",
        ".bprelease",
    ])

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v):
        if v < 1:
            raise ValueError("max_file_size_mb must be >= 1")
        return v

    @field_validator("allowed_extensions")
    @classmethod
    def validate_extensions(cls, v):
        """Extensions must be dotted; they are compared case-insensitively."""
        for ext in v:
            if not ext.startswith("."):
                raise ValueError(f"extension must start with '.', got: {ext}")
        return [ext.lower() for ext in v]

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    model_config = ConfigDict(populate_by_name=True)


class AnalysisConfig(BaseModel):
    """Extraction engine configuration section."""
    pattern_fallback: bool = Field(alias="patternFallback", default=True)
    main_location: str = Field(alias="mainLocation", default="Main Process")
    unknown_subsheet: str = Field(alias="unknownSubsheet", default="Unknown Subsheet")

    @field_validator("main_location", "unknown_subsheet")
    @classmethod
    def validate_label(cls, v):
        if not v.strip():
            raise ValueError("location labels must not be blank")
        return v

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.JSON
    indent: int = 2

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v):
        if not (0 <= v <= 8):
            raise ValueError(f"indent must be between 0-8, got: {v}")
        return v

    model_config = ConfigDict(use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class BpaxConfig(BaseModel):
    """Complete bpax configuration model."""
    intake: IntakeConfig = Field(default_factory=IntakeConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> BpaxConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .bpax.json

    Returns:
        BpaxConfig: Loaded and validated configuration

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
            return BpaxConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
    else:
        return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .bpax.json configuration file by searching up directory tree.

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


def create_default_config() -> BpaxConfig:
    """Create default configuration."""
    return BpaxConfig()
