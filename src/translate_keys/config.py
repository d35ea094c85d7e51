"""
Configuration management for translate-keys.

Handles loading configuration from YAML files and environment variables.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if present (before Settings initialization)
load_dotenv()


class ExportFormat(str, Enum):
    """Supported export file formats."""

    CSV = "csv"
    YML = "yml"
    YAML = "yaml"

    @property
    def is_yaml(self) -> bool:
        return self in (ExportFormat.YML, ExportFormat.YAML)


class PathsConfig(BaseModel):
    """Configuration for file paths."""

    translations_dir: Path = Field(default=Path("./translations"))
    database_path: Path = Field(default=Path("./translations.duckdb"))
    license_file: Path = Field(default=Path("./var/deepl-license.key"))
    logs: Path = Field(default=Path("./logs"))

    @field_validator("translations_dir", "database_path", "license_file", "logs")
    @classmethod
    def expand_path(cls, v: Path) -> Path:
        """Expand user home directory and make path absolute."""
        return Path(v).expanduser().resolve()


class DeepLConfig(BaseModel):
    """Configuration for the DeepL translation engine."""

    source_language: str = Field(default="en")
    server_url: str | None = Field(default=None)
    max_retries: int = Field(default=3, ge=0, le=10)
    timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)
    # DeepL rejects some bare target codes and wants the regional variant
    language_overrides: dict[str, str] = Field(
        default_factory=lambda: {"en": "EN-US", "pt": "PT-PT"}
    )


class ExportConfig(BaseModel):
    """Configuration for the export command."""

    default_format: ExportFormat = Field(default=ExportFormat.CSV)
    default_domains: list[str] = Field(default_factory=lambda: ["messages", "workflows"])
    timestamp_format: str = Field(default="%d%m%Y-%H%M%S")


class TranslationConfig(BaseModel):
    """Configuration for the translation store lookups."""

    # Falls back to the language flagged as default in the database
    reference_locale: str | None = Field(default=None)


class ImportConfig(BaseModel):
    """Configuration for the import command."""

    # argv of the command that reloads translations into the live application
    rebuild_command: list[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")
    file: Path = Field(default=Path("./logs/translate_keys.log"))
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    max_file_size_mb: int = Field(default=10, ge=1, le=100)
    backup_count: int = Field(default=5, ge=1, le=20)


class Settings(BaseSettings):
    """Main settings class that combines all configurations."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSLATE_KEYS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    paths: PathsConfig = Field(default_factory=PathsConfig)
    deepl: DeepLConfig = Field(default_factory=DeepLConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    translation: TranslationConfig = Field(default_factory=TranslationConfig)
    imports: ImportConfig = Field(default_factory=ImportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Settings:
        """Load settings from a YAML file, with environment variable overrides."""
        path = Path(path)
        if not path.exists():
            # Return defaults if file doesn't exist
            return cls()

        with open(path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        # Process environment variable substitutions in YAML values
        yaml_config = _substitute_env_vars(yaml_config)

        return cls(**yaml_config)


def _substitute_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively substitute ${ENV_VAR} patterns in config values."""
    result = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = _substitute_env_vars(value)
        elif isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            result[key] = os.getenv(env_var, "")
        elif isinstance(value, list):
            result[key] = [
                _substitute_env_vars(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


def load_config(path: Path | str | None = None) -> Settings:
    """
    Load configuration from YAML file or return defaults.

    Args:
        path: Path to YAML config file. If None, looks for config.yaml in current directory.

    Returns:
        Settings instance with merged YAML and environment configurations.
    """
    if path is None:
        default_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(".translate-keys.yaml"),
        ]
        for p in default_paths:
            if p.exists():
                path = p
                break

    if path is not None:
        return Settings.from_yaml(path)

    return Settings()


DEFAULT_CONFIG = """# translate-keys configuration

paths:
  translations_dir: ./translations
  database_path: ./translations.duckdb
  # Plain-text DeepL key, used when no key is stored in the database
  license_file: ./var/deepl-license.key
  logs: ./logs

deepl:
  source_language: en
  # server_url: https://api-free.deepl.com
  max_retries: 3
  timeout_seconds: 30
  language_overrides:
    en: EN-US
    pt: PT-PT

export:
  default_format: csv                 # csv, yml or yaml
  default_domains:
    - messages
    - workflows
  timestamp_format: "%d%m%Y-%H%M%S"

translation:
  reference_locale: null              # null = the database default language

imports:
  # Run after `translate-keys import --rebuild-cache`
  rebuild_command: []

logging:
  level: INFO
  file: ./logs/translate_keys.log
"""


def create_default_config(path: Path | str = "config.yaml") -> None:
    """Create a default configuration file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(DEFAULT_CONFIG)
