"""dialogsearch configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dialogsearch.exceptions import ConfigurationError, check_config_keys


class DialogSearchSettings(BaseSettings):
    """dialogsearch configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
       Example: dialogsearch search books/ --query hello --limit 10

    2. Config file values (YAML, TOML, or JSON)
       Example: dialogsearch search --config myconfig.yaml ...
       Multiple files: Later files override earlier ones

    3. Environment variables (prefixed with DIALOGSEARCH_)
       Example: export DIALOGSEARCH_SEARCH_AGGREGATION=average

    4. .env file (in current directory or specified path)
       Example: DIALOGSEARCH_LOG_LEVEL=DEBUG in .env file

    5. Default values (defined in field declarations below)
    """

    model_config = SettingsConfigDict(
        env_prefix="DIALOGSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Debug settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        pattern="^(?i)(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(?i)(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # Analysis settings
    analysis_max_token_length: int = Field(
        default=255,
        description="Longest run of token characters emitted as one token",
        ge=1,
        le=1024 * 1024,
    )
    analysis_lowercase: bool = Field(
        default=True,
        description="Lowercase terms before indexing",
    )
    analysis_stop_words: bool = Field(
        default=False,
        description="Drop English stop words from the indexed terms",
    )
    analysis_debug_tokens: bool = Field(
        default=False,
        description="Log every token leaving the dialogue payload filter",
    )

    # Indexing settings
    index_workers: int = Field(
        default=8,
        description="Number of worker threads used to index documents",
        ge=1,
        le=256,
    )
    index_extensions: list[str] = Field(
        default_factory=lambda: [".txt"],
        description="File extensions indexed as plain text (also inside .zip)",
    )

    # Search settings
    search_aggregation: str = Field(
        default="min",
        description="How payload scores combine per document (min, max, average)",
        pattern="^(?i)(min|max|average)$",
    )
    search_limit: int = Field(
        default=5,
        description="Maximum number of hits returned per query",
        ge=1,
    )
    search_include_span_score: bool = Field(
        default=True,
        description="Multiply the payload score by the term's TF-IDF score",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and resolve path.

        Accepts None, a ``str`` (env vars and ``~`` are expanded) or a
        ``Path``. Collection types are rejected.
        """
        if v is None:
            return None
        if isinstance(v, str):
            expanded = os.path.expandvars(v)
            return Path(expanded).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()

        if isinstance(v, (dict, list, set, tuple)):  # noqa: UP038
            raise ValueError(
                f"Path fields cannot accept {type(v).__name__} types. "
                f"Expected str or Path, got: {v!r}"
            )

        try:
            return Path(str(v)).resolve()
        except (TypeError, ValueError, OSError) as e:
            raise ValueError(
                f"Path fields must be string, Path, or convertible to string. "
                f"Got {type(v).__name__}: {v!r}"
            ) from e

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.upper()
        raise ValueError(f"log_level must be a string, got {type(v).__name__}")

    @field_validator("log_format", "search_aggregation", mode="before")
    @classmethod
    def normalize_lowercase(cls, v: Any) -> str:
        """Normalize enumerated string options to lowercase."""
        if isinstance(v, str):
            return v.lower()
        raise ValueError(f"expected a string, got {type(v).__name__}")

    @field_validator("index_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: Any) -> Any:
        """Accept ``txt``, ``.TXT`` or a comma separated string."""
        if isinstance(v, str):
            v = [part for part in v.split(",") if part.strip()]
        if isinstance(v, list):
            normalized = []
            for ext in v:
                ext = str(ext).strip().lower()
                normalized.append(ext if ext.startswith(".") else f".{ext}")
            return normalized
        return v

    @classmethod
    def from_env(cls) -> DialogSearchSettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> DialogSearchSettings:
        """Load settings from a configuration file.

        Args:
            config_path: Path to configuration file (YAML, TOML, or JSON).

        Returns:
            Settings loaded from the file.

        Raises:
            ConfigurationError: If file format is not supported.
            FileNotFoundError: If config file doesn't exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()

        if suffix in {".yml", ".yaml"}:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {suffix}",
                hint="Use one of the supported formats: .yml, .yaml, .toml, or .json",
                details={
                    "file": str(config_path),
                    "detected_format": suffix,
                    "supported_formats": [".yml", ".yaml", ".toml", ".json"],
                },
            )

        check_config_keys(data)

        return cls(**data)

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        env_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> DialogSearchSettings:
        """Load settings with proper precedence from multiple sources.

        Precedence (highest to lowest):
        1. CLI arguments
        2. Config files (last file wins)
        3. Environment variables
        4. .env file
        5. Default values

        Args:
            config_files: List of config files to load (later files override earlier).
            env_file: Path to .env file (default: .env in current directory).
            cli_args: Dictionary of CLI arguments.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        if config_files:
            for config_file in config_files:
                try:
                    file_settings = cls.from_file(config_file)
                    data.update(file_settings.model_dump(exclude_unset=True))
                except FileNotFoundError:
                    from dialogsearch.config.logging import get_logger as _get_logger

                    logger = _get_logger("dialogsearch.config.settings")
                    logger.warning(
                        "Configuration file not found, using defaults",
                        config_file=str(config_file),
                    )

        if env_file:
            settings = cast(
                "DialogSearchSettings", cast(Any, cls)(_env_file=env_file, **data)
            )
        else:
            settings = cls(**data)

        if cli_args:
            cli_data = {k: v for k, v in cli_args.items() if v is not None}
            if cli_data:
                updated_data = settings.model_dump()
                updated_data.update(cli_data)
                settings = cls(**updated_data)

        return settings


# Global settings instance
_settings: DialogSearchSettings | None = None


def _get_config_paths() -> list[Path | str]:
    """Return the standard config files that exist, lowest priority first."""
    potential_paths = [
        Path.home() / ".config" / "dialogsearch" / "config.yaml",
        Path.home() / ".config" / "dialogsearch" / "config.toml",
        Path.cwd() / "dialogsearch.yaml",
        Path.cwd() / "dialogsearch.toml",
        Path.cwd() / "dialogsearch.json",
    ]

    existing_paths: list[Path | str] = []
    for path in potential_paths:
        try:
            if path.is_file():
                existing_paths.append(path)
        except OSError:
            continue
    return existing_paths


def get_settings() -> DialogSearchSettings:
    """Get the global settings instance.

    Returns:
        Global DialogSearchSettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = DialogSearchSettings.from_multiple_sources(
                config_files=config_paths
            )
        else:
            _settings = DialogSearchSettings.from_env()
    return _settings


def set_settings(settings: DialogSearchSettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset the global settings instance.

    Forces recreation of settings on next call to get_settings(),
    useful for tests that modify environment variables.
    """
    global _settings
    _settings = None


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> DialogSearchSettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file to load. If not provided,
                    uses standard config locations.
        cli_overrides: Dictionary of CLI argument overrides.
                      Only non-None values are applied.

    Returns:
        DialogSearchSettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return DialogSearchSettings.from_multiple_sources(
            config_files=[config_file],
            cli_args=cli_overrides,
        )

    settings = get_settings()
    if cli_overrides:
        filtered_overrides = {k: v for k, v in cli_overrides.items() if v is not None}
        if filtered_overrides:
            data = settings.model_dump()
            data.update(filtered_overrides)
            settings = DialogSearchSettings(**data)
    return settings
