#!/usr/bin/env python3
"""config.py - Settings loader for flagcleaner

Reads an optional YAML file, merges it over the defaults and validates the
result. CLI options are applied on top by the caller via `with_overrides`.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from flagcleaner.utils.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".flagcleaner.yaml"

PRECEDENCE_MODES = ("sequential", "swift")


class CleanerSettings(BaseModel):
    """Validated run settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    swift_extensions: List[str] = Field(default_factory=lambda: [".swift"])
    objc_extensions: List[str] = Field(default_factory=lambda: [".m", ".mm", ".h"])
    excluded_dirs: List[str] = Field(
        default_factory=lambda: [".git", ".build", "DerivedData", "Pods", "Carthage"]
    )
    use_ripgrep: bool = True
    max_workers: int = Field(default=4, ge=1)
    condition_precedence: str = "sequential"
    encoding: str = "utf-8"
    report_limit: int = Field(default=0, ge=0)  # 0 lists every unchanged file

    @field_validator("swift_extensions", "objc_extensions")
    @classmethod
    def _dotted(cls, value: List[str]) -> List[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]

    @field_validator("condition_precedence")
    @classmethod
    def _known_precedence(cls, value: str) -> str:
        if value not in PRECEDENCE_MODES:
            raise ValueError(
                f"condition_precedence must be one of {', '.join(PRECEDENCE_MODES)}"
            )
        return value

    @property
    def source_extensions(self) -> List[str]:
        return list(self.swift_extensions) + list(self.objc_extensions)

    def with_overrides(self, **overrides: Any) -> "CleanerSettings":
        """Return a copy with the non-None overrides applied and validated."""
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return CleanerSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    logger.info(f"Loading configuration from {config_file}")
    try:
        with open(config_file, encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read configuration file {config_file}: {e}") from e

    if config_data is None:
        logger.warning(f"Configuration file {config_file} is empty. Using defaults.")
        return {}
    if not isinstance(config_data, dict):
        raise ConfigError(
            f"Configuration file {config_file} must hold a mapping, "
            f"got {type(config_data).__name__}"
        )
    logger.debug(f"Raw configuration data from file: {config_data}")
    return config_data


def load_settings(
    config_path: Optional[Path] = None, search_root: Optional[Path] = None
) -> CleanerSettings:
    """
    Load settings from an explicit file or from the scanned directory.

    Args:
        config_path: Explicit YAML file; must exist when given
        search_root: Directory checked for a `.flagcleaner.yaml`

    Returns:
        Validated settings, defaults for anything not configured
    """
    config_data: Dict[str, Any] = {}
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Configuration file not found: {config_path}")
        config_data = _read_yaml(config_path)
    elif search_root is not None and (search_root / CONFIG_FILE_NAME).is_file():
        config_data = _read_yaml(search_root / CONFIG_FILE_NAME)
    else:
        logger.debug("No configuration file found. Using default configuration.")

    try:
        settings = CleanerSettings.model_validate(config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    logger.debug(f"Final configuration: {settings.model_dump()}")
    return settings
