"""
Configuration loader — reads config.yml into Settings.

Settings are optional: with no config file every field has a sensible
default. An explicitly supplied file that is missing or invalid is an
error; the implicit one under the config directory is only read when
it exists.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from nephyra.core.persistence.preferences_file import default_preferences_path

logger = logging.getLogger(__name__)

APP_NAME = "nephyra"
CONFIG_FILE = "config.yml"

ENV_CONFIG_DIR = "NEPHYRA_CONFIG_DIR"
ENV_MODULES_DIR = "NEPHYRA_MODULES_DIR"


class ConfigError(Exception):
    """Raised when application configuration is invalid or missing."""


def default_config_dir() -> Path:
    """User configuration directory.

    ``$NEPHYRA_CONFIG_DIR`` > ``$XDG_CONFIG_HOME/nephyra`` > ``~/.config/nephyra``.
    """
    explicit = os.environ.get(ENV_CONFIG_DIR)
    if explicit:
        return Path(explicit).expanduser()

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / APP_NAME


class Settings(BaseModel):
    """Runtime settings for a Nephyra run."""

    config_dir: Path = Field(default_factory=default_config_dir)
    modules_dir: Path = Path("/lib/modules")
    top_n: int = Field(default=3, ge=1)
    probe_timeout: float = Field(default=10, gt=0)
    enhance: bool = True

    @property
    def preferences_path(self) -> Path:
        return default_preferences_path(self.config_dir)


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit config file. If None, ``<config_dir>/config.yml``
            is used when it exists.

    Returns:
        Validated Settings, with environment overrides applied.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    data: dict = {}

    if path is None:
        implicit = default_config_dir() / CONFIG_FILE
        if implicit.is_file():
            path = implicit
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path is not None:
        logger.debug("Loading settings from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Expected a YAML mapping in {path}, got {type(loaded).__name__}")
        data = loaded or {}

    modules_override = os.environ.get(ENV_MODULES_DIR)
    if modules_override:
        data["modules_dir"] = modules_override

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info("Settings: config_dir=%s modules_dir=%s", settings.config_dir, settings.modules_dir)
    return settings
