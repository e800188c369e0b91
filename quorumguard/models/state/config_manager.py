"""Loading of operator settings from a YAML file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from quorumguard.constants.defaults import CONFIG_PATH_ENV_VAR
from quorumguard.models.state.app_settings import (
    ConfigError,
    ConfigLoadError,
    OperatorSettings,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Reads ``OperatorSettings`` from YAML.

    The file is taken from the explicit path, else from ``$QUORUMGUARD_CONFIG``.
    A missing file yields defaults; an unreadable or invalid one raises
    ``ConfigLoadError``.
    """

    @staticmethod
    def resolve_path(path: str | Path | None = None) -> Path | None:
        if path is not None:
            return Path(path).expanduser()
        env_value = os.environ.get(CONFIG_PATH_ENV_VAR, "").strip()
        return Path(env_value).expanduser() if env_value else None

    @classmethod
    def load(cls, path: str | Path | None = None) -> OperatorSettings:
        config_path = cls.resolve_path(path)
        if config_path is None or not config_path.exists():
            logger.debug("No settings file found, using defaults")
            return OperatorSettings()

        try:
            with config_path.open(encoding="utf-8") as handle:
                raw = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"Failed to read settings from {config_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigLoadError(f"Settings file {config_path} must contain a mapping")

        try:
            settings = OperatorSettings.model_validate(raw)
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid settings in {config_path}: {exc}") from exc

        logger.info("Loaded settings from %s", config_path)
        return settings


__all__ = [
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "OperatorSettings",
]
