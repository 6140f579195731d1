"""Configuration loading and validation."""

from .io import CONFIG_ENV_VAR, get_config_path, load_config, save_config
from .models import (
    BackupConfig,
    ConfigModel,
    LoggingConfig,
    PatcherSettings,
    SteamConfig,
    validate_config,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "get_config_path",
    "load_config",
    "save_config",
    "BackupConfig",
    "ConfigModel",
    "LoggingConfig",
    "PatcherSettings",
    "SteamConfig",
    "validate_config",
]
