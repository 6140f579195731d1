"""Config I/O utilities."""

from __future__ import annotations

import json
import os
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .models import ConfigModel, validate_config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BL2PATCH_CONFIG"


def get_config_path() -> str:
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return override
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_dir, "config.json")


def load_config(config_path: Optional[Union[str, Path]] = None) -> ConfigModel:
    """Load and validate the configuration file.

    A missing file yields the defaults; unreadable or invalid content raises
    ConfigurationError.
    """
    if config_path is None:
        config_path = get_config_path()
    path = Path(config_path)
    if not path.exists():
        logger.debug("No configuration at %s, using defaults", path)
        return ConfigModel()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file: {e}", file_path=str(path)) from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration: {e}", file_path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration root must be an object", file_path=str(path))

    try:
        config = validate_config(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed: {e.error_count()} error(s)",
            "VALIDATION_ERROR",
            file_path=str(path),
            details={"errors": [err.get("msg") for err in e.errors()]},
        ) from e

    logger.debug("Configuration loaded from %s", path)
    return config


def save_config(config: ConfigModel, config_path: Optional[Union[str, Path]] = None) -> bool:
    if config_path is None:
        config_path = get_config_path()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(by_alias=True), f, indent=2)
        return True
    except OSError as e:
        logger.warning("Failed to save configuration to %s: %s", config_path, e)
        return False
