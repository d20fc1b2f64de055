#!/usr/bin/env python3
"""
Application settings, read from an optional YAML file.
"""
import os
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent

APP_NAME = "Essai Control Panel v2"
DEFAULT_ONLINE_URL = "https://media.githubusercontent.com/media/Uncreate/EssaiControlPanel/refs/heads/main/MasterToolDatabase.txt"
LOCAL_DB_NAME = "MasterToolDatabase.txt"
DEFAULT_CONFIG_NAME = "essai_cp.yaml"
CONFIG_ENV_VAR = "ESSAI_CP_CONFIG"

SOURCE_NAMES = ("local", "online")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""


@dataclass
class AppConfig:
    online_url: str = DEFAULT_ONLINE_URL
    local_path: Path = field(default_factory=lambda: PROJECT_ROOT / LOCAL_DB_NAME)
    default_source: str = "online"
    timeout: Optional[float] = None
    log_level: str = "INFO"

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


def _validate(data: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
    known = {f.name for f in fields(AppConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values = dict(data)
    if "online_url" in values and not isinstance(values["online_url"], str):
        raise ConfigError("online_url must be a string")

    if "local_path" in values:
        if not isinstance(values["local_path"], str):
            raise ConfigError("local_path must be a string")
        local_path = Path(os.path.expanduser(values["local_path"]))
        if not local_path.is_absolute():
            local_path = base_dir / local_path
        values["local_path"] = local_path

    if "default_source" in values:
        source = str(values["default_source"]).lower()
        if source not in SOURCE_NAMES:
            raise ConfigError(f"default_source must be one of {', '.join(SOURCE_NAMES)}, got '{values['default_source']}'")
        values["default_source"] = source

    if values.get("timeout") is not None:
        timeout = values["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError("timeout must be a positive number of seconds or null")
        values["timeout"] = float(timeout)

    if "log_level" in values:
        level = str(values["log_level"]).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        values["log_level"] = level

    return values


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load the application configuration.

    Args:
        path: Explicit YAML file. When omitted the ESSAI_CP_CONFIG environment
            variable is used, then essai_cp.yaml in the project root.

    Returns:
        The configuration, built-in defaults for anything not set.

    Raises:
        ConfigError: If an explicitly requested file is missing or any file
            found is not valid.
    """
    explicit = path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or PROJECT_ROOT / DEFAULT_CONFIG_NAME
    config_file = Path(path)

    if not config_file.exists():
        if explicit:
            raise ConfigError(f"Configuration file '{config_file}' not found")
        logging.debug(f"No configuration file at {config_file}, using defaults")
        return AppConfig()

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Error reading configuration file '{config_file}': {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file '{config_file}' must contain a mapping")

    logging.debug(f"Loaded configuration from {config_file}")
    return AppConfig(**_validate(data, config_file.resolve().parent))
