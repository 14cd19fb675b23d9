"""
Load and save config.json.

A missing file is written out with defaults so there is something to edit,
then validated like any other. Validation problems are reported one line
per field.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .models import AppConfig


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.json"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read {config_path}: {e}") from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a JSON object")
    return config_dict


def _write_config_file(config_dict: Dict[str, Any], config_path: Path) -> None:
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_dict, f, indent=2)
        f.write("\n")


def _describe_errors(config_path: Path, error: ValidationError) -> str:
    lines = [f"Configuration validation failed for {config_path}:"]
    for item in error.errors():
        field = " -> ".join(str(x) for x in item["loc"]) or "(root)"
        lines.append(f"  - {field}: {item['msg']}")
    return "\n".join(lines)


def load_config(path: Optional[str] = None, require_serial_port: bool = True) -> AppConfig:
    """
    Load configuration from JSON file.

    Args:
        path: Path to config.json. Defaults to config.json in the current
            directory. Created with defaults when it does not exist.
        require_serial_port: Reject configs that would open the serial link
            without naming a port. Pass False when the loopback link is
            forced from the command line.

    Returns:
        Validated AppConfig instance.

    Raises:
        ConfigurationError: If the file is unreadable or invalid.
    """
    config_path = Path(path or DEFAULT_CONFIG_FILE)

    if config_path.exists():
        config_dict = _read_config_file(config_path)
    else:
        logger.info(f"Config file not found: {config_path}. Creating it with defaults.")
        config_dict = AppConfig().model_dump()
        try:
            _write_config_file(config_dict, config_path)
        except OSError as e:
            logger.warning(f"Failed to create default config file: {e}")

    try:
        config = AppConfig.model_validate(
            config_dict, context={"require_serial_port": require_serial_port}
        )
    except ValidationError as e:
        raise ConfigurationError(_describe_errors(config_path, e)) from e

    if config.simulator.enabled:
        logger.info(f"Configuration loaded from {config_path} (loopback link)")
    else:
        logger.info(f"Configuration loaded from {config_path} (serial port {config.serial.port or 'unset'})")
    return config


def save_config(config: AppConfig, path: Optional[str] = None) -> None:
    """
    Save configuration to JSON file.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    config_path = Path(path or DEFAULT_CONFIG_FILE)

    try:
        _write_config_file(config.model_dump(), config_path)
    except OSError as e:
        raise ConfigurationError(f"Failed to write {config_path}: {e}") from e

    logger.info(f"Configuration saved to {config_path}")
