"""
Configuration loading for the exporter.

Handles loading export and collect parameters from config.yaml files.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from exporter.errors import ConfigError
from exporter.profiles import PROFILES

EXPORT_DEFAULTS: Dict[str, Any] = {
    "profile": "data",
    "run_directory": "run",
    "host_data": "registry.yaml",
    "show_progress": False,
    "min_free_disk_mb": 50,
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load full configuration from config.yaml.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Dictionary with full configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_path is None:
        config_path = Path("config.yaml")

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    return config or {}


def export_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Resolve the export section of an already loaded configuration.

    Raises:
        ConfigError: If the profile is unknown or a value has the wrong type
    """
    settings = {**EXPORT_DEFAULTS, **(config.get("export") or {})}

    if settings["profile"] not in PROFILES:
        raise ConfigError(
            f"Unknown export profile '{settings['profile']}', expected one of {sorted(PROFILES)}"
        )
    try:
        settings["min_free_disk_mb"] = float(settings["min_free_disk_mb"])
    except (TypeError, ValueError):
        raise ConfigError(f"min_free_disk_mb must be a number: {settings['min_free_disk_mb']!r}")

    settings["run_directory"] = Path(settings["run_directory"])
    settings["host_data"] = Path(settings["host_data"])
    settings["show_progress"] = bool(settings["show_progress"])
    return settings


def load_export_config(config_path: Path = Path("config.yaml")) -> Dict[str, Any]:
    """
    Load export configuration from config.yaml.

    Args:
        config_path: Path to config.yaml file (defaults to "config.yaml" in current directory)

    Returns:
        Export settings with defaults filled in and paths converted to Path

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the export section is invalid
    """
    return export_settings(load_config(config_path))


def collect_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    collect = dict(config.get("collect") or {})
    for required in ("output_dir", "version"):
        if not collect.get(required):
            raise ConfigError(f"collect.{required} is required")
    collect["output_dir"] = Path(collect["output_dir"])
    collect["version"] = str(collect["version"])
    return collect


def load_collect_config(config_path: Path = Path("config.yaml")) -> Dict[str, Any]:
    """
    Load the collect section from config.yaml.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If output_dir or version is missing
    """
    return collect_settings(load_config(config_path))
