from pathlib import Path
from unittest.mock import mock_open, patch

import pytest

from exporter.config import (
    collect_settings,
    export_settings,
    load_collect_config,
    load_config,
    load_export_config,
)
from exporter.errors import ConfigError


def test_load_config_file_not_found():
    """Test that load_config raises FileNotFoundError if config file is missing."""
    with pytest.raises(FileNotFoundError):
        load_config(Path("nonexistent_config.yaml"))


def test_load_config_success():
    """Test that load_config successfully loads a valid config file."""
    mock_yaml_content = """
    export:
      profile: collision
      run_directory: server/run
    """
    with patch("builtins.open", mock_open(read_data=mock_yaml_content)):
        with patch("pathlib.Path.exists", return_value=True):
            config = load_config(Path("config.yaml"))
            assert config["export"]["profile"] == "collision"
            assert config["export"]["run_directory"] == "server/run"


def test_load_config_empty_file():
    """Test that an empty config file loads as an empty dictionary."""
    with patch("builtins.open", mock_open(read_data="")):
        with patch("pathlib.Path.exists", return_value=True):
            assert load_config(Path("config.yaml")) == {}


def test_load_export_config_file_not_found():
    """Test that load_export_config raises FileNotFoundError if config file is missing."""
    with pytest.raises(FileNotFoundError):
        load_export_config(Path("nonexistent_config.yaml"))


def test_load_export_config_success():
    """Test that load_export_config converts paths and keeps configured values."""
    mock_yaml_content = """
    export:
      profile: collision
      run_directory: server/run
      host_data: dumps/registry.json
      show_progress: true
    """
    with patch("builtins.open", mock_open(read_data=mock_yaml_content)):
        with patch("pathlib.Path.exists", return_value=True):
            settings = load_export_config(Path("config.yaml"))
            assert settings["profile"] == "collision"
            assert settings["run_directory"] == Path("server/run")
            assert settings["host_data"] == Path("dumps/registry.json")
            assert settings["show_progress"] is True


def test_load_export_config_missing_section():
    """Test that a missing export section falls back to defaults."""
    mock_yaml_content = """
    collect:
      output_dir: out
    """
    with patch("builtins.open", mock_open(read_data=mock_yaml_content)):
        with patch("pathlib.Path.exists", return_value=True):
            settings = load_export_config(Path("config.yaml"))
            assert settings["profile"] == "data"
            assert settings["run_directory"] == Path("run")
            assert settings["show_progress"] is False
            assert settings["min_free_disk_mb"] == 50.0


def test_export_settings_unknown_profile():
    with pytest.raises(ConfigError, match="Unknown export profile"):
        export_settings({"export": {"profile": "everything"}})


def test_export_settings_bad_disk_threshold():
    with pytest.raises(ConfigError):
        export_settings({"export": {"min_free_disk_mb": "lots"}})


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        export_settings({"export": {"profile": "everything"}})


def test_collect_settings_requires_version():
    with pytest.raises(ConfigError, match="collect.version"):
        collect_settings({"collect": {"output_dir": "out"}})


def test_collect_settings_requires_section():
    with pytest.raises(ConfigError, match="collect.output_dir"):
        collect_settings({})


def test_load_collect_config_success():
    """Test that numeric versions are kept as strings."""
    mock_yaml_content = """
    collect:
      output_dir: out
      version: 1.21
    """
    with patch("builtins.open", mock_open(read_data=mock_yaml_content)):
        with patch("pathlib.Path.exists", return_value=True):
            collect = load_collect_config(Path("config.yaml"))
            assert collect["output_dir"] == Path("out")
            assert collect["version"] == "1.21"
