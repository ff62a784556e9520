# tests/test_config.py
"""Tests for TOML configuration handling."""
from pathlib import Path

import pytest

from qalam.config import ConfigManager


@pytest.fixture
def clean_env(monkeypatch):
    for var in (
        "QALAM_DEBUG", "QALAM_STRICT_VARIABLES", "QALAM_SHELL", "QALAM_DATA_DIR", "QALAM_LOG_DIR", "QALAM_LOG_LEVEL"
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults_without_file(clean_env, tmp_path):
    manager = ConfigManager(config_file=tmp_path / "config.toml")
    manager.load_config()

    assert manager.config.debug is False
    assert manager.config.execution.strict_variables is False
    assert manager.config.execution.shell is None
    assert manager.data_dir == tmp_path


def test_load_from_toml(clean_env, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        'debug = true\n'
        '[execution]\n'
        'strict_variables = true\n'
        'shell = "/bin/bash"\n'
        '[storage]\n'
        f'data_dir = "{tmp_path / "data"}"\n'
    )

    manager = ConfigManager(config_file=config_file)
    manager.load_config()

    assert manager.config.debug is True
    assert manager.config.execution.strict_variables is True
    assert manager.config.execution.shell == "/bin/bash"
    assert manager.data_dir == tmp_path / "data"


def test_environment_overrides_file(clean_env, monkeypatch, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text('[execution]\nstrict_variables = true\n')
    monkeypatch.setenv("QALAM_STRICT_VARIABLES", "false")
    monkeypatch.setenv("QALAM_DATA_DIR", str(tmp_path / "elsewhere"))

    manager = ConfigManager(config_file=config_file)
    manager.load_config()

    assert manager.config.execution.strict_variables is False
    assert manager.data_dir == Path(tmp_path / "elsewhere")


def test_invalid_toml_falls_back_to_defaults(clean_env, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text("debug = [unterminated\n")

    manager = ConfigManager(config_file=config_file)
    manager.load_config()

    assert manager.config.debug is False


def test_invalid_debug_type_is_ignored(clean_env, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text('debug = "yes"\n')

    manager = ConfigManager(config_file=config_file)
    manager.load_config()

    assert manager.config.debug is False


def test_save_and_reload(clean_env, tmp_path):
    config_file = tmp_path / "nested" / "config.toml"
    manager = ConfigManager(config_file=config_file)
    manager.config.execution.strict_variables = True
    manager.save_config()

    assert config_file.exists()

    reloaded = ConfigManager(config_file=config_file)
    reloaded.load_config()
    assert reloaded.config.execution.strict_variables is True
    assert reloaded.config.execution.shell is None


def test_logging_table_and_environment(clean_env, monkeypatch, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text('[logging]\nlevel = "debug"\nstructured = false\n')
    monkeypatch.setenv("QALAM_LOG_DIR", str(tmp_path / "logs"))

    manager = ConfigManager(config_file=config_file)
    manager.load_config()

    assert manager.config.logging.level == "DEBUG"
    assert manager.config.logging.structured is False
    assert manager.log_dir == tmp_path / "logs"


def test_log_dir_defaults_under_config_dir(clean_env, tmp_path):
    manager = ConfigManager(config_file=tmp_path / "config.toml")
    assert manager.log_dir == tmp_path / "logs"


def test_unknown_log_level_in_environment_is_ignored(clean_env, monkeypatch, tmp_path):
    monkeypatch.setenv("QALAM_LOG_LEVEL", "chatty")

    manager = ConfigManager(config_file=tmp_path / "config.toml")

    assert manager.config.logging.level == "INFO"
