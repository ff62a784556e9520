# qalam/config.py
"""
Configuration management for Qalam CLI.
Uses TOML format for configuration files.
"""
import os
from pathlib import Path
from typing import Optional
import sys
from qalam.utils.logging import get_logger


# --- TOML Library Handling ---

# Reader (tomllib for >= 3.11, tomli for < 3.11)
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # Alias tomli as tomllib

import tomli_w

# --- Pydantic and Environment Handling ---
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from qalam.constants import CONFIG_FILE

logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

# --- Configuration Models ---

class ExecutionConfig(BaseModel):
    """Settings for running workflow and saved commands."""
    shell: Optional[str] = Field(None, description="Shell used to interpret commands (defaults to /bin/sh)")
    strict_variables: bool = Field(False, description="Fail a workflow run when ${name} placeholders stay unresolved")
    stream_output: bool = Field(True, description="Print command output as sequential workflows progress")


class StorageConfig(BaseModel):
    """Settings for the local data files."""
    data_dir: Optional[Path] = Field(None, description="Directory holding workflows, commands and tasks")


class LoggingConfig(BaseModel):
    """Settings for the log files."""
    log_dir: Optional[Path] = Field(None, description="Directory for log files (defaults to <config dir>/logs)")
    level: str = Field("INFO", description="Minimum level written to the log files")
    file_logging: bool = Field(True, description="Write log files at all")
    structured: bool = Field(True, description="Also write a JSON (serialized) log file")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return level


class AppConfig(BaseModel):
    """Application configuration settings."""
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig, description="Execution configuration")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Storage configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    debug: bool = Field(False, description="Enable debug mode")


# --- Configuration Manager ---

class ConfigManager:
    """Manages the configuration for the Qalam CLI application using TOML."""

    def __init__(self, config_file: Path = CONFIG_FILE):
        """Initializes the ConfigManager with default settings."""
        self._config: AppConfig = AppConfig()
        self.CONFIG_DIR = config_file.parent
        self.CONFIG_FILE = config_file
        self._logger = logger
        self._load_environment()

    def _load_environment(self) -> None:
        """Loads overrides from environment variables and .env file."""
        load_dotenv()  # Load .env file if present

        debug = os.getenv("QALAM_DEBUG")
        if debug is not None:
            self._config.debug = debug.lower() in _TRUE_VALUES

        strict = os.getenv("QALAM_STRICT_VARIABLES")
        if strict is not None:
            self._config.execution.strict_variables = strict.lower() in _TRUE_VALUES

        shell = os.getenv("QALAM_SHELL")
        if shell:
            self._config.execution.shell = shell

        data_dir = os.getenv("QALAM_DATA_DIR")
        if data_dir:
            self._config.storage.data_dir = Path(data_dir).expanduser()

        log_dir = os.getenv("QALAM_LOG_DIR")
        if log_dir:
            self._config.logging.log_dir = Path(log_dir).expanduser()

        log_level = os.getenv("QALAM_LOG_LEVEL")
        if log_level:
            if log_level.upper() in _LOG_LEVELS:
                self._config.logging.level = log_level.upper()
            else:
                self._logger.warning(f"Ignoring unknown QALAM_LOG_LEVEL '{log_level}'")

    def _reset(self) -> None:
        self._config = AppConfig()
        self._load_environment()

    def load_config(self) -> None:
        """Loads configuration from the TOML config file."""
        if not self.CONFIG_FILE.exists():
            self._logger.debug(f"Configuration file not found at '{self.CONFIG_FILE}'. Using defaults.")
            return

        try:
            self._logger.debug(f"Loading configuration from: {self.CONFIG_FILE}")
            with open(self.CONFIG_FILE, "rb") as f:  # TOML requires binary read mode
                config_data = tomllib.load(f)

            # Update configuration with loaded data, using Pydantic validation
            if "execution" in config_data and isinstance(config_data["execution"], dict):
                self._config.execution = ExecutionConfig(**config_data["execution"])

            if "storage" in config_data and isinstance(config_data["storage"], dict):
                # Pydantic will handle Path conversion from string during validation
                self._config.storage = StorageConfig(**config_data["storage"])

            if "logging" in config_data and isinstance(config_data["logging"], dict):
                self._config.logging = LoggingConfig(**config_data["logging"])

            if "debug" in config_data:
                if isinstance(config_data["debug"], bool):
                    self._config.debug = config_data["debug"]
                else:
                    self._logger.warning(
                        f"Invalid type for 'debug' in {self.CONFIG_FILE}. "
                        f"Expected boolean, got {type(config_data['debug'])}. Ignoring."
                    )

            # Environment variables win over the file
            self._load_environment()

        except tomllib.TOMLDecodeError as e:
            self._logger.error(f"Error decoding TOML configuration file ({self.CONFIG_FILE}): {e}")
            self._logger.error("Resetting configuration to default.")
            self._reset()
        except (OSError, ValueError) as e:
            self._logger.error(f"Error reading configuration file ({self.CONFIG_FILE}): {e}")
            self._logger.error("Using default configuration and environment variables.")
            self._reset()

    def save_config(self) -> None:
        """Saves the current configuration to the config file (as TOML)."""
        # TOML has no null, and Path objects need to become strings
        config_dict = self._config.model_dump(mode="json", exclude_none=True)

        self.CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

        with open(self.CONFIG_FILE, "wb") as f:
            tomli_w.dump(config_dict, f)
        self._logger.info(f"Configuration saved to {self.CONFIG_FILE}")

    @property
    def data_dir(self) -> Path:
        """Directory where workflows, commands and tasks are stored."""
        return self._config.storage.data_dir or self.CONFIG_DIR

    @property
    def log_dir(self) -> Path:
        """Directory where log files are written."""
        return self._config.logging.log_dir or self.CONFIG_DIR / "logs"

    @property
    def config(self) -> AppConfig:
        """Provides read-only access to the current application configuration."""
        return self._config


# --- Global Instance ---

# Create a single, globally accessible instance of the ConfigManager
config_manager = ConfigManager()

# Load the configuration from file immediately when this module is imported.
config_manager.load_config()
