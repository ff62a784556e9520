# qalam/utils/logging.py
"""
Logging configuration for Qalam CLI.

Sinks are driven by the [logging] table of the configuration file and the
QALAM_DEBUG / QALAM_LOG_DIR / QALAM_LOG_LEVEL environment variables.
"""
import sys
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger
from qalam.constants import LOG_FORMAT, LOG_ROTATION, LOG_RETENTION
from qalam.utils.enhanced_logging import ContextLogger

# Dictionary to store logger instances by module name
_context_loggers: Dict[str, ContextLogger] = {}


def _file_sink_options(level: str) -> dict:
    return {
        "level": level,
        "rotation": LOG_ROTATION,
        "retention": LOG_RETENTION,
        "compression": "zip",
    }


def setup_logging(debug: Optional[bool] = None, settings=None, log_dir: Optional[Path] = None) -> List[Path]:
    """
    Configure the application logging.

    The console only shows warnings unless debug is on, because commands
    print their own results with rich.

    Args:
        debug: Force debug output on or off; the configured value when None
        settings: LoggingConfig to use instead of the global configuration
        log_dir: Directory for log files instead of the configured one

    Returns:
        The log files that were attached
    """
    from qalam.config import config_manager

    if debug is None:
        debug = config_manager.config.debug
    settings = settings or config_manager.config.logging
    log_dir = log_dir or config_manager.log_dir

    logger.remove()
    logger.configure(extra={"name": "qalam"})

    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level="DEBUG" if debug else "WARNING",
        diagnose=debug,  # Include variable values in traceback if debug is True
    )

    if not settings.file_logging:
        logger.bind(name=__name__).debug("File logging disabled")
        return []

    log_dir.mkdir(parents=True, exist_ok=True)
    file_level = "DEBUG" if debug else settings.level
    log_files = [log_dir / "qalam.log"]
    logger.add(log_files[0], format=LOG_FORMAT, **_file_sink_options(file_level))

    if settings.structured:
        log_files.append(log_dir / "qalam_structured.log")
        logger.add(log_files[1], serialize=True, **_file_sink_options(file_level))

    logger.bind(name=__name__).debug(f"Logging initialized. Log files: {', '.join(map(str, log_files))}")
    return log_files


def get_logger(name: str = "qalam") -> ContextLogger:
    """
    Get a logger instance with the given name.

    Args:
        name: The name for the logger.

    Returns:
        A context-aware logger instance.
    """
    if name not in _context_loggers:
        _context_loggers[name] = ContextLogger(name)
    return _context_loggers[name]
