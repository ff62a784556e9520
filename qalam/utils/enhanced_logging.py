# qalam/utils/enhanced_logging.py
from typing import Dict, Any

from loguru import logger as _root_logger


class ContextLogger:
    """Logger that carries a module name and extra context fields on every record."""
    
    def __init__(self, name: str, context: Dict[str, Any] = None):
        self._name = name
        self._context: Dict[str, Any] = dict(context or {})
        self._logger = _root_logger.bind(name=name, **self._context)
    
    def with_context(self, **context) -> 'ContextLogger':
        """Create a new logger with added context."""
        return ContextLogger(self._name, {**self._context, **context})
    
    def _message(self, msg: str) -> str:
        if not self._context:
            return msg
        fields = " ".join(f"{key}={value}" for key, value in self._context.items())
        return f"[{fields}] {msg}"
    
    # opt(depth=1) reports the caller's location instead of this wrapper's
    def debug(self, msg: str) -> None:
        self._logger.opt(depth=1).debug(self._message(msg))
    
    def info(self, msg: str) -> None:
        self._logger.opt(depth=1).info(self._message(msg))
    
    def warning(self, msg: str) -> None:
        self._logger.opt(depth=1).warning(self._message(msg))
    
    def error(self, msg: str) -> None:
        self._logger.opt(depth=1).error(self._message(msg))
    
    def critical(self, msg: str) -> None:
        self._logger.opt(depth=1).critical(self._message(msg))
    
    def exception(self, msg: str) -> None:
        """Log an error with the active exception's traceback attached."""
        self._logger.opt(depth=1, exception=True).error(self._message(msg))

    @property
    def name(self) -> str:
        """Get the logger name."""
        return self._name
    
    @property
    def context(self) -> Dict[str, Any]:
        """Get a copy of the bound context."""
        return dict(self._context)
