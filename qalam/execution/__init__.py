# qalam/execution/__init__.py
"""
Execution components for Qalam CLI.

This package launches shell commands and schedules deferred cleanup actions.
"""
from .engine import process_runner, ProcessRunner, ProcessResult
from .cleanup import cleanup_scheduler, CleanupScheduler, parse_duration

__all__ = [
    'process_runner',
    'ProcessRunner',
    'ProcessResult',
    'cleanup_scheduler',
    'CleanupScheduler',
    'parse_duration',
]
