# qalam/utils/__init__.py
"""
Utility functions for Qalam CLI.

This package provides common utilities like logging setup and the
context-aware logger used throughout the application.
"""

from .logging import setup_logging, get_logger

__all__ = ['setup_logging', 'get_logger']
