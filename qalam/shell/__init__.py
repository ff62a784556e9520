# qalam/shell/__init__.py
"""
Terminal formatting for Qalam CLI.
"""

from .formatter import terminal_formatter, TerminalFormatter, OutputType

__all__ = ['terminal_formatter', 'TerminalFormatter', 'OutputType']
