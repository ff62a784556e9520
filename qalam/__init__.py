# qalam/__init__.py
"""
Qalam CLI: the pen that never forgets.

Saved shell commands, named command workflows and a priority task queue.
"""

__version__ = '1.0.0'
