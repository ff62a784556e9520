"""
Saved command memory for Qalam CLI.
"""
from qalam.memory.commands import SavedCommand, CommandMemory, command_memory

__all__ = ['SavedCommand', 'CommandMemory', 'command_memory']
