# qalam/core/exceptions.py
"""
Exception hierarchy for Qalam CLI.

Only structural problems are raised. The outcome of a shell command is never
an exception: it is recorded in the execution report.
"""
from typing import List


class QalamError(Exception):
    """Base class for all Qalam errors."""


class WorkflowError(QalamError):
    """Base class for workflow errors."""


class WorkflowDefinitionError(WorkflowError):
    """Raised when a workflow definition is structurally invalid."""


class WorkflowNotFoundError(WorkflowError):
    """Raised when a workflow is requested by a name that does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Workflow '{name}' not found")


class WorkflowImportError(WorkflowError):
    """Raised when an exported workflow file cannot be imported."""


class UnresolvedVariableError(WorkflowError):
    """Raised in strict mode when a command still contains placeholders."""

    def __init__(self, command: str, names: List[str]):
        self.command = command
        self.names = names
        super().__init__(
            f"Unresolved variables {', '.join(names)} in command: {command}"
        )


class CommandNotFoundError(QalamError):
    """Raised when a saved command does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Command '{name}' not found")


class TaskNotFoundError(QalamError):
    """Raised when a task cannot be located in the queue."""
