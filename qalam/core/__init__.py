# qalam/core/__init__.py
"""
Core infrastructure for Qalam CLI.

Shared exception types used by every Qalam component.
"""
from qalam.core.exceptions import (
    QalamError,
    WorkflowError,
    WorkflowDefinitionError,
    WorkflowNotFoundError,
    WorkflowImportError,
    UnresolvedVariableError,
    CommandNotFoundError,
    TaskNotFoundError,
)

__all__ = [
    'QalamError',
    'WorkflowError',
    'WorkflowDefinitionError',
    'WorkflowNotFoundError',
    'WorkflowImportError',
    'UnresolvedVariableError',
    'CommandNotFoundError',
    'TaskNotFoundError',
]
