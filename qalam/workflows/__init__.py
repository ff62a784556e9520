"""
Workflow management for Qalam CLI.

This package handles creating, storing, and executing user-defined
workflows - named sequences of shell commands that run one after another
or all at once.
"""

from qalam.workflows.models import (
    Workflow,
    CommandOutcome,
    ExecutionReport,
    OutcomeStatus,
    RunStatus,
    RunState,
)
from qalam.workflows.substitution import merge_variables, substitute_variables
from qalam.workflows.executor import WorkflowExecutor
from qalam.workflows.manager import WorkflowManager, workflow_manager
