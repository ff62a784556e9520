"""
Workflow management for Qalam CLI.

This module handles user-defined workflows - reusable sequences
of commands that can be invoked by name.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from qalam.config import config_manager
from qalam.constants import WORKFLOWS_FILENAME
from qalam.core.exceptions import WorkflowDefinitionError, WorkflowNotFoundError
from qalam.utils.logging import get_logger
from qalam.workflows.executor import WorkflowExecutor, ProgressCallback
from qalam.workflows.models import Workflow, ExecutionReport

logger = get_logger(__name__)


class WorkflowManager:
    """
    Manager for user-defined workflows.

    This class handles:
    1. Storing and retrieving workflows
    2. Executing workflows with variable substitution
    3. Listing, searching and duplicating workflows
    4. Tracking how often each workflow runs
    """

    def __init__(
        self,
        storage_file: Optional[Path] = None,
        executor: Optional[WorkflowExecutor] = None
    ):
        """
        Initialize the workflow manager.

        Args:
            storage_file: JSON file holding the workflows
            executor: Executor used for runs (built from the configuration when None)
        """
        self._workflows: Dict[str, Workflow] = {}
        self._workflow_file = storage_file or config_manager.data_dir / WORKFLOWS_FILENAME
        self._executor = executor or WorkflowExecutor(
            strict_variables=config_manager.config.execution.strict_variables
        )
        self._logger = logger
        self._load_workflows()

    def _load_workflows(self) -> None:
        """Load workflows from the storage file."""
        if not self._workflow_file.exists():
            self._logger.debug("No workflows file found, starting with empty workflows")
            return

        try:
            with open(self._workflow_file, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.error(f"Error loading workflows from {self._workflow_file}: {e}")
            return

        for workflow_data in data:
            try:
                workflow = Workflow.model_validate(workflow_data)
                self._workflows[workflow.name] = workflow
            except ValidationError as e:
                self._logger.error(f"Skipping invalid workflow entry: {e}")

        self._logger.debug(f"Loaded {len(self._workflows)} workflows")

    def _save_workflows(self) -> None:
        """Save workflows to the storage file."""
        self._workflow_file.parent.mkdir(parents=True, exist_ok=True)

        data = [workflow.model_dump(mode="json") for workflow in self._workflows.values()]

        with open(self._workflow_file, "w") as f:
            json.dump(data, f, indent=2)

        self._logger.debug(f"Saved {len(self._workflows)} workflows")

    def save_workflow(
        self,
        name: str,
        commands: List[str],
        description: str = "",
        parallel: bool = False,
        continue_on_error: bool = False,
        variables: Optional[Dict[str, str]] = None
    ) -> Workflow:
        """
        Define a new workflow or replace an existing one.

        Replacing keeps the run statistics and creation time.

        Args:
            name: Unique name for the workflow
            commands: Ordered command templates
            description: Human-readable description
            parallel: Run the commands concurrently
            continue_on_error: Keep going after a failure (sequential only)
            variables: Default variable values

        Returns:
            The saved Workflow

        Raises:
            WorkflowDefinitionError: If the name or the command list is empty
        """
        if not name or not name.strip():
            raise WorkflowDefinitionError("Workflow name is required")
        if isinstance(commands, str):
            commands = [commands]
        commands = [cmd for cmd in commands if cmd and cmd.strip()]
        if not commands:
            raise WorkflowDefinitionError(f"Workflow '{name}' must have at least one command")

        existing = self._workflows.get(name)
        workflow = Workflow(
            name=name,
            description=description or "",
            commands=commands,
            parallel=parallel,
            continue_on_error=continue_on_error,
            variables=dict(variables or {}),
        )
        if existing:
            workflow.created = existing.created
            workflow.execution_count = existing.execution_count
            workflow.last_executed = existing.last_executed
            self._logger.info(f"Updated workflow: {name}")
        else:
            self._logger.info(f"Created new workflow: {name}")

        self._workflows[name] = workflow
        self._save_workflows()

        return workflow

    def get_workflow(self, name: str) -> Optional[Workflow]:
        """
        Get a workflow by name.

        Args:
            name: Name of the workflow to retrieve

        Returns:
            The Workflow if found, None otherwise
        """
        return self._workflows.get(name)

    def list_workflows(self) -> List[Workflow]:
        """List all workflows, most recently modified first."""
        return sorted(self._workflows.values(), key=lambda w: w.modified, reverse=True)

    def search_workflows(self, query: str) -> List[Workflow]:
        """
        Search for workflows by name or description.

        Args:
            query: Search query

        Returns:
            Matching Workflows, most used first
        """
        query_lower = query.lower()
        results = [
            w for w in self._workflows.values()
            if query_lower in w.name.lower() or query_lower in w.description.lower()
        ]
        return sorted(results, key=lambda w: (w.execution_count, w.modified), reverse=True)

    def delete_workflow(self, name: str) -> bool:
        """
        Delete a workflow by name.

        Args:
            name: Name of the workflow to delete

        Returns:
            True if deleted, False if not found
        """
        if name not in self._workflows:
            return False

        del self._workflows[name]
        self._save_workflows()
        self._logger.info(f"Deleted workflow: {name}")
        return True

    def duplicate_workflow(
        self,
        source: str,
        target: str,
        description: Optional[str] = None,
        parallel: Optional[bool] = None,
        continue_on_error: Optional[bool] = None,
        variables: Optional[Dict[str, str]] = None
    ) -> Workflow:
        """
        Copy a workflow under a new name, optionally changing its options.

        Options left as None are taken from the source workflow.
        """
        original = self.get_workflow(source)
        if not original:
            raise WorkflowNotFoundError(source)

        return self.save_workflow(
            target,
            list(original.commands),
            description=original.description if description is None else description,
            parallel=original.parallel if parallel is None else parallel,
            continue_on_error=original.continue_on_error if continue_on_error is None else continue_on_error,
            variables=dict(original.variables) if variables is None else variables,
        )

    def record_execution(self, name: str) -> Workflow:
        """Bump the run statistics of a workflow."""
        workflow = self.get_workflow(name)
        if not workflow:
            raise WorkflowNotFoundError(name)

        workflow.execution_count += 1
        workflow.last_executed = datetime.now()
        self._save_workflows()
        return workflow

    async def run_workflow(
        self,
        name: str,
        variables: Optional[Dict[str, Any]] = None,
        on_progress: Optional[ProgressCallback] = None
    ) -> ExecutionReport:
        """
        Execute a workflow and record the run.

        Args:
            name: Name of the workflow to execute
            variables: Run-time variables overriding the stored defaults
            on_progress: Progress callback for sequential runs

        Returns:
            The execution report

        Raises:
            WorkflowNotFoundError: If no workflow has this name
        """
        workflow = self.get_workflow(name)
        if not workflow:
            raise WorkflowNotFoundError(name)

        # Run against a copy so concurrent edits cannot change this run
        snapshot = workflow.model_copy(deep=True)
        report = await self._executor.execute(snapshot, variables, on_progress=on_progress)

        self.record_execution(name)
        return report


# Global workflow manager instance
workflow_manager = WorkflowManager()
