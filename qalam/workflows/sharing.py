# qalam/workflows/sharing.py
"""
Workflow export and import.

Exported workflows are plain JSON documents that can be committed to a
repository or handed to a colleague and imported on another machine.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from qalam.constants import EXPORT_FORMAT_VERSION, EXPORT_FILE_SUFFIX
from qalam.core.exceptions import WorkflowDefinitionError, WorkflowImportError, WorkflowNotFoundError
from qalam.utils.logging import get_logger
from qalam.workflows.manager import WorkflowManager
from qalam.workflows.models import Workflow

logger = get_logger(__name__)


class WorkflowExport(BaseModel):
    """On-disk shape of an exported workflow."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Name of the workflow")
    description: str = Field("", description="Description of the workflow")
    commands: List[str] = Field(..., description="Ordered command templates")
    parallel: bool = False
    continue_on_error: bool = Field(False, alias="continueOnError")
    variables: Dict[str, str] = Field(default_factory=dict)
    version: str = Field(EXPORT_FORMAT_VERSION, description="Export format version")
    exported: str = Field(default_factory=lambda: datetime.now().isoformat(), description="Export timestamp")

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value):
        return value or ""

    @field_validator("variables", mode="before")
    @classmethod
    def _stringify_variables(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value


class WorkflowSharingManager:
    """Manager for workflow importing and exporting."""

    def __init__(self, workflow_manager: Optional[WorkflowManager] = None):
        """
        Initialize the workflow sharing manager.

        Args:
            workflow_manager: Optional workflow manager instance (for testing)
        """
        if workflow_manager is None:
            from qalam.workflows.manager import workflow_manager
        self._workflow_manager = workflow_manager
        self._logger = logger

    def export_workflow(self, workflow_name: str, output_path: Optional[Path] = None) -> Path:
        """
        Export a workflow to a JSON file.

        Args:
            workflow_name: Name of the workflow to export
            output_path: Destination file, <name>-workflow.json in the current directory by default

        Returns:
            Path of the written file
        """
        workflow = self._workflow_manager.get_workflow(workflow_name)
        if not workflow:
            raise WorkflowNotFoundError(workflow_name)

        export = WorkflowExport(
            name=workflow.name,
            description=workflow.description,
            commands=list(workflow.commands),
            parallel=workflow.parallel,
            continue_on_error=workflow.continue_on_error,
            variables=dict(workflow.variables),
        )

        destination = output_path or Path.cwd() / f"{workflow.name}{EXPORT_FILE_SUFFIX}"
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(destination, "w") as f:
            json.dump(export.model_dump(by_alias=True), f, indent=2)

        self._logger.info(f"Exported workflow {workflow.name} to {destination}")
        return destination

    def import_workflow(self, workflow_path: Path, rename: Optional[str] = None) -> Workflow:
        """
        Import a workflow from an exported JSON file.

        An existing workflow with the same name is replaced.

        Args:
            workflow_path: File produced by export_workflow
            rename: Optional new name for the imported workflow

        Returns:
            The saved Workflow
        """
        try:
            with open(workflow_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise WorkflowImportError(f"Import failed: {e}") from e

        if not isinstance(data, dict) or not data.get("name") or not data.get("commands"):
            raise WorkflowImportError("Import failed: invalid workflow file format")

        try:
            export = WorkflowExport.model_validate(data)
        except ValidationError as e:
            raise WorkflowImportError(f"Import failed: {e}") from e

        if export.version != EXPORT_FORMAT_VERSION:
            self._logger.warning(
                f"Workflow file version {export.version} differs from {EXPORT_FORMAT_VERSION}, importing anyway"
            )

        try:
            workflow = self._workflow_manager.save_workflow(
                rename or export.name,
                export.commands,
                description=export.description,
                parallel=export.parallel,
                continue_on_error=export.continue_on_error,
                variables=export.variables,
            )
        except WorkflowDefinitionError as e:
            raise WorkflowImportError(f"Import failed: {e}") from e

        self._logger.info(f"Imported workflow {workflow.name} from {workflow_path}")
        return workflow
