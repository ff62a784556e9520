# qalam/workflows/models.py
"""
Data models for workflows and their execution results.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Workflow(BaseModel):
    """Model for a user-defined workflow."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Unique name for the workflow")
    description: str = Field("", description="Human-readable description")
    commands: List[str] = Field(..., description="Ordered shell command templates")
    parallel: bool = Field(False, description="Run all commands concurrently")
    continue_on_error: bool = Field(
        False, alias="continueOnError", description="Keep going after a failed command (sequential mode only)"
    )
    variables: Dict[str, str] = Field(default_factory=dict, description="Default variable values")
    execution_count: int = Field(0, description="Number of completed runs")
    last_executed: Optional[datetime] = Field(None, description="When the workflow last ran")
    created: datetime = Field(default_factory=datetime.now, description="When the workflow was created")
    modified: datetime = Field(default_factory=datetime.now, description="When the workflow was last modified")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("workflow name must not be empty")
        return value

    @field_validator("variables", mode="before")
    @classmethod
    def _stringify_variables(cls, value):
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value


class OutcomeStatus(str, Enum):
    """Result of a single command."""
    SUCCESS = "success"
    FAILED = "failed"


class RunStatus(str, Enum):
    """Aggregate result of a workflow run."""
    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FAILED = "failed"


class RunState(str, Enum):
    """Lifecycle of a single run."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    ABORTED = "aborted"


class CommandOutcome(BaseModel):
    """Recorded result of one command within one run."""
    index: int = Field(..., description="Position in the workflow's command list")
    resolved_command: str = Field(..., description="Command after variable substitution")
    status: OutcomeStatus
    output: str = Field("", description="Captured standard output")
    error_detail: Optional[str] = Field(None, description="Diagnostic text, only set on failure")
    exit_code: Optional[int] = None
    duration: float = Field(0.0, description="Wall-clock seconds")

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS


class ExecutionReport(BaseModel):
    """Everything the caller needs to know about a finished run."""
    workflow: str
    overall_status: RunStatus
    outcomes: List[CommandOutcome] = Field(default_factory=list)
    halted_early: bool = False
    parallel: bool = False
    state: RunState = RunState.COMPLETED
    started: datetime = Field(default_factory=datetime.now)
    finished: datetime = Field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        return self.overall_status == RunStatus.SUCCESS

    @property
    def succeeded(self) -> List[CommandOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[CommandOutcome]:
        return [o for o in self.outcomes if not o.succeeded]


def derive_overall_status(outcomes: List[CommandOutcome], halted_early: bool) -> RunStatus:
    """
    Collapse per-command outcomes into one run status.

    A halted run is always FAILED, even when earlier commands succeeded.
    """
    failures = sum(1 for o in outcomes if not o.succeeded)

    if halted_early or (outcomes and failures == len(outcomes)):
        return RunStatus.FAILED
    if failures:
        return RunStatus.PARTIAL_FAILURE
    return RunStatus.SUCCESS


def derive_run_state(status: RunStatus, halted_early: bool) -> RunState:
    if halted_early:
        return RunState.ABORTED
    if status == RunStatus.SUCCESS:
        return RunState.COMPLETED
    return RunState.COMPLETED_WITH_ERRORS
