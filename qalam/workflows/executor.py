# qalam/workflows/executor.py
"""
Workflow execution engine.

Runs the commands of a workflow either one after another or all at once,
and folds the per-command results into a single ExecutionReport. Command
failures never raise; callers inspect the report's overall status.
"""
import asyncio
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from qalam.core.exceptions import WorkflowDefinitionError, UnresolvedVariableError
from qalam.execution.engine import ProcessRunner, ProcessResult
from qalam.utils.logging import get_logger
from qalam.workflows.models import (
    Workflow,
    CommandOutcome,
    ExecutionReport,
    OutcomeStatus,
    derive_overall_status,
    derive_run_state,
)
from qalam.workflows.substitution import merge_variables, substitute_variables, find_unresolved

logger = get_logger(__name__)

ProgressCallback = Callable[[CommandOutcome, int], None]


class WorkflowExecutor:
    """Executes workflows against the shell and reports the results."""

    def __init__(self, runner: Optional[ProcessRunner] = None, strict_variables: bool = False):
        """
        Initialize the workflow executor.

        Args:
            runner: Process runner used to launch commands
            strict_variables: Refuse to run when ${name} placeholders stay unresolved
        """
        if runner is None:
            from qalam.execution.engine import process_runner
            runner = process_runner
        self._runner = runner
        self._strict_variables = strict_variables
        self._logger = logger

    async def execute(
        self,
        workflow: Workflow,
        variables: Optional[Dict[str, Any]] = None,
        on_progress: Optional[ProgressCallback] = None
    ) -> ExecutionReport:
        """
        Execute a workflow.

        Args:
            workflow: The workflow to run
            variables: Run-time variables, overriding the workflow's defaults
            on_progress: Called with each outcome as sequential runs progress

        Returns:
            The execution report

        Raises:
            WorkflowDefinitionError: If the workflow has no commands
            UnresolvedVariableError: In strict mode, if a placeholder has no value
        """
        if not workflow.commands:
            raise WorkflowDefinitionError(f"Workflow '{workflow.name}' has no commands")

        run_logger = self._logger.with_context(workflow=workflow.name)

        # Snapshot once; every command in this run sees the same variables
        merged = merge_variables(workflow.variables, variables)
        resolved = [substitute_variables(cmd, merged) for cmd in workflow.commands]

        if self._strict_variables:
            for command in resolved:
                missing = find_unresolved(command)
                if missing:
                    raise UnresolvedVariableError(command, missing)

        started = datetime.now()
        mode = "parallel" if workflow.parallel else "sequential"
        run_logger.info(f"Running {len(resolved)} commands ({mode})")

        if workflow.parallel:
            outcomes = await self._run_parallel(resolved)
            halted_early = False
        else:
            outcomes, halted_early = await self._run_sequential(
                resolved, workflow.continue_on_error, on_progress, run_logger
            )

        overall_status = derive_overall_status(outcomes, halted_early)
        report = ExecutionReport(
            workflow=workflow.name,
            overall_status=overall_status,
            outcomes=outcomes,
            halted_early=halted_early,
            parallel=workflow.parallel,
            state=derive_run_state(overall_status, halted_early),
            started=started,
            finished=datetime.now(),
        )

        run_logger.info(
            f"Finished with status {overall_status.value}: "
            f"{len(report.succeeded)} succeeded, {len(report.failed)} failed"
        )
        return report

    async def _run_sequential(
        self,
        commands: List[str],
        continue_on_error: bool,
        on_progress: Optional[ProgressCallback],
        run_logger
    ):
        outcomes: List[CommandOutcome] = []

        for index, command in enumerate(commands):
            outcome = await self._run_command(index, command)
            outcomes.append(outcome)

            if on_progress:
                on_progress(outcome, len(commands))

            if not outcome.succeeded:
                if not continue_on_error:
                    run_logger.warning(f"Command {index + 1} failed, stopping workflow")
                    return outcomes, True
                run_logger.warning(f"Command {index + 1} failed, continuing despite error")

        return outcomes, False

    async def _run_parallel(self, commands: List[str]) -> List[CommandOutcome]:
        # Start everything before awaiting anything
        tasks = [
            asyncio.create_task(self._run_command(index, command))
            for index, command in enumerate(commands)
        ]

        # gather keeps argument order, so outcomes line up with command indexes
        return list(await asyncio.gather(*tasks))

    async def _run_command(self, index: int, command: str) -> CommandOutcome:
        started = time.monotonic()
        try:
            result = await self._runner.run(command)
        except Exception as e:
            self._logger.exception(f"Process layer failed for command {index + 1}: {e}")
            result = ProcessResult("", str(e), -1)
        duration = time.monotonic() - started

        if result.success:
            return CommandOutcome(
                index=index,
                resolved_command=command,
                status=OutcomeStatus.SUCCESS,
                output=result.stdout,
                exit_code=result.return_code,
                duration=duration,
            )

        error_detail = result.stderr.strip() or f"Command exited with status {result.return_code}"
        return CommandOutcome(
            index=index,
            resolved_command=command,
            status=OutcomeStatus.FAILED,
            output=result.stdout,
            error_detail=error_detail,
            exit_code=result.return_code,
            duration=duration,
        )
