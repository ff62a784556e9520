# qalam/cli/workflows.py
"""
Workflow management commands for Qalam CLI.

This module provides CLI commands for creating, running, and managing workflows.
"""
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.prompt import Confirm

from qalam.config import config_manager
from qalam.core.exceptions import QalamError
from qalam.cli.utils import parse_vars, run_async
from qalam.shell.formatter import terminal_formatter
from qalam.utils.logging import get_logger
from qalam.workflows.manager import workflow_manager
from qalam.workflows.models import RunStatus
from qalam.workflows.sharing import WorkflowSharingManager

logger = get_logger(__name__)
console = Console()

# Create the workflow commands app
app = typer.Typer(help="Manage and execute workflows")


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    sys.exit(1)


@app.command("create")
def create_workflow(
    name: str = typer.Argument(..., help="Name for the workflow"),
    commands: List[str] = typer.Argument(..., help="Shell commands, in order"),
    description: str = typer.Option(
        "", "--description", "-d", help="Description of the workflow"
    ),
    parallel: bool = typer.Option(
        False, "--parallel", "-p", help="Run commands in parallel"
    ),
    continue_on_error: bool = typer.Option(
        False, "--continue", "-c", help="Continue on error"
    ),
    variables: List[str] = typer.Option(
        [], "--vars", "-v", help="Default variables as key=value[,key2=value2]"
    ),
):
    """Create or replace a workflow."""
    try:
        workflow = workflow_manager.save_workflow(
            name,
            commands,
            description=description,
            parallel=parallel,
            continue_on_error=continue_on_error,
            variables=parse_vars(variables, console),
        )
    except QalamError as e:
        _fail(str(e))
    except Exception as e:
        logger.exception(f"Error creating workflow: {str(e)}")
        _fail(str(e))

    console.print(
        f"[bold green]✓[/bold green] Workflow '{workflow.name}' saved with {len(workflow.commands)} commands"
    )
    console.print(f"Run it with: [bold cyan]qalam workflow run {workflow.name}[/bold cyan]")


@app.command("run")
def run_workflow(
    name: str = typer.Argument(..., help="Name of the workflow to run"),
    variables: List[str] = typer.Option(
        [], "--vars", "-v", help="Variable values as key=value[,key2=value2]"
    ),
    confirm: bool = typer.Option(
        False, "--confirm", help="Show the resolved commands and ask before running"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show the resolved commands without running them"
    ),
):
    """Run a workflow."""
    workflow = workflow_manager.get_workflow(name)
    if not workflow:
        console.print(f"[bold red]Error:[/bold red] Workflow '{name}' not found.")
        available = workflow_manager.list_workflows()
        if available:
            console.print("\nAvailable workflows:")
            for w in available:
                console.print(f"  - {w.name}")
        sys.exit(1)

    run_vars = parse_vars(variables, console)

    if dry_run:
        terminal_formatter.display_workflow(workflow, run_vars, resolve=True)
        console.print("[yellow]Dry run: no commands were executed.[/yellow]")
        return

    if confirm:
        terminal_formatter.display_workflow(workflow, run_vars, resolve=True)
        if not Confirm.ask("Execute this workflow?", default=True):
            console.print("Workflow execution cancelled.")
            return

    stream_output = config_manager.config.execution.stream_output
    mode = "in parallel" if workflow.parallel else "sequentially"
    console.print(f"[blue]Executing workflow: {name}[/blue] ({len(workflow.commands)} commands {mode})")

    def on_progress(outcome, total):
        terminal_formatter.print_progress(outcome, total, show_output=stream_output)

    try:
        if workflow.parallel:
            with console.status(f"Running {len(workflow.commands)} commands in parallel..."):
                report = run_async(workflow_manager.run_workflow(name, run_vars))
        else:
            report = run_async(workflow_manager.run_workflow(name, run_vars, on_progress=on_progress))
    except QalamError as e:
        _fail(str(e))
    except Exception as e:
        logger.exception(f"Error running workflow: {str(e)}")
        _fail(str(e))

    # Sequential runs already printed every command as it finished
    terminal_formatter.print_report(report, show_outcomes=workflow.parallel)

    if report.overall_status != RunStatus.SUCCESS:
        sys.exit(1)


@app.command("list")
def list_workflows():
    """List saved workflows."""
    workflows = workflow_manager.list_workflows()
    if not workflows:
        console.print("No workflows defined yet. Use 'qalam workflow create' to define one.")
        return

    table = Table(title="Available Workflows")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Commands", style="magenta", justify="right")
    table.add_column("Mode", style="blue")
    table.add_column("Runs", justify="right")
    table.add_column("Last Run", style="green")

    for workflow in workflows:
        table.add_row(
            workflow.name,
            workflow.description,
            str(len(workflow.commands)),
            "parallel" if workflow.parallel else "sequential",
            str(workflow.execution_count),
            workflow.last_executed.strftime("%Y-%m-%d %H:%M") if workflow.last_executed else "-",
        )

    console.print(table)


@app.command("show")
def show_workflow(
    name: str = typer.Argument(..., help="Name of the workflow to show"),
):
    """Show details of a workflow."""
    workflow = workflow_manager.get_workflow(name)
    if not workflow:
        _fail(f"Workflow '{name}' not found.")

    terminal_formatter.display_workflow(workflow)


@app.command("remove")
def remove_workflow(
    name: str = typer.Argument(..., help="Name of the workflow to remove"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Remove without confirmation"
    ),
):
    """Remove a workflow."""
    if not workflow_manager.get_workflow(name):
        _fail(f"Workflow '{name}' not found.")

    if not force and not Confirm.ask(f"Are you sure you want to remove workflow '{name}'?", default=False):
        console.print("Removal cancelled.")
        return

    workflow_manager.delete_workflow(name)
    console.print(f"[bold green]✓[/bold green] Workflow '{name}' removed")


@app.command("search")
def search_workflows(
    query: str = typer.Argument(..., help="Text to look for in names and descriptions"),
):
    """Search workflows."""
    workflows = workflow_manager.search_workflows(query)
    if not workflows:
        console.print(f"No workflows found matching '{query}'")
        return

    table = Table(title=f"Workflows matching '{query}'")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Commands", style="magenta", justify="right")
    for workflow in workflows:
        table.add_row(workflow.name, workflow.description, str(len(workflow.commands)))
    console.print(table)


@app.command("duplicate")
def duplicate_workflow(
    source: str = typer.Argument(..., help="Workflow to copy"),
    target: str = typer.Argument(..., help="Name of the copy"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Description for the copy"
    ),
    parallel: Optional[bool] = typer.Option(
        None, "--parallel/--sequential", help="Override the execution mode"
    ),
    continue_on_error: Optional[bool] = typer.Option(
        None, "--continue/--stop", help="Override the error policy"
    ),
    variables: List[str] = typer.Option(
        [], "--vars", "-v", help="Replace the default variables"
    ),
):
    """Copy a workflow under a new name."""
    try:
        workflow = workflow_manager.duplicate_workflow(
            source,
            target,
            description=description,
            parallel=parallel,
            continue_on_error=continue_on_error,
            variables=parse_vars(variables, console) if variables else None,
        )
    except QalamError as e:
        _fail(str(e))

    console.print(f"[bold green]✓[/bold green] Workflow '{source}' duplicated as '{workflow.name}'")


@app.command("export")
def export_workflow(
    name: str = typer.Argument(..., help="Name of the workflow to export"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output path for the exported workflow"
    ),
):
    """Export a workflow to a JSON file."""
    try:
        path = WorkflowSharingManager(workflow_manager).export_workflow(name, output)
    except QalamError as e:
        _fail(str(e))
    except OSError as e:
        logger.exception(f"Error exporting workflow: {str(e)}")
        _fail(str(e))

    console.print(f"[bold green]✓[/bold green] Workflow exported to {path}")


@app.command("import")
def import_workflow(
    path: Path = typer.Argument(..., help="Path to the exported workflow file"),
    rename: Optional[str] = typer.Option(
        None, "--rename", "-r", help="New name for the imported workflow"
    ),
):
    """Import a workflow from a JSON file."""
    try:
        workflow = WorkflowSharingManager(workflow_manager).import_workflow(path, rename=rename)
    except QalamError as e:
        _fail(str(e))

    console.print(
        f"[bold green]✓[/bold green] Workflow '{workflow.name}' imported with {len(workflow.commands)} commands"
    )
