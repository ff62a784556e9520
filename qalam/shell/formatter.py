# qalam/shell/formatter.py
"""
Rich terminal formatting for Qalam CLI.

Renders workflows, per-command progress and execution reports.
"""
from enum import Enum
from typing import Optional, Dict, Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.markup import escape
from rich import box

from qalam.utils.logging import get_logger
from qalam.workflows.models import Workflow, CommandOutcome, ExecutionReport, RunStatus
from qalam.workflows.substitution import merge_variables, substitute_variables

logger = get_logger(__name__)

_STATUS_STYLES = {
    RunStatus.SUCCESS: ("green", "Workflow completed successfully"),
    RunStatus.PARTIAL_FAILURE: ("yellow", "Workflow completed with errors"),
    RunStatus.FAILED: ("red", "Workflow failed"),
}


class OutputType(Enum):
    """Streams a command can write to."""
    STDOUT = "stdout"
    STDERR = "stderr"


_OUTPUT_STYLES = {
    OutputType.STDOUT: ("Output", "white"),
    OutputType.STDERR: ("Error", "red"),
}


class TerminalFormatter:
    """Rich terminal formatter for Qalam output."""
    
    def __init__(self, console: Optional[Console] = None):
        """Initialize the terminal formatter."""
        self._console = console or Console()
        self._logger = logger
    
    @property
    def console(self) -> Console:
        return self._console
    
    def print_command(self, command: str, title: Optional[str] = None) -> None:
        """
        Display a command with syntax highlighting.
        
        Args:
            command: The command to display
            title: Optional title for the panel
        """
        title = title or "Command"
        syntax = Syntax(command, "bash", theme="monokai", word_wrap=True)
        self._console.print(Panel(syntax, title=title, expand=False))
    
    def print_output(
        self, 
        output: str, 
        output_type: OutputType = OutputType.STDOUT,
        title: Optional[str] = None
    ) -> None:
        """
        Display command output in a panel.
        
        Args:
            output: The output text
            output_type: Stream the text came from
            title: Optional title for the panel
        """
        if not output:
            return
        
        default_title, border_style = _OUTPUT_STYLES[output_type]
        self._console.print(
            Panel(escape(output.rstrip()), title=title or default_title, border_style=border_style, expand=False)
        )
    
    def display_workflow(
        self,
        workflow: Workflow,
        variables: Optional[Dict[str, Any]] = None,
        resolve: bool = False
    ) -> None:
        """
        Display a workflow with rich formatting.
        
        Args:
            workflow: The workflow to display
            variables: Optional run-time variables merged over the stored defaults
            resolve: Show commands as they will run instead of as templates
        """
        merged = merge_variables(workflow.variables, variables)
        
        table = Table(title=f"Workflow: {workflow.name}", box=box.ROUNDED)
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Command", style="green")
        
        for i, command in enumerate(workflow.commands):
            table.add_row(str(i + 1), escape(substitute_variables(command, merged) if resolve else command))
        
        details = [
            escape(workflow.description) if workflow.description else "[dim]No description[/dim]",
            "",
            f"Mode: {'parallel' if workflow.parallel else 'sequential'}",
            f"Continue on error: {'yes' if workflow.continue_on_error else 'no'}",
            f"Executed: {workflow.execution_count} times",
        ]
        if workflow.last_executed:
            details.append(f"Last run: {workflow.last_executed.strftime('%Y-%m-%d %H:%M:%S')}")
        
        self._console.print(Panel("\n".join(details), title=f"Workflow: {workflow.name}", border_style="blue"))
        self._console.print(table)
        
        if merged:
            var_table = Table(title="Variables", box=box.SIMPLE)
            var_table.add_column("Name", style="cyan")
            var_table.add_column("Value", style="green")
            for var_name, var_value in merged.items():
                var_table.add_row(escape(var_name), escape(var_value))
            self._console.print(var_table)
    
    def print_progress(self, outcome: CommandOutcome, total: int, show_output: bool = True) -> None:
        """Print one line per finished command of a sequential run."""
        position = f"[{outcome.index + 1}/{total}]"
        if outcome.succeeded:
            self._console.print(f"[green]✓[/green] {position} {escape(outcome.resolved_command)}", highlight=False)
            if show_output and outcome.output.strip():
                self._console.print(f"[dim]{escape(outcome.output.rstrip())}[/dim]", highlight=False)
        else:
            self._console.print(f"[red]✗[/red] {position} {escape(outcome.resolved_command)}", highlight=False)
            self._console.print(f"  [red]Error:[/red] {escape(outcome.error_detail or '')}", highlight=False)
    
    def print_report(self, report: ExecutionReport, show_outcomes: bool = True) -> None:
        """
        Display the result of a workflow run.
        
        Args:
            report: The execution report
            show_outcomes: Whether to include the per-command table
        """
        if show_outcomes:
            table = Table(title=f"Results: {report.workflow}", box=box.ROUNDED)
            table.add_column("#", style="cyan", no_wrap=True)
            table.add_column("Command", style="white")
            table.add_column("Status", no_wrap=True)
            table.add_column("Time", justify="right")
            table.add_column("Details", style="dim")
            
            for outcome in report.outcomes:
                status = "[green]success[/green]" if outcome.succeeded else "[red]failed[/red]"
                details = outcome.output.strip() if outcome.succeeded else (outcome.error_detail or "")
                table.add_row(
                    str(outcome.index + 1),
                    escape(outcome.resolved_command),
                    status,
                    f"{outcome.duration:.2f}s",
                    escape(details),
                )
            self._console.print(table)
        
        style, message = _STATUS_STYLES[report.overall_status]
        summary = f"{len(report.succeeded)} succeeded, {len(report.failed)} failed"
        if report.halted_early:
            summary += ", stopped at the first failure"
        self._console.print(f"[bold {style}]{message}[/bold {style}] ({summary})")


# Global terminal formatter instance
terminal_formatter = TerminalFormatter()
