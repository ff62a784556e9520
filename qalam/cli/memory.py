# qalam/cli/memory.py
"""
Saved command ("memory") commands for Qalam CLI.
"""
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from qalam.core.exceptions import QalamError
from qalam.cli.utils import run_async
from qalam.memory.commands import command_memory
from qalam.shell.formatter import terminal_formatter, OutputType
from qalam.utils.logging import get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(help="Save and recall commands")


def _commands_table(commands, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Command", style="green")
    table.add_column("Description", style="white")
    table.add_column("Tags", style="blue")
    table.add_column("Uses", justify="right")
    for saved in commands:
        table.add_row(saved.name, saved.command, saved.description, ", ".join(saved.tags), str(saved.usage_count))
    return table


@app.command("save")
def save_command(
    name: str = typer.Argument(..., help="Name to save the command under"),
    command: str = typer.Argument(..., help="The command, quoted"),
    description: str = typer.Option("", "--description", "-d", help="What the command does"),
    tags: Optional[str] = typer.Option(None, "--tags", "-t", help="Comma separated tags"),
    expires: Optional[str] = typer.Option(
        None, "--expires", "-e", help="Make the command temporary, e.g. 30m or 2h"
    ),
):
    """Save a command."""
    try:
        saved = command_memory.save(name, command, description, tags.split(",") if tags else None, expires=expires)
    except (QalamError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)
    console.print(f"[bold green]✓[/bold green] Command '{name}' saved")
    if saved.expires:
        console.print(f"[dim]Expires at {saved.expires.strftime('%Y-%m-%d %H:%M')}[/dim]")


@app.command("get")
def get_command(name: str = typer.Argument(..., help="Name of the saved command")):
    """Show a saved command."""
    try:
        saved = command_memory.get(name)
    except QalamError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)
    terminal_formatter.print_command(saved.command, title=saved.name)
    if saved.description:
        console.print(saved.description)


@app.command("run")
def run_command(
    name: str = typer.Argument(..., help="Name of the saved command"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the command without running it"),
):
    """Run a saved command."""
    try:
        result = run_async(command_memory.run(name, dry_run=dry_run))
    except QalamError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)

    if result.stdout.strip():
        terminal_formatter.print_output(result.stdout, OutputType.STDOUT)
    if not result.success:
        terminal_formatter.print_output(
            result.stderr or f"Command exited with status {result.return_code}", OutputType.STDERR
        )
        sys.exit(result.return_code if result.return_code > 0 else 1)


@app.command("list")
def list_commands(limit: int = typer.Option(50, "--limit", "-n", help="Maximum number of commands")):
    """List saved commands."""
    commands = command_memory.list(limit)
    if not commands:
        console.print("No saved commands yet. Use 'qalam memory save' to add one.")
        return
    console.print(_commands_table(commands, "Saved Commands"))


@app.command("search")
def search_commands(query: List[str] = typer.Argument(..., help="Search text")):
    """Search saved commands."""
    text = " ".join(query)
    commands = command_memory.search(text)
    if not commands:
        console.print(f"No commands found matching '{text}'")
        return
    console.print(_commands_table(commands, f"Commands matching '{text}'"))


@app.command("delete")
def delete_command(name: str = typer.Argument(..., help="Name of the saved command")):
    """Delete a saved command."""
    if not command_memory.delete(name):
        console.print(f"[bold red]Error:[/bold red] Command '{name}' not found")
        sys.exit(1)
    console.print(f"[bold green]✓[/bold green] Command '{name}' deleted")


@app.command("stats")
def show_stats():
    """Show usage statistics."""
    stats = command_memory.stats()
    console.print(f"Saved commands: {stats['total_commands']}")
    console.print(f"Total recalls: {stats['total_uses']}")
    if stats["most_used"]:
        console.print(f"Most used: [cyan]{stats['most_used']}[/cyan]")


@app.command("export")
def export_commands(
    path: Path = typer.Argument(Path("qalam-commands.json"), help="Destination file"),
):
    """Export saved commands to a JSON file."""
    try:
        count = command_memory.export(path)
    except OSError as e:
        logger.exception(f"Error exporting commands: {str(e)}")
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)
    console.print(f"[bold green]✓[/bold green] Exported {count} commands to {path}")


@app.command("import")
def import_commands(path: Path = typer.Argument(..., help="File written by 'qalam memory export'")):
    """Import saved commands from a JSON file."""
    try:
        count = command_memory.import_(path)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] Import failed: {str(e)}")
        sys.exit(1)
    console.print(f"[bold green]✓[/bold green] Imported {count} commands")
