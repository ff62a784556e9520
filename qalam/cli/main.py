# qalam/cli/main.py
"""
Main command-line interface for Qalam CLI.
"""
import sys

import typer
from rich.console import Console

from qalam import __version__
from qalam.config import config_manager
from qalam.utils.logging import setup_logging, get_logger

# Create the app
app = typer.Typer(help="Qalam: the pen that never forgets", no_args_is_help=True)
logger = get_logger(__name__)
console = Console()


def version_callback(value: bool):
    """Display version information and exit."""
    if value:
        console.print(f"Qalam CLI version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(
        False, "--debug", "-d", help="Enable debug mode"
    ),
    version: bool = typer.Option(
        False, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Qalam: saved commands, workflows and tasks for your shell."""
    if debug:
        config_manager.config.debug = True

    setup_logging()


@app.command()
def init(
    strict: bool = typer.Option(
        False, "--strict", help="Fail workflow runs with unresolved ${name} placeholders"
    ),
):
    """Write a configuration file with the current settings."""
    config_manager.config.execution.strict_variables = strict
    try:
        config_manager.save_config()
    except OSError as e:
        logger.exception(f"Error saving configuration: {e}")
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)

    console.print(f"[green]Configuration saved to {config_manager.CONFIG_FILE}[/green]")
