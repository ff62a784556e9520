# qalam/cli/__init__.py
"""
CLI components for Qalam CLI.

This package provides the command-line interface: the main application and
the subcommands for workflows, saved commands and tasks.
"""
from qalam.cli.main import app as main_app
from qalam.cli.workflows import app as workflows_app
from qalam.cli.memory import app as memory_app
from qalam.cli.tasks import app as tasks_app

# Add subcommands to the main app
main_app.add_typer(workflows_app, name="workflow", help="Manage and execute workflows")
main_app.add_typer(memory_app, name="memory", help="Save and recall commands")
main_app.add_typer(tasks_app, name="task", help="Simple priority task management")

# Export the main app
app = main_app

__all__ = ['app']
