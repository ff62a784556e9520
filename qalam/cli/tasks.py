# qalam/cli/tasks.py
"""
Task queue commands for Qalam CLI.
"""
import sys
from datetime import datetime
from typing import List, Optional

import typer
from rich.console import Console

from qalam.core.exceptions import TaskNotFoundError
from qalam.tasks.queue import Priority, Task, parse_priority, task_queue

console = Console()

app = typer.Typer(help="Simple priority task management")

_PRIORITY_COLORS = {Priority.P1: "red", Priority.P2: "yellow", Priority.P3: "green"}


def _label(priority: Priority) -> str:
    color = _PRIORITY_COLORS[priority]
    return f"[{color}]P{priority.value}[/{color}]"


def _age(task: Task) -> str:
    delta = datetime.now() - task.created
    if delta.days:
        return f"{delta.days}d"
    hours = delta.seconds // 3600
    if hours:
        return f"{hours}h"
    return f"{delta.seconds // 60}m"


def _summary() -> None:
    counts = task_queue.pending_count()
    console.print(
        f"[dim]{counts['total']} pending: {counts['p1']} urgent, "
        f"{counts['p2']} important, {counts['p3']} normal[/dim]"
    )


@app.command("add")
def add_task(
    words: List[str] = typer.Argument(..., help="Task description, optionally ending with p1, p2 or p3"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="p1, p2 or p3"),
):
    """Add a task."""
    chosen = parse_priority(priority) if priority else None
    if priority and chosen is None:
        console.print(f"[bold red]Error:[/bold red] Invalid priority: {priority}")
        sys.exit(1)

    # "qalam task add fix login p1"
    if chosen is None and len(words) > 1:
        chosen = parse_priority(words[-1])
        if chosen is not None:
            words = words[:-1]

    try:
        task = task_queue.add(" ".join(words), chosen)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)

    console.print(f"[green]Added task:[/green] {task.title} {_label(task.priority)}")
    _summary()


@app.command("next")
def next_task():
    """Show what to work on next."""
    upcoming = task_queue.next()
    if not upcoming:
        console.print("[green]No tasks pending![/green]")
        return

    head = upcoming[0]
    console.print("[blue]> Do this next:[/blue]")
    console.print(f"  {_label(head.priority)} [bold]{head.title}[/bold]")

    urgent = sum(1 for t in upcoming if t.priority == Priority.P1)
    if head.priority == Priority.P1 and urgent > 1:
        console.print(f"  [red]Warning: You have {urgent} urgent items[/red]")

    if len(upcoming) > 1:
        console.print("\n[dim]Coming up:[/dim]")
        for task in upcoming[1:4]:
            console.print(f"  {_label(task.priority)} [dim]{task.title}[/dim]")


@app.command("done")
def mark_done(query: Optional[List[str]] = typer.Argument(None, help="p1/p2/p3 or part of a task title")):
    """Mark tasks as done (the next task by default)."""
    try:
        completed = task_queue.done(" ".join(query) if query else None)
    except TaskNotFoundError as e:
        console.print(f"[yellow]{str(e)}[/yellow]")
        sys.exit(1)

    for task in completed:
        console.print(f"[green]Done:[/green] [strike]{task.title}[/strike]")
    _summary()


@app.command("list")
def list_tasks(show_all: bool = typer.Option(False, "--all", "-a", help="Include completed tasks")):
    """List tasks grouped by priority."""
    tasks = task_queue.list(include_completed=show_all)
    pending = [t for t in tasks if t.is_pending]
    if not tasks:
        console.print("[green]No tasks pending![/green]")
        return

    console.print(f"[blue]Your Tasks ({len(pending)} items)[/blue]")
    for priority in Priority:
        group = [t for t in pending if t.priority == priority]
        if not group:
            continue
        color = _PRIORITY_COLORS[priority]
        console.print(f"\n[{color}]P{priority.value} - {priority.label}[/{color}]")
        for task in group:
            console.print(f"  {task.title} [dim]{_age(task)}[/dim]")

    completed = [t for t in tasks if not t.is_pending]
    if completed:
        console.print("\n[dim]Completed[/dim]")
        for task in completed[:5]:
            console.print(f"  [dim][strike]{task.title}[/strike][/dim]")
        if len(completed) > 5:
            console.print(f"  [dim]... and {len(completed) - 5} more[/dim]")


@app.command("clear")
def clear_completed():
    """Remove completed tasks."""
    removed = task_queue.clear_completed()
    if not removed:
        console.print("[yellow]No completed tasks to clear[/yellow]")
        return
    console.print(f"[green]Done:[/green] Cleared {removed} completed tasks")
