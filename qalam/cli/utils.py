# qalam/cli/utils.py
"""
Helpers shared by the Qalam CLI commands.
"""
import asyncio
from typing import Any, Coroutine, Dict, List, Optional, TypeVar

from rich.console import Console

T = TypeVar('T')


def run_async(coroutine: Coroutine[Any, Any, T]) -> T:
    """Run an async function from a synchronous Typer command."""
    return asyncio.run(coroutine)


def parse_vars(values: Optional[List[str]], console: Optional[Console] = None) -> Dict[str, str]:
    """
    Parse --vars options into a dictionary.

    Each value may hold several comma separated pairs, e.g.
    "env=prod,region=eu". Pairs are split on the first "=" so values may
    contain "=" themselves. Malformed pairs are skipped with a warning.
    """
    variables: Dict[str, str] = {}
    for value in values or []:
        for pair in value.split(","):
            pair = pair.strip()
            if not pair:
                continue
            key, sep, val = pair.partition("=")
            if not sep or not key.strip():
                if console:
                    console.print(f"[bold yellow]Warning:[/bold yellow] Ignoring invalid variable format: {pair}")
                continue
            variables[key.strip()] = val
    return variables
