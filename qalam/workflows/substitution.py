# qalam/workflows/substitution.py
"""
Variable substitution for workflow command templates.

Templates reference variables as ${name} (preferred) or $name. Substitution
is purely textual: placeholders without a matching variable are left as they
are, so shell variables like $HOME still reach the shell untouched.
"""
import re
from typing import Any, Dict, List, Mapping, Optional

_BRACED_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def merge_variables(
    defaults: Optional[Mapping[str, Any]],
    overrides: Optional[Mapping[str, Any]] = None
) -> Dict[str, str]:
    """
    Merge run-time overrides over stored defaults.

    Always returns a new dictionary; neither argument is modified.

    Args:
        defaults: Variables stored with the workflow
        overrides: Variables supplied for this run

    Returns:
        The merged mapping with values converted to strings
    """
    merged: Dict[str, str] = {}
    for source in (defaults or {}, overrides or {}):
        for key, value in source.items():
            merged[str(key)] = str(value)
    return merged


def substitute_variables(command: str, variables: Mapping[str, Any]) -> str:
    """
    Substitute variables in a command.

    Each variable is replaced in a single scan that matches both ${name}
    and $name, so text inserted for a variable is never substituted again
    for that same variable.

    Args:
        command: The command template
        variables: Variable values for substitution

    Returns:
        Command with variables substituted
    """
    result = command

    for var_name, var_value in variables.items():
        # Remove leading $ if present
        clean_name = var_name[1:] if var_name.startswith('$') else var_name
        if not clean_name:
            continue

        name = re.escape(clean_name)
        value = str(var_value)
        result = re.sub(r"\$\{" + name + r"\}|\$" + name, lambda _match: value, result)

    return result


def find_unresolved(command: str) -> List[str]:
    """
    List the ${name} placeholders still present in a command.

    Bare $name references are not reported since they are usually meant
    for the shell.
    """
    seen: List[str] = []
    for name in _BRACED_PLACEHOLDER.findall(command):
        if name not in seen:
            seen.append(name)
    return seen
