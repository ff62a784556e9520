# qalam/memory/commands.py
"""
Saved command memory for Qalam CLI.

Long or hard-to-remember shell commands are stored under a short name and
recalled or run later. A command saved with an expiry ("30m", "2h") is
temporary: it is deleted by a cleanup timer while the process lives, and
dropped on the next load otherwise.
"""
import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from qalam.config import config_manager
from qalam.constants import COMMANDS_FILENAME, DEFAULT_LIST_LIMIT, SEARCH_RESULT_LIMIT
from qalam.core.exceptions import CommandNotFoundError
from qalam.execution.cleanup import CleanupScheduler, parse_duration
from qalam.execution.engine import ProcessRunner, ProcessResult
from qalam.utils.logging import get_logger

logger = get_logger(__name__)


class SavedCommand(BaseModel):
    """A named shell command."""
    name: str = Field(..., description="Name used to recall the command")
    command: str = Field(..., description="The shell command")
    description: str = Field("", description="What the command does")
    tags: List[str] = Field(default_factory=list, description="Tags for searching")
    usage_count: int = Field(0, description="Times the command was recalled")
    created: datetime = Field(default_factory=datetime.now)
    updated: datetime = Field(default_factory=datetime.now)
    last_used: Optional[datetime] = None
    expires: Optional[datetime] = Field(None, description="When a temporary command is removed")

    @property
    def is_expired(self) -> bool:
        return self.expires is not None and self.expires <= datetime.now()


class CommandMemory:
    """Stores saved commands in a JSON file."""

    def __init__(
        self,
        storage_file: Optional[Path] = None,
        runner: Optional[ProcessRunner] = None,
        scheduler: Optional[CleanupScheduler] = None
    ):
        self._commands: Dict[str, SavedCommand] = {}
        self._storage_file = storage_file or config_manager.data_dir / COMMANDS_FILENAME
        if runner is None:
            from qalam.execution.engine import process_runner
            runner = process_runner
        if scheduler is None:
            from qalam.execution.cleanup import cleanup_scheduler
            scheduler = cleanup_scheduler
        self._runner = runner
        self._scheduler = scheduler
        self._logger = logger
        self._load()

    def _cleanup_key(self, name: str) -> str:
        return f"memory:{self._storage_file}:{name}"

    def _load(self) -> None:
        if not self._storage_file.exists():
            return

        try:
            with open(self._storage_file, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.error(f"Error loading saved commands from {self._storage_file}: {e}")
            return

        expired = 0
        for entry in data:
            try:
                saved = SavedCommand.model_validate(entry)
            except ValidationError as e:
                self._logger.error(f"Skipping invalid saved command: {e}")
                continue
            if saved.is_expired:
                expired += 1
                continue
            self._commands[saved.name] = saved

        if expired:
            self._logger.info(f"Dropped {expired} expired commands")
            self._save()

    def _save(self) -> None:
        self._storage_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self._storage_file, "w") as f:
            json.dump([c.model_dump(mode="json") for c in self._commands.values()], f, indent=2)

    def _expire(self, name: str) -> None:
        saved = self._commands.get(name)
        if saved and saved.is_expired:
            del self._commands[name]
            self._save()
            self._logger.info(f"Temporary command expired: {name}")

    def save(
        self,
        name: str,
        command: str,
        description: str = "",
        tags: Optional[List[str]] = None,
        expires: Optional[str] = None
    ) -> SavedCommand:
        """
        Save a command, replacing any command with the same name.

        Args:
            name: Name to store the command under
            command: The shell command
            description: What the command does
            tags: Tags for searching
            expires: Lifetime such as "30m" for a temporary command

        Returns:
            The saved command
        """
        if not name or not command:
            raise ValueError("Name and command are required")

        existing = self._commands.get(name)
        saved = SavedCommand(
            name=name,
            command=command,
            description=description or "",
            tags=[t.strip() for t in (tags or []) if t.strip()],
        )
        if existing:
            saved.created = existing.created
            saved.usage_count = existing.usage_count
            saved.last_used = existing.last_used

        if expires:
            saved.expires = datetime.now() + timedelta(seconds=parse_duration(expires))

        self._commands[name] = saved
        self._save()

        # Timer starts only once the command is stored
        key = self._cleanup_key(name)
        if expires:
            self._scheduler.schedule(key, expires, lambda: self._expire(name))
        else:
            self._scheduler.cancel(key)

        self._logger.info(f"Saved command: {name}")
        return saved

    def get(self, name: str) -> SavedCommand:
        """Recall a command by name, counting the use."""
        saved = self._commands.get(name)
        if not saved or saved.is_expired:
            raise CommandNotFoundError(name)

        saved.usage_count += 1
        saved.last_used = datetime.now()
        self._save()
        return saved

    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> List[SavedCommand]:
        """Most recently updated commands first."""
        ordered = sorted(self._commands.values(), key=lambda c: c.updated, reverse=True)
        return ordered[:limit]

    def search(self, query: str) -> List[SavedCommand]:
        """Match the query against names, commands, descriptions and tags."""
        query_lower = query.lower()
        matches = [
            c for c in self._commands.values()
            if query_lower in c.name.lower()
            or query_lower in c.command.lower()
            or query_lower in c.description.lower()
            or any(query_lower in tag.lower() for tag in c.tags)
        ]
        matches.sort(key=lambda c: (c.usage_count, c.updated), reverse=True)
        return matches[:SEARCH_RESULT_LIMIT]

    def delete(self, name: str) -> bool:
        if name not in self._commands:
            return False
        del self._commands[name]
        self._scheduler.cancel(self._cleanup_key(name))
        self._save()
        self._logger.info(f"Deleted command: {name}")
        return True

    def stats(self) -> Dict[str, Any]:
        most_used = max(self._commands.values(), key=lambda c: c.usage_count, default=None)
        return {
            "total_commands": len(self._commands),
            "total_uses": sum(c.usage_count for c in self._commands.values()),
            "most_used": most_used.name if most_used and most_used.usage_count else None,
        }

    def export(self, path: Path) -> int:
        """Write all commands to a JSON file. Returns how many were written."""
        entries = [
            {"name": c.name, "command": c.command, "description": c.description, "tags": c.tags}
            for c in self._commands.values()
        ]
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(entries, f, indent=2)
        return len(entries)

    def import_(self, path: Path) -> int:
        """
        Load commands from a file written by export.

        Entries without a name or command are skipped.

        Returns:
            The number of commands imported
        """
        with open(path, "r") as f:
            entries = json.load(f)

        imported = 0
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("name") or not entry.get("command"):
                self._logger.warning(f"Skipping invalid command entry: {entry}")
                continue
            tags = entry.get("tags") or []
            if isinstance(tags, str):
                tags = tags.split(",")
            self.save(entry["name"], entry["command"], entry.get("description", ""), tags)
            imported += 1
        return imported

    async def run(self, name: str, dry_run: bool = False) -> ProcessResult:
        """Recall a command and execute it through the shell."""
        saved = self.get(name)
        return await self._runner.run(saved.command, dry_run=dry_run)


# Global command memory instance
command_memory = CommandMemory()
