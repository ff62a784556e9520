# qalam/tasks/queue.py
"""
Priority task queue for Qalam CLI.

Answers the question "what should I do next?" by keeping pending tasks
ordered by priority and age.
"""
import json
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from qalam.config import config_manager
from qalam.constants import TASKS_FILENAME, URGENT_KEYWORDS, IMPORTANT_KEYWORDS
from qalam.core.exceptions import TaskNotFoundError
from qalam.utils.logging import get_logger

logger = get_logger(__name__)


class Priority(IntEnum):
    """Task priority; lower values come first."""
    P1 = 1  # Urgent (do now)
    P2 = 2  # Important (do soon)
    P3 = 3  # Normal (when possible)

    @property
    def label(self) -> str:
        return {1: "Urgent", 2: "Important", 3: "Normal"}[self.value]


class TaskStatus:
    PENDING = "pending"
    COMPLETED = "completed"


def detect_priority(title: str) -> Priority:
    """Guess a priority from keywords in the task title."""
    title_lower = title.lower()
    if any(keyword in title_lower for keyword in URGENT_KEYWORDS):
        return Priority.P1
    if any(keyword in title_lower for keyword in IMPORTANT_KEYWORDS):
        return Priority.P2
    return Priority.P3


def parse_priority(text: str) -> Optional[Priority]:
    """Parse "p1".."p3" or "1".."3"; anything else yields None."""
    cleaned = text.strip().lower().lstrip("p")
    if cleaned in ("1", "2", "3"):
        return Priority(int(cleaned))
    return None


class Task(BaseModel):
    """A single task in the queue."""
    id: int
    title: str
    priority: Priority
    project: Optional[str] = None
    status: str = TaskStatus.PENDING
    created: datetime = Field(default_factory=datetime.now)
    completed: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING


class TaskQueue:
    """Stores tasks in a JSON file."""

    def __init__(self, storage_file: Optional[Path] = None):
        self._tasks: List[Task] = []
        self._storage_file = storage_file or config_manager.data_dir / TASKS_FILENAME
        self._logger = logger
        self._load()

    def _load(self) -> None:
        if not self._storage_file.exists():
            return
        try:
            with open(self._storage_file, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.error(f"Error loading tasks from {self._storage_file}: {e}")
            return

        for entry in data:
            try:
                self._tasks.append(Task.model_validate(entry))
            except ValidationError as e:
                self._logger.error(f"Skipping invalid task: {e}")

    def _save(self) -> None:
        self._storage_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self._storage_file, "w") as f:
            json.dump([t.model_dump(mode="json") for t in self._tasks], f, indent=2)

    def _next_id(self) -> int:
        return max((t.id for t in self._tasks), default=0) + 1

    def _complete(self, task: Task) -> None:
        task.status = TaskStatus.COMPLETED
        task.completed = datetime.now()

    def add(self, title: str, priority: Optional[Priority] = None) -> Task:
        """
        Add a task, detecting its priority from the title when not given.

        The current directory name is recorded as the task's project.
        """
        title = title.strip()
        if not title:
            raise ValueError("Task title is required")

        task = Task(
            id=self._next_id(),
            title=title,
            priority=priority or detect_priority(title),
            project=Path.cwd().name,
        )
        self._tasks.append(task)
        self._save()
        self._logger.info(f"Added task {task.id} with priority P{task.priority.value}")
        return task

    def pending(self) -> List[Task]:
        """Pending tasks, highest priority and oldest first."""
        tasks = [t for t in self._tasks if t.is_pending]
        return sorted(tasks, key=lambda t: (t.priority, t.created, t.id))

    def next(self, limit: int = 5) -> List[Task]:
        """The head of the queue followed by what is coming up."""
        return self.pending()[:limit]

    def done(self, query: Optional[str] = None) -> List[Task]:
        """
        Mark tasks as completed.

        Args:
            query: None for the next task, "p1".."p3" for a whole priority,
                otherwise text matched against task titles

        Returns:
            The tasks that were completed

        Raises:
            TaskNotFoundError: If no pending task matches
        """
        pending = self.pending()

        if not query:
            if not pending:
                raise TaskNotFoundError("No pending tasks")
            completed = [pending[0]]
        elif query.strip().lower() in ("p1", "p2", "p3"):
            priority = parse_priority(query)
            completed = [t for t in pending if t.priority == priority]
            if not completed:
                raise TaskNotFoundError(f"No pending P{priority.value} tasks")
        else:
            query_lower = query.lower()
            matches = [t for t in pending if query_lower in t.title.lower()]
            if not matches:
                raise TaskNotFoundError(f"No task found matching: {query}")
            completed = [matches[0]]

        for task in completed:
            self._complete(task)
        self._save()
        return completed

    def list(self, include_completed: bool = False) -> List[Task]:
        tasks = self.pending()
        if include_completed:
            finished = [t for t in self._tasks if not t.is_pending]
            finished.sort(key=lambda t: t.completed or t.created, reverse=True)
            tasks.extend(finished)
        return tasks

    def clear_completed(self) -> int:
        """Drop completed tasks. Returns how many were removed."""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.is_pending]
        removed = before - len(self._tasks)
        if removed:
            self._save()
        return removed

    def pending_count(self) -> Dict[str, int]:
        pending = self.pending()
        counts = {"total": len(pending)}
        for priority in Priority:
            counts[priority.name.lower()] = sum(1 for t in pending if t.priority == priority)
        return counts


# Global task queue instance
task_queue = TaskQueue()
