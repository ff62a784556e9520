# tests/test_tasks.py
"""Tests for the priority task queue."""
import pytest

from qalam.core.exceptions import TaskNotFoundError
from qalam.tasks.queue import Priority, TaskQueue, detect_priority, parse_priority


@pytest.fixture
def queue(storage_dir):
    """Task queue backed by a temporary file."""
    return TaskQueue(storage_file=storage_dir / "tasks.json")


@pytest.mark.parametrize("title, expected", [
    ("Fix production outage", Priority.P1),
    ("URGENT: call back", Priority.P1),
    ("Review pull request", Priority.P2),
    ("Water the plants", Priority.P3),
])
def test_detect_priority(title, expected):
    assert detect_priority(title) == expected


@pytest.mark.parametrize("text, expected", [
    ("p1", Priority.P1), ("P2", Priority.P2), ("3", Priority.P3), ("p4", None), ("soon", None),
])
def test_parse_priority(text, expected):
    assert parse_priority(text) == expected


def test_add_rejects_empty_title(queue):
    with pytest.raises(ValueError):
        queue.add("   ")


def test_add_records_project(queue, temp_cwd):
    task = queue.add("write docs", Priority.P3)
    assert task.project == temp_cwd.name


def test_pending_ordered_by_priority_then_age(queue):
    queue.add("c", Priority.P3)
    queue.add("a1", Priority.P1)
    queue.add("b", Priority.P2)
    queue.add("a2", Priority.P1)

    assert [t.title for t in queue.pending()] == ["a1", "a2", "b", "c"]
    assert [t.title for t in queue.next(limit=2)] == ["a1", "a2"]


def test_done_without_query_completes_head(queue):
    queue.add("later", Priority.P3)
    queue.add("now", Priority.P1)

    completed = queue.done()

    assert [t.title for t in completed] == ["now"]
    assert [t.title for t in queue.pending()] == ["later"]


def test_done_by_priority_completes_the_group(queue):
    queue.add("x", Priority.P2)
    queue.add("y", Priority.P2)
    queue.add("z", Priority.P3)

    completed = queue.done("p2")

    assert {t.title for t in completed} == {"x", "y"}
    assert queue.pending_count() == {"total": 1, "p1": 0, "p2": 0, "p3": 1}


def test_done_by_title(queue):
    queue.add("Write release notes", Priority.P3)
    queue.add("Ship it", Priority.P3)

    completed = queue.done("RELEASE")

    assert [t.title for t in completed] == ["Write release notes"]


@pytest.mark.parametrize("query", [None, "p1", "nothing"])
def test_done_raises_when_nothing_matches(queue, query):
    with pytest.raises(TaskNotFoundError):
        queue.done(query)


def test_list_and_clear_completed(queue, storage_dir):
    queue.add("one", Priority.P3)
    queue.add("two", Priority.P3)
    queue.done("one")

    assert [t.title for t in queue.list()] == ["two"]
    assert [t.title for t in queue.list(include_completed=True)] == ["two", "one"]

    assert queue.clear_completed() == 1
    assert queue.clear_completed() == 0

    reloaded = TaskQueue(storage_file=storage_dir / "tasks.json")
    assert [t.title for t in reloaded.list(include_completed=True)] == ["two"]


def test_ids_are_unique(queue):
    ids = [queue.add(f"task {i}", Priority.P3).id for i in range(3)]
    assert len(set(ids)) == 3
