# tests/test_memory.py
"""Tests for saved command memory."""
import json

import pytest

from conftest import FakeRunner, FakeScheduler
from qalam.core.exceptions import CommandNotFoundError
from qalam.memory.commands import CommandMemory


@pytest.fixture
def runner():
    return FakeRunner(failing={"false"})


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def memory(storage_dir, runner, scheduler):
    """Command memory backed by a temporary file."""
    return CommandMemory(storage_file=storage_dir / "commands.json", runner=runner, scheduler=scheduler)


def test_save_and_get_counts_usage(memory):
    memory.save("ports", "lsof -i -P", "Open ports", ["network"])

    first = memory.get("ports")
    second = memory.get("ports")

    assert first.command == "lsof -i -P"
    assert second.usage_count == 2
    assert second.last_used is not None


def test_get_missing(memory):
    with pytest.raises(CommandNotFoundError):
        memory.get("nope")


@pytest.mark.parametrize("name, command", [("", "ls"), ("ls", "")])
def test_save_requires_name_and_command(memory, name, command):
    with pytest.raises(ValueError):
        memory.save(name, command)


def test_replace_keeps_usage(memory):
    memory.save("ll", "ls -l")
    memory.get("ll")

    replaced = memory.save("ll", "ls -la")

    assert replaced.command == "ls -la"
    assert replaced.usage_count == 1


def test_persisted_between_instances(memory, storage_dir):
    memory.save("ll", "ls -l", tags=[" files ", ""])

    reloaded = CommandMemory(storage_file=storage_dir / "commands.json", runner=FakeRunner())

    assert reloaded.get("ll").tags == ["files"]


def test_search_matches_every_field(memory):
    memory.save("ports", "lsof -i", tags=["network"])
    memory.save("disk", "df -h", description="Show disk usage")
    memory.save("ll", "ls -l")

    assert [c.name for c in memory.search("NETWORK")] == ["ports"]
    assert [c.name for c in memory.search("usage")] == ["disk"]
    assert [c.name for c in memory.search("df")] == ["disk"]
    assert memory.search("missing") == []


def test_search_orders_by_usage(memory):
    memory.save("a-one", "echo 1")
    memory.save("a-two", "echo 2")
    memory.get("a-one")

    assert [c.name for c in memory.search("a-")] == ["a-one", "a-two"]


def test_list_limit(memory):
    for i in range(5):
        memory.save(f"c{i}", f"echo {i}")

    assert len(memory.list(3)) == 3


def test_delete(memory):
    memory.save("ll", "ls -l")

    assert memory.delete("ll") is True
    assert memory.delete("ll") is False


def test_stats(memory):
    assert memory.stats() == {"total_commands": 0, "total_uses": 0, "most_used": None}

    memory.save("a", "echo a")
    memory.save("b", "echo b")
    memory.get("b")
    memory.get("b")
    memory.get("a")

    assert memory.stats() == {"total_commands": 2, "total_uses": 3, "most_used": "b"}


def test_export_and_import(memory, storage_dir, tmp_path):
    memory.save("ll", "ls -l", "List", ["files"])
    memory.save("ports", "lsof -i")
    export_path = tmp_path / "commands-export.json"

    assert memory.export(export_path) == 2

    other = CommandMemory(storage_file=tmp_path / "other.json", runner=FakeRunner())
    assert other.import_(export_path) == 2
    assert other.get("ll").tags == ["files"]


def test_import_skips_invalid_entries(memory, tmp_path):
    path = tmp_path / "in.json"
    path.write_text(json.dumps([
        {"name": "ok", "command": "echo ok", "tags": "a,b"},
        {"name": "no-command"},
        "junk",
    ]))

    assert memory.import_(path) == 1
    assert memory.get("ok").tags == ["a", "b"]


@pytest.mark.asyncio
async def test_run_executes_saved_command(memory, runner):
    memory.save("greet", "echo hi")

    result = await memory.run("greet")

    assert result.success
    assert runner.calls == ["echo hi"]
    assert memory.get("greet").usage_count == 2


@pytest.mark.asyncio
async def test_run_reports_failure(memory):
    memory.save("nope", "false")

    result = await memory.run("nope")

    assert not result.success


def test_temporary_command_schedules_cleanup(memory, scheduler):
    saved = memory.save("tmp", "echo tmp", expires="30m")

    assert saved.expires is not None
    assert [duration for duration, _ in scheduler.scheduled.values()] == ["30m"]
    assert memory.get("tmp").command == "echo tmp"


def test_expired_command_is_removed_when_timer_fires(memory, scheduler, storage_dir):
    memory.save("tmp", "echo tmp", expires="0s")
    memory.save("keep", "echo keep")

    scheduler.fire_all()

    with pytest.raises(CommandNotFoundError):
        memory.get("tmp")
    reloaded = CommandMemory(storage_file=storage_dir / "commands.json", runner=FakeRunner(), scheduler=FakeScheduler())
    assert [c.name for c in reloaded.list()] == ["keep"]


def test_expired_commands_are_dropped_on_load(storage_dir):
    path = storage_dir / "commands.json"
    path.write_text(json.dumps([
        {"name": "old", "command": "echo old", "expires": "2000-01-01T00:00:00"},
        {"name": "live", "command": "echo live"},
    ]))

    memory = CommandMemory(storage_file=path, runner=FakeRunner(), scheduler=FakeScheduler())

    assert [c.name for c in memory.list()] == ["live"]
    assert "old" not in path.read_text()


def test_saving_without_expiry_cancels_pending_cleanup(memory, scheduler):
    memory.save("tmp", "echo tmp", expires="1h")

    permanent = memory.save("tmp", "echo tmp")

    assert permanent.expires is None
    assert scheduler.scheduled == {}


def test_delete_cancels_pending_cleanup(memory, scheduler):
    memory.save("tmp", "echo tmp", expires="1h")

    memory.delete("tmp")

    assert scheduler.scheduled == {}
