# tests/conftest.py
"""
Common test fixtures for Qalam CLI.
"""
import os
import asyncio
import tempfile

# Keep configuration, logs and the global stores out of the real home directory
os.environ["QALAM_CONFIG_DIR"] = tempfile.mkdtemp(prefix="qalam-test-")
os.environ.pop("QALAM_DATA_DIR", None)
os.environ.pop("QALAM_STRICT_VARIABLES", None)

import pytest
from pathlib import Path

from qalam.execution.engine import ProcessResult
from qalam.workflows.executor import WorkflowExecutor
from qalam.workflows.manager import WorkflowManager
from qalam.workflows.models import Workflow


class FakeRunner:
    """Process runner double that records every command it is given."""

    def __init__(self, failing=(), delays=None, outputs=None):
        self.failing = set(failing)
        self.delays = delays or {}
        self.outputs = outputs or {}
        self.calls = []
        self.started = []
        self.finished = []

    async def run(self, command, dry_run=False):
        self.calls.append(command)
        self.started.append(command)
        delay = self.delays.get(command)
        if delay:
            await asyncio.sleep(delay)
        self.finished.append(command)
        if command in self.failing:
            return ProcessResult("", f"{command}: failed", 1)
        return ProcessResult(self.outputs.get(command, f"ran {command}\n"), "", 0)


@pytest.fixture
def fake_runner():
    """A runner where every command succeeds."""
    return FakeRunner()


@pytest.fixture
def make_workflow():
    """Build a Workflow with sensible defaults."""
    def _make(commands, **kwargs):
        kwargs.setdefault("name", "test-workflow")
        return Workflow(commands=commands, **kwargs)
    return _make


@pytest.fixture
def storage_dir(tmp_path):
    """Directory for JSON stores used by a single test."""
    directory = tmp_path / "data"
    directory.mkdir()
    return directory


@pytest.fixture
def workflow_manager(storage_dir, fake_runner):
    """Workflow manager backed by a temporary file and a fake runner."""
    return WorkflowManager(
        storage_file=storage_dir / "workflows.json",
        executor=WorkflowExecutor(runner=fake_runner),
    )


@pytest.fixture
def temp_cwd(tmp_path):
    """Run the test from inside a temporary directory."""
    old_dir = os.getcwd()
    os.chdir(tmp_path)
    yield Path(tmp_path)
    os.chdir(old_dir)


class FakeScheduler:
    """Cleanup scheduler double; actions run only when the test fires them."""

    def __init__(self):
        self.scheduled = {}
        self.cancelled = []

    def schedule(self, key, duration, action):
        self.scheduled[key] = (duration, action)

    def cancel(self, key):
        self.cancelled.append(key)
        return self.scheduled.pop(key, None) is not None

    def fire_all(self):
        for _, action in list(self.scheduled.values()):
            action()
        self.scheduled.clear()
