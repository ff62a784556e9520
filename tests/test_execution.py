# tests/test_execution.py
"""Tests for the command execution engine."""
import os

import pytest

from qalam.execution.engine import ProcessRunner, ProcessResult


@pytest.fixture
def runner():
    """Create a process runner for testing."""
    return ProcessRunner()


@pytest.mark.asyncio
async def test_run_simple_command(runner):
    """Test running a command that succeeds."""
    result = await runner.run("echo hello")

    assert result.return_code == 0
    assert result.success is True
    assert result.stdout.strip() == "hello"
    assert result.stderr == ""


@pytest.mark.asyncio
async def test_run_command_failure(runner):
    """Test running a command that does not exist."""
    result = await runner.run("command_that_does_not_exist")

    assert result.return_code != 0
    assert result.success is False
    assert result.stdout == ""
    assert "not found" in result.stderr or "No such file" in result.stderr


@pytest.mark.asyncio
async def test_exit_code_is_reported(runner):
    result = await runner.run("exit 7")
    assert result.return_code == 7


@pytest.mark.asyncio
async def test_shell_features_are_available(runner):
    """Pipes and && are interpreted by the shell."""
    result = await runner.run("printf 'b\\na\\n' | sort && echo done")

    assert result.success
    assert result.stdout.split() == ["a", "b", "done"]


@pytest.mark.asyncio
async def test_stderr_is_captured(runner):
    result = await runner.run("echo oops >&2; exit 1")

    assert result.stderr.strip() == "oops"
    assert result.return_code == 1


@pytest.mark.asyncio
async def test_inherits_working_directory(runner, temp_cwd):
    result = await runner.run("pwd")
    assert os.path.realpath(result.stdout.strip()) == os.path.realpath(str(temp_cwd))


@pytest.mark.asyncio
async def test_dry_run_does_not_execute(runner, tmp_path):
    """Test that dry run mode reports the command without running it."""
    marker = tmp_path / "created.txt"

    result = await runner.run(f"touch {marker}", dry_run=True)

    assert result.return_code == 0
    assert "[DRY RUN]" in result.stdout
    assert not marker.exists()


@pytest.mark.asyncio
async def test_missing_shell_is_reported_as_failure(tmp_path):
    runner = ProcessRunner(shell=str(tmp_path / "no-such-shell"))

    result = await runner.run("echo hi")

    assert result.return_code == -1
    assert result.stderr


def test_process_result_success():
    assert ProcessResult("", "", 0).success
    assert not ProcessResult("", "", 2).success
