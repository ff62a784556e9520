# qalam/execution/engine.py
"""
Engine for running shell commands.
"""
import asyncio
from dataclasses import dataclass
from typing import Optional

from qalam.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Captured result of one shell command."""
    stdout: str
    stderr: str
    return_code: int

    @property
    def success(self) -> bool:
        return self.return_code == 0


class ProcessRunner:
    """
    Runs commands through the host shell.
    
    Commands are handed to the shell verbatim so that pipes, `&&` and
    redirection keep working. The child inherits the current working
    directory and environment.
    """
    
    def __init__(self, shell: Optional[str] = None):
        """
        Initialize the process runner.
        
        Args:
            shell: Executable used to interpret commands, /bin/sh when None
        """
        self._shell = shell
        self._logger = logger
    
    async def run(self, command: str, dry_run: bool = False) -> ProcessResult:
        """
        Execute a shell command and return its output.
        
        Args:
            command: The shell command to execute.
            dry_run: Whether to simulate the command without actual execution.
            
        Returns:
            A ProcessResult with stdout, stderr and the return code.
        """
        if dry_run:
            self._logger.info(f"DRY RUN: Would execute command: {command}")
            return ProcessResult(f"[DRY RUN] Would execute: {command}", "", 0)
        
        self._logger.info(f"Executing command: {command}")
        
        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                executable=self._shell,
            )
            
            stdout_bytes, stderr_bytes = await process.communicate()
        except OSError as e:
            self._logger.error(f"Could not start command '{command}': {e}")
            return ProcessResult("", str(e), -1)
        
        stdout = stdout_bytes.decode('utf-8', errors='replace')
        stderr = stderr_bytes.decode('utf-8', errors='replace')
        
        self._logger.debug(f"Command completed with return code: {process.returncode}")
        self._logger.debug(f"stdout: {stdout[:100]}{'...' if len(stdout) > 100 else ''}")
        if stderr:
            self._logger.debug(f"stderr: {stderr}")
        
        return ProcessResult(stdout, stderr, process.returncode)


def _configured_runner() -> ProcessRunner:
    from qalam.config import config_manager
    return ProcessRunner(shell=config_manager.config.execution.shell)


# Global process runner instance
process_runner = _configured_runner()
