"""Shell command worker."""

import logging
import subprocess
from pathlib import Path
from typing import Optional

import httpx

from hive.agent.base import Worker
from hive.config import settings
from hive.tools import ToolCatalogue
from hive.workers.registry import WorkerRegistry

logger = logging.getLogger(__name__)


class Shell(Worker):
    """Runs shell commands in a fixed working directory."""

    ROLE = "shell"
    DESCRIPTION = (
        "Executes command line operations. Can run shell commands and return their output."
    )
    SYSTEM_PROMPT = """\
You are a shell command executor. You receive instructions and execute shell commands.

# Working Directory
{DIRECTORY}

# Operating System
{OS}

# Rules
1. Parse the instruction to identify what command to run
2. Execute the appropriate command
3. Return ONLY the raw output - no commentary

# Available Tools
{TOOLS}

# Response Format
Return the command output directly. Do not add interpretation or suggestions.
Just the data."""

    def __init__(
        self,
        working_dir: str | Path | None = None,
        *,
        command_timeout: float | None = None,
        endpoint: str | None = None,
        model: str | None = None,
        max_iterations: int | None = None,
        client: Optional[httpx.Client] = None,
        timeout: float | None = None,
    ) -> None:
        if command_timeout is None:
            command_timeout = settings.SHELL_TIMEOUT
        self.command_timeout = command_timeout
        super().__init__(
            endpoint or settings.SHELL_URL,
            model or settings.SHELL_MODEL,
            max_iterations=(
                settings.worker_max_iterations if max_iterations is None else max_iterations
            ),
            directory=working_dir,
            client=client,
            timeout=timeout,
        )

    def build_tools(self) -> ToolCatalogue:
        catalogue = ToolCatalogue()
        catalogue.register(
            "execute_command",
            self.execute_command,
            "Execute a shell command and return its output",
            command="The command to execute",
        )
        return catalogue

    def execute_command(self, command: str) -> str:
        logger.info("Executing command: %s", command)
        try:
            result = subprocess.run(
                ["sh", "-c", command],
                cwd=self.directory,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.command_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return f"Error executing command: timed out after {self.command_timeout} seconds"
        except OSError as exc:
            return f"Error executing command: {exc}"

        if result.returncode == 0:
            return result.stdout or "Command executed successfully (no output)"
        return (
            f"Command failed (exit code: {result.returncode})\n"
            f"stdout: {result.stdout}\n"
            f"stderr: {result.stderr}"
        )


def register_shell(registry: WorkerRegistry, **kwargs) -> None:
    """Register the shell worker; *kwargs* go to :class:`Shell`."""
    registry.register(Shell.ROLE, lambda: Shell(**kwargs))
