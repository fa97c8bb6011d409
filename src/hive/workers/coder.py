"""Code analysis and generation worker (no tools)."""

from typing import Optional

import httpx

from hive.agent.base import Worker
from hive.config import settings
from hive.tools import ToolCatalogue
from hive.workers.registry import WorkerRegistry


class Coder(Worker):
    """Expert software engineer answering in a single reply."""

    ROLE = "coder"
    DESCRIPTION = (
        "Analyzes code, writes code, and provides technical solutions. Give full context and code."
    )
    SYSTEM_PROMPT = """\
You are an expert software engineer. You analyze code and write code.

# When Analyzing Code
- Identify issues, bugs, or improvements
- Explain the code's purpose and structure
- Point out potential problems or edge cases

# When Writing Code
- Write clean, idiomatic code
- Follow best practices for the language
- Include necessary error handling
- Keep it focused on the specific request

# Available Tools
{TOOLS}

# Response Format
- Be direct and technical
- When writing code, output the code directly
- When analyzing, be concise but thorough
- No unnecessary preamble or filler"""

    def __init__(
        self,
        *,
        endpoint: str | None = None,
        model: str | None = None,
        max_iterations: int | None = None,
        client: Optional[httpx.Client] = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            endpoint or settings.CODER_URL,
            model or settings.CODER_MODEL,
            max_iterations=(
                settings.worker_max_iterations if max_iterations is None else max_iterations
            ),
            client=client,
            timeout=timeout,
        )

    def build_tools(self) -> ToolCatalogue:
        return ToolCatalogue()


def register_coder(registry: WorkerRegistry, **kwargs) -> None:
    """Register the coder worker; *kwargs* go to :class:`Coder`."""
    registry.register(Coder.ROLE, lambda: Coder(**kwargs))
