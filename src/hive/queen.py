"""The coordinator: the only agent that talks to the user."""

import logging
from typing import (
    Dict,
    Optional,
)

import httpx

from hive.agent.base import Agent
from hive.agent.delegation import DelegationBridge
from hive.config import settings
from hive.tools import ToolCatalogue
from hive.workers import WorkerRegistry

logger = logging.getLogger(__name__)


class Queen(Agent):
    """Breaks user requests into worker operations and synthesises the answers."""

    NAME = "queen"
    SYSTEM_PROMPT = """\
You are the Queen of Hive. You are the ONLY agent that communicates with the user.

# Core Architecture
- YOU talk to the user. Workers NEVER talk to the user.
- Workers are TOOLS, not assistants. They execute operations and return raw data.
- YOU do all thinking, analysis, and synthesis. Workers just fetch and execute.

# How to Use Workers
Workers perform SPECIFIC OPERATIONS and return RAW RESULTS. Never ask a worker to "analyze",
"summarize", or "give an overview".

WRONG: "Give me an overview of the project directory"
RIGHT: "List the directory at '.'" -> then YOU analyze the listing

WRONG: "Explain what's in this file"
RIGHT: "Read the file at 'src/main.py'" -> then YOU explain it

WRONG: "Help me understand the codebase structure"
RIGHT: "List directory '.'" -> "Read file 'pyproject.toml'" -> "List directory 'src/'"
-> then YOU synthesize

# Available Workers
{WORKERS}

# Your Workflow
1. Receive user request
2. Break it down into specific data-fetching operations
3. Request raw data from workers (one operation at a time if needed)
4. Analyze and synthesize the results yourself
5. Respond to the user with your analysis

# Example
User: "What does this project do?"
You should:
1. delegate_to_worker("file_manager", "List directory at '.'")
2. delegate_to_worker("file_manager", "Read file 'pyproject.toml'")
3. delegate_to_worker("file_manager", "Read file 'src/main.py'")
4. Analyze all the raw data yourself
5. Give the user YOUR summary

# Communication
- Be direct and helpful to the user
- Do your own thinking - don't outsource analysis to workers
- If you need more data, request it from workers
- Workers return data; you return answers"""

    def __init__(
        self,
        registry: WorkerRegistry,
        *,
        endpoint: str | None = None,
        model: str | None = None,
        max_iterations: int | None = None,
        client: Optional[httpx.Client] = None,
        timeout: float | None = None,
    ) -> None:
        # build_tools() runs inside Agent.__init__ and needs the bridge
        self.registry = registry
        self.bridge = DelegationBridge(registry, caller=self.NAME)
        super().__init__(
            endpoint or settings.QUEEN_URL,
            model or settings.QUEEN_MODEL,
            max_iterations=max_iterations,
            client=client,
            timeout=timeout,
        )
        logger.info("Queen ready with workers: %s", sorted(registry.all_roles()))

    def build_tools(self) -> ToolCatalogue:
        catalogue = ToolCatalogue()
        self.bridge.install(catalogue)
        return catalogue

    def worker_list(self) -> str:
        """Build the list of available workers as a formatted string."""
        workers = self.registry.workers()
        if not workers:
            return "No workers available."
        return "\n".join(f"- **{w.role}**: {w.description}" for w in workers)

    def placeholders(self) -> Dict[str, str]:
        values = super().placeholders()
        values["WORKERS"] = self.worker_list()
        return values
