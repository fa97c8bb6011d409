"""
Delegation bridge: the tool through which one agent hands work to a worker.

Instead of running locally, ``delegate_to_worker`` looks the worker up in the registry and runs
that worker's whole agent loop; the worker's final text becomes the tool result.  Any agent can
carry a bridge, so delegation nests as deep as each level's iteration ceiling allows.
"""

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
)

if TYPE_CHECKING:
    from hive.tools import ToolCatalogue
    from hive.workers import WorkerRegistry

logger = logging.getLogger(__name__)

DELEGATE_TOOL = "delegate_to_worker"
DELEGATE_DESCRIPTION = "Delegate a task to a specialized worker"


class DelegationBridge:
    """Exposes a worker registry as a single tool."""

    def __init__(self, registry: "WorkerRegistry", caller: str = "agent") -> None:
        self.registry = registry
        self.caller = caller

    def parameter_schema(self) -> Dict[str, Any]:
        """Schema whose ``worker`` enum lists the roles registered right now."""
        return {
            "type": "object",
            "properties": {
                "worker": {
                    "type": "string",
                    "enum": sorted(self.registry.all_roles()),
                    "description": "The worker to delegate to",
                },
                "instruction": {
                    "type": "string",
                    "description": "Natural language instruction for the worker",
                },
            },
            "required": ["worker", "instruction"],
        }

    def delegate(self, worker: str = "", instruction: str = "") -> str:
        """Run *worker*'s agent loop on *instruction* and return its final text."""
        logger.info(
            "[%s] Delegating to worker '%s' with instruction: %s", self.caller, worker, instruction
        )
        target = self.registry.get(worker)
        if target is None:
            logger.error("[%s] Worker '%s' not found", self.caller, worker)
            return f"Error: Worker '{worker}' not found"
        if not instruction:
            return f"Error: no instruction given for worker '{worker}'"

        result = target.process(instruction)
        logger.info("[%s] Worker '%s' returned: %s", self.caller, worker, result)
        return result

    def install(self, catalogue: "ToolCatalogue") -> None:
        """Register ``delegate_to_worker`` in *catalogue*."""
        catalogue.register(
            DELEGATE_TOOL,
            self.delegate,
            description=DELEGATE_DESCRIPTION,
            parameters=self.parameter_schema(),
        )
