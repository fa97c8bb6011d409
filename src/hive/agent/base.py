"""
Agent abstraction for Hive.

An agent is a backend endpoint, a model, a system prompt template and a tool catalogue.  It keeps
no conversation history: every call to :meth:`Agent.run` starts a fresh conversation, while
:meth:`Agent.run_loop` continues one held by the caller.  After construction an agent is
read-only, so one instance can serve any number of loops.

New agents subclass :class:`Agent` (or :class:`Worker` for delegation targets), set
``SYSTEM_PROMPT`` and implement :meth:`Agent.build_tools`.
"""

import logging
import platform
from abc import (
    ABC,
    abstractmethod,
)
from datetime import date
from pathlib import Path
from typing import (
    Any,
    ClassVar,
    Dict,
    List,
    Mapping,
    Optional,
)

import httpx

from hive.agent.agent_loop import run_agent_loop
from hive.agent.prompt import compose
from hive.config import settings
from hive.core.schema import (
    AgentResult,
    ConversationTurn,
    ToolSpec,
)
from hive.core.transport import send
from hive.tools import ToolCatalogue

logger = logging.getLogger(__name__)


class Agent(ABC):
    """Anything that can hold a model-backed, tool-using conversation."""

    NAME: ClassVar[str] = "agent"
    SYSTEM_PROMPT: ClassVar[str] = ""

    def __init__(
        self,
        endpoint: str,
        model: str,
        *,
        max_iterations: int | None = None,
        directory: str | Path | None = None,
        client: Optional[httpx.Client] = None,
        timeout: float | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.model = model
        self.max_iterations = settings.MAX_ITERATIONS if max_iterations is None else max_iterations
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        self.directory = Path(directory) if directory is not None else Path.cwd()
        self.client = client
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self.catalogue = self.build_tools()

    @property
    def name(self) -> str:
        """Label used in logs."""
        return self.NAME

    @abstractmethod
    def build_tools(self) -> ToolCatalogue:
        """Return this agent's tool catalogue (possibly empty)."""

    def placeholders(self) -> Dict[str, str]:
        """Values substituted into ``SYSTEM_PROMPT``."""
        return {
            "DIRECTORY": str(self.directory.resolve()),
            "OS": platform.system(),
            "DATE": date.today().isoformat(),
        }

    def tool_specs(self) -> List[ToolSpec]:
        """Declarations sent to the backend on every request."""
        return self.catalogue.specs()

    def dispatch(self, name: str, arguments: Mapping[str, Any]) -> str:
        """Execute one tool call locally."""
        return self.catalogue.dispatch(name, arguments)

    def system_prompt(self) -> str:
        """The composed system prompt."""
        return compose(self.SYSTEM_PROMPT, self.placeholders(), self.tool_specs())

    def new_conversation(self, instruction: str | None = None) -> List[ConversationTurn]:
        """Start a conversation with the system turn and, optionally, a user turn."""
        conversation = [ConversationTurn.system(self.system_prompt())]
        if instruction is not None:
            conversation.append(ConversationTurn.user(instruction))
        return conversation

    def request(self, conversation: List[ConversationTurn]) -> ConversationTurn:
        """One backend round-trip with this agent's endpoint, model and tools."""
        return send(
            self.endpoint,
            self.model,
            conversation,
            self.tool_specs(),
            client=self.client,
            timeout=self.timeout,
        )

    def run_loop(self, conversation: List[ConversationTurn]) -> AgentResult:
        """Continue a caller-held conversation until the agent answers."""
        return run_agent_loop(self, conversation)

    def run(self, instruction: str) -> str:
        """Answer *instruction* in a fresh conversation and return the final text."""
        return self.run_loop(self.new_conversation(instruction)).text


class Worker(Agent):
    """An agent reachable only through delegation."""

    ROLE: ClassVar[str] = ""
    DESCRIPTION: ClassVar[str] = ""

    @property
    def role(self) -> str:
        """Registry key of this worker."""
        return self.ROLE

    @property
    def name(self) -> str:
        return self.ROLE

    @property
    def description(self) -> str:
        """One-line summary shown to the coordinator."""
        return self.DESCRIPTION

    def process(self, instruction: str) -> str:
        """Carry out a delegated instruction."""
        logger.debug("Worker '%s' processing: %s", self.role, instruction)
        return self.run(instruction)
