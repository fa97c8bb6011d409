"""
Schema definitions for agent <-> backend <-> tool messages.

These data models serve as the contract between the chat backend, the agent loop, and individual
tools.  We keep them separate from runtime logic so they can be imported anywhere without
side-effects.  Field aliases carry the backend's wire names (``content``, ``tool_calls``), so
``model_dump(by_alias=True)`` produces request bodies directly.
"""

import json
from enum import Enum
from typing import (
    Any,
    Dict,
    List,
    Literal,
    Optional,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


class Role(str, Enum):
    """Author of a conversation turn."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


# ---------------------------------------------------------------------------
# Tool calls (produced by the backend only)
# ---------------------------------------------------------------------------
class FunctionCall(BaseModel):
    """Name and arguments of a tool the model wants to run."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Tool name from the agent's catalogue")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Keyword arguments")

    @field_validator("arguments", mode="before")
    @classmethod
    def _decode_arguments(cls, value: Any) -> Any:
        # Some backends ship the arguments as a JSON-encoded string
        if value is None:
            return {}
        if isinstance(value, str):
            if not value.strip():
                return {}
            try:
                return json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError(f"tool arguments are not valid JSON: {exc}") from exc
        return value


class ToolInvocation(BaseModel):
    """A call that the model wants the agent to execute."""

    model_config = ConfigDict(frozen=True)

    function: FunctionCall

    @property
    def name(self) -> str:
        """Requested tool name."""
        return self.function.name

    @property
    def arguments(self) -> Dict[str, Any]:
        """Requested tool arguments."""
        return self.function.arguments


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------
class ConversationTurn(BaseModel):
    """A single message in a conversation with the backend."""

    model_config = ConfigDict(populate_by_name=True)

    role: Role
    text: Optional[str] = Field(None, alias="content")
    tool_invocations: Optional[List[ToolInvocation]] = Field(None, alias="tool_calls")

    @model_validator(mode="after")
    def _tool_turns_carry_text(self) -> "ConversationTurn":
        if self.role is Role.TOOL and (self.text is None or self.tool_invocations):
            raise ValueError("a tool turn carries text and never tool invocations")
        return self

    @classmethod
    def system(cls, text: str) -> "ConversationTurn":
        """Build a system turn."""
        return cls(role=Role.SYSTEM, text=text)

    @classmethod
    def user(cls, text: str) -> "ConversationTurn":
        """Build a user turn."""
        return cls(role=Role.USER, text=text)

    @classmethod
    def tool(cls, text: str) -> "ConversationTurn":
        """Build a tool-result turn."""
        return cls(role=Role.TOOL, text=text)

    @property
    def has_tool_invocations(self) -> bool:
        """True when the turn asks for at least one tool call."""
        return bool(self.tool_invocations)

    def to_wire(self) -> Dict[str, Any]:
        """Serialise with backend field names, omitting absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Tool declarations
# ---------------------------------------------------------------------------
class ToolSpec(BaseModel):
    """Declaration of one callable operation in an agent's catalogue."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parameter_schema: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )


class ToolFunction(BaseModel):
    """Wire form of a tool declaration's function block."""

    name: str
    description: str
    parameters: Dict[str, Any]


class ToolDefinition(BaseModel):
    """Wire form of a tool declaration."""

    type: Literal["function"] = "function"
    function: ToolFunction

    @classmethod
    def from_spec(cls, spec: ToolSpec) -> "ToolDefinition":
        """Convert a catalogue entry to its wire form."""
        return cls(
            function=ToolFunction(
                name=spec.name, description=spec.description, parameters=spec.parameter_schema
            )
        )


# ---------------------------------------------------------------------------
# Backend request / response
# ---------------------------------------------------------------------------
class ChatRequest(BaseModel):
    """Body of a chat-completion request."""

    model: str
    messages: List[ConversationTurn]
    stream: bool = False
    tools: Optional[List[ToolDefinition]] = None


class ChatResponse(BaseModel):
    """Body of a chat-completion reply; extra backend fields are ignored."""

    message: ConversationTurn


# ---------------------------------------------------------------------------
# Loop outcome
# ---------------------------------------------------------------------------
class LoopStatus(str, Enum):
    """How an agent loop run ended."""

    DONE = "done"
    BUDGET_EXHAUSTED = "budget_exhausted"


class AgentResult(BaseModel):
    """Outcome of one agent loop run."""

    text: str
    status: LoopStatus = LoopStatus.DONE
    iterations: int = 0
