"""Bounded tool-use loop shared by every agent."""

from __future__ import annotations

import logging
from enum import Enum
from typing import (
    TYPE_CHECKING,
    List,
)

from hive.core.schema import (
    AgentResult,
    ConversationTurn,
    LoopStatus,
    Role,
    ToolInvocation,
)
from hive.core.transport import TransportError

if TYPE_CHECKING:
    from hive.agent.base import Agent

logger = logging.getLogger(__name__)

BUDGET_EXHAUSTED_PREFIX = "[Iteration limit reached] "
BUDGET_EXHAUSTED_FALLBACK = "Iteration limit reached without a final answer."


class LoopState(Enum):
    """States of the agent loop."""

    AWAITING_MODEL = "awaiting_model"
    HANDLING_TOOLS = "handling_tools"
    DONE = "done"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def execute_invocation(agent: "Agent", invocation: ToolInvocation) -> str:
    """
    Run one tool call on *agent* and return the text for its ``tool`` turn.

    Faults become ``"Error: <cause>"`` so the model sees them on its next round.  Only
    :class:`TransportError` (raised by a nested delegation) propagates.
    """
    logger.debug("[%s] Tool call: %s(%s)", agent.name, invocation.name, invocation.arguments)
    try:
        result = agent.dispatch(invocation.name, invocation.arguments)
    except TransportError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.warning("[%s] Tool '%s' failed: %s", agent.name, invocation.name, exc)
        return f"Error: {exc}"
    logger.debug("[%s] Tool '%s' returned: %s", agent.name, invocation.name, result)
    return result


def _degraded_text(turns: List[ConversationTurn]) -> str:
    for turn in reversed(turns):
        if turn.role is Role.ASSISTANT and turn.text:
            return BUDGET_EXHAUSTED_PREFIX + turn.text
    return BUDGET_EXHAUSTED_FALLBACK


# ---------------------------------------------------------------------------
# Agent Loop
# ---------------------------------------------------------------------------
def run_agent_loop(
    agent: "Agent", conversation: List[ConversationTurn], max_iterations: int | None = None
) -> AgentResult:
    """
    Drive *conversation* until the model answers without tool calls or the ceiling is hit.

    The conversation is extended in place: every reply, then one ``tool`` turn per invocation in
    the order the backend returned them.  At most *max_iterations* backend requests are made
    (default: the agent's own ceiling).

    Raises
    ------
    TransportError
        If the backend (of this agent or of any worker it delegates to) cannot be reached.
    """
    ceiling = agent.max_iterations if max_iterations is None else max_iterations
    if ceiling < 1:
        raise ValueError(f"max_iterations must be at least 1, got {ceiling}")

    start = len(conversation)
    state = LoopState.AWAITING_MODEL
    iteration = 0
    pending: List[ToolInvocation] = []
    final_text = ""

    logger.info("[%s] === Starting agent loop ===", agent.name)
    while True:
        if state is LoopState.AWAITING_MODEL:
            if iteration >= ceiling:
                logger.warning(
                    "[%s] Iteration ceiling (%d) reached without a final answer",
                    agent.name,
                    ceiling,
                )
                return AgentResult(
                    text=_degraded_text(conversation[start:]),
                    status=LoopStatus.BUDGET_EXHAUSTED,
                    iterations=iteration,
                )
            iteration += 1
            logger.info("[%s] --- Iteration %d/%d ---", agent.name, iteration, ceiling)
            reply = agent.request(conversation)
            conversation.append(reply)
            pending = list(reply.tool_invocations or [])
            final_text = reply.text or ""
            state = LoopState.HANDLING_TOOLS if reply.has_tool_invocations else LoopState.DONE

        elif state is LoopState.HANDLING_TOOLS:
            logger.info("[%s] Received %d tool call(s)", agent.name, len(pending))
            for invocation in pending:
                conversation.append(ConversationTurn.tool(execute_invocation(agent, invocation)))
            pending = []
            state = LoopState.AWAITING_MODEL

        else:
            logger.info("[%s] Finished after %d iteration(s)", agent.name, iteration)
            return AgentResult(text=final_text, status=LoopStatus.DONE, iterations=iteration)
