"""
Chat transport for Hive.

This module is the only place that *directly* calls an LLM backend.  Everything else (agent loop,
tools, delegation) stays backend-agnostic.  The backend speaks the Ollama ``/api/chat`` schema:
one POST, one complete reply message, no streaming.
"""

import logging
from typing import (
    Optional,
    Sequence,
)

import httpx
from pydantic import ValidationError

from hive.core.schema import (
    ChatRequest,
    ChatResponse,
    ConversationTurn,
    ToolDefinition,
    ToolSpec,
)

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when the backend cannot be reached or its reply cannot be understood."""


def build_request(
    model: str,
    conversation: Sequence[ConversationTurn],
    tool_specs: Sequence[ToolSpec] | None = None,
) -> ChatRequest:
    """Assemble the request body; ``tools`` is left out for an empty catalogue."""
    tools = [ToolDefinition.from_spec(spec) for spec in tool_specs] if tool_specs else None
    return ChatRequest(model=model, messages=list(conversation), stream=False, tools=tools)


def send(
    endpoint: str,
    model: str,
    conversation: Sequence[ConversationTurn],
    tool_specs: Sequence[ToolSpec] | None = None,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float | None = None,
) -> ConversationTurn:
    """
    Send *conversation* to the backend and return its single reply turn.

    Parameters
    ----------
    endpoint:
        Full URL of the chat endpoint, e.g. ``http://localhost:11434/api/chat``.
    model:
        Backend model identifier.
    conversation:
        Non-empty list of turns, conventionally starting with the system turn.
    tool_specs:
        Catalogue offered to the model on this request.
    client:
        Optional shared ``httpx.Client``.  When omitted a short-lived client is opened.
    timeout:
        Request timeout in seconds for the short-lived client.

    Raises
    ------
    ValueError
        If *conversation* is empty.
    TransportError
        On a malformed endpoint, network failure, timeout, non-2xx status or a malformed reply
        body.  Never retried here; retry policy belongs to the caller.
    """
    if not conversation:
        raise ValueError("Cannot send an empty conversation.")

    payload = build_request(model, conversation, tool_specs).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )
    logger.debug("POST %s model=%s turns=%d", endpoint, model, len(conversation))

    try:
        if client is None:
            with httpx.Client(timeout=timeout) as http:
                resp = http.post(endpoint, json=payload)
        else:
            resp = client.post(endpoint, json=payload)
        resp.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("Backend request to %s failed: %s", endpoint, exc)
        raise TransportError(f"Backend request to {endpoint} failed: {exc}") from exc

    try:
        body = resp.json()
    except ValueError as exc:
        raise TransportError(f"Backend reply is not JSON: {exc}") from exc

    try:
        reply = ChatResponse.model_validate(body).message
    except ValidationError as exc:
        raise TransportError(f"Malformed backend reply: {exc}") from exc

    logger.debug("Backend reply: %s", reply.to_wire())
    return reply
