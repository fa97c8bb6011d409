"""Scripted stand-in for the chat backend, served through ``httpx.MockTransport``."""

import json
from typing import (
    Any,
    Dict,
    Iterable,
    List,
)

import httpx


def answer(text: str) -> Dict[str, Any]:
    """A content-only assistant reply."""
    return {"role": "assistant", "content": text}


def tool_call(name: str, content: str = "", **arguments: Any) -> Dict[str, Any]:
    """An assistant reply asking for one tool call."""
    return tool_calls((name, arguments), content=content)


def tool_calls(*calls: Any, content: str = "") -> Dict[str, Any]:
    """An assistant reply asking for several ``(name, arguments)`` tool calls."""
    return {
        "role": "assistant",
        "content": content,
        "tool_calls": [{"function": {"name": name, "arguments": args}} for name, args in calls],
    }


class ScriptedBackend:
    """
    Answers each request with the next scripted reply and records the request bodies.

    The first *fail_first* requests, and any request after the script runs out, get a 500.
    """

    def __init__(
        self, replies: Iterable[Dict[str, Any]], repeat_last: bool = False, fail_first: int = 0
    ) -> None:
        self.replies: List[Dict[str, Any]] = list(replies)
        self.repeat_last = repeat_last
        self.fail_first = fail_first
        self.requests: List[Dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if len(self.requests) <= self.fail_first or not self.replies:
            return httpx.Response(500, json={"error": "script exhausted"})
        if self.repeat_last and len(self.replies) == 1:
            reply = self.replies[0]
        else:
            reply = self.replies.pop(0)
        return httpx.Response(200, json={"model": "stub", "message": reply, "done": True})

    @property
    def calls(self) -> int:
        """Number of requests received."""
        return len(self.requests)

    def client(self) -> httpx.Client:
        """An ``httpx.Client`` routed to this backend."""
        return httpx.Client(transport=httpx.MockTransport(self))
