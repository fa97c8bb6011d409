"""Tests for the agent loop state machine."""

from typing import List

import httpx
import pytest

from backend_stub import (
    ScriptedBackend,
    answer,
    tool_call,
    tool_calls,
)
from hive.agent.agent_loop import (
    BUDGET_EXHAUSTED_FALLBACK,
    BUDGET_EXHAUSTED_PREFIX,
    run_agent_loop,
)
from hive.agent.base import Agent
from hive.core.schema import (
    LoopStatus,
    Role,
)
from hive.core.transport import TransportError
from hive.tools import ToolCatalogue
from hive.workers.file_manager import FileManager


class EchoAgent(Agent):
    """Agent with a few deterministic tools that records what it ran."""

    NAME = "echo_agent"
    SYSTEM_PROMPT = "You are a test agent.\n{TOOLS}"

    def __init__(self, client: httpx.Client, max_iterations: int = 5) -> None:
        self.executed: List[str] = []
        super().__init__("http://agent.test/api/chat", "test-model",
                         max_iterations=max_iterations, client=client)

    def build_tools(self) -> ToolCatalogue:
        catalogue = ToolCatalogue()
        catalogue.register("echo", self.echo, "Echo the text back", text="Text to echo")
        catalogue.register("boom", self.boom, "Always fails")
        return catalogue

    def echo(self, text: str) -> str:
        self.executed.append(text)
        return f"echo: {text}"

    def boom(self) -> str:
        raise RuntimeError("kaboom")


def test_scenario_a_plain_answer() -> None:
    """A content-only reply ends the loop after one request."""

    backend = ScriptedBackend([answer("Hello")])
    agent = EchoAgent(backend.client())

    result = run_agent_loop(agent, agent.new_conversation("hi"))

    assert result.text == "Hello"
    assert result.status is LoopStatus.DONE
    assert result.iterations == 1
    assert backend.calls == 1


def test_scenario_b_tool_then_answer(tmp_path) -> None:
    """A read_file call is answered with one tool turn before the final reply."""

    (tmp_path / "a.txt").write_text("alpha", encoding="utf-8")
    backend = ScriptedBackend([tool_call("read_file", path="a.txt"), answer("Done")])
    agent = FileManager(tmp_path, client=backend.client())
    conversation = agent.new_conversation("Read a.txt")

    result = run_agent_loop(agent, conversation)

    assert result.text == "Done"
    assert backend.calls == 2
    assert [turn.role for turn in conversation] == [
        Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.TOOL, Role.ASSISTANT,
    ]
    assert conversation[3].text == "alpha"
    # The second request already contains the tool result
    assert backend.requests[1]["messages"][3] == {"role": "tool", "content": "alpha"}


def test_scenario_b_missing_file(tmp_path) -> None:
    """A failed read is passed to the model as text."""

    backend = ScriptedBackend([tool_call("read_file", path="a.txt"), answer("Done")])
    agent = FileManager(tmp_path, client=backend.client())
    conversation = agent.new_conversation("Read a.txt")

    run_agent_loop(agent, conversation)

    assert conversation[3].text.startswith("Error reading file:")


def test_scenario_c_ceiling_reached() -> None:
    """Endless tool calls stop after exactly ``ceiling`` requests."""

    backend = ScriptedBackend([tool_call("echo", text="again")], repeat_last=True)
    agent = EchoAgent(backend.client(), max_iterations=5)

    result = run_agent_loop(agent, agent.new_conversation("loop forever"))

    assert backend.calls == 5
    assert result.status is LoopStatus.BUDGET_EXHAUSTED
    assert result.iterations == 5
    assert result.text == BUDGET_EXHAUSTED_FALLBACK


def test_ceiling_result_keeps_last_assistant_text() -> None:
    """The degraded answer carries the last text the model wrote."""

    backend = ScriptedBackend(
        [
            tool_call("echo", content="first thought", text="1"),
            tool_call("echo", content="second thought", text="2"),
            tool_call("echo", text="3"),
        ]
    )
    agent = EchoAgent(backend.client(), max_iterations=3)

    result = run_agent_loop(agent, agent.new_conversation("go"))

    assert backend.calls == 3
    assert result.text == BUDGET_EXHAUSTED_PREFIX + "second thought"


def test_ceiling_override_per_run() -> None:
    """An explicit ceiling takes precedence over the agent's own."""

    backend = ScriptedBackend([tool_call("echo", text="x")], repeat_last=True)
    agent = EchoAgent(backend.client(), max_iterations=5)

    result = run_agent_loop(agent, agent.new_conversation("go"), max_iterations=2)

    assert backend.calls == 2
    assert result.status is LoopStatus.BUDGET_EXHAUSTED


def test_invalid_ceiling_rejected() -> None:
    """A ceiling below one makes no sense."""

    agent = EchoAgent(ScriptedBackend([]).client())

    with pytest.raises(ValueError):
        run_agent_loop(agent, agent.new_conversation("go"), max_iterations=0)


def test_tool_turns_follow_invocation_order() -> None:
    """Invocations in one reply run, and are recorded, in order."""

    backend = ScriptedBackend(
        [
            tool_calls(("echo", {"text": "1"}), ("echo", {"text": "2"}), ("echo", {"text": "3"})),
            answer("ok"),
        ]
    )
    agent = EchoAgent(backend.client())
    conversation = agent.new_conversation("go")

    run_agent_loop(agent, conversation)

    assert agent.executed == ["1", "2", "3"]
    tool_texts = [turn.text for turn in conversation if turn.role is Role.TOOL]
    assert tool_texts == ["echo: 1", "echo: 2", "echo: 3"]


def test_tool_fault_becomes_conversation_text() -> None:
    """A raising tool does not stop the loop; its error reaches the model."""

    backend = ScriptedBackend([tool_call("boom"), answer("recovered")])
    agent = EchoAgent(backend.client())
    conversation = agent.new_conversation("go")

    result = run_agent_loop(agent, conversation)

    assert result.text == "recovered"
    fault = conversation[3]
    assert fault.role is Role.TOOL
    assert fault.text.startswith("Error: ")
    assert "kaboom" in fault.text


def test_unknown_tool_and_bad_arguments_continue() -> None:
    """Unknown names and bad arguments are answered in-band."""

    backend = ScriptedBackend(
        [tool_calls(("nope", {}), ("echo", {"wrong": 1})), answer("ok")]
    )
    agent = EchoAgent(backend.client())
    conversation = agent.new_conversation("go")

    run_agent_loop(agent, conversation)

    assert conversation[3].text == "Unknown tool: nope"
    assert "invalid arguments" in conversation[4].text


def test_missing_content_yields_empty_text() -> None:
    """A final reply without content returns an empty string."""

    backend = ScriptedBackend([{"role": "assistant"}])
    agent = EchoAgent(backend.client())

    assert agent.run("go") == ""


def test_transport_error_propagates() -> None:
    """Backend failures abort the loop."""

    backend = ScriptedBackend([tool_call("echo", text="x")])  # second request gets a 500
    agent = EchoAgent(backend.client())

    with pytest.raises(TransportError):
        agent.run("go")


def test_conversation_is_extended_in_place() -> None:
    """A caller-held conversation keeps growing across runs."""

    backend = ScriptedBackend([answer("one"), answer("two")])
    agent = EchoAgent(backend.client())
    conversation = agent.new_conversation("first")

    run_agent_loop(agent, conversation)
    conversation.append(conversation[1].model_copy(update={"text": "second"}))
    result = run_agent_loop(agent, conversation)

    assert result.text == "two"
    assert len(conversation) == 5
    assert len(backend.requests[1]["messages"]) == 4


def test_system_prompt_lists_tools() -> None:
    """Fresh conversations start with the composed system prompt."""

    agent = EchoAgent(ScriptedBackend([]).client())

    conversation = agent.new_conversation("hi")

    assert conversation[0].role is Role.SYSTEM
    assert "- echo: Echo the text back" in conversation[0].text
    assert conversation[1].text == "hi"


def test_empty_final_answer_is_not_replaced_by_earlier_text() -> None:
    """Only the reply that ends the loop supplies its text."""

    backend = ScriptedBackend([tool_call("echo", content="Working on it", text="x"), answer("")])
    agent = EchoAgent(backend.client())

    result = run_agent_loop(agent, agent.new_conversation("go"))

    assert result.status is LoopStatus.DONE
    assert result.text == ""
    assert result.iterations == 2
    assert agent.executed == ["x"]
