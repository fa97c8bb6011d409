"""Builds the system prompt an agent's conversations start with."""

import re
from typing import (
    Mapping,
    Sequence,
)

from hive.core.schema import ToolSpec

TOOLS_PLACEHOLDER = "TOOLS"
NO_TOOLS = "No tools available."

ITERATION_BUDGET_NOTICE = """

# Iteration Budget
You work in a limited number of rounds. Each reply you send is one round, whether it calls tools
or answers. Call tools only when you need their results, request everything you can in a single
round, and give your final answer as soon as you have enough information. If you run out of
rounds, your last written text is returned as your answer."""

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def format_tool_list(tool_specs: Sequence[ToolSpec]) -> str:
    """Human-readable ``- name: description`` enumeration of a catalogue."""
    if not tool_specs:
        return NO_TOOLS
    return "\n".join(f"- {spec.name}: {spec.description}" for spec in tool_specs)


def compose(
    template: str, placeholder_values: Mapping[str, str], tool_specs: Sequence[ToolSpec]
) -> str:
    """
    Substitute ``{NAME}`` placeholders in *template* and append the iteration-budget notice.

    ``{TOOLS}`` always expands to the tool list.  Placeholders without a value are left as they
    are.
    """
    values = dict(placeholder_values)
    values[TOOLS_PLACEHOLDER] = format_tool_list(tool_specs)

    def _substitute(match: re.Match) -> str:
        return str(values.get(match.group(1), match.group(0)))

    return _PLACEHOLDER_RE.sub(_substitute, template) + ITERATION_BUDGET_NOTICE
