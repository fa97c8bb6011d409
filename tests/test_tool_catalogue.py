"""
Basic sanity tests for the tool catalogue.

Run with:
$ pytest -q
"""

from typing import List

import pytest

from hive.core.transport import TransportError
from hive.tools import (
    ToolCatalogue,
    ToolExecutionError,
)


def _catalogue() -> ToolCatalogue:
    catalogue = ToolCatalogue()

    # This is a stub tool for testing purposes.
    @catalogue.tool("add", a="First operand")
    def _add(a: int, b: int = 0) -> int:
        """Return the sum of two integers (used only for tests)."""

        return a + b

    @catalogue.tool("explode")
    def _explode() -> str:
        """Always fails."""

        raise OSError("disk on fire")

    return catalogue


def test_dispatch_success() -> None:
    """Dispatch should return the tool's value as a string."""

    assert _catalogue().dispatch("add", {"a": 2, "b": 3}) == "5"


def test_dispatch_missing_tool() -> None:
    """An unknown tool is reported, not raised."""

    assert _catalogue().dispatch("not_a_tool", {}) == "Unknown tool: not_a_tool"


def test_dispatch_bad_args() -> None:
    """Missing or unexpected arguments are reported, not raised."""

    catalogue = _catalogue()

    missing = catalogue.dispatch("add", {"b": 2})
    unexpected = catalogue.dispatch("add", {"a": 1, "c": 2})

    assert missing.startswith("Error: invalid arguments for tool 'add'")
    assert unexpected.startswith("Error: invalid arguments for tool 'add'")


def test_dispatch_tool_fault_raises_execution_error() -> None:
    """A tool that raises is wrapped in ToolExecutionError."""

    with pytest.raises(ToolExecutionError) as excinfo:
        _catalogue().dispatch("explode", {})

    assert "disk on fire" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_schema_derived_from_signature() -> None:
    """Types, required parameters and docs come from the function."""

    spec = _catalogue().specs()[0]

    assert spec.name == "add"
    assert spec.description == "Return the sum of two integers (used only for tests)."
    assert spec.parameter_schema == {
        "type": "object",
        "properties": {
            "a": {"type": "integer", "description": "First operand"},
            "b": {"type": "integer"},
        },
        "required": ["a"],
    }


def test_explicit_schema_and_description_win() -> None:
    """A registered schema is used verbatim."""

    catalogue = ToolCatalogue()
    schema = {"type": "object", "properties": {"items": {"type": "array"}}, "required": []}
    catalogue.register("count", lambda items=(): len(items), "Count items", parameters=schema)

    spec = catalogue.specs()[0]

    assert spec.description == "Count items"
    assert spec.parameter_schema == schema
    assert catalogue.dispatch("count", {"items": [1, 2]}) == "2"


def test_specs_keep_registration_order() -> None:
    """specs() lists tools in the order they were registered."""

    catalogue = ToolCatalogue()
    for name in ("b", "a", "c"):
        catalogue.register(name, lambda: name, name)

    names: List[str] = [spec.name for spec in catalogue.specs()]

    assert names == ["b", "a", "c"]


def test_duplicate_registration_rejected() -> None:
    """Tool names are unique within a catalogue."""

    catalogue = _catalogue()

    with pytest.raises(ValueError):
        catalogue.register("add", lambda: "again")


def test_empty_catalogue() -> None:
    """An agent may have no tools at all."""

    catalogue = ToolCatalogue()

    assert catalogue.specs() == []
    assert len(catalogue) == 0
    assert catalogue.dispatch("anything", None) == "Unknown tool: anything"


def test_transport_error_is_not_wrapped() -> None:
    """Backend failures from nested agents pass through untouched."""

    catalogue = ToolCatalogue()

    @catalogue.tool("delegate")
    def _delegate() -> str:
        """Pretend to run another agent."""

        raise TransportError("backend down")

    with pytest.raises(TransportError):
        catalogue.dispatch("delegate", {})
