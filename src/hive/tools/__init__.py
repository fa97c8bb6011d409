"""
Tool catalogue for Hive.

Every agent owns one :class:`ToolCatalogue`: the declarations sent to the model on each request
plus the table used to execute the calls it makes.  Tools are plain functions called with keyword
arguments; they return a string (anything else is converted with ``str``).

Tools can be registered with a decorator:
    catalogue = ToolCatalogue()

    @catalogue.tool("read_file", path="Path to the file to read")
    def read_file(path: str) -> str:
        ...
"""

import inspect
import logging
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    get_type_hints,
)

from hive.core.schema import ToolSpec
from hive.core.transport import TransportError

logger = logging.getLogger(__name__)

_JSON_TYPES: Dict[type, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


class ToolExecutionError(RuntimeError):
    """Raised when a registered tool fails while running."""


def build_parameter_schema(fn: Callable, param_docs: Mapping[str, str] | None = None) -> Dict:
    """Derive a JSON-schema ``parameters`` block from *fn*'s signature and type hints."""
    param_docs = param_docs or {}
    sig = inspect.signature(fn)
    type_hints = get_type_hints(fn)
    properties: Dict[str, Dict[str, str]] = {}
    required: List[str] = []
    for param_name, param in sig.parameters.items():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        hint = type_hints.get(param_name, str)
        prop = {"type": _JSON_TYPES.get(getattr(hint, "__origin__", hint), "string")}
        if param_name in param_docs:
            prop["description"] = param_docs[param_name]
        properties[param_name] = prop
        if param.default is inspect.Parameter.empty:
            required.append(param_name)
    return {"type": "object", "properties": properties, "required": required}


class ToolCatalogue:
    """Declarations and dispatch table of one agent's tools."""

    def __init__(self) -> None:
        self._specs: Dict[str, ToolSpec] = {}
        self._handlers: Dict[str, Callable[..., Any]] = {}

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def register(
        self,
        name: str,
        fn: Callable[..., Any],
        description: str | None = None,
        parameters: Mapping[str, Any] | None = None,
        **param_docs: str,
    ) -> Callable[..., Any]:
        """
        Add *fn* to the catalogue under *name*.

        Parameters
        ----------
        name:
            Unique tool name within this catalogue.
        fn:
            Callable invoked with the model's arguments as keyword arguments.
        description:
            Text shown to the model; defaults to the function's docstring.
        parameters:
            Explicit JSON-schema ``parameters`` block.  When omitted it is derived from the
            signature, with ``param_docs`` as per-parameter descriptions.

        Raises
        ------
        ValueError
            If a tool with the same name is already registered.
        """
        if name in self._specs:
            raise ValueError(f"Tool '{name}' is already registered.")
        logger.debug("Registering tool '%s'", name)

        if parameters is not None:
            schema = dict(parameters)
        else:
            schema = build_parameter_schema(fn, param_docs)
        self._specs[name] = ToolSpec(
            name=name,
            description=description if description is not None else inspect.getdoc(fn) or "",
            parameter_schema=schema,
        )
        self._handlers[name] = fn
        return fn

    def tool(
        self, name: str, description: str | None = None, **param_docs: str
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of :meth:`register`."""

        def wrapper(fn: Callable[..., Any]) -> Callable[..., Any]:
            return self.register(name, fn, description, **param_docs)

        return wrapper

    def specs(self) -> List[ToolSpec]:
        """Return the declarations in registration order."""
        return list(self._specs.values())

    def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> str:
        """
        Run the tool *name* with *arguments* and return its result as a string.

        Unknown tools and arguments that do not fit the signature are reported as strings so the
        conversation can continue.

        Raises
        ------
        ToolExecutionError
            If the tool itself raises.
        TransportError
            If a delegated agent loses its backend; never wrapped.
        """
        if arguments is None:
            arguments = {}

        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("Unknown tool requested: %s", name)
            return f"Unknown tool: {name}"

        try:
            inspect.signature(handler).bind(**arguments)
        except TypeError as exc:
            logger.warning("Invalid arguments for tool '%s': %s", name, exc)
            return f"Error: invalid arguments for tool '{name}': {exc}"

        try:
            logger.debug("Executing tool '%s' with args=%s", name, arguments)
            result = handler(**arguments)
        except TransportError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unhandled error in tool '%s'", name)
            raise ToolExecutionError(f"Tool '{name}' raised an error: {exc}") from exc

        return result if isinstance(result, str) else str(result)
