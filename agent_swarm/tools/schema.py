"""
Tool schema derivation.

Turns a Python callable plus its parameter descriptors into an OpenAI
function-calling tool definition. Descriptors come either from the
``@tool`` decorator (see ``registry``) or, when none is attached, from the
callable's docstring (see ``docstring``). Both paths produce a ``ToolSpec``
and go through the same completeness checks against the signature.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from ..exceptions import InvalidToolError, SchemaDerivationError

logger = logging.getLogger(__name__)

ALLOWED_TYPES = ("string", "number", "boolean", "array", "object")

# Attribute under which ``@tool`` stores the declarative descriptor.
TOOL_SPEC_ATTR = "__tool_spec__"


@dataclass(frozen=True)
class ParameterSpec:
    """Descriptor for a single tool parameter."""

    name: str
    type: str
    description: str
    enum: Optional[tuple] = None
    # None means "required iff the signature has no default".
    required: Optional[bool] = None


@dataclass(frozen=True)
class ToolSpec:
    """Descriptor for a tool: what the model is told about it."""

    description: str
    parameters: tuple[ParameterSpec, ...] = ()
    name: Optional[str] = None


@dataclass(frozen=True)
class CallableTool:
    """A raw callable with its derived schema."""

    fn: Callable[..., Any]
    schema: dict = field(hash=False, compare=False)

    @property
    def name(self) -> str:
        return self.schema["function"]["name"]


@dataclass(frozen=True)
class PrebuiltTool:
    """A schema supplied as-is; nothing local is invoked for it."""

    schema: dict = field(hash=False)

    @property
    def name(self) -> str:
        return self.schema["function"]["name"]


AgentTool = Union[CallableTool, PrebuiltTool]


def _validate_type(function_name: str, param: ParameterSpec) -> str:
    param_type = (param.type or "").lower()
    if param_type not in ALLOWED_TYPES:
        raise SchemaDerivationError(
            function_name,
            f"invalid type '{param.type}' for parameter {param.name}. "
            f"Allowed types are: {', '.join(ALLOWED_TYPES)}.",
        )
    return param_type


def _declared_parameters(fn: Callable, function_name: str) -> list[inspect.Parameter]:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        raise SchemaDerivationError(function_name, f"cannot inspect signature: {e}") from e

    params = []
    for param in signature.parameters.values():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            raise SchemaDerivationError(
                function_name,
                f"variadic parameter '{param.name}' cannot be described in a tool schema.",
            )
        if param.kind is inspect.Parameter.KEYWORD_ONLY:
            raise SchemaDerivationError(
                function_name,
                f"keyword-only parameter '{param.name}' cannot receive "
                "positional tool arguments.",
            )
        params.append(param)
    return params


def build_function_schema(fn: Callable, spec: ToolSpec) -> dict:
    """
    Build the OpenAI tool definition for ``fn`` from ``spec``.

    The signature and the descriptor must describe exactly the same
    parameters. Properties are emitted in signature order.

    Raises:
        SchemaDerivationError: On any mismatch or invalid descriptor.
    """
    function_name = spec.name or getattr(fn, "__name__", repr(fn))

    if not spec.description or not spec.description.strip():
        raise SchemaDerivationError(function_name, "missing @description.")

    documented: dict[str, ParameterSpec] = {}
    for param in spec.parameters:
        if param.name in documented:
            raise SchemaDerivationError(
                function_name, f"parameter {param.name} is documented more than once."
            )
        documented[param.name] = param

    declared = _declared_parameters(fn, function_name)
    declared_names = [p.name for p in declared]

    for name in declared_names:
        if name not in documented:
            raise SchemaDerivationError(
                function_name, f"parameter {name} is not documented."
            )

    for name in documented:
        if name not in declared_names:
            raise SchemaDerivationError(
                function_name,
                f"parameter {name} is documented but not present in the signature.",
            )

    properties: dict[str, dict] = {}
    required: list[str] = []
    for declared_param in declared:
        param = documented[declared_param.name]
        prop: dict[str, Any] = {
            "type": _validate_type(function_name, param),
            "description": param.description,
        }
        if param.enum is not None:
            prop["enum"] = list(param.enum)
        properties[param.name] = prop

        is_required = param.required
        if is_required is None:
            is_required = declared_param.default is inspect.Parameter.empty
        if is_required:
            required.append(param.name)

    return {
        "type": "function",
        "function": {
            "name": function_name,
            "description": spec.description.strip(),
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }


def derive_tool_schema(fn: Callable) -> dict:
    """
    Derive an OpenAI tool definition for a callable.

    Uses the descriptor attached by ``@tool`` when present, otherwise parses
    the callable's docstring.

    Args:
        fn: The tool callable.

    Returns:
        Tool definition dict (``{"type": "function", "function": {...}}``).

    Raises:
        SchemaDerivationError: If the metadata violates the contract.
    """
    spec = getattr(fn, TOOL_SPEC_ATTR, None)
    if spec is None:
        # Imported lazily: the adapter depends on this module's types.
        from .docstring import parse_docstring

        spec = parse_docstring(fn)
    schema = build_function_schema(fn, spec)
    logger.debug(f"Derived schema for tool '{schema['function']['name']}'")
    return schema


def resolve_tool(tool: Any) -> AgentTool:
    """Resolve a raw tool entry into a CallableTool or PrebuiltTool."""
    if isinstance(tool, (CallableTool, PrebuiltTool)):
        return tool
    if callable(tool):
        return CallableTool(fn=tool, schema=derive_tool_schema(tool))
    if isinstance(tool, dict) and isinstance(tool.get("function"), dict):
        return PrebuiltTool(schema=tool)
    raise InvalidToolError(tool)
