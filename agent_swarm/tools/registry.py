"""
Tool Registry - named lookup for tools that swarm configs refer to.

The ``@tool`` decorator attaches a declarative ``ToolSpec`` to a function,
derives its schema immediately (so contract violations fail at import
time) and registers it under its tool name.
"""

from typing import Any, Callable, Optional, Sequence

from .schema import TOOL_SPEC_ATTR, CallableTool, ParameterSpec, ToolSpec, derive_tool_schema


def param(
    name: str,
    type: str,
    description: str,
    enum: Optional[Sequence[Any]] = None,
    required: Optional[bool] = None,
) -> ParameterSpec:
    """Shorthand for a ParameterSpec."""
    return ParameterSpec(
        name=name,
        type=type,
        description=description,
        enum=tuple(enum) if enum is not None else None,
        required=required,
    )


class ToolRegistry:
    """Central registry for all named tools."""

    _tools: dict[str, CallableTool] = {}

    @classmethod
    def register(cls, fn: Callable[..., Any]) -> CallableTool:
        """Derive the schema for ``fn`` and register it under its tool name."""
        entry = CallableTool(fn=fn, schema=derive_tool_schema(fn))
        cls._tools[entry.name] = entry
        return entry

    @classmethod
    def get(cls, name: str) -> Optional[CallableTool]:
        """Get a tool by name."""
        return cls._tools.get(name)

    @classmethod
    def all_tools(cls) -> dict[str, CallableTool]:
        """Get a copy of all registered tools."""
        return cls._tools.copy()

    @classmethod
    def get_tools_summary(cls) -> str:
        """Get formatted summary of all tools for display."""
        lines = []
        for name, entry in cls._tools.items():
            lines.append(f"- {name}: {entry.schema['function']['description']}")
        return "\n".join(lines)

    @classmethod
    def clear(cls) -> None:
        """Clear all registered tools (mainly for testing)."""
        cls._tools.clear()


def tool(
    description: str,
    parameters: Sequence[ParameterSpec] = (),
    name: Optional[str] = None,
    register: bool = True,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Attach a declarative tool descriptor to a function.

    Args:
        description: What the tool does, as shown to the model.
        parameters: One ParameterSpec per signature parameter.
        name: Tool name; defaults to the function name.
        register: Also add the tool to the ToolRegistry.

    Returns:
        Decorator returning the function unchanged apart from the
        attached descriptor.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        spec = ToolSpec(description=description, parameters=tuple(parameters), name=name)
        setattr(fn, TOOL_SPEC_ATTR, spec)
        if register:
            ToolRegistry.register(fn)
        else:
            derive_tool_schema(fn)
        return fn

    return decorator
