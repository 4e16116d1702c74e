"""
agent-swarm tools package

- schema: tool schema derivation and the CallableTool / PrebuiltTool variants
- docstring: ``@description`` / ``@param`` docstring adapter
- registry: ``@tool`` decorator and named tool lookup
- catalog: example sales tools
"""

from .schema import (
    ALLOWED_TYPES,
    AgentTool,
    CallableTool,
    ParameterSpec,
    PrebuiltTool,
    ToolSpec,
    derive_tool_schema,
    resolve_tool,
)
from .docstring import parse_docstring
from .registry import ToolRegistry, param, tool

__all__ = [
    "ALLOWED_TYPES",
    "AgentTool",
    "CallableTool",
    "ParameterSpec",
    "PrebuiltTool",
    "ToolSpec",
    "derive_tool_schema",
    "resolve_tool",
    "parse_docstring",
    "ToolRegistry",
    "param",
    "tool",
]
