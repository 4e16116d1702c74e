"""
agent-swarm - router/agent/finalizer orchestration over the OpenAI chat API

This package provides:
- Agent descriptors exposing themselves as single-input tools
- Tool schema derivation from @tool descriptors or docstrings
- The swarm orchestration loop with nested agent dispatch
- Transcript rendering and an interactive CLI
"""

from .agent import Agent
from .exceptions import (
    ConfigurationError,
    DispatchError,
    InvalidToolError,
    SchemaDerivationError,
    SwarmError,
    ToolExecutionError,
    UnknownAgentError,
)
from .orchestration import (
    Swarm,
    SwarmResult,
    format_messages_pretty,
    get_final_answer,
    print_messages_pretty,
)
from .tools import ToolRegistry, derive_tool_schema, param, tool

__all__ = [
    "Agent",
    "Swarm",
    "SwarmResult",
    "derive_tool_schema",
    "tool",
    "param",
    "ToolRegistry",
    "format_messages_pretty",
    "print_messages_pretty",
    "get_final_answer",
    "SwarmError",
    "ConfigurationError",
    "InvalidToolError",
    "SchemaDerivationError",
    "DispatchError",
    "UnknownAgentError",
    "ToolExecutionError",
]

__version__ = "0.1.0"
