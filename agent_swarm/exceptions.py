"""
Exception hierarchy for agent-swarm.

Only ToolExecutionError is recovered inside the engine; every other error
aborts the run and reaches the caller. Transport failures are the OpenAI
SDK's own exceptions and are not wrapped.
"""

from typing import Optional


class SwarmError(Exception):
    """Base class for all agent-swarm errors."""


class ConfigurationError(SwarmError):
    """Invalid setup detected before any request is issued."""


class InvalidToolError(ConfigurationError):
    """A tool entry is neither a callable nor a prebuilt schema."""

    def __init__(self, tool: object):
        self.tool = tool
        super().__init__(f"Invalid tool format: {tool!r}")


class SchemaDerivationError(SwarmError):
    """A tool's metadata does not satisfy the schema contract."""

    def __init__(self, function_name: str, message: str):
        self.function_name = function_name
        super().__init__(f"{function_name}: {message}")


class DispatchError(SwarmError):
    """A router tool call could not be turned into an agent dispatch."""


class UnknownAgentError(DispatchError):
    """The router asked for an agent that was not supplied to the run."""

    def __init__(self, agent_name: str):
        self.agent_name = agent_name
        super().__init__(f"Unknown agent: {agent_name}")


class ToolExecutionError(SwarmError):
    """A dispatched agent's tool raised; masked before reaching the model."""

    def __init__(self, tool_name: str, cause: Optional[BaseException] = None):
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Tool '{tool_name}' failed: {cause}")
