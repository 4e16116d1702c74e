"""
Agent descriptor.

An Agent is a named, instructed, model-bound participant in a swarm. The
router sees every agent as a single-input tool; when dispatched, the agent
runs its own nested chat request with its own tools.
"""

import logging
from typing import Any, Iterable, Optional

from .config import config
from .exceptions import ConfigurationError
from .tools.schema import AgentTool, CallableTool, resolve_tool

logger = logging.getLogger(__name__)

AGENT_INPUT_DESCRIPTION = "Input for the agent"


def build_agent_tool_schema(name: str, description: str) -> dict:
    """Schema presenting an agent to the router as a single-string-input tool."""
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": {
                    "input": {
                        "type": "string",
                        "description": AGENT_INPUT_DESCRIPTION,
                    }
                },
                "required": ["input"],
            },
        },
    }


class Agent:
    """
    A named agent with instructions, a model and optional tools.

    Tool entries may be callables (schema derived from their descriptor or
    docstring) or prebuilt tool schemas. They are resolved once here; the
    agent is read-only afterwards.

    Raises:
        ConfigurationError: If the name is empty.
        InvalidToolError: If a tool entry has an unsupported shape.
        SchemaDerivationError: If a callable's metadata is invalid.
    """

    def __init__(
        self,
        name: str,
        instructions: str,
        description: str = "",
        model: Optional[str] = None,
        tools: Iterable[Any] = (),
    ):
        if not name or not name.strip():
            raise ConfigurationError("Agent name must not be empty")

        self._name = name
        self._description = description
        self._instructions = instructions
        self._model = model or config.openai.default_model
        self._tools: tuple[AgentTool, ...] = tuple(resolve_tool(t) for t in tools)
        self._tool_schema = build_agent_tool_schema(name, description)
        self._tool_schemas = [t.schema for t in self._tools]

        logger.debug(
            f"Agent '{name}' ready (model={self._model}, tools={[t.name for t in self._tools]})"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def instructions(self) -> str:
        return self._instructions

    @property
    def model(self) -> str:
        return self._model

    @property
    def tools(self) -> tuple[AgentTool, ...]:
        return self._tools

    @property
    def tool_schema(self) -> dict:
        """Schema the router sees for this agent."""
        return self._tool_schema

    @property
    def tool_schemas(self) -> list[dict]:
        """Schemas for this agent's own tools, in registration order."""
        return list(self._tool_schemas)

    def find_tool(self, name: str) -> Optional[CallableTool]:
        """Return the callable tool registered under ``name``, if any."""
        for entry in self._tools:
            if isinstance(entry, CallableTool) and entry.name == name:
                return entry
        return None

    def get_spec(self) -> dict:
        """Agent description for registering with provider-side agent APIs."""
        return {
            "name": self._name,
            "description": self._description,
            "model": self._model,
            "system_message": self._instructions,
            "tools": self.tool_schemas,
        }

    def __repr__(self) -> str:
        return f"Agent(name={self._name!r}, model={self._model!r}, tools={len(self._tools)})"
