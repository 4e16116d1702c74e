"""
Data models for swarm definitions.

A swarm definition names the agents a router may call, plus the optional
router and finalizer, as loaded from a YAML file.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class AgentConfig:
    """Definition of a single agent."""

    name: str
    instructions: str
    description: str = ""
    model: Optional[str] = None
    # Registry names or "package.module:function" references.
    tools: list[str] = field(default_factory=list)


@dataclass
class SwarmConfiguration:
    """Top-level swarm definition."""

    version: str = "1.0"
    agents: dict[str, AgentConfig] = field(default_factory=dict)
    router: Optional[AgentConfig] = None
    finalizer: Optional[AgentConfig] = None
    max_turns: Optional[int] = None
    # Modules imported before tools are resolved, so their @tool
    # registrations are in place.
    tool_modules: list[str] = field(default_factory=list)
