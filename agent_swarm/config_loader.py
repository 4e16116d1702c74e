"""
Swarm definition loader for agent-swarm.

Loads swarm definitions from YAML files with support for environment
variable interpolation, and turns them into ``Agent`` objects.
"""

import importlib
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from .agent import Agent
from .config import config
from .exceptions import ConfigurationError
from .models import AgentConfig, SwarmConfiguration
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

# Default swarm definition relative to project root
DEFAULT_SWARM_CONFIG_PATH = Path(__file__).parent.parent / "config" / "swarm.yaml"

# Regex for environment variable interpolation: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def resolve_env_vars(value: str) -> str:
    """
    Resolve environment variable references in a string.

    Supports ${VAR} and ${VAR:-default} syntax.
    """

    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.environ.get(var_name, default_value)

    return ENV_VAR_PATTERN.sub(replace_match, value)


def _substitute_env_vars_recursive(data: Any) -> Any:
    """Recursively substitute environment variables in a data structure."""
    if isinstance(data, dict):
        return {k: _substitute_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    return data


def _parse_agent(name: str, data: Any) -> AgentConfig:
    """Parse a single agent definition from dict."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Agent '{name}' must be a mapping")

    instructions = data.get("instructions")
    if not instructions:
        raise ConfigurationError(f"Agent '{name}' has no instructions")

    tools = data.get("tools") or []
    if not isinstance(tools, list):
        raise ConfigurationError(f"Tools of agent '{name}' must be a list")

    return AgentConfig(
        name=data.get("name", name),
        instructions=instructions,
        description=data.get("description", ""),
        model=data.get("model") or None,
        tools=[str(t) for t in tools],
    )


def parse_swarm_config(raw_config: Optional[dict]) -> SwarmConfiguration:
    """
    Build a SwarmConfiguration from already-loaded YAML data.

    Raises:
        ConfigurationError: If the definition is invalid.
    """
    if not raw_config:
        raise ConfigurationError("Swarm configuration is empty")

    data = _substitute_env_vars_recursive(raw_config)

    agents_data = data.get("agents") or {}
    if not isinstance(agents_data, dict) or not agents_data:
        raise ConfigurationError("Swarm configuration defines no agents")

    agents = {name: _parse_agent(name, agent_data) for name, agent_data in agents_data.items()}

    router = None
    if data.get("router"):
        router = _parse_agent("router", data["router"])

    finalizer = None
    if data.get("finalizer"):
        finalizer = _parse_agent("finalizer", data["finalizer"])

    max_turns = data.get("max_turns")
    if max_turns is not None:
        try:
            max_turns = int(max_turns)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid max_turns: {max_turns!r}") from e

    return SwarmConfiguration(
        version=str(data.get("version", "1.0")),
        agents=agents,
        router=router,
        finalizer=finalizer,
        max_turns=max_turns,
        tool_modules=list(data.get("tool_modules") or []),
    )


def load_swarm_config(path: Optional[str] = None) -> SwarmConfiguration:
    """
    Load a swarm definition from a YAML file.

    Args:
        path: Path to the YAML file. If None, uses SWARM_CONFIG_PATH or
              the default path.

    Raises:
        ConfigurationError: If the file is missing or the definition invalid.
    """
    if path is None:
        path = config.swarm.config_path or str(DEFAULT_SWARM_CONFIG_PATH)

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Swarm config not found at {config_path}")

    logger.debug(f"Loading swarm config from {config_path}")

    with open(config_path, "r") as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    swarm_config = parse_swarm_config(raw_config)
    logger.debug(f"Loaded swarm with agents: {list(swarm_config.agents)}")
    return swarm_config


def resolve_tool_reference(reference: str) -> Callable[..., Any]:
    """
    Resolve a tool reference to a callable.

    ``package.module:function`` imports the function; any other string is
    looked up in the ToolRegistry.
    """
    if ":" in reference:
        module_name, _, attr = reference.partition(":")
        try:
            module = importlib.import_module(module_name)
            return getattr(module, attr)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(f"Cannot import tool '{reference}': {e}") from e

    entry = ToolRegistry.get(reference)
    if entry is None:
        raise ConfigurationError(f"Unknown tool: {reference}")
    return entry.fn


def build_agent(agent_config: AgentConfig) -> Agent:
    """Create an Agent from its definition."""
    return Agent(
        name=agent_config.name,
        instructions=agent_config.instructions,
        description=agent_config.description,
        model=agent_config.model,
        tools=[resolve_tool_reference(ref) for ref in agent_config.tools],
    )


@dataclass
class SwarmAgents:
    """Agents built from a swarm definition, ready for ``Swarm.run``."""

    agents: list[Agent]
    router: Optional[Agent] = None
    finalizer: Optional[Agent] = None
    max_turns: Optional[int] = None


def build_agents(swarm_config: SwarmConfiguration) -> SwarmAgents:
    """Import tool modules and build every agent of a swarm definition."""
    for module_name in swarm_config.tool_modules:
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            raise ConfigurationError(f"Cannot import tool module '{module_name}': {e}") from e

    return SwarmAgents(
        agents=[build_agent(a) for a in swarm_config.agents.values()],
        router=build_agent(swarm_config.router) if swarm_config.router else None,
        finalizer=build_agent(swarm_config.finalizer) if swarm_config.finalizer else None,
        max_turns=swarm_config.max_turns,
    )
