"""
Data models for agent-swarm.
"""

from .swarm import AgentConfig, SwarmConfiguration

__all__ = [
    "AgentConfig",
    "SwarmConfiguration",
]
