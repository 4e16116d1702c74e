"""
Configuration management for agent-swarm.

Settings come from environment variables, with defaults suited to local
runs. A ``.env`` file in the working directory is loaded first.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass
class OpenAIConfig:
    """Configuration for the hosted chat API client."""
    api_key: str = os.getenv("OPENAI_API_KEY", "")
    base_url: str = os.getenv("OPENAI_BASE_URL", "")
    proxy_url: str = os.getenv("SWARM_PROXY_URL", "")
    default_model: str = os.getenv("SWARM_DEFAULT_MODEL", "gpt-4o")


@dataclass
class SwarmRunConfig:
    """Defaults for a single swarm run."""
    max_turns: int = int(os.getenv("SWARM_MAX_TURNS", "10"))
    config_path: str = os.getenv("SWARM_CONFIG_PATH", "")


@dataclass
class LangfuseConfig:
    """Langfuse credentials; runs are traced only when both keys are set."""
    public_key: str = os.getenv("LANGFUSE_PUBLIC_KEY", "")
    secret_key: str = os.getenv("LANGFUSE_SECRET_KEY", "")
    host: str = os.getenv("LANGFUSE_HOST", "")
    debug: bool = os.getenv("LANGFUSE_DEBUG", "false").lower() == "true"

    @property
    def enabled(self) -> bool:
        return bool(self.public_key and self.secret_key)


@dataclass
class Config:
    """All agent-swarm settings."""
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    swarm: SwarmRunConfig = field(default_factory=SwarmRunConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def get_config() -> Config:
    """Build a Config from the current environment."""
    return Config()


config = get_config()
