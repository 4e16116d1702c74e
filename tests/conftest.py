"""
Pytest configuration and fixtures for agent-swarm tests.
"""

import pytest
from unittest.mock import patch

from agent_swarm.tools.registry import ToolRegistry


@pytest.fixture
def mock_openai():
    """Patch the OpenAI client class; yields the client instance mock."""
    with patch("agent_swarm.llm_call.OpenAI") as mock_openai_cls:
        yield mock_openai_cls.return_value


@pytest.fixture
def swarm(mock_openai):
    """A Swarm wired to the mocked OpenAI client."""
    from agent_swarm.orchestration import Swarm

    return Swarm(api_key="test-key")


@pytest.fixture
def clean_registry():
    """Give a test an empty ToolRegistry and restore it afterwards."""
    saved = ToolRegistry.all_tools()
    ToolRegistry.clear()
    yield ToolRegistry
    ToolRegistry.clear()
    ToolRegistry._tools.update(saved)


@pytest.fixture(autouse=True)
def reset_tracing_client():
    """Make sure no test leaks a global tracing client."""
    import agent_swarm.tracing.client as client_module

    client_module._tracing_client = None
    yield
    client_module._tracing_client = None
