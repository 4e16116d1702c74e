"""
Tests for the Agent descriptor.
"""

import pytest

from agent_swarm.agent import AGENT_INPUT_DESCRIPTION, Agent, build_agent_tool_schema
from agent_swarm.config import config
from agent_swarm.exceptions import ConfigurationError, InvalidToolError, SchemaDerivationError
from agent_swarm.tools.schema import CallableTool, PrebuiltTool


def check_stock(sku):
    """
    @description Check how many units of a product are in stock.
    @param {string} sku - Stock keeping unit
    """
    return 7


REMOTE_SCHEMA = {
    "type": "function",
    "function": {
        "name": "remote_crm_lookup",
        "description": "Look up a client in the CRM.",
        "parameters": {"type": "object", "properties": {}, "required": []},
    },
}


class TestAgentToolSchema:
    """The router-facing schema of an agent."""

    def test_single_input_schema(self):
        """Every agent is exposed as a tool taking one required string."""
        agent = Agent(name="sales", description="Prepares quotes.", instructions="Sell.")

        assert agent.tool_schema == {
            "type": "function",
            "function": {
                "name": "sales",
                "description": "Prepares quotes.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "input": {"type": "string", "description": AGENT_INPUT_DESCRIPTION}
                    },
                    "required": ["input"],
                },
            },
        }

    def test_schema_independent_of_tools(self):
        """An agent's own tools do not change its router schema."""
        plain = Agent(name="needs", description="d", instructions="i")
        tooled = Agent(name="needs", description="d", instructions="i", tools=[check_stock])

        assert plain.tool_schema == tooled.tool_schema == build_agent_tool_schema("needs", "d")


class TestAgentConstruction:
    """Tests for Agent construction and its accessors."""

    def test_default_model_from_config(self):
        agent = Agent(name="needs", instructions="i")
        assert agent.model == config.openai.default_model

    def test_explicit_model(self):
        agent = Agent(name="needs", instructions="i", model="gpt-4o-mini")
        assert agent.model == "gpt-4o-mini"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, name):
        with pytest.raises(ConfigurationError, match="must not be empty"):
            Agent(name=name, instructions="i")

    def test_callable_and_prebuilt_tools(self):
        """Callables get derived schemas; prebuilt schemas pass through."""
        agent = Agent(name="positioning", instructions="i", tools=[check_stock, REMOTE_SCHEMA])

        first, second = agent.tools
        assert isinstance(first, CallableTool)
        assert isinstance(second, PrebuiltTool)
        assert [s["function"]["name"] for s in agent.tool_schemas] == [
            "check_stock",
            "remote_crm_lookup",
        ]
        assert agent.tool_schemas[1] is REMOTE_SCHEMA

    def test_tool_schemas_returns_copy(self):
        agent = Agent(name="positioning", instructions="i", tools=[check_stock])
        agent.tool_schemas.clear()
        assert len(agent.tool_schemas) == 1

    def test_invalid_tool_rejected(self):
        with pytest.raises(InvalidToolError, match="Invalid tool format"):
            Agent(name="sales", instructions="i", tools=["check_stock"])

    def test_undocumented_tool_rejected(self):
        def undocumented(x):
            return x

        with pytest.raises(SchemaDerivationError):
            Agent(name="sales", instructions="i", tools=[undocumented])

    def test_find_tool(self):
        """find_tool only returns callable tools."""
        agent = Agent(name="positioning", instructions="i", tools=[check_stock, REMOTE_SCHEMA])

        assert agent.find_tool("check_stock").fn is check_stock
        assert agent.find_tool("remote_crm_lookup") is None
        assert agent.find_tool("missing") is None

    def test_get_spec(self):
        agent = Agent(
            name="sales",
            description="Prepares quotes.",
            instructions="Sell.",
            model="gpt-4o-mini",
            tools=[check_stock],
        )

        spec = agent.get_spec()

        assert spec["name"] == "sales"
        assert spec["description"] == "Prepares quotes."
        assert spec["model"] == "gpt-4o-mini"
        assert spec["system_message"] == "Sell."
        assert spec["tools"][0]["function"]["name"] == "check_stock"

    def test_repr(self):
        agent = Agent(name="sales", instructions="i", model="m", tools=[check_stock])
        assert repr(agent) == "Agent(name='sales', model='m', tools=1)"
