"""
Tests for the interactive CLI entry point.
"""

import json
from unittest.mock import patch

import pytest

from agent_swarm.agent import Agent
from agent_swarm.config import config
from agent_swarm.config_loader import SwarmAgents
from agent_swarm.exceptions import UnknownAgentError
from agent_swarm.interactive import InteractiveCLI, main
from agent_swarm.orchestration import SwarmResult
from agent_swarm.tools import catalog
from agent_swarm.tools.registry import ToolRegistry


SWARM_YAML = """
max_turns: 3
agents:
  needs:
    description: Works out what the client needs.
    instructions: Analyse the request.
"""

RESULT = SwarmResult(
    messages=[
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "Hello! How can I help?"},
    ],
    replies=["Hello! How can I help?"],
    turns=1,
)


@pytest.fixture
def swarm_file(tmp_path):
    path = tmp_path / "swarm.yaml"
    path.write_text(SWARM_YAML)
    return str(path)


@pytest.fixture
def mock_swarm():
    with patch("agent_swarm.interactive.Swarm") as mock_swarm_cls, patch(
        "agent_swarm.interactive.init_tracing_client"
    ):
        yield mock_swarm_cls.return_value


class TestMain:
    """Tests for main()."""

    def test_single_query_json(self, swarm_file, mock_swarm, capsys):
        mock_swarm.run.return_value = RESULT

        exit_code = main(["-c", swarm_file, "-q", "hi", "--json"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["answer"] == "Hello! How can I help?"
        assert output["turns"] == 1
        assert output["capped"] is False

        kwargs = mock_swarm.run.call_args.kwargs
        assert kwargs["max_turns"] == 3
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert [a.name for a in kwargs["agents"]] == ["needs"]
        mock_swarm.close.assert_called_once()

    def test_max_turns_flag_overrides_file(self, swarm_file, mock_swarm):
        mock_swarm.run.return_value = RESULT
        main(["-c", swarm_file, "-q", "hi", "--max-turns", "7"])
        assert mock_swarm.run.call_args.kwargs["max_turns"] == 7

    def test_single_query_transcript(self, swarm_file, mock_swarm, capsys):
        mock_swarm.run.return_value = RESULT
        main(["-c", swarm_file, "-q", "hi"])
        assert "🤖 Assistant: Hello! How can I help?" in capsys.readouterr().out

    def test_swarm_error_exit_code(self, swarm_file, mock_swarm, capsys):
        mock_swarm.run.side_effect = UnknownAgentError("billing")

        assert main(["-c", swarm_file, "-q", "hi"]) == 1
        assert "Unknown agent: billing" in capsys.readouterr().err
        mock_swarm.close.assert_called_once()

    def test_tracing_initialised_when_configured(self, swarm_file, mock_swarm):
        mock_swarm.run.return_value = RESULT
        with patch.object(config.langfuse, "public_key", "pk"), patch.object(
            config.langfuse, "secret_key", "sk"
        ), patch("agent_swarm.interactive.init_tracing_client") as mock_init:
            main(["-c", swarm_file, "-q", "hi"])

        assert mock_init.call_args.kwargs["public_key"] == "pk"

    def test_tracing_skipped_without_keys(self, swarm_file, mock_swarm):
        mock_swarm.run.return_value = RESULT
        with patch.object(config.langfuse, "public_key", ""), patch(
            "agent_swarm.interactive.init_tracing_client"
        ) as mock_init:
            main(["-c", swarm_file, "-q", "hi"])

        mock_init.assert_not_called()

    def test_missing_config(self, tmp_path, mock_swarm, capsys):
        assert main(["-c", str(tmp_path / "nope.yaml"), "-q", "hi"]) == 2
        assert "not found" in capsys.readouterr().err


class TestInteractiveCLI:
    """Tests for the interactive loop."""

    def _cli(self, mock_swarm):
        agents = SwarmAgents(agents=[Agent(name="needs", description="Needs.", instructions="i")])
        return InteractiveCLI(mock_swarm, agents, max_turns=2)

    def test_commands(self, mock_swarm, capsys):
        cli = self._cli(mock_swarm)
        with patch("builtins.input", side_effect=["/agents", "/transcript", "/bogus", "/quit"]):
            cli.run()

        out = capsys.readouterr().out
        assert "needs" in out
        assert "No transcript available" in out
        assert "Unknown command: /bogus" in out
        assert "Goodbye!" in out
        mock_swarm.run.assert_not_called()

    def test_tools_command_lists_registry(self, mock_swarm, capsys, clean_registry):
        """/tools prints the registered tools with their descriptions."""
        ToolRegistry.register(catalog.calculate_quote)
        cli = self._cli(mock_swarm)
        with patch("builtins.input", side_effect=["/tools", "/quit"]):
            cli.run()

        out = capsys.readouterr().out
        assert "Registered tools:" in out
        assert "- calculate_quote: Calculate a price quote" in out

    def test_tools_command_empty_registry(self, mock_swarm, capsys, clean_registry):
        cli = self._cli(mock_swarm)
        with patch("builtins.input", side_effect=["/tools", "/quit"]):
            cli.run()

        assert "(none)" in capsys.readouterr().out

    def test_query_then_transcript(self, mock_swarm, capsys):
        mock_swarm.run.return_value = RESULT
        cli = self._cli(mock_swarm)
        with patch("builtins.input", side_effect=["I need a laptop", "/transcript", EOFError]):
            cli.run()

        out = capsys.readouterr().out
        assert "ANSWER" in out
        assert "Completed in 1 turn)" in out
        assert "👤 User: hi" in out
        assert cli.last_result is RESULT
        assert mock_swarm.run.call_args.kwargs["max_turns"] == 2
