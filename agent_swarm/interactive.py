#!/usr/bin/env python3
"""
agent-swarm Interactive CLI

Runs a swarm definition (YAML) against single queries or an interactive
prompt, printing the transcript and the final answer.
"""

import argparse
import json
import logging
import sys
import uuid
from typing import Optional

from .config import config
from .config_loader import SwarmAgents, build_agents, load_swarm_config
from .exceptions import SwarmError
from .orchestration import Swarm, SwarmResult, format_messages_pretty, get_final_answer
from .tools.registry import ToolRegistry
from .tracing import TracingContext, init_tracing_client, shutdown_tracing

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def print_banner() -> None:
    """Print the welcome banner."""
    banner = """
╔════════════════════════════════════════════════════════════════╗
║                    agent-swarm Interactive                      ║
║                                                                 ║
║  Router -> agents -> finalizer over the OpenAI chat API         ║
╚════════════════════════════════════════════════════════════════╝

Available commands:
  /help        - Show this help message
  /agents      - List the agents of the loaded swarm
  /tools       - List the registered tools
  /transcript  - Show the full transcript of the last run
  /quit        - Exit the CLI

Type a client message below.
"""
    print(banner)


def print_tools() -> None:
    """Print every tool in the ToolRegistry."""
    print("\nRegistered tools:")
    print("─" * 64)
    print(ToolRegistry.get_tools_summary() or "(none)")
    print()


def print_agents(swarm_agents: SwarmAgents) -> None:
    """Print the agents of a swarm and their tools."""
    print("\nAgents:")
    print("─" * 64)
    for agent in swarm_agents.agents:
        tool_names = ", ".join(t.name for t in agent.tools) or "no tools"
        print(f"- {agent.name.ljust(14)} {agent.description} [{tool_names}]")
    if swarm_agents.router:
        print(f"\nRouter:    {swarm_agents.router.model}")
    if swarm_agents.finalizer:
        print(f"Finalizer: {swarm_agents.finalizer.model}")
    print()


class InteractiveCLI:
    """Interactive CLI for a swarm definition."""

    def __init__(
        self,
        swarm: Swarm,
        swarm_agents: SwarmAgents,
        max_turns: Optional[int] = None,
        debug: bool = False,
    ):
        self.swarm = swarm
        self.swarm_agents = swarm_agents
        self.max_turns = max_turns
        self.debug = debug
        self.last_result: Optional[SwarmResult] = None

    def run_query(self, query: str) -> SwarmResult:
        """Run the swarm once on a single user message."""
        tracing = TracingContext(run_id=uuid.uuid4().hex[:12])
        result = self.swarm.run(
            agents=self.swarm_agents.agents,
            router_agent=self.swarm_agents.router,
            finalizer_agent=self.swarm_agents.finalizer,
            messages=[{"role": "user", "content": query}],
            max_turns=self.max_turns,
            debug=self.debug,
            tracing_context=tracing,
        )
        self.last_result = result
        return result

    def process_query(self, query: str) -> None:
        """Run a query and print the answer."""
        print("\n" + "─" * 70)
        print("Running swarm...")
        print("─" * 70 + "\n")

        try:
            result = self.run_query(query)
        except SwarmError as e:
            print(f"\nError: {e}\n")
            return

        print("\n" + "═" * 70)
        print("ANSWER")
        print("═" * 70)
        print(result.final_answer or "(no answer)")
        print("═" * 70 + "\n")
        print(
            f"(Completed in {result.turns} turn{'s' if result.turns != 1 else ''}"
            f"{', turn cap reached' if result.capped else ''})"
        )
        print("Use /transcript to see the full conversation.\n")

    def print_transcript(self) -> None:
        if self.last_result is None:
            print("\nNo transcript available. Run a query first.\n")
            return
        print(format_messages_pretty(self.last_result.messages))

    def run(self) -> None:
        """Run the interactive CLI loop."""
        print_banner()

        while True:
            try:
                user_input = input(">>> ").strip()
            except KeyboardInterrupt:
                print("\n\nType /quit to exit.\n")
                continue
            except EOFError:
                print("\nGoodbye!\n")
                break

            if not user_input:
                continue

            if user_input.startswith("/"):
                command = user_input.lower()
                if command in ("/quit", "/exit", "/q"):
                    print("\nGoodbye!\n")
                    break
                elif command in ("/help", "/h", "/?"):
                    print_banner()
                elif command == "/agents":
                    print_agents(self.swarm_agents)
                elif command == "/tools":
                    print_tools()
                elif command == "/transcript":
                    self.print_transcript()
                else:
                    print(f"\nUnknown command: {user_input}")
                    print("Type /help for available commands.\n")
            else:
                self.process_query(user_input)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="agent-swarm Interactive CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Start interactive mode
  %(prog)s -q "I want a quote"          # Run a single query
  %(prog)s -c my_swarm.yaml --debug     # Use another swarm, log every call
""",
    )
    parser.add_argument("-c", "--config", type=str, default=None,
                        help="Swarm definition YAML (default: SWARM_CONFIG_PATH or config/swarm.yaml)")
    parser.add_argument("-q", "--query", type=str, help="Run a single query and exit")
    parser.add_argument("--max-turns", type=int, default=None,
                        help="Maximum router turns (default: from swarm file or SWARM_MAX_TURNS)")
    parser.add_argument("--debug", action="store_true",
                        help="Log every request, response and tool execution")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--json", action="store_true",
                        help="Output results as JSON (for scripting)")

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        swarm_agents = build_agents(load_swarm_config(args.config))
        swarm = Swarm()
    except SwarmError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if config.langfuse.enabled:
        init_tracing_client(
            public_key=config.langfuse.public_key,
            secret_key=config.langfuse.secret_key,
            host=config.langfuse.host,
            debug=config.langfuse.debug,
        )

    max_turns = args.max_turns if args.max_turns is not None else swarm_agents.max_turns
    cli = InteractiveCLI(swarm, swarm_agents, max_turns=max_turns, debug=args.debug)

    try:
        if args.query:
            try:
                result = cli.run_query(args.query)
            except SwarmError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1

            if args.json:
                output = {
                    "query": args.query,
                    "answer": get_final_answer(result.messages),
                    "turns": result.turns,
                    "capped": result.capped,
                    "messages": result.messages,
                }
                print(json.dumps(output, indent=2, default=str))
            else:
                print(format_messages_pretty(result.messages))
        else:
            cli.run()
    finally:
        swarm.close()
        shutdown_tracing()

    return 0


if __name__ == "__main__":
    sys.exit(main())
