"""
Swarm orchestration loop.

A router model picks agents by calling them as tools. Each call is
dispatched as a nested chat request to the target agent, whose own tool
calls are executed locally. Agent replies are collected and, once the
router answers in plain text or the turn cap is reached, combined by a
finalizer agent.

Everything runs sequentially: one router request per turn, then the
requested agents in call order, then each agent's tools in call order.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from ..agent import Agent
from ..config import config
from ..exceptions import ConfigurationError, DispatchError, ToolExecutionError, UnknownAgentError
from ..llm_call import LLMClient, message_to_dict
from ..tracing import SpanContext, TracingContext
from .transcript import get_final_answer

logger = logging.getLogger(__name__)

# Shown to the model in place of any tool failure.
TOOL_ERROR_MESSAGE = "An internal error occurred. Please try again later."

DEFAULT_FINALIZER_INSTRUCTIONS = (
    "You receive all messages from the agents (needs, positioning, sales) and "
    "combine them into a single polite and persuasive message for the client. "
    "Write as a human salesperson would. Do not mention that you are an AI. "
    "Avoid using the client's name unless it was explicitly provided, and do not "
    'include phrases like "Sincerely, [Your Name]" if you don\'t know your own name.'
)

TraceParent = Union[TracingContext, SpanContext]


def dispatch_notice(name: str) -> str:
    """Content of the tool message acknowledging a call to ``name``."""
    return f"Calling agent: {name}"


def default_finalizer() -> Agent:
    """Finalizer used when a run is not given one."""
    return Agent(
        name="finalizer",
        description="Generates the final response based on messages from other agents",
        instructions=DEFAULT_FINALIZER_INSTRUCTIONS,
        model=config.openai.default_model,
    )


@dataclass
class SwarmResult:
    """Result from a complete swarm run."""

    messages: list[dict]
    replies: list[str] = field(default_factory=list)
    turns: int = 0
    capped: bool = False
    tool_errors: list[ToolExecutionError] = field(default_factory=list)

    @property
    def final_answer(self) -> Optional[str]:
        return get_final_answer(self.messages)


class _SwarmRun:
    """State and steps of a single ``Swarm.run()`` call."""

    def __init__(
        self,
        llm: LLMClient,
        agents: Sequence[Agent],
        router: Optional[Agent],
        finalizer: Agent,
        messages: Iterable[dict],
        max_turns: int,
        debug: bool,
        tracing: TracingContext,
    ):
        self.llm = llm
        self.agents = list(agents)
        self.agent_map = {agent.name: agent for agent in self.agents}
        self.router = router
        self.finalizer = finalizer
        self.max_turns = max_turns
        self.tracing = tracing
        self._log: Callable[..., None] = logger.info if debug else logger.debug

        self.conversation: list[dict] = []
        if router is not None:
            self.conversation.append({"role": "system", "content": router.instructions})
        self.conversation.extend(dict(m) for m in messages)

        self.replies: list[str] = []
        self.tool_errors: list[ToolExecutionError] = []
        self.turns = 0
        self.capped = False

    @property
    def router_model(self) -> str:
        return self.router.model if self.router else self.agents[0].model

    def execute(self) -> SwarmResult:
        self.tracing.start_trace(
            input={"messages": list(self.conversation)},
            metadata={"agents": list(self.agent_map), "max_turns": self.max_turns},
        )
        try:
            self._run_loop()
            self._finalize()
        except Exception:
            self.tracing.end_trace(status="error", metadata={"turns": self.turns})
            raise

        result = SwarmResult(
            messages=self.conversation,
            replies=self.replies,
            turns=self.turns,
            capped=self.capped,
            tool_errors=self.tool_errors,
        )
        self.tracing.end_trace(
            output=result.final_answer,
            metadata={"turns": self.turns, "capped": self.capped},
        )
        self._log_summary()
        return result

    def _run_loop(self) -> None:
        router_tools = [agent.tool_schema for agent in self.agents]

        for turn in range(1, self.max_turns + 1):
            self.turns = turn
            message = self._complete(
                self.tracing,
                f"router_turn_{turn}",
                self.router_model,
                list(self.conversation),
                router_tools,
            )
            self.conversation.append(message)

            tool_calls = message.get("tool_calls")
            if not tool_calls:
                if message.get("content"):
                    self.replies.append(message["content"])
                logger.debug(f"Turn {turn}: router answered directly")
                return

            acknowledgments = [
                {
                    "role": "tool",
                    "tool_call_id": call["id"],
                    "content": dispatch_notice(call["function"]["name"]),
                }
                for call in tool_calls
            ]
            self._log(f"[TOOL RESPONSES] {acknowledgments}")
            self.conversation.extend(acknowledgments)

            for call in tool_calls:
                agent, agent_input = self._resolve_dispatch(call)
                self._dispatch(agent, agent_input)

        self.capped = True
        logger.warning(f"Max turns ({self.max_turns}) reached, ending routing")

    def _resolve_dispatch(self, call: dict) -> tuple[Agent, str]:
        """Map a router tool call onto an agent and its input text."""
        name = call["function"]["name"]
        agent = self.agent_map.get(name)
        if agent is None:
            raise UnknownAgentError(name)

        try:
            arguments = json.loads(call["function"]["arguments"])
        except (json.JSONDecodeError, TypeError) as e:
            raise DispatchError(f"Malformed arguments for agent '{name}': {e}") from e

        if not isinstance(arguments, dict) or "input" not in arguments:
            raise DispatchError(f"Arguments for agent '{name}' carry no 'input' field")

        agent_input = arguments["input"]
        if not isinstance(agent_input, str):
            agent_input = json.dumps(agent_input)
        return agent, agent_input

    def _dispatch(self, agent: Agent, agent_input: str) -> None:
        """Run one nested agent request and the tools it asks for."""
        logger.debug(f"Dispatching agent '{agent.name}'")
        nested = [
            {"role": "system", "content": agent.instructions},
            *self.conversation,
            {"role": "user", "content": agent_input},
        ]

        with self.tracing.span(name=f"agent:{agent.name}", input={"input": agent_input}) as span:
            message = self._complete(
                span, f"agent:{agent.name}", agent.model, nested, agent.tool_schemas
            )
            self.conversation.append(message)

            for tool_call in message.get("tool_calls") or []:
                self._execute_tool(agent, tool_call, span)

            if message.get("content"):
                self.replies.append(message["content"])
                span.set_output({"reply": message["content"]})

    def _execute_tool(self, agent: Agent, tool_call: dict, parent: SpanContext) -> None:
        """
        Execute one of an agent's tool calls and record the tool message.

        Arguments are applied positionally in the order their keys appear
        in the JSON payload. Argument JSON that does not parse aborts the
        run with DispatchError. Failures of the tool itself never reach the
        model: the tool message gets TOOL_ERROR_MESSAGE and the real error
        is logged and kept on the result.
        """
        name = tool_call["function"]["name"]
        raw_arguments = tool_call["function"].get("arguments") or "{}"
        try:
            arguments = json.loads(raw_arguments)
        except json.JSONDecodeError as e:
            raise DispatchError(
                f"Malformed arguments for tool '{name}' of agent '{agent.name}': {e}"
            ) from e

        with parent.span(name=f"tool:{name}", input={"arguments": raw_arguments}) as span:
            try:
                entry = agent.find_tool(name)
                if entry is None:
                    result: Any = dispatch_notice(name)
                else:
                    result = entry.fn(*arguments.values())
                content = str(result)
                self._log(f"[TOOL EXEC: {name}] {content}")
                span.set_output({"result": content[:500]})
            except Exception as e:
                error = ToolExecutionError(name, e)
                self.tool_errors.append(error)
                logger.error(f"Agent '{agent.name}': {error}", exc_info=e)
                span.set_status("error")
                span.set_output({"error": str(e)[:500]})
                content = TOOL_ERROR_MESSAGE

        self.conversation.append(
            {"role": "tool", "tool_call_id": tool_call["id"], "content": content}
        )

    def _finalize(self) -> None:
        if not self.replies:
            return

        combined = "\n\n".join(self.replies)
        messages = [
            {"role": "system", "content": self.finalizer.instructions},
            {"role": "user", "content": combined},
        ]
        message = self._complete(
            self.tracing, "finalizer", self.finalizer.model, messages, None
        )
        self.conversation.append(message)

    def _complete(
        self,
        parent: TraceParent,
        name: str,
        model: str,
        messages: list[dict],
        tools: Optional[list[dict]],
    ) -> dict:
        """Issue one chat request and return the response message as a dict."""
        self._log(
            f"[REQUEST: {name}] model={model} messages={len(messages)} tools={len(tools or [])}"
        )

        with parent.generation(name=name, model=model, input=messages) as gen:
            try:
                response = self.llm.chat(model, messages, tools)
            except Exception:
                gen.set_status("error")
                raise

            message = message_to_dict(response.choices[0].message)
            gen.set_output(message)
            usage = getattr(response, "usage", None)
            if usage:
                gen.set_usage(
                    prompt_tokens=usage.prompt_tokens,
                    completion_tokens=usage.completion_tokens,
                    total_tokens=usage.total_tokens,
                )

        self._log(f"[RESPONSE: {name}] {message}")
        return message

    def _log_summary(self) -> None:
        capped = " (capped)" if self.capped else ""
        logger.info(
            f"Swarm run {self.tracing.run_id} finished: turns={self.turns}{capped}, "
            f"replies={len(self.replies)}, tool_errors={len(self.tool_errors)}, "
            f"messages={len(self.conversation)}"
        )


class Swarm:
    """
    Router/agent/finalizer orchestration over the OpenAI chat API.

    A Swarm holds only the API client; every ``run()`` has its own
    conversation, so one Swarm can serve several runs.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        proxy_url: Optional[str] = None,
        base_url: Optional[str] = None,
        llm_client: Optional[LLMClient] = None,
    ):
        self.llm_client = llm_client or LLMClient(
            api_key=api_key, proxy_url=proxy_url, base_url=base_url
        )

    def run(
        self,
        agents: Sequence[Agent],
        router_agent: Optional[Agent] = None,
        finalizer_agent: Optional[Agent] = None,
        messages: Iterable[dict] = (),
        max_turns: Optional[int] = None,
        debug: bool = False,
        tracing_context: Optional[TracingContext] = None,
    ) -> SwarmResult:
        """
        Run the swarm over ``messages``.

        Args:
            agents: Agents the router may call; names must be unique.
            router_agent: Supplies the routing instructions and model.
                Without one, the first agent's model routes.
            finalizer_agent: Combines the collected replies. A default
                sales finalizer is used when omitted.
            messages: Initial conversation messages.
            max_turns: Cap on router requests (default from config).
            debug: Log every request, response and tool execution at INFO
                on the ``agent_swarm`` loggers. The records are only written
                out where logging is configured (the CLI does this; library
                users call ``logging.basicConfig`` or attach a handler).
            tracing_context: Langfuse context for this run.

        Returns:
            SwarmResult with the full conversation.

        Raises:
            ConfigurationError: No agents, or duplicate agent names.
            DispatchError: Unknown agent, malformed router arguments, or
                tool-call arguments that are not valid JSON.
            openai.OpenAIError: Any API failure.
        """
        if not agents:
            raise ConfigurationError("No agents provided")

        seen: set[str] = set()
        for agent in agents:
            if agent.name in seen:
                raise ConfigurationError(f"Duplicate agent name: {agent.name}")
            seen.add(agent.name)

        run = _SwarmRun(
            llm=self.llm_client,
            agents=agents,
            router=router_agent,
            finalizer=finalizer_agent or default_finalizer(),
            messages=messages,
            max_turns=config.swarm.max_turns if max_turns is None else max_turns,
            debug=debug,
            tracing=tracing_context or TracingContext(run_id=uuid.uuid4().hex[:12]),
        )
        logger.debug(f"Starting swarm run {run.tracing.run_id} with agents {list(run.agent_map)}")
        return run.execute()

    def close(self) -> None:
        """Close the underlying API client."""
        self.llm_client.close()
