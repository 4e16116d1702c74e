"""
Run-scoped tracing for swarm runs (Langfuse SDK v3).

One ``TracingContext`` per ``Swarm.run()`` owns the root span. Router turns
and the finalizer are generations under the root; each agent dispatch is a
span holding its own generation and one span per tool execution. Children
are linked explicitly through a ``TraceContext`` (trace id + parent span
id). Without an enabled tracing client every call is a no-op.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

from langfuse.types import TraceContext

from .client import get_tracing_client

logger = logging.getLogger(__name__)


def _start_observation(trace_context: Optional[TraceContext], **kwargs: Any):
    """Open a Langfuse observation; returns (context_manager, observation)."""
    client = get_tracing_client()
    if not client or not client.client:
        return None, None
    if trace_context:
        kwargs["trace_context"] = trace_context
    context_manager = client.client.start_as_current_observation(**kwargs)
    return context_manager, context_manager.__enter__()


def _elapsed_ms(start: float) -> float:
    return round((time.time() - start) * 1000, 2)


@dataclass
class _Observation:
    """Shared lifecycle of spans and generations."""

    name: str
    enabled: bool = False
    input: Optional[Any] = None
    metadata: Optional[dict] = None
    _trace_context: Optional[TraceContext] = field(default=None, repr=False)
    _context_manager: Any = field(default=None, repr=False)
    _observation: Any = field(default=None, repr=False)
    _start_time: float = field(default=0.0, repr=False)
    _output: Optional[Any] = field(default=None, repr=False)
    _status: str = field(default="success", repr=False)

    as_type = "span"

    def _start_kwargs(self) -> dict:
        return {"name": self.name, "input": self.input, "metadata": self.metadata}

    def _end_kwargs(self) -> dict:
        kwargs: dict[str, Any] = {
            "metadata": {"status": self._status, "duration_ms": _elapsed_ms(self._start_time)}
        }
        if self._output is not None:
            kwargs["output"] = self._output
        return kwargs

    def start(self) -> None:
        if not self.enabled:
            return
        try:
            self._start_time = time.time()
            self._context_manager, self._observation = _start_observation(
                self._trace_context, as_type=self.as_type, **self._start_kwargs()
            )
        except Exception as e:
            logger.warning(f"Failed to start {self.as_type} '{self.name}': {e}")
            self._observation = None

    def end(self) -> None:
        if not self.enabled or not self._observation:
            return
        try:
            self._observation.update(**self._end_kwargs())
            if self._context_manager:
                self._context_manager.__exit__(None, None, None)
        except Exception as e:
            logger.warning(f"Failed to end {self.as_type} '{self.name}': {e}")

    def set_output(self, output: Any) -> None:
        self._output = output

    def set_status(self, status: str) -> None:
        self._status = status


@dataclass
class GenerationContext(_Observation):
    """One chat completion request."""

    model: str = ""
    _usage: Optional[dict] = field(default=None, repr=False)

    as_type = "generation"

    def _start_kwargs(self) -> dict:
        return {**super()._start_kwargs(), "model": self.model}

    def _end_kwargs(self) -> dict:
        kwargs = super()._end_kwargs()
        if self._usage:
            kwargs["usage_details"] = self._usage
        if self._status == "error":
            kwargs["level"] = "ERROR"
        return kwargs

    def set_usage(
        self,
        prompt_tokens: Optional[int] = None,
        completion_tokens: Optional[int] = None,
        total_tokens: Optional[int] = None,
    ) -> None:
        """Record token usage reported by the API."""
        usage = {
            "input": prompt_tokens,
            "output": completion_tokens,
            "total": total_tokens,
        }
        self._usage = {k: v for k, v in usage.items() if v is not None}


class _ObservationParent:
    """Opens child spans and generations below a given trace context."""

    enabled: bool

    def _child_trace_context(self) -> Optional[TraceContext]:
        raise NotImplementedError

    @contextmanager
    def _child(self, observation: _Observation) -> Generator[Any, None, None]:
        observation.start()
        try:
            yield observation
        finally:
            observation.end()

    def span(
        self,
        name: str,
        metadata: Optional[dict] = None,
        input: Optional[Any] = None,
    ):
        """Context manager yielding a child SpanContext."""
        return self._child(
            SpanContext(
                name=name,
                enabled=self.enabled,
                input=input,
                metadata=metadata,
                _trace_context=self._child_trace_context(),
            )
        )

    def generation(
        self,
        name: str,
        model: str,
        input: Optional[Any] = None,
        metadata: Optional[dict] = None,
    ):
        """Context manager yielding a child GenerationContext."""
        return self._child(
            GenerationContext(
                name=name,
                model=model,
                enabled=self.enabled,
                input=input,
                metadata=metadata,
                _trace_context=self._child_trace_context(),
            )
        )


@dataclass
class SpanContext(_Observation, _ObservationParent):
    """An agent dispatch or tool execution; can parent further observations."""

    def _end_kwargs(self) -> dict:
        kwargs = super()._end_kwargs()
        if self._status == "error":
            kwargs["level"] = "ERROR"
        return kwargs

    def _child_trace_context(self) -> Optional[TraceContext]:
        span_id = getattr(self._observation, "id", None)
        if not self._trace_context or not span_id:
            return self._trace_context
        return TraceContext(trace_id=self._trace_context["trace_id"], parent_span_id=span_id)


@dataclass
class TracingContext(_ObservationParent):
    """
    Tracing context for a single swarm run.

    Create one per ``Swarm.run()``; call ``start_trace`` before the run and
    ``end_trace`` after it.
    """

    run_id: str
    session_id: Optional[str] = None
    user_id: Optional[str] = None
    _context_manager: Any = field(default=None, repr=False)
    _root_span: Any = field(default=None, repr=False)
    _enabled: bool = field(default=False, repr=False)
    _start_time: float = field(default_factory=time.time, repr=False)

    def __post_init__(self):
        client = get_tracing_client()
        self._enabled = client is not None and client.enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def start_trace(
        self,
        name: str = "swarm_run",
        input: Optional[Any] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        """Open the root span for this run."""
        if not self._enabled:
            return
        try:
            self._start_time = time.time()
            self._context_manager, self._root_span = _start_observation(
                None,
                as_type="span",
                name=name,
                input=input,
                metadata={"run_id": self.run_id, **(metadata or {})},
            )
            if self._root_span is not None:
                self._root_span.update_trace(user_id=self.user_id, session_id=self.session_id)
        except Exception as e:
            logger.warning(f"[{self.run_id}] Failed to start trace: {e}")
            self._root_span = None

    def end_trace(
        self,
        output: Optional[Any] = None,
        status: str = "success",
        metadata: Optional[dict] = None,
    ) -> None:
        """Close the root span."""
        if not self._enabled or not self._root_span:
            return
        try:
            self._root_span.update(
                output=output,
                metadata={
                    "status": status,
                    "duration_ms": _elapsed_ms(self._start_time),
                    **(metadata or {}),
                },
            )
            if self._context_manager:
                self._context_manager.__exit__(None, None, None)
        except Exception as e:
            logger.warning(f"[{self.run_id}] Failed to end trace: {e}")

    def get_trace_context(self) -> Optional[TraceContext]:
        """TraceContext linking children to the root span."""
        trace_id = getattr(self._root_span, "trace_id", None)
        span_id = getattr(self._root_span, "id", None)
        if not trace_id or not span_id:
            return None
        return TraceContext(trace_id=trace_id, parent_span_id=span_id)

    def _child_trace_context(self) -> Optional[TraceContext]:
        return self.get_trace_context()
