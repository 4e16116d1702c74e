"""
Swarm orchestration.

Router turns, nested agent dispatch, tool execution and the finalizer
pass, plus transcript rendering helpers.
"""

from .loop import (
    DEFAULT_FINALIZER_INSTRUCTIONS,
    TOOL_ERROR_MESSAGE,
    Swarm,
    SwarmResult,
    default_finalizer,
)
from .transcript import format_messages_pretty, get_final_answer, print_messages_pretty

__all__ = [
    "DEFAULT_FINALIZER_INSTRUCTIONS",
    "TOOL_ERROR_MESSAGE",
    "Swarm",
    "SwarmResult",
    "default_finalizer",
    "format_messages_pretty",
    "get_final_answer",
    "print_messages_pretty",
]
