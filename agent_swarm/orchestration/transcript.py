"""
Console rendering of swarm transcripts.
"""

import json
from typing import Iterable, Optional


def _format_arguments(arguments: str) -> str:
    try:
        return json.dumps(json.loads(arguments), indent=2)
    except (json.JSONDecodeError, TypeError):
        return str(arguments)


def format_messages_pretty(messages: Iterable[dict]) -> str:
    """Render a message list as a human-readable transcript."""
    lines: list[str] = []
    for msg in messages:
        role = msg.get("role")
        content = msg.get("content")
        if role == "user":
            lines.append(f"\n👤 User: {content}")
        elif role == "assistant":
            if msg.get("tool_calls"):
                for call in msg["tool_calls"]:
                    function = call.get("function", {})
                    lines.append(
                        f"🤖 Assistant invoked agent: {function.get('name')} with arguments:\n"
                        f"{_format_arguments(function.get('arguments', ''))}"
                    )
            else:
                lines.append(f"🤖 Assistant: {content}")
        elif role == "tool":
            lines.append(f"🛠️ Tool response: {content}")
        else:
            lines.append(f"📄 {role}: {content}")

    lines.append("\n✅ Conversation finished.\n")
    return "\n".join(lines)


def print_messages_pretty(messages: Iterable[dict]) -> None:
    """Print a message list as a human-readable transcript."""
    print(format_messages_pretty(messages))


def get_final_answer(messages: list[dict]) -> Optional[str]:
    """Content of the last assistant message with non-empty text, or None."""
    for msg in reversed(messages):
        if msg.get("role") == "assistant" and msg.get("content"):
            return msg["content"]
    return None
