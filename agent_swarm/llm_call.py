"""
LLM Call Interface for agent-swarm

Thin wrapper around the OpenAI chat completions API: one client per
swarm, optionally routed through an HTTP(S) proxy. No retries are applied
here; SDK errors propagate to the caller.
"""

import logging
from typing import Any, Optional

from openai import DefaultHttpxClient, OpenAI

from .config import config
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def message_to_dict(message: Any) -> dict:
    """Convert an SDK response message into a plain chat message dict."""
    if isinstance(message, dict):
        return {k: v for k, v in message.items() if v is not None}
    return message.model_dump(exclude_none=True)


class LLMClient:
    """Chat completions client shared by every request of a swarm."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        proxy_url: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.api_key = api_key or config.openai.api_key
        if not self.api_key:
            raise ConfigurationError(
                "An API key is required (pass api_key or set OPENAI_API_KEY)"
            )
        self.proxy_url = proxy_url or config.openai.proxy_url or None
        self.base_url = base_url or config.openai.base_url or None

        client_kwargs: dict[str, Any] = {"api_key": self.api_key}
        if self.base_url:
            client_kwargs["base_url"] = self.base_url
        if self.proxy_url:
            logger.debug(f"Routing API traffic through proxy {self.proxy_url}")
            client_kwargs["http_client"] = DefaultHttpxClient(proxy=self.proxy_url)

        self.client = OpenAI(**client_kwargs)

    def chat(
        self,
        model: str,
        messages: list[dict],
        tools: Optional[list[dict]] = None,
    ) -> Any:
        """
        Issue one chat completion request.

        Args:
            model: Model identifier.
            messages: Chat messages in OpenAI format.
            tools: Tool definitions to offer. When given (and non-empty)
                ``tool_choice`` is set to ``"auto"``; otherwise both keys
                are omitted.

        Returns:
            The raw ChatCompletion response.
        """
        create_kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
        }
        if tools:
            create_kwargs["tools"] = tools
            create_kwargs["tool_choice"] = "auto"

        return self.client.chat.completions.create(**create_kwargs)

    def close(self) -> None:
        """Close the underlying OpenAI client."""
        try:
            self.client.close()
        except Exception as e:
            logger.debug(f"Error closing OpenAI client: {e}")
