"""
Langfuse client for swarm tracing (SDK v3).

A process-wide ``TracingClient`` is set up once by the CLI (or by library
users through ``init_tracing_client``). Swarm runs look it up when their
``TracingContext`` is created; with no client, or a disabled one, runs are
not traced.
"""

import logging
from typing import Optional

from langfuse import Langfuse

logger = logging.getLogger(__name__)


class TracingClient:
    """
    Langfuse client that disables itself instead of failing.

    Missing credentials, a failing auth check or an unreachable host leave
    the client disabled with the reason in ``error``; swarm runs are never
    affected.
    """

    def __init__(
        self,
        public_key: str = "",
        secret_key: str = "",
        host: str = "",
        debug: bool = False,
    ):
        self._client: Optional[Langfuse] = None
        self._error: Optional[str] = None

        if not public_key or not secret_key:
            self._disable("Langfuse credentials not configured", level=logging.DEBUG)
            return

        if host and not host.startswith(("http://", "https://")):
            logger.warning(f"LANGFUSE_HOST '{host}' has no http:// or https:// scheme")

        try:
            client = Langfuse(
                public_key=public_key,
                secret_key=secret_key,
                debug=debug,
                **({"host": host} if host else {}),
            )
            authenticated = client.auth_check()
        except Exception as e:
            self._disable(f"Langfuse connectivity check failed: {e}")
            return

        if not authenticated:
            self._disable("Langfuse auth_check() failed")
            return

        self._client = client
        logger.info(f"Langfuse tracing enabled (host: {host or 'default'})")

    def _disable(self, reason: str, level: int = logging.WARNING) -> None:
        self._client = None
        self._error = reason
        logger.log(level, f"Tracing disabled: {reason}")

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @property
    def error(self) -> Optional[str]:
        """Why tracing is disabled, if it is."""
        return self._error

    @property
    def client(self) -> Optional[Langfuse]:
        """The underlying Langfuse client (None if disabled)."""
        return self._client

    def flush(self) -> None:
        """Send pending events."""
        if self._client is None:
            return
        try:
            self._client.flush()
        except Exception as e:
            logger.warning(f"Failed to flush tracing events: {e}")

    def shutdown(self) -> None:
        """Flush and stop the Langfuse client."""
        if self._client is None:
            return
        try:
            self._client.shutdown()
            logger.debug("Langfuse tracing client shut down")
        except Exception as e:
            logger.warning(f"Error during tracing client shutdown: {e}")


_tracing_client: Optional[TracingClient] = None


def init_tracing_client(
    public_key: str = "",
    secret_key: str = "",
    host: str = "",
    debug: bool = False,
) -> TracingClient:
    """Create the process-wide tracing client, replacing any previous one."""
    global _tracing_client
    _tracing_client = TracingClient(
        public_key=public_key,
        secret_key=secret_key,
        host=host,
        debug=debug,
    )
    return _tracing_client


def get_tracing_client() -> Optional[TracingClient]:
    return _tracing_client


def shutdown_tracing() -> None:
    """Shut down and forget the process-wide tracing client."""
    global _tracing_client
    if _tracing_client:
        _tracing_client.shutdown()
        _tracing_client = None
