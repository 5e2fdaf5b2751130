"""
Langfuse tracing client wrapper with graceful degradation.

Uses the Langfuse SDK v3 (OpenTelemetry-based) API. Tracing stays off,
and every operation is a no-op, when credentials are missing, the client
cannot be constructed, or the startup ``auth_check()`` fails.
"""

import logging
from typing import Any, Optional

from langfuse import Langfuse

from ..models import LangfuseConfig

logger = logging.getLogger(__name__)


class TracingClient:
    """Owns one ``Langfuse`` client and knows whether tracing is usable."""

    def __init__(
        self,
        public_key: str = "",
        secret_key: str = "",
        host: str = "",
        debug: bool = False,
    ):
        self._client: Optional[Langfuse] = None
        self._enabled = False
        self._error: Optional[str] = None

        if not public_key or not secret_key:
            self._error = "Langfuse credentials not configured"
            logger.debug("Tracing disabled: %s", self._error)
            return

        if host and not host.startswith(("http://", "https://")):
            logger.warning(
                "LANGFUSE_HOST '%s' may be malformed; expected http://host:port or https://host:port",
                host,
            )

        try:
            kwargs: dict[str, Any] = {
                "public_key": public_key,
                "secret_key": secret_key,
                "debug": debug,
            }
            if host:
                kwargs["host"] = host
            self._client = Langfuse(**kwargs)
        except Exception as e:
            self._error = f"Failed to initialize Langfuse client: {e}"
            logger.warning("Tracing disabled: %s", self._error)
            self._client = None
            return

        if not self._validate_connectivity():
            return

        self._enabled = True
        logger.info("Langfuse tracing enabled (host: %s)", host or "default")

    @classmethod
    def from_config(cls, langfuse_config: LangfuseConfig) -> "TracingClient":
        return cls(
            public_key=langfuse_config.public_key,
            secret_key=langfuse_config.secret_key,
            host=langfuse_config.host,
            debug=langfuse_config.debug,
        )

    def _validate_connectivity(self) -> bool:
        """Run ``auth_check()`` once; on failure drop the client and stay disabled."""
        if self._client is None:
            return False
        try:
            ok = self._client.auth_check()
        except Exception as e:
            self._error = f"Langfuse connectivity check failed: {e}"
            ok = False
        else:
            if not ok:
                self._error = "Langfuse auth_check() failed; check LANGFUSE_HOST and keys"
        if not ok:
            logger.warning("Tracing disabled: %s", self._error)
            self._client = None
        return ok

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def error(self) -> Optional[str]:
        """Why tracing is disabled, if it is."""
        return self._error

    @property
    def client(self) -> Optional[Langfuse]:
        """The underlying Langfuse client, ``None`` when disabled."""
        return self._client

    def flush(self) -> None:
        if not self._enabled or not self._client:
            return
        try:
            self._client.flush()
        except Exception as e:
            logger.warning("Failed to flush tracing events: %s", e)

    def shutdown(self) -> None:
        """Flush and stop the client."""
        if not self._enabled or not self._client:
            return
        try:
            self._client.shutdown()
            logger.info("Langfuse tracing client shutdown complete")
        except Exception as e:
            logger.warning("Error during tracing client shutdown: %s", e)


_tracing_client: Optional[TracingClient] = None


def init_tracing_client(langfuse_config: LangfuseConfig) -> TracingClient:
    """Create the process-wide tracing client from config."""
    global _tracing_client
    _tracing_client = TracingClient.from_config(langfuse_config)
    return _tracing_client


def get_tracing_client() -> Optional[TracingClient]:
    return _tracing_client


def shutdown_tracing() -> None:
    """Shut down and forget the process-wide tracing client."""
    global _tracing_client
    if _tracing_client:
        _tracing_client.shutdown()
        _tracing_client = None
