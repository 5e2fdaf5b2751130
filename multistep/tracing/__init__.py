"""
Langfuse tracing integration for multistep.

Provides observability for orchestration runs and the request lifecycle.
"""

from .client import (
    TracingClient,
    get_tracing_client,
    init_tracing_client,
    shutdown_tracing,
)
from .context import SpanContext, TracingContext
from .sink import TracingEventSink

__all__ = [
    "TracingClient",
    "init_tracing_client",
    "get_tracing_client",
    "shutdown_tracing",
    "TracingContext",
    "SpanContext",
    "TracingEventSink",
]
