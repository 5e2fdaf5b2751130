"""
Request-scoped tracing context using Langfuse SDK v3.

One ``TracingContext`` covers one orchestration request: a root span opened
by ``start_trace`` and closed by ``end_trace``, with child spans linked to it
through an explicit ``TraceContext`` (trace id plus parent span id) rather
than ambient OpenTelemetry state, so nesting stays correct across awaits.

Everything degrades to a no-op when the tracing client is disabled.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

from langfuse.types import TraceContext

from .client import get_tracing_client

logger = logging.getLogger(__name__)


def _tracing_enabled() -> bool:
    client = get_tracing_client()
    return client is not None and client.enabled


@dataclass
class SpanContext:
    """One Langfuse span, started and ended explicitly or via ``with``."""

    name: str
    enabled: bool = False
    metadata: Optional[dict] = None
    input: Optional[Any] = None
    _context_manager: Any = field(default=None, repr=False)
    _span: Any = field(default=None, repr=False)
    _start_time: float = field(default=0.0, repr=False)
    _output: Optional[Any] = field(default=None, repr=False)
    _status: str = field(default="success", repr=False)
    _trace_context: Optional[TraceContext] = field(default=None, repr=False)
    _span_id: Optional[str] = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._span is not None

    def start(self) -> None:
        if not self.enabled:
            return
        client = get_tracing_client()
        if not client or not client.client:
            return

        try:
            self._start_time = time.time()
            self._context_manager = client.client.start_as_current_observation(
                trace_context=self._trace_context,
                as_type="span",
                name=self.name,
                metadata=self.metadata,
                input=self.input,
            )
            self._span = self._context_manager.__enter__()
            self._span_id = getattr(self._span, "id", None)
        except Exception as e:
            logger.warning("Failed to start span '%s': %s", self.name, e)
            self._span = None

    def end(self) -> None:
        if not self.enabled or not self._span:
            return

        try:
            update_kwargs: dict[str, Any] = {
                "metadata": {
                    "status": self._status,
                    "duration_ms": round((time.time() - self._start_time) * 1000, 2),
                }
            }
            if self._output is not None:
                update_kwargs["output"] = self._output
            self._span.update(**update_kwargs)
            if self._context_manager:
                self._context_manager.__exit__(None, None, None)
        except Exception as e:
            logger.warning("Failed to end span '%s': %s", self.name, e)
        finally:
            self._span = None

    def set_output(self, output: Any) -> None:
        self._output = output

    def set_status(self, status: str) -> None:
        self._status = status

    def child_trace_context(self) -> Optional[TraceContext]:
        """Trace context that parents new observations under this span."""
        if not self._trace_context:
            return None
        if not self._span_id:
            return self._trace_context
        return TraceContext(
            trace_id=self._trace_context["trace_id"],
            parent_span_id=self._span_id,
        )

    @contextmanager
    def span(
        self,
        name: str,
        metadata: Optional[dict] = None,
        input: Optional[Any] = None,
    ) -> Generator["SpanContext", None, None]:
        """Child span of this span."""
        child = SpanContext(
            name=name,
            enabled=self.enabled,
            metadata=metadata,
            input=input,
            _trace_context=self.child_trace_context(),
        )
        try:
            child.start()
            yield child
        finally:
            child.end()


@dataclass
class TracingContext:
    """
    Tracing state for one request.

    ``span()`` and ``new_span()`` create children of the innermost open
    ``span()`` block, falling back to the root span opened by ``start_trace``.
    Before ``start_trace`` (or with tracing disabled) they return spans that
    record nothing.
    """

    execution_id: str
    session_id: Optional[str] = None
    user_id: Optional[str] = None
    _context_manager: Any = field(default=None, repr=False)
    _root_span: Any = field(default=None, repr=False)
    _enabled: bool = field(default=False, repr=False)
    _start_time: float = field(default_factory=time.time, repr=False)
    _trace_id: Optional[str] = field(default=None, repr=False)
    _root_span_id: Optional[str] = field(default=None, repr=False)
    _parents: list = field(default_factory=list, repr=False)
    _issued: list = field(default_factory=list, repr=False)

    def __post_init__(self):
        self._enabled = _tracing_enabled()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def start_trace(
        self,
        name: str = "api_request",
        query: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        """Open the root span for this request."""
        if not self._enabled:
            logger.debug("[%s] start_trace skipped: tracing disabled", self.execution_id)
            return
        client = get_tracing_client()
        if not client or not client.client:
            return

        try:
            trace_metadata = {"execution_id": self.execution_id, **(metadata or {})}
            self._context_manager = client.client.start_as_current_observation(
                as_type="span",
                name=name,
                input={"query": query} if query else None,
                metadata=trace_metadata,
            )
            self._root_span = self._context_manager.__enter__()
            self._trace_id = getattr(self._root_span, "trace_id", None)
            self._root_span_id = getattr(self._root_span, "id", None)
            self._root_span.update_trace(
                user_id=self.user_id,
                session_id=self.session_id,
            )
            self._start_time = time.time()
            logger.debug(
                "[%s] Trace started: trace_id=%s span_id=%s",
                self.execution_id,
                self._trace_id,
                self._root_span_id,
            )
        except Exception as e:
            logger.warning("[%s] Failed to start trace: %s", self.execution_id, e)
            self._root_span = None

    def get_trace_context(self) -> Optional[TraceContext]:
        """Trace context that parents new observations under the root span."""
        if not self._trace_id or not self._root_span_id:
            return None
        return TraceContext(trace_id=self._trace_id, parent_span_id=self._root_span_id)

    def end_trace(
        self,
        output: Optional[str] = None,
        status: str = "success",
        metadata: Optional[dict] = None,
    ) -> None:
        """Close the root span, recording output and status."""
        if not self._enabled or not self._root_span:
            return

        try:
            self._root_span.update(
                output=output,
                metadata={
                    "status": status,
                    "duration_ms": round((time.time() - self._start_time) * 1000, 2),
                    **(metadata or {}),
                },
            )
            if self._context_manager:
                self._context_manager.__exit__(None, None, None)
        except Exception as e:
            logger.warning("[%s] Failed to end trace: %s", self.execution_id, e)
        finally:
            self._root_span = None

    def new_span(
        self,
        name: str,
        metadata: Optional[dict] = None,
        input: Optional[Any] = None,
    ) -> SpanContext:
        """
        Unstarted span; the caller starts and ends it.

        The span is parented under the innermost open ``span()`` block, or
        under the root span outside of any block.
        """
        if self._parents:
            trace_context = self._parents[-1].child_trace_context()
        else:
            trace_context = self.get_trace_context()
        span_ctx = SpanContext(
            name=name,
            enabled=self._enabled,
            metadata=metadata,
            input=input,
            _trace_context=trace_context,
        )
        self._issued.append(span_ctx)
        return span_ctx

    @contextmanager
    def span(
        self,
        name: str,
        metadata: Optional[dict] = None,
        input: Optional[Any] = None,
    ) -> Generator[SpanContext, None, None]:
        """
        Span around a block. Spans issued inside the block and still open
        when it exits are ended first, marked as errors.
        """
        span_ctx = self.new_span(name, metadata=metadata, input=input)
        mark = len(self._issued)
        self._parents.append(span_ctx)
        try:
            span_ctx.start()
            yield span_ctx
        except Exception:
            span_ctx.set_status("error")
            raise
        finally:
            self._parents.pop()
            for child in reversed(self._issued[mark:]):
                if child.active:
                    child.set_status("error")
                    child.end()
            del self._issued[mark:]
            span_ctx.end()
