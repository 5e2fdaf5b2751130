"""
Event sink that mirrors an orchestration run into Langfuse spans.

Each iteration becomes one span named ``iteration_<n>``. The span opens on
``IterationStart`` and closes once the iteration's outcome is known: the
tool result was appended, or the run ended on that iteration. Spans nest
under the loop's ``orchestration`` span; if the run raises, the tracing
context ends the open iteration span when that span exits.
"""

import logging
from typing import Any, Optional

from ..orchestration.types import (
    EarlyFailure,
    Event,
    FinalText,
    IterationStart,
    Proposed,
    Resolved,
    TranscriptAppended,
    Truncated,
)
from .context import SpanContext, TracingContext

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 500


def _preview(value: Any) -> str:
    text = str(value)
    if len(text) > _PREVIEW_CHARS:
        return text[:_PREVIEW_CHARS] + "..."
    return text


class TracingEventSink:
    """Turns loop events into per-iteration spans under ``tracing_context``."""

    def __init__(self, tracing_context: TracingContext):
        self.tracing_context = tracing_context
        self._span: Optional[SpanContext] = None
        self._output: dict[str, Any] = {}

    def emit(self, event: Event) -> None:
        if isinstance(event, IterationStart):
            self._close()
            self._span = self.tracing_context.new_span(
                name=f"iteration_{event.iteration}",
                metadata={"iteration": event.iteration},
            )
            self._span.start()
        elif isinstance(event, Proposed):
            self._output["decision"] = _preview(event.decision)
        elif isinstance(event, Resolved):
            self._output["resolution"] = _preview(event.resolution)
        elif isinstance(event, TranscriptAppended):
            self._close()
        elif isinstance(event, FinalText):
            self._output["final_text"] = _preview(event.text)
            self._close()
        elif isinstance(event, EarlyFailure):
            self._output["failure"] = event.resolution.describe()
            self._close(status="error")
        elif isinstance(event, Truncated):
            self._close()
            with self.tracing_context.span(
                name="truncated",
                metadata={"max_iterations": event.max_iterations},
            ):
                pass

    def _close(self, status: str = "success") -> None:
        if self._span is None:
            return
        self._span.set_output(dict(self._output))
        self._span.set_status(status)
        self._span.end()
        self._span = None
        self._output = {}
