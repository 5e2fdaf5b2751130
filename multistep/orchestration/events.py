"""
Event sinks for observing an orchestration run.

Events are delivered synchronously, in order, as the loop transitions. Sinks
are observers only: an exception raised by a sink is logged and otherwise
ignored.
"""

import logging
from typing import Callable, Iterable, Optional, Protocol, Union, runtime_checkable

from .types import TERMINAL_EVENTS, Event

logger = logging.getLogger(__name__)


@runtime_checkable
class EventSink(Protocol):
    def emit(self, event: Event) -> None: ...


EventCallback = Callable[[Event], None]
SinkLike = Union[EventSink, EventCallback]


class LoggingEventSink:
    """Writes every event to the log; terminal events at INFO, the rest at DEBUG."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def emit(self, event: Event) -> None:
        level = logging.INFO if isinstance(event, TERMINAL_EVENTS) else logging.DEBUG
        self._log.log(level, "multi_step_event: %s", event)


class CollectingEventSink:
    """Keeps events in memory, e.g. for a ``/trace`` command or for tests."""

    def __init__(self):
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(list(self.events))


class CallableEventSink:
    """Adapts a plain ``callable(event)`` to the sink interface."""

    def __init__(self, callback: EventCallback):
        self._callback = callback

    def emit(self, event: Event) -> None:
        self._callback(event)


class CompositeEventSink:
    """Fans events out to several sinks. One failing sink does not starve the others."""

    def __init__(self, sinks: Iterable[SinkLike] = ()):
        self.sinks: list[EventSink] = [as_sink(s) for s in sinks]

    def add(self, sink: SinkLike) -> None:
        self.sinks.append(as_sink(sink))

    def emit(self, event: Event) -> None:
        for sink in self.sinks:
            safe_emit(sink, event)


def as_sink(sink: SinkLike) -> EventSink:
    """Return ``sink`` as an ``EventSink``, wrapping plain callables."""
    if isinstance(sink, EventSink):
        return sink
    if callable(sink):
        return CallableEventSink(sink)
    raise TypeError(f"Not an event sink: {sink!r}")


def safe_emit(sink: Optional[EventSink], event: Event) -> None:
    """Deliver ``event`` to ``sink``, logging and dropping any sink failure."""
    if sink is None:
        return
    try:
        sink.emit(event)
    except Exception as e:
        logger.warning("Event sink %s failed on %s: %s", type(sink).__name__, type(event).__name__, e)
