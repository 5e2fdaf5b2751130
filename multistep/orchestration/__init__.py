"""
Multi-step tool calling orchestration.

The loop alternates between a proposer (one chat completions request that
yields a decision) and a resolver (runs the requested tool), feeding tool
results back through an append-only transcript until the model answers in
plain text, a tool call fails, or the iteration budget runs out.
"""

from .events import (
    CallableEventSink,
    CollectingEventSink,
    CompositeEventSink,
    EventSink,
    LoggingEventSink,
    as_sink,
    safe_emit,
)
from .loop import (
    DEFAULT_MAX_ITERATIONS,
    OrchestrationLoop,
    multi_step_tool_answer,
    multi_step_tool_answer_blocking,
)
from .proposer import ChatProposer, Proposer, decode_decision
from .request import build_chat_request, token_limit_field
from .resolver import resolve
from .tool_defs import build_tool_definitions
from .transcript import AssistantTextTurn, ToolResultTurn, Transcript, UserTurn
from .types import (
    ArgumentsParseError,
    Decision,
    EarlyFailure,
    Event,
    Executed,
    ExecutionError,
    FinalText,
    IterationStart,
    ModelText,
    Proposed,
    Resolution,
    Resolved,
    RunResult,
    TextDecision,
    ToolCallDecision,
    ToolNotFound,
    TranscriptAppended,
    Truncated,
)

__all__ = [
    "ArgumentsParseError",
    "AssistantTextTurn",
    "CallableEventSink",
    "ChatProposer",
    "CollectingEventSink",
    "CompositeEventSink",
    "DEFAULT_MAX_ITERATIONS",
    "Decision",
    "EarlyFailure",
    "Event",
    "EventSink",
    "Executed",
    "ExecutionError",
    "FinalText",
    "IterationStart",
    "LoggingEventSink",
    "ModelText",
    "OrchestrationLoop",
    "Proposed",
    "Proposer",
    "Resolution",
    "Resolved",
    "RunResult",
    "TextDecision",
    "ToolCallDecision",
    "ToolNotFound",
    "ToolResultTurn",
    "Transcript",
    "TranscriptAppended",
    "Truncated",
    "UserTurn",
    "as_sink",
    "build_chat_request",
    "build_tool_definitions",
    "decode_decision",
    "multi_step_tool_answer",
    "multi_step_tool_answer_blocking",
    "resolve",
    "safe_emit",
    "token_limit_field",
]
