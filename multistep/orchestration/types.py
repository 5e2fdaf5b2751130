"""
Data model for the tool-calling loop.

Decisions are what the proposer read out of one model reply, resolutions are
what the resolver did with a decision, and events describe each transition
of the loop for observers. All of them are immutable values.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Union


def _compact(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(value)


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextDecision:
    """The model answered with plain text."""

    text: str

    def __str__(self) -> str:
        return f"Text(len={len(self.text)}):\n{self.text}"


@dataclass(frozen=True)
class ToolCallDecision:
    """The model asked for one tool invocation.

    ``arguments`` is the raw argument text exactly as the model produced it.
    ``discarded`` names any further calls from the same reply; only the
    first call is ever executed.
    """

    name: str
    arguments: str
    discarded: tuple[str, ...] = ()

    def __str__(self) -> str:
        text = f"ToolCall name={self.name} args={self.arguments} (len={len(self.arguments)})"
        if self.discarded:
            text += f" discarded={list(self.discarded)}"
        return text


Decision = Union[TextDecision, ToolCallDecision]


# ---------------------------------------------------------------------------
# Resolutions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModelText:
    """Decision was plain text; passed through unchanged."""

    text: str
    is_executed = False

    def describe(self) -> str:
        return f"Model text: {self.text}"

    def __str__(self) -> str:
        return f"ModelText(len={len(self.text)}):\n{self.text}"


@dataclass(frozen=True)
class Executed:
    """Tool found, arguments parsed, handler succeeded."""

    name: str
    result: Any
    is_executed = True

    def describe(self) -> str:
        return f"Result JSON of tool {self.name}: {_compact(self.result)}"

    def __str__(self) -> str:
        return f"Executed name={self.name} result={_compact(self.result)} (json)"


@dataclass(frozen=True)
class ToolNotFound:
    """No registered tool has the requested name."""

    requested: str
    is_executed = False

    def describe(self) -> str:
        return f"The requested tool {self.requested} does not exist."

    def __str__(self) -> str:
        return f"ToolNotFound requested={self.requested}"


@dataclass(frozen=True)
class ArgumentsParseError:
    """Tool found but its raw argument text is not valid JSON."""

    name: str
    raw: str
    error: str
    is_executed = False

    def describe(self) -> str:
        return f"Failed to parse arguments for tool {self.name}: {self.error}. RAW: {self.raw}"

    def __str__(self) -> str:
        return f"ArgumentsParseError name={self.name} error={self.error} raw={self.raw}"


@dataclass(frozen=True)
class ExecutionError:
    """Tool found and arguments parsed, but the handler failed."""

    name: str
    error: str
    is_executed = False

    def describe(self) -> str:
        return f"Tool {self.name} execution error: {self.error}"

    def __str__(self) -> str:
        return f"ExecutionError name={self.name} error={self.error}"


Resolution = Union[ModelText, Executed, ToolNotFound, ArgumentsParseError, ExecutionError]


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunResult:
    """Outcome of one orchestration run."""

    final_answer: str
    steps: tuple[Resolution, ...] = field(default_factory=tuple)
    iterations: int = 0
    truncated: bool = False

    @property
    def tools_used(self) -> list[str]:
        """Unique names of tools that executed successfully, in order."""
        seen: list[str] = []
        for step in self.steps:
            if isinstance(step, Executed) and step.name not in seen:
                seen.append(step.name)
        return seen


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IterationStart:
    iteration: int

    def __str__(self) -> str:
        return f"IterationStart #{self.iteration}"


@dataclass(frozen=True)
class Proposed:
    iteration: int
    decision: Decision

    def __str__(self) -> str:
        return f"Proposed @{self.iteration} => {self.decision}"


@dataclass(frozen=True)
class Resolved:
    iteration: int
    resolution: Resolution

    def __str__(self) -> str:
        return f"Resolved @{self.iteration} => {self.resolution}"


@dataclass(frozen=True)
class TranscriptAppended:
    iteration: int
    tool_name: str
    result: Any

    def __str__(self) -> str:
        return (
            f"TranscriptAppended @{self.iteration} "
            f"name={self.tool_name} result={_compact(self.result)}"
        )


@dataclass(frozen=True)
class FinalText:
    iteration: int
    text: str

    def __str__(self) -> str:
        return f"FinalText @{self.iteration} len={len(self.text)}"


@dataclass(frozen=True)
class EarlyFailure:
    iteration: int
    resolution: Resolution

    def __str__(self) -> str:
        return f"EarlyFailure @{self.iteration} => {self.resolution}"


@dataclass(frozen=True)
class Truncated:
    max_iterations: int

    def __str__(self) -> str:
        return f"Truncated after {self.max_iterations} iterations"


Event = Union[
    IterationStart,
    Proposed,
    Resolved,
    TranscriptAppended,
    FinalText,
    EarlyFailure,
    Truncated,
]

TERMINAL_EVENTS = (FinalText, EarlyFailure, Truncated)
