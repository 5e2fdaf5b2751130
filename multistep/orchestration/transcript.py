"""
Conversation transcript for one orchestration run.

Turns are append-only and kept in send order. The system directive is held
apart from the turns: it is always rendered first when sending, but length,
iteration and equality only look at the turns.
"""

import json
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from ..models import DEFAULT_SYSTEM_PROMPT


@dataclass(frozen=True)
class UserTurn:
    text: str

    def to_message(self) -> dict:
        return {"role": "user", "content": self.text}


@dataclass(frozen=True)
class AssistantTextTurn:
    text: str

    def to_message(self) -> dict:
        return {"role": "assistant", "content": self.text}


@dataclass(frozen=True)
class ToolResultTurn:
    """Result of a tool execution, kept verbatim as ``payload``."""

    tool_name: str
    payload: Any

    def to_message(self) -> dict:
        return {
            "role": "function",
            "name": self.tool_name,
            "content": json.dumps(self.payload, ensure_ascii=False),
        }


Turn = Union[UserTurn, AssistantTextTurn, ToolResultTurn]


class Transcript:
    """Ordered record of the turns exchanged so far."""

    def __init__(self, system_directive: Optional[str] = None):
        self._system_directive = system_directive
        self._turns: list[Turn] = []

    @classmethod
    def with_default_directive(cls) -> "Transcript":
        return cls(DEFAULT_SYSTEM_PROMPT)

    @property
    def system_directive(self) -> Optional[str]:
        return self._system_directive

    def set_system_directive(self, text: Optional[str]) -> "Transcript":
        """Replace the directive, or clear it with ``None``."""
        self._system_directive = text
        return self

    def append_user(self, text: str) -> "Transcript":
        self._turns.append(UserTurn(text))
        return self

    def append_assistant_text(self, text: str) -> "Transcript":
        self._turns.append(AssistantTextTurn(text))
        return self

    def append_tool_result(self, tool_name: str, payload: Any) -> "Transcript":
        self._turns.append(ToolResultTurn(tool_name, payload))
        return self

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def last_turn(self) -> Optional[Turn]:
        return self._turns[-1] if self._turns else None

    def render_for_send(self) -> list[dict]:
        """Chat messages in send order, directive first when set."""
        messages = []
        if self._system_directive is not None:
            messages.append({"role": "system", "content": self._system_directive})
        messages.extend(turn.to_message() for turn in self._turns)
        return messages

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transcript):
            return NotImplemented
        return self._turns == other._turns

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Transcript(turns={len(self._turns)}, "
            f"system_directive={self._system_directive is not None})"
        )
