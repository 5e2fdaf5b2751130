"""
Pytest configuration and fixtures for multistep tests.
"""

from typing import Optional
from unittest.mock import Mock

import pytest

from multistep.orchestration import Decision, Transcript
from multistep.tools import ToolDefinition, ToolRegistry, build_get_constants_tool


class ScriptedProposer:
    """Proposer that replays a fixed list of decisions (or raises exceptions)."""

    def __init__(self, decisions: list):
        self._decisions = list(decisions)
        self.calls: list[dict] = []

    async def propose(
        self, transcript: Transcript, tools: ToolRegistry, prompt: str = ""
    ) -> Decision:
        self.calls.append(
            {
                "messages": transcript.render_for_send(),
                "turns": len(transcript),
                "tools": tools.names(),
                "prompt": prompt,
            }
        )
        if not self._decisions:
            raise AssertionError("ScriptedProposer ran out of decisions")
        decision = self._decisions.pop(0)
        if isinstance(decision, Exception):
            raise decision
        return decision


def make_chat_response(
    content: Optional[str] = None,
    tool_calls: Optional[list[tuple[str, str]]] = None,
    no_choices: bool = False,
) -> Mock:
    """Build an object shaped like an openai ``ChatCompletion``."""
    response = Mock()
    if no_choices:
        response.choices = []
        return response

    message = Mock()
    message.content = content
    if tool_calls:
        calls = []
        for name, arguments in tool_calls:
            call = Mock()
            call.function.name = name
            call.function.arguments = arguments
            calls.append(call)
        message.tool_calls = calls
    else:
        message.tool_calls = None

    choice = Mock()
    choice.message = message
    response.choices = [choice]
    return response


@pytest.fixture
def constants_registry() -> ToolRegistry:
    """Registry holding only get_constants (X=10, Y=20)."""
    return ToolRegistry([build_get_constants_tool(10, 20)])


@pytest.fixture
def failing_registry() -> ToolRegistry:
    """Registry with a tool whose handler always raises."""

    def _boom(_args):
        raise RuntimeError("boom")

    return ToolRegistry(
        [
            ToolDefinition(
                name="explode",
                description="Always fails",
                parameters={"type": "object", "properties": {}, "required": []},
                handler=_boom,
            )
        ]
    )


@pytest.fixture
def scripted_proposer():
    """Factory for ``ScriptedProposer``."""
    return ScriptedProposer


@pytest.fixture
def chat_response():
    """Factory for fake chat completions responses."""
    return make_chat_response
