"""
Proposer: one chat completions round trip decoded into a ``Decision``.

The model is offered the registry's tool catalog with ``tool_choice="auto"``
and decides on its own whether to answer or to call a tool. Only the first
tool call of a reply is honored.
"""

import logging
from typing import TYPE_CHECKING, Any, Protocol

from ..models import ModelConfig
from ..tools.registry import ToolRegistry
from .request import build_chat_request
from .tool_defs import build_tool_definitions
from .transcript import Transcript
from .types import Decision, TextDecision, ToolCallDecision

if TYPE_CHECKING:
    from ..llm_call import LLMClient

logger = logging.getLogger(__name__)

NO_RESPONSE = "(no response)"
EMPTY_RESPONSE = "(empty response)"


class Proposer(Protocol):
    """Anything that can turn a transcript into the model's next decision."""

    async def propose(
        self,
        transcript: Transcript,
        tools: ToolRegistry,
        prompt: str = "",
    ) -> Decision: ...


class ChatProposer:
    """Proposer backed by an OpenAI-compatible chat completions endpoint."""

    def __init__(self, llm_client: "LLMClient", model_config: ModelConfig):
        self.llm_client = llm_client
        self.model_config = model_config

    async def propose(
        self,
        transcript: Transcript,
        tools: ToolRegistry,
        prompt: str = "",
    ) -> Decision:
        """
        Ask the model for its next move.

        Args:
            transcript: Conversation so far. Not modified.
            tools: Tool catalog offered to the model.
            prompt: Extra user text appended after the transcript when non-empty.

        Returns:
            The decoded decision.

        Raises:
            openai.APIError: Endpoint failures propagate unchanged.
        """
        messages = transcript.render_for_send()
        if prompt:
            messages.append({"role": "user", "content": prompt})

        tool_defs = build_tool_definitions(tools)
        create_kwargs = build_chat_request(
            messages,
            self.model_config,
            tools=tool_defs,
            tool_choice="auto",
        )

        logger.info(
            "propose_tool_call_request: model=%s messages=%d tools=%d",
            self.model_config.model,
            len(messages),
            len(tool_defs),
        )
        response = await self.llm_client.create_chat_completion(**create_kwargs)
        return decode_decision(response)


def decode_decision(response: Any) -> Decision:
    """Read a ``Decision`` out of a chat completions response."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        logger.warning("Model returned no choices")
        return TextDecision(NO_RESPONSE)

    message = choices[0].message
    tool_calls = getattr(message, "tool_calls", None) or []
    if tool_calls:
        first = tool_calls[0]
        discarded = tuple(call.function.name for call in tool_calls[1:])
        if discarded:
            logger.warning(
                "Model proposed %d tool calls; executing '%s' and discarding %s",
                len(tool_calls),
                first.function.name,
                list(discarded),
            )
        decision = ToolCallDecision(
            name=first.function.name,
            arguments=first.function.arguments,
            discarded=discarded,
        )
        logger.debug("Decoded %s", decision)
        return decision

    content = getattr(message, "content", None)
    if content is None:
        return TextDecision(EMPTY_RESPONSE)
    return TextDecision(content)
