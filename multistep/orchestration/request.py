"""
Chat completions request construction.

The output-token limit is sent under a different field name depending on the
model family: the 4o family takes ``max_tokens``, newer families only accept
``max_completion_tokens``.
"""

import logging
from typing import Optional

from ..models import ModelConfig

logger = logging.getLogger(__name__)

MAX_TOKENS = "max_tokens"
MAX_COMPLETION_TOKENS = "max_completion_tokens"


def token_limit_field(model: str) -> str:
    """Name of the token-limit request field for ``model``."""
    if "4o" in model:
        return MAX_TOKENS
    return MAX_COMPLETION_TOKENS


def build_chat_request(
    messages: list[dict],
    model_config: ModelConfig,
    tools: Optional[list[dict]] = None,
    tool_choice: str = "auto",
) -> dict:
    """
    Build keyword arguments for ``chat.completions.create``.

    Args:
        messages: Rendered chat messages.
        model_config: Model name, token limits and sampling settings.
        tools: OpenAI tool catalog. ``tools``/``tool_choice`` are omitted
            when empty, since the endpoint rejects a tool choice without tools.
        tool_choice: Tool choice policy when tools are present.
    """
    create_kwargs: dict = {
        "model": model_config.model,
        "messages": messages,
    }
    if tools:
        create_kwargs["tools"] = tools
        create_kwargs["tool_choice"] = tool_choice

    limit_field = token_limit_field(model_config.model)
    if limit_field == MAX_TOKENS:
        create_kwargs[MAX_TOKENS] = model_config.max_tokens
    else:
        create_kwargs[MAX_COMPLETION_TOKENS] = model_config.max_completion_tokens
    logger.debug("Token limit field for %s: %s", model_config.model, limit_field)

    if model_config.temperature is not None:
        create_kwargs["temperature"] = model_config.temperature

    return create_kwargs
