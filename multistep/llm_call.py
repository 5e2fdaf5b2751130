"""
LLM Call Interface for multistep

Thin wrapper over the OpenAI SDK's async client for any OpenAI-compatible
chat completions endpoint, plus a one-shot question/answer helper that
skips tool calling entirely.
"""

import asyncio
import logging
from typing import Any, Optional

from openai import AsyncOpenAI

from .models import ModelConfig
from .orchestration.request import build_chat_request

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "(empty response)"


class LLMClient:
    """Async chat completions client configured from ``ModelConfig``.

    The underlying ``AsyncOpenAI`` client is created on first use so that
    building an ``LLMClient`` never requires credentials.
    """

    def __init__(
        self,
        model_config: ModelConfig,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model_config = model_config
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            # Empty strings fall back to the SDK's OPENAI_* environment handling
            self._client = AsyncOpenAI(
                base_url=self.model_config.base_url or None,
                api_key=self.model_config.api_key or None,
                timeout=self.model_config.timeout,
            )
        return self._client

    @property
    def model(self) -> str:
        return self.model_config.model

    async def create_chat_completion(self, **create_kwargs: Any) -> Any:
        """Issue one chat completions request. SDK errors propagate."""
        logger.debug(
            "Chat completion request: model=%s messages=%d tools=%d",
            create_kwargs.get("model"),
            len(create_kwargs.get("messages", [])),
            len(create_kwargs.get("tools", [])),
        )
        return await self.client.chat.completions.create(**create_kwargs)

    async def ask_once(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Single question, single answer, no tools."""
        messages = [
            {
                "role": "system",
                "content": system_prompt or self.model_config.system_prompt,
            },
            {"role": "user", "content": prompt},
        ]
        create_kwargs = build_chat_request(messages, self.model_config)
        logger.info(
            "simple_request: model=%s, max_tokens=%d",
            self.model_config.model,
            self.model_config.max_tokens,
        )
        response = await self.create_chat_completion(**create_kwargs)
        logger.debug("simple_response_choices: %d", len(response.choices))
        if not response.choices:
            return EMPTY_RESPONSE
        content = response.choices[0].message.content
        return EMPTY_RESPONSE if content is None else content

    def ask_once_blocking(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Blocking form of ``ask_once`` on a private event loop."""
        return asyncio.run(self._ask_once_and_close(prompt, system_prompt))

    async def _ask_once_and_close(self, prompt: str, system_prompt: Optional[str]) -> str:
        try:
            return await self.ask_once(prompt, system_prompt)
        finally:
            await self.close()

    async def close(self) -> None:
        """Close the underlying OpenAI client if this object created it."""
        if self._client is None or not self._owns_client:
            return
        try:
            await self._client.close()
        except Exception as e:
            logger.debug("Error closing OpenAI client: %s", e)
        self._client = None
