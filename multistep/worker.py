"""
Background prompt worker.

Runs orchestrations on a dedicated thread so a blocking host (a REPL, a UI
event loop) can hand prompts over without waiting. Prompts go in through
``inbound``, answer texts come back through ``outbound``, one answer per
prompt, in order.

The thread owns a single asyncio event loop for its whole lifetime, so the
async OpenAI client is created and closed on the same loop.
"""

import asyncio
import logging
import queue
import threading
from typing import Optional

import openai

from .orchestration import OrchestrationLoop, RunResult

logger = logging.getLogger(__name__)

_STOP = object()


class PromptWorker:
    """Daemon thread answering prompts with an ``OrchestrationLoop``."""

    def __init__(
        self,
        loop: OrchestrationLoop,
        inbound: Optional[queue.Queue] = None,
        outbound: Optional[queue.Queue] = None,
    ):
        self.loop = loop
        self.inbound: queue.Queue = inbound if inbound is not None else queue.Queue()
        self.outbound: queue.Queue = outbound if outbound is not None else queue.Queue()
        self.last_result: Optional[RunResult] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_sent = False

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "PromptWorker":
        if self.running:
            return self
        self._thread = threading.Thread(
            target=self._serve, name="multistep-prompt-worker", daemon=True
        )
        self._thread.start()
        return self

    def submit(self, prompt: str) -> None:
        self.inbound.put(prompt)

    def get_answer(self, timeout: Optional[float] = None) -> str:
        """Next answer text. Raises ``queue.Empty`` on timeout."""
        return self.outbound.get(timeout=timeout)

    def ask(self, prompt: str, timeout: Optional[float] = None) -> str:
        """Submit ``prompt`` and wait for its answer."""
        self.submit(prompt)
        return self.get_answer(timeout=timeout)

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Let queued prompts finish, then end the thread.

        If ``timeout`` expires first the thread is still tracked, so ``start``
        will not spawn a second consumer on the same queues.
        """
        if self._thread is None:
            return
        if not self._stop_sent:
            self.inbound.put(_STOP)
            self._stop_sent = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Prompt worker still busy after stop(timeout=%s)", timeout)
            return
        self._thread = None
        self._stop_sent = False

    def _serve(self) -> None:
        event_loop = asyncio.new_event_loop()
        try:
            while True:
                prompt = self.inbound.get()
                if prompt is _STOP:
                    break
                logger.info("prompt_received: %s", prompt)
                answer = event_loop.run_until_complete(self._answer(prompt))
                logger.info("answer_ready: %d chars", len(answer))
                self.outbound.put(answer)
        finally:
            llm_client = getattr(self.loop.proposer, "llm_client", None)
            if llm_client is not None:
                event_loop.run_until_complete(llm_client.close())
            event_loop.close()
            logger.debug("Prompt worker stopped")

    async def _answer(self, prompt: str) -> str:
        self.last_result = None
        try:
            result = await self.loop.run(prompt)
        except openai.APIError as e:
            logger.error("propose_tool_call_error: %s", e)
            return f"API error: {e}"
        except Exception as e:
            logger.exception("Orchestration failed for prompt")
            return f"API error: {e}"
        self.last_result = result
        return result.final_answer
