"""
Bounded multi-step tool calling loop.

Each iteration asks the proposer for the model's next move against the
growing transcript, resolves it, and either stops or feeds the tool result
back into the transcript:

    1. emit IterationStart
    2. propose (empty extra prompt), emit Proposed
    3. plain text         -> emit FinalText, done
    4. tool call          -> resolve, emit Resolved, record the step
    5. not executed       -> emit EarlyFailure, done with a synthesized answer
    6. executed           -> append the result, emit TranscriptAppended;
                             after the last allowed iteration emit Truncated

Early failures short-circuit rather than retry. Running out of iterations is
reported separately through ``RunResult.truncated``.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from ..models import DEFAULT_SYSTEM_PROMPT, ModelConfig
from ..tools.registry import ToolRegistry
from .events import SinkLike, as_sink, safe_emit
from .proposer import ChatProposer, Proposer
from .resolver import resolve
from .transcript import Transcript
from .types import (
    EarlyFailure,
    Executed,
    FinalText,
    IterationStart,
    Proposed,
    Resolution,
    Resolved,
    RunResult,
    TextDecision,
    TranscriptAppended,
    Truncated,
)

if TYPE_CHECKING:
    from ..tracing import TracingContext

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 5


def early_failure_answer(query: str, resolution: Resolution) -> str:
    """Final answer for a run that stopped on a failed tool resolution."""
    return (
        "A tool call failed midway, so this answer is based on the information gathered so far.\n"
        f"Original question: {query}\n"
        f"{resolution.describe()}"
    )


def truncated_answer(max_iterations: int) -> str:
    """Final answer for a run that used up its iteration budget."""
    return (
        f"Stopped after reaching the maximum number of iterations ({max_iterations}). "
        "Please summarize a final answer from the function results (JSON) gathered so far."
    )


class OrchestrationLoop:
    """
    Runs one question through the propose/resolve cycle.

    The registry is only read during a run. A loop instance holds no state
    between runs, so it can be reused for many questions, one at a time.

    Tool handlers run inline on the calling event loop unless
    ``run_tools_in_thread`` is set, in which case each resolution is awaited
    on a worker thread. Iterations stay strictly sequential either way.
    """

    def __init__(
        self,
        proposer: Proposer,
        registry: ToolRegistry,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        event_sink: Optional[SinkLike] = None,
        system_directive: Optional[str] = DEFAULT_SYSTEM_PROMPT,
        tracing_context: Optional["TracingContext"] = None,
        run_tools_in_thread: bool = False,
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        self.proposer = proposer
        self.registry = registry
        self.max_iterations = max_iterations
        self.event_sink = as_sink(event_sink) if event_sink is not None else None
        self.system_directive = system_directive
        self.tracing_context = tracing_context
        self.run_tools_in_thread = run_tools_in_thread

    async def run(self, query: str) -> RunResult:
        """
        Answer ``query``, calling tools as the model requests them.

        Args:
            query: The user's question.

        Returns:
            RunResult with the final answer and every resolution taken.

        Raises:
            openai.APIError: Endpoint failures abort the run unchanged.
        """
        logger.debug("Starting orchestration for: %s", query)
        if self.tracing_context is None:
            result = await self._run_loop(query)
        else:
            with self.tracing_context.span(
                name="orchestration",
                metadata={"max_iterations": self.max_iterations},
                input={"query": query},
            ) as orch_span:
                result = await self._run_loop(query)
                orch_span.set_output(
                    {
                        "iterations": result.iterations,
                        "truncated": result.truncated,
                        "final_answer": result.final_answer[:500],
                    }
                )
        self._log_trace_summary(result)
        return result

    def run_blocking(self, query: str) -> RunResult:
        """
        Run ``run`` to completion on a private event loop.

        Raises:
            RuntimeError: If called from inside a running event loop.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "run_blocking() cannot be called from a running event loop; await run() instead"
            )
        return asyncio.run(self._run_and_close(query))

    async def _run_and_close(self, query: str) -> RunResult:
        try:
            return await self.run(query)
        finally:
            # The async HTTP client is bound to the loop that is about to close
            llm_client = getattr(self.proposer, "llm_client", None)
            if llm_client is not None:
                await llm_client.close()

    async def _run_loop(self, query: str) -> RunResult:
        transcript = Transcript(self.system_directive)
        transcript.append_user(query)
        steps: list[Resolution] = []

        for iteration in range(1, self.max_iterations + 1):
            logger.debug("Iteration %d/%d", iteration, self.max_iterations)
            self._emit(IterationStart(iteration))

            decision = await self.proposer.propose(transcript, self.registry, "")
            self._emit(Proposed(iteration, decision))

            if isinstance(decision, TextDecision):
                self._emit(FinalText(iteration, decision.text))
                return RunResult(
                    final_answer=decision.text,
                    steps=tuple(steps),
                    iterations=iteration,
                    truncated=False,
                )

            resolution = await self._resolve(decision)
            self._emit(Resolved(iteration, resolution))
            steps.append(resolution)

            if not isinstance(resolution, Executed):
                self._emit(EarlyFailure(iteration, resolution))
                return RunResult(
                    final_answer=early_failure_answer(query, resolution),
                    steps=tuple(steps),
                    iterations=iteration,
                    truncated=False,
                )

            transcript.append_tool_result(resolution.name, resolution.result)
            self._emit(TranscriptAppended(iteration, resolution.name, resolution.result))

        logger.warning("Max iterations (%d) reached, truncating", self.max_iterations)
        self._emit(Truncated(self.max_iterations))
        return RunResult(
            final_answer=truncated_answer(self.max_iterations),
            steps=tuple(steps),
            iterations=self.max_iterations,
            truncated=True,
        )

    async def _resolve(self, decision) -> Resolution:
        if self.run_tools_in_thread:
            # Handlers may block (HTTP, file reads); keep a shared event loop responsive
            return await asyncio.to_thread(resolve, decision, self.registry)
        return resolve(decision, self.registry)

    def _emit(self, event) -> None:
        safe_emit(self.event_sink, event)

    def _log_trace_summary(self, result: RunResult) -> None:
        """Log a compact trace summary."""
        logger.info("─" * 50)
        logger.info(
            "TRACE SUMMARY: iterations=%d truncated=%s steps=%d",
            result.iterations,
            result.truncated,
            len(result.steps),
        )
        logger.info("─" * 50)
        for number, step in enumerate(result.steps, start=1):
            if isinstance(step, Executed):
                preview = step.describe()
                if len(preview) > 80:
                    preview = preview[:80] + "..."
                logger.info("Step %d: %s -> %s", number, step.name, preview)
            else:
                logger.error("Step %d failed:\n%s", number, step.describe())


def _build_loop(
    registry: ToolRegistry,
    model_config: ModelConfig,
    max_iterations: Optional[int],
    event_sink: Optional[SinkLike],
) -> OrchestrationLoop:
    from ..llm_call import LLMClient

    proposer = ChatProposer(LLMClient(model_config), model_config)
    return OrchestrationLoop(
        proposer,
        registry,
        max_iterations=max_iterations or model_config.max_iterations,
        event_sink=event_sink,
        system_directive=model_config.system_prompt,
    )


async def multi_step_tool_answer(
    query: str,
    registry: ToolRegistry,
    model_config: Optional[ModelConfig] = None,
    max_iterations: Optional[int] = None,
    event_sink: Optional[SinkLike] = None,
) -> RunResult:
    """
    Answer ``query`` against the configured endpoint with the given tools.

    ``model_config`` defaults to the loaded application config; a missing
    ``max_iterations`` falls back to ``model_config.max_iterations``.
    """
    if model_config is None:
        from ..config import config

        model_config = config.model
    loop = _build_loop(registry, model_config, max_iterations, event_sink)
    try:
        return await loop.run(query)
    finally:
        await loop.proposer.llm_client.close()


def multi_step_tool_answer_blocking(
    query: str,
    registry: ToolRegistry,
    model_config: Optional[ModelConfig] = None,
    max_iterations: Optional[int] = None,
    event_sink: Optional[SinkLike] = None,
) -> RunResult:
    """Blocking form of ``multi_step_tool_answer``."""
    if model_config is None:
        from ..config import config

        model_config = config.model
    loop = _build_loop(registry, model_config, max_iterations, event_sink)
    logger.info(
        "multi_step_blocking_request: model=%s max_iterations=%d",
        model_config.model,
        loop.max_iterations,
    )
    result = loop.run_blocking(query)
    logger.info(
        "multi_step_blocking_done: iterations=%d truncated=%s steps=%d final_len=%d",
        result.iterations,
        result.truncated,
        len(result.steps),
        len(result.final_answer),
    )
    return result
