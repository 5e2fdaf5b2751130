"""
OpenAI-compatible chat completion endpoints.

Implements /v1/chat/completions and /v1/models. A completion runs one
bounded tool-calling orchestration on the last user message.
"""

import json
import logging
import time
import uuid
from typing import Generator, Optional

import openai
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from ...config import config
from ...orchestration import (
    CompositeEventSink,
    LoggingEventSink,
    OrchestrationLoop,
    Proposer,
    RunResult,
)
from ...tools import ToolRegistry
from ...tracing import TracingContext, TracingEventSink, get_tracing_client
from ..dependencies import get_proposer, get_registry
from ..schemas import (
    MODEL_ID,
    ChatCompletionChoice,
    ChatCompletionMessage,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ErrorResponse,
    ModelInfo,
    ModelListResponse,
    TraceStep,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MODEL_CREATED = int(time.time())


@router.get(
    "/v1/models",
    response_model=ModelListResponse,
    summary="List models",
)
def list_models() -> ModelListResponse:
    return ModelListResponse(data=[ModelInfo(id=MODEL_ID, created=MODEL_CREATED)])


@router.get(
    "/v1/models/{model_id}",
    response_model=ModelInfo,
    summary="Get model",
)
def get_model(model_id: str) -> ModelInfo:
    if model_id != MODEL_ID:
        raise HTTPException(
            status_code=404,
            detail=f"Model '{model_id}' not found. Available model: {MODEL_ID}",
        )
    return ModelInfo(id=MODEL_ID, created=MODEL_CREATED)


def _finish_reason(result: RunResult) -> str:
    return "length" if result.truncated else "stop"


def _create_sse_chunk(
    content: str,
    completion_id: str,
    finish_reason: Optional[str] = None,
) -> str:
    chunk = {
        "id": completion_id,
        "object": "chat.completion.chunk",
        "created": int(time.time()),
        "model": MODEL_ID,
        "choices": [
            {
                "index": 0,
                "delta": {"content": content} if content else {},
                "finish_reason": finish_reason,
            }
        ],
    }
    return f"data: {json.dumps(chunk, ensure_ascii=False)}\n\n"


def _generate_streaming_response(result: RunResult) -> Generator[str, None, None]:
    """The whole answer as one content chunk, then the finish chunk and [DONE]."""
    completion_id = f"chatcmpl-{uuid.uuid4().hex[:12]}"
    yield _create_sse_chunk(result.final_answer, completion_id)
    yield _create_sse_chunk("", completion_id, finish_reason=_finish_reason(result))
    yield "data: [DONE]\n\n"


@router.post(
    "/v1/chat/completions",
    response_model=ChatCompletionResponse,
    responses={
        502: {"model": ErrorResponse, "description": "Model endpoint failure"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create chat completion",
    description=(
        "Answer the last user message, letting the model call the registered "
        "tools for up to max_iterations rounds."
    ),
)
async def create_chat_completion(
    request: ChatCompletionRequest,
    proposer: Proposer = Depends(get_proposer),
    registry: ToolRegistry = Depends(get_registry),
):
    user_messages = [msg for msg in request.messages if msg.role == "user"]
    if not user_messages:
        logger.warning("No user message found in request")
        raise HTTPException(status_code=400, detail="No user message found in the request.")

    query = user_messages[-1].get_text_content()
    execution_id = f"exec-{uuid.uuid4().hex[:8]}"
    logger.info("[%s] Processing chat completion request: %s", execution_id, query[:100])

    tracing_context = TracingContext(execution_id=execution_id)
    tracing_context.start_trace(
        name="chat_completion",
        query=query,
        metadata={"model": request.model, "stream": request.stream},
    )
    loop = OrchestrationLoop(
        proposer,
        registry,
        max_iterations=request.max_iterations or config.model.max_iterations,
        event_sink=CompositeEventSink([LoggingEventSink(), TracingEventSink(tracing_context)]),
        system_directive=config.model.system_prompt,
        tracing_context=tracing_context,
        run_tools_in_thread=True,
    )

    try:
        result = await loop.run(query)
    except openai.APIError as e:
        logger.error("[%s] Model endpoint error: %s", execution_id, e)
        tracing_context.end_trace(output=str(e), status="error")
        _flush_tracing()
        raise HTTPException(status_code=502, detail=f"Model endpoint error: {e}")
    except Exception as e:
        logger.exception("[%s] Chat completion failed: %s", execution_id, e)
        tracing_context.end_trace(output=str(e), status="error")
        _flush_tracing()
        raise HTTPException(status_code=500, detail=str(e))

    tracing_context.end_trace(
        output=result.final_answer,
        status="success",
        metadata={
            "iterations": result.iterations,
            "truncated": result.truncated,
            "tools_used": result.tools_used,
        },
    )
    _flush_tracing()

    if request.stream:
        return StreamingResponse(
            _generate_streaming_response(result),
            media_type="text/event-stream",
        )

    trace = None
    if request.include_trace:
        trace = [
            TraceStep.from_resolution(number, step)
            for number, step in enumerate(result.steps, start=1)
        ]

    return ChatCompletionResponse(
        choices=[
            ChatCompletionChoice(
                message=ChatCompletionMessage(content=result.final_answer),
                finish_reason=_finish_reason(result),
            )
        ],
        iterations=result.iterations,
        truncated=result.truncated,
        trace=trace,
    )


def _flush_tracing() -> None:
    client = get_tracing_client()
    if client:
        client.flush()
