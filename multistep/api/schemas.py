"""
OpenAI-compatible Pydantic schemas for the API.

Requests and responses follow the OpenAI Chat API shape so that standard
OpenAI clients can talk to the server. ``include_trace`` and
``max_iterations`` are extensions specific to this server.
"""

import time
import uuid
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..orchestration import (
    ArgumentsParseError,
    Executed,
    ExecutionError,
    ModelText,
    Resolution,
    ToolNotFound,
)

MODEL_ID = "multistep"


class ContentPart(BaseModel):
    """A single part of multimodal content. Only text parts are used."""

    type: Literal["text", "image_url"] = Field(..., description="The type of content part")
    text: Optional[str] = Field(default=None, description="Text content (for type='text')")
    image_url: Optional[dict] = Field(default=None, description="Ignored")


class ChatMessage(BaseModel):
    """A single message in a chat conversation."""

    role: Literal["system", "user", "assistant", "tool", "function"] = Field(
        ..., description="The role of the message author"
    )
    content: Union[str, list[ContentPart], None] = Field(
        default=None, description="String or list of content parts"
    )

    @field_validator("content", mode="before")
    @classmethod
    def normalize_content(cls, v):
        if isinstance(v, list):
            return [ContentPart(**item) if isinstance(item, dict) else item for item in v]
        return v

    def get_text_content(self) -> str:
        """Extract text content regardless of format."""
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(part.text for part in self.content if part.type == "text" and part.text)


class ChatCompletionRequest(BaseModel):
    """Request body for /v1/chat/completions."""

    model: str = Field(default=MODEL_ID, description="Model ID (always multistep)")
    messages: list[ChatMessage] = Field(
        ..., description="Conversation; the last user message is answered", min_length=1
    )
    temperature: Optional[float] = Field(
        default=None, ge=0.0, le=2.0, description="Accepted for compatibility, not forwarded"
    )
    max_tokens: Optional[int] = Field(
        default=None, ge=1, description="Accepted for compatibility, not forwarded"
    )
    stream: Optional[bool] = Field(
        default=False, description="Return the answer as a single server-sent event"
    )
    include_trace: Optional[bool] = Field(
        default=False, description="Include the resolution steps in the response"
    )
    max_iterations: Optional[int] = Field(
        default=None, ge=1, le=50, description="Tool round budget for this request"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "model": MODEL_ID,
                "messages": [{"role": "user", "content": "What is X + Y?"}],
                "include_trace": True,
            }
        }
    }


class TraceStep(BaseModel):
    """One resolution taken during the run."""

    step: int = Field(..., description="1-based position in the run")
    kind: Literal[
        "executed",
        "tool_not_found",
        "arguments_parse_error",
        "execution_error",
        "model_text",
    ]
    tool: Optional[str] = Field(default=None, description="Tool name involved, if any")
    result: Optional[Any] = Field(default=None, description="Tool result for executed steps")
    description: str = Field(..., description="Human-readable outcome")

    @classmethod
    def from_resolution(cls, step: int, resolution: Resolution) -> "TraceStep":
        if isinstance(resolution, Executed):
            return cls(
                step=step,
                kind="executed",
                tool=resolution.name,
                result=resolution.result,
                description=resolution.describe(),
            )
        if isinstance(resolution, ToolNotFound):
            kind, tool = "tool_not_found", resolution.requested
        elif isinstance(resolution, ArgumentsParseError):
            kind, tool = "arguments_parse_error", resolution.name
        elif isinstance(resolution, ExecutionError):
            kind, tool = "execution_error", resolution.name
        elif isinstance(resolution, ModelText):
            kind, tool = "model_text", None
        else:
            raise TypeError(f"Unknown resolution: {resolution!r}")
        return cls(step=step, kind=kind, tool=tool, description=resolution.describe())


class ChatCompletionMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str


class ChatCompletionChoice(BaseModel):
    index: int = 0
    message: ChatCompletionMessage
    finish_reason: Literal["stop", "length"] = "stop"


class UsageInfo(BaseModel):
    """Token usage. Always zero; usage is not accounted."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(BaseModel):
    """Response body for /v1/chat/completions."""

    id: str = Field(default_factory=lambda: f"chatcmpl-{uuid.uuid4().hex[:12]}")
    object: Literal["chat.completion"] = "chat.completion"
    created: int = Field(default_factory=lambda: int(time.time()))
    model: str = MODEL_ID
    choices: list[ChatCompletionChoice]
    usage: UsageInfo = Field(default_factory=UsageInfo)
    iterations: int = Field(default=0, description="Iterations the run used")
    truncated: bool = Field(default=False, description="Whether the iteration budget ran out")
    trace: Optional[list[TraceStep]] = Field(
        default=None, description="Resolution steps (when include_trace=True)"
    )


class ModelInfo(BaseModel):
    id: str
    object: Literal["model"] = "model"
    created: int = Field(default_factory=lambda: int(time.time()))
    owned_by: str = MODEL_ID


class ModelListResponse(BaseModel):
    object: Literal["list"] = "list"
    data: list[ModelInfo]


class HealthResponse(BaseModel):
    """Response body for /health."""

    status: Literal["healthy", "unhealthy"]
    version: str
    model: str
    tools: int = Field(default=0, description="Number of registered tools")
    tracing: bool = Field(default=False, description="Whether Langfuse tracing is enabled")


class ErrorDetail(BaseModel):
    """Error detail in OpenAI format."""

    message: str
    type: str = "server_error"
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
