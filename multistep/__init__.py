"""
multistep - bounded multi-step tool calling over an OpenAI-compatible endpoint

This package provides:
- Tool registry and sample tools (constants, arithmetic, docs, search, rpg)
- Proposer/resolver orchestration loop with event sinks
- Background prompt worker and interactive CLI
- OpenAI-compatible FastAPI server
"""

__version__ = "0.1.0"

from .llm_call import LLMClient
from .orchestration import (
    OrchestrationLoop,
    RunResult,
    multi_step_tool_answer,
    multi_step_tool_answer_blocking,
)
from .tools import ToolDefinition, ToolRegistry, build_default_registry

__all__ = [
    "LLMClient",
    "OrchestrationLoop",
    "RunResult",
    "ToolDefinition",
    "ToolRegistry",
    "build_default_registry",
    "multi_step_tool_answer",
    "multi_step_tool_answer_blocking",
]
