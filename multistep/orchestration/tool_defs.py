"""
Tool catalog rendering for the chat completions ``tools`` parameter.
"""

from ..tools.registry import ToolRegistry


def build_tool_definitions(registry: ToolRegistry) -> list[dict]:
    """
    Build OpenAI function-calling tool definitions from a registry.

    Args:
        registry: Tools available to the model.

    Returns:
        List of OpenAI-format tool definitions, in registration order.
    """
    return [tool.as_openai_tool() for tool in registry]
