"""Tests for tool catalog rendering."""

from multistep.orchestration import build_tool_definitions
from multistep.tools import ToolRegistry, build_add_tool, build_get_constants_tool


def _registry() -> ToolRegistry:
    return ToolRegistry([build_get_constants_tool(1, 2), build_add_tool()])


class TestBuildToolDefinitions:
    """Tests for build_tool_definitions."""

    def test_registration_order(self):
        tools = build_tool_definitions(_registry())
        names = [t["function"]["name"] for t in tools]
        assert names == ["get_constants", "add"]

    def test_openai_format(self):
        """Each tool should follow OpenAI function-calling format."""
        for tool in build_tool_definitions(_registry()):
            assert tool["type"] == "function"
            func = tool["function"]
            assert set(func) == {"name", "description", "parameters", "strict"}
            assert func["parameters"]["type"] == "object"

    def test_empty_registry(self):
        assert build_tool_definitions(ToolRegistry()) == []
