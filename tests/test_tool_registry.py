"""
Tests for the Tool Registry and the parameter schema builder.

Tests cover registration, retrieval, duplicate detection, rendering for the
chat completions API and summary generation.
"""

import pytest

from multistep.exceptions import DuplicateToolError
from multistep.tools import ParametersBuilder, ToolDefinition, ToolRegistry


def _tool(name: str, description: str = "A tool", handler=None) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description=description,
        parameters=ParametersBuilder.new_object().build(),
        handler=handler or (lambda args: {"echo": args}),
    )


class TestToolRegistry:
    """Tests for the ToolRegistry class."""

    def test_new_registry_is_empty(self):
        """A fresh registry holds no tools."""
        registry = ToolRegistry()

        assert len(registry) == 0
        assert registry.names() == []

    def test_registries_are_independent(self):
        """Registering in one registry does not leak into another."""
        first = ToolRegistry()
        second = ToolRegistry()

        first.register(_tool("alpha"))

        assert "alpha" in first
        assert "alpha" not in second

    def test_get_existing_tool(self):
        """Test retrieving an existing tool."""
        registry = ToolRegistry([_tool("alpha", "First tool")])

        tool = registry.get("alpha")

        assert tool is not None
        assert tool.name == "alpha"
        assert tool.description == "First tool"

    def test_get_nonexistent_tool(self):
        """Test retrieving a nonexistent tool returns None."""
        registry = ToolRegistry([_tool("alpha")])

        assert registry.get("nonexistent_tool") is None

    def test_lookup_is_exact_match(self):
        """Lookup does not ignore case or whitespace."""
        registry = ToolRegistry([_tool("alpha")])

        assert registry.get("Alpha") is None
        assert registry.get(" alpha") is None

    def test_duplicate_name_raises(self):
        """Registering the same name twice is an error."""
        registry = ToolRegistry([_tool("alpha")])

        with pytest.raises(DuplicateToolError) as exc_info:
            registry.register(_tool("alpha"))

        assert exc_info.value.name == "alpha"
        assert "alpha" in str(exc_info.value)

    def test_names_keep_registration_order(self):
        """Names and iteration follow registration order."""
        registry = ToolRegistry()
        registry.extend([_tool("b"), _tool("a"), _tool("c")])

        assert registry.names() == ["b", "a", "c"]
        assert [t.name for t in registry] == ["b", "a", "c"]

    def test_all_tools_returns_copy(self):
        """Mutating the returned mapping does not change the registry."""
        registry = ToolRegistry([_tool("alpha")])

        tools = registry.all_tools()
        tools.pop("alpha")

        assert "alpha" in registry

    def test_get_tools_summary(self):
        """Summary lists each tool with its description."""
        registry = ToolRegistry([_tool("alpha", "First"), _tool("beta", "Second")])

        summary = registry.get_tools_summary()

        assert summary == "- alpha: First\n- beta: Second"


class TestToolDefinition:
    """Tests for ToolDefinition."""

    def test_execute_calls_handler(self):
        """execute() passes the parsed arguments to the handler."""
        tool = _tool("echo")

        assert tool.execute({"a": 1}) == {"echo": {"a": 1}}

    def test_as_openai_tool(self):
        """Renders the chat completions function tool shape."""
        tool = _tool("alpha", "First tool")

        rendered = tool.as_openai_tool()

        assert rendered == {
            "type": "function",
            "function": {
                "name": "alpha",
                "description": "First tool",
                "parameters": {"type": "object", "properties": {}, "required": []},
                "strict": False,
            },
        }

    def test_definition_is_frozen(self):
        """Definitions cannot be modified after construction."""
        tool = _tool("alpha")

        with pytest.raises(AttributeError):
            tool.name = "beta"  # type: ignore[misc]


class TestParametersBuilder:
    """Tests for the JSON schema builder."""

    def test_empty_object(self):
        """An empty builder yields an object schema with no properties."""
        assert ParametersBuilder.new_object().build() == {
            "type": "object",
            "properties": {},
            "required": [],
        }

    def test_full_schema(self):
        """Each property helper contributes the expected JSON schema."""
        schema = (
            ParametersBuilder.new_object()
            .add_string("query", "Search text")
            .add_string_enum("mode", "Mode", ["fast", "slow"])
            .add_integer("count", "How many", minimum=1, maximum=10)
            .add_integer_unbounded("offset")
            .add_boolean("verbose", "Be chatty")
            .required("query")
            .required("query")
            .additional_properties(False)
            .build()
        )

        assert schema["properties"] == {
            "query": {"type": "string", "description": "Search text"},
            "mode": {"type": "string", "enum": ["fast", "slow"], "description": "Mode"},
            "count": {"type": "integer", "minimum": 1, "maximum": 10, "description": "How many"},
            "offset": {"type": "integer"},
            "verbose": {"type": "boolean", "description": "Be chatty"},
        }
        assert schema["required"] == ["query"]
        assert schema["additionalProperties"] is False
