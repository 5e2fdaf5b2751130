"""
Tool Registry - name-keyed catalog of tool definitions.

A registry is an ordinary object owned by whoever builds the tool catalog
for a run. It is read-only while an orchestration is in progress and may be
shared between separate runs as long as the handlers tolerate concurrent
calls.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Optional

from ..exceptions import DuplicateToolError

# Handler contract: parsed JSON arguments in, JSON-serializable value out.
# Failures are reported by raising.
ToolHandler = Callable[[Any], Any]


@dataclass(frozen=True)
class ToolDefinition:
    """Metadata plus execution handler for one tool."""

    name: str
    description: str
    parameters: dict  # JSON Schema for the arguments object
    handler: ToolHandler = field(repr=False, compare=False)
    strict: bool = False

    def execute(self, args: Any) -> Any:
        """Run the handler with already-parsed arguments."""
        return self.handler(args)

    def as_openai_tool(self) -> dict:
        """Render as an entry of the chat completions ``tools`` list."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
                "strict": self.strict,
            },
        }


class ToolRegistry:
    """Catalog of tools for one or more orchestration runs."""

    def __init__(self, tools: Optional[Iterable[ToolDefinition]] = None):
        self._tools: dict[str, ToolDefinition] = {}
        for tool in tools or ():
            self.register(tool)

    def register(self, tool: ToolDefinition) -> ToolDefinition:
        """Add a tool. Names must be unique within a registry."""
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)
        self._tools[tool.name] = tool
        return tool

    def extend(self, tools: Iterable[ToolDefinition]) -> None:
        """Register several tools in order."""
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> Optional[ToolDefinition]:
        """Get a tool by exact name."""
        return self._tools.get(name)

    def all_tools(self) -> dict[str, ToolDefinition]:
        """Get a copy of all registered tools."""
        return self._tools.copy()

    def names(self) -> list[str]:
        """Registered tool names in registration order."""
        return list(self._tools)

    def get_tools_summary(self) -> str:
        """Get formatted summary of all tools for display."""
        lines = []
        for name, tool in self._tools.items():
            lines.append(f"- {name}: {tool.description}")
        return "\n".join(lines)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())
