"""
Constants tool.

Returns a fixed pair of integers; useful for exercising a full
propose -> execute -> answer round trip against a live model.
"""

from .parameters import ParametersBuilder
from .registry import ToolDefinition


def build_get_constants_tool(x: int, y: int) -> ToolDefinition:
    """Build the ``get_constants`` tool returning ``{"X": x, "Y": y}``."""

    def _handle_get_constants(_args) -> dict:
        return {"X": x, "Y": y}

    return ToolDefinition(
        name="get_constants",
        description="Return constants X and Y as JSON",
        parameters=ParametersBuilder.new_object().build(),
        handler=_handle_get_constants,
    )
