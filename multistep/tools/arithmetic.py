"""
Integer arithmetic tool.
"""

from ..exceptions import ToolError
from .parameters import ParametersBuilder
from .registry import ToolDefinition


def _require_int(args, key: str) -> int:
    value = args.get(key) if isinstance(args, dict) else None
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise ToolError(f"Invalid or missing '{key}' parameter")
    return value


def _handle_add(args) -> dict:
    return {"sum": _require_int(args, "x") + _require_int(args, "y")}


def build_add_tool() -> ToolDefinition:
    """Build the ``add`` tool summing two integers."""
    params = (
        ParametersBuilder.new_object()
        .add_integer_unbounded("x", "First integer to add")
        .add_integer_unbounded("y", "Second integer to add")
        .required("x")
        .required("y")
        .additional_properties(False)
        .build()
    )
    return ToolDefinition(
        name="add",
        description="Add two integers and return the sum as JSON",
        parameters=params,
        handler=_handle_add,
    )
