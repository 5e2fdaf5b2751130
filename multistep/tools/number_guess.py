"""
Number guessing game tool.

The tool author picks a hidden target in ``1..=max``; the model passes a
``guess`` and learns whether it is low, high, correct or out of range.
"""

from ..exceptions import ToolError
from .parameters import ParametersBuilder
from .registry import ToolDefinition


def build_number_guess_tool(target: int, max_value: int) -> ToolDefinition:
    """Build the ``number_guess`` tool.

    ``max_value`` is coerced to at least 1 and ``target`` is clamped into
    ``1..=max_value``.
    """
    max_value = max(max_value, 1)
    target = max(min(target, max_value), 1)

    def _handle_number_guess(args) -> dict:
        guess = args.get("guess") if isinstance(args, dict) else None
        if not isinstance(guess, int) or isinstance(guess, bool):
            raise ToolError("Invalid or missing 'guess' parameter")
        if not 1 <= guess <= max_value:
            return {"result": "out_of_range"}
        if guess < target:
            return {"result": "low"}
        if guess > target:
            return {"result": "high"}
        return {"result": "correct"}

    params = (
        ParametersBuilder.new_object()
        .add_integer(
            "guess",
            "Your guessed integer between 1 and MAX (inclusive)",
            minimum=1,
            maximum=max_value,
        )
        .required("guess")
        .additional_properties(False)
        .build()
    )
    return ToolDefinition(
        name="number_guess",
        description=(
            "Number guessing game: compare provided 'guess' with the hidden "
            f"target (1..={max_value}) and return whether it is low, high, or correct."
        ),
        parameters=params,
        handler=_handle_number_guess,
    )
