"""
Resolver: maps a decision onto exactly one resolution.

Tool lookup is by exact name. Argument text must be valid JSON; the schema
attached to the tool is not enforced here. Handler failures of any kind are
captured into ``ExecutionError`` so a faulty tool can never abort a run.
"""

import json
import logging

from ..tools.registry import ToolRegistry
from .types import (
    ArgumentsParseError,
    Decision,
    Executed,
    ExecutionError,
    ModelText,
    Resolution,
    TextDecision,
    ToolNotFound,
)

logger = logging.getLogger(__name__)


def resolve(decision: Decision, registry: ToolRegistry) -> Resolution:
    """Resolve ``decision`` against ``registry``, running the tool if one is called."""
    if isinstance(decision, TextDecision):
        return ModelText(decision.text)

    tool = registry.get(decision.name)
    if tool is None:
        logger.warning("Unknown tool requested: %s", decision.name)
        return ToolNotFound(decision.name)

    try:
        args = json.loads(decision.arguments)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning("Failed to parse arguments for '%s': %s", decision.name, e)
        return ArgumentsParseError(
            name=decision.name,
            raw=decision.arguments if isinstance(decision.arguments, str) else repr(decision.arguments),
            error=str(e),
        )

    try:
        logger.debug("Executing tool '%s' with %s", decision.name, args)
        result = tool.execute(args)
    except Exception as e:
        logger.error("Tool '%s' execution failed: %s", decision.name, e)
        return ExecutionError(name=decision.name, error=str(e))

    # The result is fed back to the model as JSON on the next request
    try:
        json.dumps(result)
    except (TypeError, ValueError) as e:
        logger.error("Tool '%s' returned a non-JSON result: %s", decision.name, e)
        return ExecutionError(
            name=decision.name, error=f"result is not JSON-serializable: {e}"
        )

    return Executed(name=decision.name, result=result)
