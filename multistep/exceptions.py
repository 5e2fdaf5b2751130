"""
Exception types for multistep.

Endpoint failures (connectivity, authentication, malformed responses) are not
wrapped here: they surface as the openai SDK's own exceptions and propagate to
the caller of an orchestration run unchanged.
"""


class MultistepError(Exception):
    """Base class for errors raised by this package."""


class ToolError(MultistepError):
    """Raised by a tool handler to report a failed execution.

    The resolver converts any handler exception into an ``ExecutionError``
    resolution; raising this type just makes the intent explicit.
    """


class DuplicateToolError(MultistepError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str):
        super().__init__(f"Tool '{name}' is already registered")
        self.name = name


class ConfigError(MultistepError):
    """Configuration file could not be interpreted."""
