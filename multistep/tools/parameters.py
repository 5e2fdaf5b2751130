"""
Fluent builder for tool argument schemas.

Produces the JSON Schema object sent to the model as a tool's
``parameters``. The schema is advisory: arguments are only checked for
JSON syntax before a handler runs.
"""

from typing import Optional


class ParametersBuilder:
    """Build an ``{"type": "object", ...}`` schema one property at a time."""

    def __init__(self):
        self._properties: dict[str, dict] = {}
        self._required: list[str] = []
        self._additional_properties: Optional[bool] = None

    @classmethod
    def new_object(cls) -> "ParametersBuilder":
        return cls()

    def _add(self, name: str, schema: dict, description: Optional[str]) -> "ParametersBuilder":
        if description:
            schema["description"] = description
        self._properties[name] = schema
        return self

    def add_string(self, name: str, description: Optional[str] = None) -> "ParametersBuilder":
        return self._add(name, {"type": "string"}, description)

    def add_string_enum(
        self,
        name: str,
        description: Optional[str],
        values: list[str] | tuple[str, ...],
    ) -> "ParametersBuilder":
        return self._add(name, {"type": "string", "enum": list(values)}, description)

    def add_integer(
        self,
        name: str,
        description: Optional[str] = None,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> "ParametersBuilder":
        schema: dict = {"type": "integer"}
        if minimum is not None:
            schema["minimum"] = minimum
        if maximum is not None:
            schema["maximum"] = maximum
        return self._add(name, schema, description)

    def add_integer_unbounded(
        self, name: str, description: Optional[str] = None
    ) -> "ParametersBuilder":
        return self.add_integer(name, description)

    def add_boolean(self, name: str, description: Optional[str] = None) -> "ParametersBuilder":
        return self._add(name, {"type": "boolean"}, description)

    def required(self, name: str) -> "ParametersBuilder":
        if name not in self._required:
            self._required.append(name)
        return self

    def additional_properties(self, allowed: bool) -> "ParametersBuilder":
        self._additional_properties = allowed
        return self

    def build(self) -> dict:
        schema: dict = {
            "type": "object",
            "properties": {k: dict(v) for k, v in self._properties.items()},
            "required": list(self._required),
        }
        if self._additional_properties is not None:
            schema["additionalProperties"] = self._additional_properties
        return schema
