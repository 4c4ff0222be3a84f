"""
JSON Schema converter.

Produces plain dictionaries. Named types are registered once under
``context["definitions"]`` and referenced with ``$ref`` unless the converter
is configured to dereference them.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping
from typing import Any

from ..schema.nodes import AlternativesSchema, ArraySchema, PropertySchema, TypeSchema, ValueSchema
from .base import SchemaConverter, definition_key, register_definition


class JsonSchemaConverter(SchemaConverter):
    """Converts schema nodes to JSON Schema."""

    NAMES = ("jsonschema",)

    TYPE_MAP = {
        "string": "string",
        "number": "number",
        "integer": "integer",
        "boolean": "boolean",
        "object": "object",
        "array": "array",
        "null": "null",
    }

    def convert_value(self, schema: ValueSchema, context: MutableMapping[str, Any]) -> dict[str, Any]:
        if schema.properties:
            return {
                "type": "object",
                "properties": {name: self.convert(prop, context) for name, prop in schema.properties.items()},
            }

        json_schema: dict[str, Any] = {}
        primitive = self.primitive_type(schema)
        if primitive is not None:
            json_schema["type"] = primitive

        validation = schema.validation or {}
        if validation.get("values") is not None:
            members = self.enum_members(schema)
            if members and members[0][1] is not None:
                json_schema.pop("type", None)
                json_schema["anyOf"] = [self._enum_member(primitive, value, meta) for value, meta in members]
            else:
                json_schema["enum"] = [value for value, _ in members]

        return json_schema

    def _enum_member(self, primitive: str | None, value: Any, meta: Any) -> dict[str, Any]:
        member: dict[str, Any] = {}
        if primitive is not None:
            member["type"] = primitive
        member["enum"] = [value]
        title = meta.get("name") if isinstance(meta, Mapping) else meta
        if title is not None:
            member["title"] = title
        return member

    def convert_array(self, schema: ArraySchema, context: MutableMapping[str, Any]) -> dict[str, Any]:
        return {"type": "array", "items": self.convert(schema.items, context)}

    def convert_alternatives(self, schema: AlternativesSchema, context: MutableMapping[str, Any]) -> dict[str, Any]:
        return {"anyOf": [self.convert(alternative, context) for alternative in schema.alternatives]}

    def convert_property(self, schema: PropertySchema, context: MutableMapping[str, Any]) -> dict[str, Any]:
        # Copy so that annotating a $ref never touches a shared definition
        json_schema = dict(self.convert(schema.schema, context))
        if schema.meta.get("description"):
            json_schema["description"] = schema.meta["description"]
        return json_schema

    def convert_type(self, schema: TypeSchema, context: MutableMapping[str, Any]) -> dict[str, Any]:
        def build() -> dict[str, Any]:
            json_schema = dict(self.convert(schema.schema, context))
            if schema.meta.get("description"):
                json_schema["description"] = schema.meta["description"]
            if schema.meta.get("example") is not None:
                json_schema["example"] = copy.deepcopy(schema.meta["example"])
            return json_schema

        if self.options.deref:
            return build()

        key = definition_key(schema.name)
        register_definition(context, key, build, slot=self.definitions_slot())
        return {"$ref": f"#/{self.definitions_slot()}/{key}"}
