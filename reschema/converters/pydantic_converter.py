"""
Pydantic converter.

Builds validators out of pydantic's own building blocks: builtin types for
primitives, ``Literal`` for enumerations, ``list`` for arrays, left-to-right
unions for alternatives and dynamically created models for objects.
Metadata is attached with ``Annotated[..., Field(...)]``. The result can be
handed to ``pydantic.TypeAdapter`` (or used directly when it is a model).

Named types are registered under ``context["validators"]``, or under
``context["tagged_validators"]`` when types are embedded, so that one context
can be shared with the JSON Schema converter.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Mapping, MutableMapping
from typing import Annotated, Any, Literal, Union, get_origin

from pydantic import BaseModel, Field, create_model

from ..errors import ConversionError
from ..schema.nodes import AlternativesSchema, ArraySchema, PropertySchema, TypeSchema, ValueSchema
from ..utils import snake_to_pascal_case
from .base import SchemaConverter, definition_key, register_definition
from .tagging import TaggedModel, type_tagger

_INVALID_FIELD_CHARS = re.compile(r"\W")


class PydanticConverter(SchemaConverter):
    """Converts schema nodes to pydantic validators."""

    NAMES = ("pydantic", "validation")

    TYPE_MAP = {
        "string": str,
        "number": float,
        "integer": int,
        "boolean": bool,
    }

    # Validators are registered apart from JSON definitions, tagged ones apart
    # from plain ones
    DEFINITIONS_SLOT = "validators"
    TAGGED_DEFINITIONS_SLOT = "tagged_validators"

    # Model name used for objects outside any named type or property
    DEFAULT_MODEL_NAME = "Object"

    def __init__(self, options=None):
        super().__init__(options)
        self.model_base = TaggedModel if self.options.embed_types else BaseModel
        # Names of the enclosing types/properties, used to name models
        self._names: list[str] = []

    def definitions_slot(self) -> str:
        return self.TAGGED_DEFINITIONS_SLOT if self.options.embed_types else self.DEFINITIONS_SLOT

    def convert_value(self, schema: ValueSchema, context: MutableMapping[str, Any]) -> Any:
        if schema.properties:
            return self._create_model(schema, context)

        validation = schema.validation or {}
        if validation.get("values") is not None:
            members = self.enum_members(schema)
            if not members:
                raise ConversionError("Cannot build a validator for an empty enumeration")
            if members[0][1] is not None:
                return self._union([self._titled_literal(value, meta) for value, meta in members])
            return self._literal(*(value for value, _ in members))

        return self._primitive(schema)

    def _primitive(self, schema: ValueSchema) -> Any:
        primitive = self.primitive_type(schema)
        return primitive if primitive is not None else Any

    def _titled_literal(self, value: Any, meta: Any) -> Any:
        title = meta.get("name") if isinstance(meta, Mapping) else meta
        if title is None:
            return self._literal(value)
        return Annotated[self._literal(value), Field(title=str(title))]

    def _literal(self, *values: Any) -> Any:
        try:
            return Literal[values]
        except TypeError as e:
            raise ConversionError(f"Unsupported enumeration values {values!r}: {e}") from e

    def _create_model(self, schema: ValueSchema, context: MutableMapping[str, Any]) -> type[BaseModel]:
        fields: dict[str, Any] = {}
        for name, prop in schema.properties.items():
            self._names.append(name)
            try:
                annotation = self.convert(prop, context)
            finally:
                self._names.pop()

            field_name = self._field_name(name, fields)
            if field_name == name:
                fields[field_name] = (annotation, None)
            else:
                fields[field_name] = (annotation, Field(default=None, alias=name))

        return create_model(self._model_name(), __base__=self.model_base, **fields)

    def _model_name(self) -> str:
        if not self._names:
            return self.DEFAULT_MODEL_NAME
        return snake_to_pascal_case(self._names[-1]) or self.DEFAULT_MODEL_NAME

    def _field_name(self, name: str, taken: Mapping[str, Any]) -> str:
        """Get a python-safe field name, the original name becomes an alias."""
        if (
            name.isidentifier()
            and not keyword.iskeyword(name)
            and not name.startswith(("_", "model_"))
            and not hasattr(self.model_base, name)
        ):
            return name

        base = _INVALID_FIELD_CHARS.sub("_", name).strip("_") or "field"
        if base[0].isdigit():
            base = f"field_{base}"
        candidate = f"{base}_"
        while candidate in taken or hasattr(self.model_base, candidate) or candidate.startswith("model_"):
            candidate = f"{candidate}_"
        return candidate

    def _union(self, members: list[Any]) -> Any:
        if not members:
            raise ConversionError("Cannot build a validator for empty alternatives")
        if len(members) == 1:
            return members[0]
        union = Union[tuple(members)]
        if get_origin(union) is not Union:
            return union
        # Alternatives are tried in declaration order
        return Annotated[union, Field(union_mode="left_to_right")]

    def _annotate(self, annotation: Any, meta: Mapping[str, Any], with_example: bool = False) -> Any:
        kwargs: dict[str, Any] = {}
        if meta.get("description"):
            kwargs["description"] = meta["description"]
        if with_example and meta.get("example") is not None:
            kwargs["examples"] = [meta["example"]]
        if not kwargs:
            return annotation
        return Annotated[annotation, Field(**kwargs)]

    def convert_array(self, schema: ArraySchema, context: MutableMapping[str, Any]) -> Any:
        return list[self.convert(schema.items, context)]

    def convert_alternatives(self, schema: AlternativesSchema, context: MutableMapping[str, Any]) -> Any:
        return self._union([self.convert(alternative, context) for alternative in schema.alternatives])

    def convert_property(self, schema: PropertySchema, context: MutableMapping[str, Any]) -> Any:
        return self._annotate(self.convert(schema.schema, context), schema.meta)

    def convert_type(self, schema: TypeSchema, context: MutableMapping[str, Any]) -> Any:
        def build() -> Any:
            self._names.append(schema.name)
            try:
                annotation = self.convert(schema.schema, context)
            finally:
                self._names.pop()

            if self.options.embed_types:
                annotation = Annotated[annotation, type_tagger(schema.name)]
            return self._annotate(annotation, schema.meta, with_example=True)

        if self.options.deref:
            return build()

        # Built validators have no structural equality, the first one is reused
        return register_definition(
            context, definition_key(schema.name), build, reuse=True, slot=self.definitions_slot()
        )
