"""
Base class for schema converters.

Defines the interface that all target-dialect converters must implement.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, MutableMapping
from typing import Any

from ..config import ConverterOptions
from ..errors import ConversionError, DefinitionConflictError
from ..schema.nodes import AlternativesSchema, ArraySchema, PropertySchema, Schema, SchemaKind, TypeSchema, ValueSchema

logger = logging.getLogger(__name__)

DEFINITIONS_KEY = "definitions"


def definition_key(type_name: str) -> str:
    """Get the definitions key of a type name ("geo/point" -> "geo.point")."""
    return type_name.replace("/", ".")


def register_definition(
    context: MutableMapping[str, Any],
    key: str,
    build: Callable[[], Any],
    reuse: bool = False,
    slot: str = DEFINITIONS_KEY,
) -> Any:
    """
    Register a definition in the conversion context.

    The definition is built with ``build``. When ``key`` is already registered,
    either the registered definition is returned as-is (``reuse``) or the new
    one must be equal to it.

    Args:
        context: Conversion context holding the definitions registry
        key: Definition key
        build: Builds the definition
        reuse: Return an existing definition without building a new one
        slot: Context key of the registry, one per kind of definition

    Returns:
        The registered definition

    Raises:
        DefinitionConflictError: If a different definition is already registered
    """
    definitions = context.setdefault(slot, {})
    if key in definitions and reuse:
        return definitions[key]

    definition = build()
    if key in definitions:
        if definitions[key] != definition:
            raise DefinitionConflictError(key)
        return definitions[key]

    logger.debug("Registering definition %s in %s", key, slot)
    definitions[key] = definition
    return definition


class SchemaConverter(ABC):
    """Abstract base class for converters from schema nodes to a target dialect."""

    # Names the converter is registered under (lower case)
    NAMES: tuple[str, ...] = ()

    # Context key under which named types are registered
    DEFINITIONS_SLOT: str = DEFINITIONS_KEY

    # Primitive types understood by the target, by validation type
    TYPE_MAP: dict[str, Any] = {}

    def __init__(self, options: ConverterOptions | dict | None = None):
        """
        Initialize the converter.

        Args:
            options: Converter options
        """
        self.options = ConverterOptions.coerce(options)

    def convert(self, schema: Schema, context: MutableMapping[str, Any] | None = None) -> Any:
        """
        Convert a loaded schema node.

        Args:
            schema: The schema node
            context: Registry receiving shared definitions

        Returns:
            The target representation of the node
        """
        if context is None:
            context = {}

        match schema.kind:
            case SchemaKind.VALUE:
                return self.convert_value(schema, context)
            case SchemaKind.ARRAY:
                return self.convert_array(schema, context)
            case SchemaKind.ALTERNATIVES:
                return self.convert_alternatives(schema, context)
            case SchemaKind.PROPERTY:
                return self.convert_property(schema, context)
            case SchemaKind.TYPE:
                return self.convert_type(schema, context)
            case _:
                raise ConversionError(f"{type(self).__name__} cannot convert schema of kind '{schema.kind}'")

    @abstractmethod
    def convert_value(self, schema: ValueSchema, context: MutableMapping[str, Any]) -> Any:
        """Convert a value node: an object, an enumeration or a primitive."""

    @abstractmethod
    def convert_array(self, schema: ArraySchema, context: MutableMapping[str, Any]) -> Any:
        """Convert an array node."""

    @abstractmethod
    def convert_alternatives(self, schema: AlternativesSchema, context: MutableMapping[str, Any]) -> Any:
        """Convert an alternatives node, keeping the order of the alternatives."""

    @abstractmethod
    def convert_property(self, schema: PropertySchema, context: MutableMapping[str, Any]) -> Any:
        """Convert a property node: its inner schema annotated with its metadata."""

    @abstractmethod
    def convert_type(self, schema: TypeSchema, context: MutableMapping[str, Any]) -> Any:
        """Convert a named type, inline or as a reference to a shared definition."""

    def definitions_slot(self) -> str:
        """Get the context key of the registry this converter writes to."""
        return self.DEFINITIONS_SLOT

    @staticmethod
    def enum_members(schema: ValueSchema) -> list[tuple[Any, Any]]:
        """
        Pair enumeration values with their display metadata.

        Args:
            schema: A value node whose validation has ``values``

        Returns:
            List of (value, meta) pairs, meta is None without display metadata

        Raises:
            ConversionError: If values are not a list or do not line up with their display metadata
        """
        values = schema.validation["values"]
        if not isinstance(values, (list, tuple)):
            raise ConversionError(f"Enumeration values must be a list, got {type(values).__name__}")
        values = list(values)
        display = schema.meta.get("values")
        if not display:
            return [(value, None) for value in values]
        if not isinstance(display, (list, tuple)) or len(display) != len(values):
            raise ConversionError(
                f"meta.values must list one display entry for each of the {len(values)} enumeration values"
            )
        return list(zip(values, display))

    def primitive_type(self, schema: Schema) -> Any:
        """Get the target primitive for the validation type of a node, None when unknown."""
        type_name = (schema.validation or {}).get("type")
        if not isinstance(type_name, str):
            return None
        return self.TYPE_MAP.get(type_name)
