"""
Converters from resolved schema graphs to external schema dialects.

- jsonschema: JSON Schema dictionaries with shared definitions
- pydantic: pydantic validators (alias: validation)
"""

from __future__ import annotations

from ..config import ConverterOptions
from ..errors import UnknownConverterError
from .base import DEFINITIONS_KEY, SchemaConverter, definition_key, register_definition
from .jsonschema_converter import JsonSchemaConverter
from .pydantic_converter import PydanticConverter
from .tagging import TaggedModel, tag_value, type_of


class ConverterFactory:
    """Creates converters by case-insensitive name."""

    CONVERTERS: tuple[type[SchemaConverter], ...] = (JsonSchemaConverter, PydanticConverter)

    @staticmethod
    def names() -> list[str]:
        """Get all registered converter names."""
        return [name for converter in ConverterFactory.CONVERTERS for name in converter.NAMES]

    @staticmethod
    def create(target: str, options: ConverterOptions | dict | None = None) -> SchemaConverter:
        """
        Create the converter registered under ``target``.

        Raises:
            UnknownConverterError: If no converter is registered under that name
        """
        name = target.lower() if isinstance(target, str) else target
        for converter in ConverterFactory.CONVERTERS:
            if name in converter.NAMES:
                return converter(options)
        raise UnknownConverterError(str(target))


__all__ = [
    "ConverterFactory",
    "SchemaConverter",
    "JsonSchemaConverter",
    "PydanticConverter",
    "TaggedModel",
    "DEFINITIONS_KEY",
    "definition_key",
    "register_definition",
    "tag_value",
    "type_of",
]
