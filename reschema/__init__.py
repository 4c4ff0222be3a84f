"""reschema

Resolves an extensible schema-definition language (named types, multiple
inheritance, alternatives, arrays and per-property metadata) into a schema
graph and converts it to JSON Schema or to pydantic validators.
"""

__version__ = "1.0.0"

from .config import ConverterOptions, SchemaOptions
from .converters import ConverterFactory, JsonSchemaConverter, PydanticConverter, type_of
from .errors import (
    ConfigurationError,
    ConversionError,
    DefinitionConflictError,
    ReschemaError,
    ResolutionError,
    SchemaNotLoadedError,
    ShapeError,
    UnknownConverterError,
)
from .loader import DictLoader, DirectoryLoader, Loader, TypeLoader
from .schema import (
    AlternativesSchema,
    ArraySchema,
    PropertySchema,
    Schema,
    SchemaKind,
    TypeSchema,
    ValueSchema,
)

create = Schema.create

__all__ = [
    "create",
    "Schema",
    "SchemaKind",
    "ValueSchema",
    "ArraySchema",
    "AlternativesSchema",
    "PropertySchema",
    "TypeSchema",
    "SchemaOptions",
    "ConverterOptions",
    "ConverterFactory",
    "JsonSchemaConverter",
    "PydanticConverter",
    "type_of",
    "Loader",
    "TypeLoader",
    "DictLoader",
    "DirectoryLoader",
    "ReschemaError",
    "ShapeError",
    "ConfigurationError",
    "ResolutionError",
    "SchemaNotLoadedError",
    "ConversionError",
    "DefinitionConflictError",
    "UnknownConverterError",
]
