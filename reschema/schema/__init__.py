"""
Schema node model.

Contains the node definitions, their shape contracts and the inheritance
rules applied while loading them.
"""

from __future__ import annotations

from .inheritance import merge_properties, merge_validation
from .nodes import (
    AlternativesSchema,
    ArraySchema,
    PropertySchema,
    Schema,
    SchemaKind,
    TypeSchema,
    ValueSchema,
)

__all__ = [
    "Schema",
    "SchemaKind",
    "ValueSchema",
    "ArraySchema",
    "AlternativesSchema",
    "PropertySchema",
    "TypeSchema",
    "merge_properties",
    "merge_validation",
]
