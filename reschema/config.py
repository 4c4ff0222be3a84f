"""
Configuration for schema construction and conversion.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .loader import Loader


@dataclass
class SchemaOptions:
    """Options used while building a schema graph."""

    # Resolves a type name to its descriptor (callable or object with resolve())
    loader: Loader | Any | None = None

    @staticmethod
    def from_dict(d: dict) -> SchemaOptions:
        """Create options from a dictionary."""
        options = SchemaOptions()
        for k, v in d.items():
            if hasattr(options, k):
                setattr(options, k, v)
        return options

    @staticmethod
    def coerce(options: SchemaOptions | dict | None) -> SchemaOptions:
        """Accept None, a dictionary or an existing SchemaOptions instance."""
        if options is None:
            return SchemaOptions()
        if isinstance(options, SchemaOptions):
            return options
        return SchemaOptions.from_dict(options)

    def to_dict(self) -> dict:
        """Convert options to a dictionary."""
        return {"loader": self.loader}


@dataclass
class ConverterOptions:
    """Options shared by all converters."""

    # Inline named types instead of registering them as definitions
    deref: bool = False

    # Tag values validated through a named type with that type's name
    # (validation-DSL converters only)
    embed_types: bool = False

    # Accepted spellings for option keys coming from other tooling
    ALIASES = {"embedTypes": "embed_types"}

    @staticmethod
    def from_dict(d: dict) -> ConverterOptions:
        """Create options from a dictionary."""
        options = ConverterOptions()
        for k, v in d.items():
            k = ConverterOptions.ALIASES.get(k, k)
            if hasattr(options, k):
                setattr(options, k, bool(v))
        return options

    @staticmethod
    def coerce(options: ConverterOptions | dict | None) -> ConverterOptions:
        """Accept None, a dictionary or an existing ConverterOptions instance."""
        if options is None:
            return ConverterOptions()
        if isinstance(options, ConverterOptions):
            return options
        return ConverterOptions.from_dict(options)

    def to_dict(self) -> dict:
        """Convert options to a dictionary."""
        return {
            "deref": self.deref,
            "embed_types": self.embed_types,
        }
