"""
Error taxonomy for schema resolution and conversion.

Every error raised by the package derives from ReschemaError so callers can
catch construction and conversion failures with a single except clause.
"""

from __future__ import annotations


class ReschemaError(Exception):
    """Base class for all reschema errors."""


class ShapeError(ReschemaError, ValueError):
    """Raw schema data does not match the minimal shape of a node kind."""


class ConfigurationError(ReschemaError):
    """A required collaborator (e.g. the type loader) is missing or unusable."""


class ResolutionError(ReschemaError):
    """A named type could not be resolved through the loader."""

    def __init__(self, message: str, type_name: str | None = None):
        super().__init__(message)
        self.type_name = type_name


class SchemaNotLoadedError(ReschemaError):
    """A resolved view was read before the node finished loading."""


class ConversionError(ReschemaError):
    """An emitter cannot handle a node or one of its validation rules."""


class DefinitionConflictError(ConversionError):
    """Two different definitions were registered under the same name."""

    def __init__(self, key: str):
        super().__init__(f"Conflicting definitions registered under '{key}'")
        self.key = key


class UnknownConverterError(ConversionError):
    """No converter is registered under the requested target name."""

    def __init__(self, target: str):
        super().__init__(f"Converter not implemented: {target}")
        self.target = target
