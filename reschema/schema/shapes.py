"""
Minimal shape contracts for raw schema data.

Each node kind checks its raw input against one of these models when it is
constructed. They only check what the node needs to build itself; full
conformance checking of raw schemas is left to the host.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ShapeError


class NodeShape(BaseModel):
    """Base class for shape models: unknown keys are allowed."""

    model_config = ConfigDict(extra="allow")


class ValueShape(NodeShape):
    extend: str | list[Any] | None = None
    validation: dict[str, Any] | None = None
    properties: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class ArrayShape(NodeShape):
    items: Any = Field(...)
    validation: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class AlternativesShape(NodeShape):
    alternatives: list[Any]


class PropertyShape(NodeShape):
    meta: dict[str, Any] | None = None
    # "schema" shadows a BaseModel attribute, hence the alias
    inner: Any = Field(..., alias="schema")


class TypeShape(NodeShape):
    name: str
    meta: dict[str, Any] | None = None
    inner: Any = Field(..., alias="schema")


def check_shape(shape: type[NodeShape], raw: Any, what: str) -> NodeShape:
    """
    Check raw data against a shape model.

    Args:
        shape: The shape model class
        raw: Raw schema data
        what: Human readable node kind for error messages

    Returns:
        The validated shape

    Raises:
        ShapeError: If the data does not match the shape
    """
    if not isinstance(raw, Mapping):
        raise ShapeError(f"Invalid {what} schema: expected an object, got {type(raw).__name__}")
    try:
        return shape.model_validate(dict(raw))
    except ValidationError as e:
        problems = "; ".join(f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors())
        raise ShapeError(f"Invalid {what} schema: {problems}") from e
