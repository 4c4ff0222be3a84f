"""
Inheritance resolution for value and type schemas.

A schema may ``extend`` one or more parent schemas. Properties are merged
across all parents in order (a later parent overrides an earlier one) and the
schema's own properties override every parent. Validation is only taken from
the first parent that defines it, then overridden key by key with the
schema's own validation.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .nodes import PropertySchema, Schema


def merge_properties(parents: Iterable[Schema], own: Mapping[str, PropertySchema]) -> dict[str, PropertySchema]:
    properties: dict[str, PropertySchema] = {}
    for parent in parents:
        properties.update(parent.properties)
    properties.update(own)
    return properties


def merge_validation(parents: Iterable[Schema], own: Mapping[str, Any] | None) -> dict[str, Any] | None:
    # Only the first parent carrying a validation contributes
    inherited = next((parent.validation for parent in parents if parent.validation is not None), None)
    if inherited is None:
        return dict(own) if own is not None else None
    validation = copy.deepcopy(dict(inherited))
    validation.update(own or {})
    return validation
