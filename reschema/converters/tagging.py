"""
Runtime type tags for validated values.

When a validator is built with embedded types, every value validated through
a named type is tagged with that type's name. Tagging is layered on top of
pydantic's own builders with an ``AfterValidator``: scalars and containers are
replaced by tagged subclasses of their builtin type, models record the name
on a private attribute.

``bool`` cannot be subclassed, so booleans (and ``None``) stay untagged.
"""

from __future__ import annotations

from typing import Any

from pydantic import AfterValidator, BaseModel, PrivateAttr

TAG_ATTRIBUTE = "_reschema_type"


class TaggedModel(BaseModel):
    """Base class of the models built with embedded types."""

    _reschema_type: str | None = PrivateAttr(default=None)


class TaggedStr(str):
    def __new__(cls, value: str, type_name: str):
        obj = super().__new__(cls, value)
        obj._reschema_type = type_name
        return obj


class TaggedInt(int):
    def __new__(cls, value: int, type_name: str):
        obj = super().__new__(cls, value)
        obj._reschema_type = type_name
        return obj


class TaggedFloat(float):
    def __new__(cls, value: float, type_name: str):
        obj = super().__new__(cls, value)
        obj._reschema_type = type_name
        return obj


class TaggedList(list):
    def __init__(self, value: list, type_name: str):
        super().__init__(value)
        self._reschema_type = type_name


class TaggedDict(dict):
    def __init__(self, value: dict, type_name: str):
        super().__init__(value)
        self._reschema_type = type_name


# Checked in order, bool is excluded before int
_TAGGED_TYPES: tuple[tuple[type, type], ...] = (
    (str, TaggedStr),
    (int, TaggedInt),
    (float, TaggedFloat),
    (list, TaggedList),
    (dict, TaggedDict),
)


def tag_value(value: Any, type_name: str) -> Any:
    """Tag a validated value with a type name."""
    if isinstance(value, TaggedModel):
        value._reschema_type = type_name
        return value
    if value is None or isinstance(value, bool):
        return value
    for base, tagged in _TAGGED_TYPES:
        if isinstance(value, base):
            return tagged(value, type_name)
    return value


def type_tagger(type_name: str) -> AfterValidator:
    """Build the validator tagging values with ``type_name``."""

    def tag(value: Any) -> Any:
        return tag_value(value, type_name)

    return AfterValidator(tag)


def type_of(value: Any) -> str | None:
    """Get the name of the type a value was validated through, if tagged."""
    return getattr(value, TAG_ATTRIBUTE, None)
