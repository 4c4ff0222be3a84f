"""
Schema node model.

Raw schema data is turned into a graph of nodes in two steps: a node is
constructed synchronously (its raw shape is checked) and then loaded
asynchronously (its children are resolved, named types through the loader).
Once loaded, a node is never mutated.

Raw data is dispatched on its shape:

- a string is a reference to a named type (TypeSchema)
- a list is a shorthand for alternatives (AlternativesSchema)
- an object with ``items`` is an array (ArraySchema)
- any other object is a value, possibly extending parents (ValueSchema)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from ..cache import Memoizer
from ..config import ConverterOptions, SchemaOptions
from ..errors import ResolutionError, SchemaNotLoadedError, ShapeError
from ..loader import TypeLoader
from .inheritance import merge_properties, merge_validation
from .shapes import AlternativesShape, ArrayShape, PropertyShape, TypeShape, ValueShape, check_shape

logger = logging.getLogger(__name__)

EMPTY: Mapping[str, Any] = MappingProxyType({})


class SchemaKind(str, Enum):
    """Discriminator shared by schema nodes and converters."""

    VALUE = "value"
    ARRAY = "array"
    ALTERNATIVES = "alternatives"
    PROPERTY = "property"
    TYPE = "type"


async def _spawn(create: Callable[[Any, SchemaOptions], Awaitable[Schema]], raw: Any, options: SchemaOptions) -> Schema:
    # Construction errors surface inside the gathered coroutine
    return await create(raw, options)


async def _gather_all(coros: Iterable[Awaitable[Schema]]) -> list[Schema]:
    """Run sibling loads concurrently, cancelling all of them as soon as one fails."""
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        # Wait for the cancelled loads so no loader call outlives the failure
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    return MappingProxyType(mapping) if mapping is not None else None


class Schema:
    """Base class for all schema nodes."""

    kind: SchemaKind

    def __init__(self, raw: Any, options: SchemaOptions | dict | None = None):
        self._raw = raw
        self._options = SchemaOptions.coerce(options)
        self._cache = Memoizer()
        self._loaded = False

    @staticmethod
    def create(raw: Any, options: SchemaOptions | dict | None = None) -> Awaitable[Schema]:
        """
        Build and load the node matching the shape of raw schema data.

        Shape and configuration problems are raised immediately; the returned
        awaitable resolves to the loaded node.

        Args:
            raw: Raw schema data
            options: Construction options (the loader in particular)

        Returns:
            Awaitable resolving to the loaded node
        """
        if isinstance(raw, str):
            return TypeSchema.create(raw, options)
        if isinstance(raw, (list, tuple)):
            return AlternativesSchema.create(raw, options)
        if isinstance(raw, Mapping):
            if "items" in raw:
                return ArraySchema.create(raw, options)
            return ValueSchema.create(raw, options)
        raise ShapeError(f"Invalid schema: expected a string, a list or an object, got {type(raw).__name__}")

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def meta(self) -> Mapping[str, Any]:
        return EMPTY

    @property
    def properties(self) -> Mapping[str, PropertySchema]:
        return EMPTY

    @property
    def validation(self) -> Mapping[str, Any] | None:
        return None

    @property
    def extend(self) -> list[Schema]:
        return []

    async def load(self) -> Schema:
        """Resolve all children of this node. Safe to call several times."""
        await self._cache("load", lambda: asyncio.ensure_future(self._load()))
        self._loaded = True
        return self

    async def _load(self) -> None:
        """Resolve the children of this node."""

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise SchemaNotLoadedError(f"{type(self).__name__} is used before being loaded")

    def to(self, target: str, options: ConverterOptions | dict | None = None, context: dict | None = None) -> Any:
        """
        Convert this node to another schema dialect.

        Args:
            target: Converter name, case insensitive ("jsonschema", "pydantic")
            options: Converter options
            context: Registry receiving shared definitions, created when omitted

        Returns:
            The converted schema
        """
        from ..converters import ConverterFactory

        self._require_loaded()
        converter = ConverterFactory.create(target, options)
        return converter.convert(self, context if context is not None else {})

    def __repr__(self) -> str:
        return f"<{type(self).__name__} kind={self.kind.value}>"


class ValueSchema(Schema):
    """An object or scalar schema, possibly extending parent schemas."""

    kind = SchemaKind.VALUE

    def __init__(self, raw: Mapping[str, Any], options: SchemaOptions | dict | None = None):
        super().__init__(raw, options)
        self._shape = check_shape(ValueShape, raw, "value")
        self._own_properties: dict[str, PropertySchema] = {}
        self._extend: list[Schema] = []

    @staticmethod
    def create(raw: Mapping[str, Any], options: SchemaOptions | dict | None = None) -> Awaitable[ValueSchema]:
        return ValueSchema(raw, options).load()

    @property
    def meta(self) -> Mapping[str, Any]:
        return _frozen(self._shape.meta) or EMPTY

    @property
    def own_properties(self) -> Mapping[str, PropertySchema]:
        self._require_loaded()
        return MappingProxyType(self._own_properties)

    @property
    def extend(self) -> list[Schema]:
        self._require_loaded()
        return list(self._extend)

    @property
    def properties(self) -> Mapping[str, PropertySchema]:
        """Properties of all parents, in order, overridden by the own properties."""
        self._require_loaded()
        merged = self._cache("properties", lambda: merge_properties(self._extend, self._own_properties))
        return MappingProxyType(merged)

    @property
    def validation(self) -> Mapping[str, Any] | None:
        """Validation of the first parent defining one, overridden by the own validation."""
        self._require_loaded()
        return _frozen(self._cache("validation", lambda: merge_validation(self._extend, self._shape.validation)))

    def _extend_list(self) -> list[Any]:
        extend = self._shape.extend
        if extend is None:
            return []
        if not isinstance(extend, list):
            return [extend]
        return extend

    async def _load(self) -> None:
        declared = self._shape.properties or {}
        names = list(declared)

        loaded = await _gather_all(
            [
                *(_spawn(PropertySchema.create, declared[name], self._options) for name in names),
                *(_spawn(Schema.create, parent, self._options) for parent in self._extend_list()),
            ]
        )

        self._own_properties = dict(zip(names, loaded[: len(names)]))
        self._extend = loaded[len(names) :]


class ArraySchema(Schema):
    """A homogeneous sequence schema."""

    kind = SchemaKind.ARRAY

    def __init__(self, raw: Mapping[str, Any], options: SchemaOptions | dict | None = None):
        super().__init__(raw, options)
        self._shape = check_shape(ArrayShape, raw, "array")
        self._items: Schema | None = None

    @staticmethod
    def create(raw: Mapping[str, Any], options: SchemaOptions | dict | None = None) -> Awaitable[ArraySchema]:
        return ArraySchema(raw, options).load()

    @property
    def meta(self) -> Mapping[str, Any]:
        return _frozen(self._shape.meta) or EMPTY

    @property
    def validation(self) -> Mapping[str, Any] | None:
        return _frozen(self._shape.validation)

    @property
    def items(self) -> Schema:
        self._require_loaded()
        return self._items

    async def _load(self) -> None:
        self._items = await Schema.create(self._shape.items, self._options)


class AlternativesSchema(Schema):
    """A tagged union: an ordered list of alternative schemas."""

    kind = SchemaKind.ALTERNATIVES

    def __init__(self, raw: Mapping[str, Any], options: SchemaOptions | dict | None = None):
        super().__init__(raw, options)
        self._shape = check_shape(AlternativesShape, raw, "alternatives")
        self._alternatives: list[PropertySchema] = []

    @staticmethod
    def create(raw: Any, options: SchemaOptions | dict | None = None) -> Awaitable[AlternativesSchema]:
        if isinstance(raw, (list, tuple)):
            raw = {"alternatives": list(raw)}
        return AlternativesSchema(raw, options).load()

    @property
    def alternatives(self) -> list[PropertySchema]:
        self._require_loaded()
        return list(self._alternatives)

    async def _load(self) -> None:
        alternatives = await _gather_all(
            (_spawn(PropertySchema.create, alternative, self._options) for alternative in self._shape.alternatives)
        )
        self._alternatives = list(alternatives)


class PropertySchema(Schema):
    """Wraps one child schema with metadata (description, example, ...)."""

    kind = SchemaKind.PROPERTY

    def __init__(self, raw: Mapping[str, Any], options: SchemaOptions | dict | None = None):
        super().__init__(raw, options)
        self._shape = check_shape(PropertyShape, raw, "property")
        self._schema: Schema | None = None

    @staticmethod
    def create(raw: Any, options: SchemaOptions | dict | None = None) -> Awaitable[PropertySchema]:
        # Bare schemas are shorthand for {"schema": raw}
        if not isinstance(raw, Mapping) or "schema" not in raw:
            raw = {"schema": raw}
        return PropertySchema(raw, options).load()

    @property
    def meta(self) -> Mapping[str, Any]:
        if self._shape.meta is not None:
            return MappingProxyType(self._shape.meta)
        if self.schema.kind == SchemaKind.TYPE:
            return self.schema.meta
        return EMPTY

    @property
    def schema(self) -> Schema:
        self._require_loaded()
        return self._schema

    async def _load(self) -> None:
        self._schema = await Schema.create(self._shape.inner, self._options)


class TypeSchema(Schema):
    """A named schema resolved through the loader."""

    kind = SchemaKind.TYPE

    def __init__(self, descriptor: Mapping[str, Any], options: SchemaOptions | dict | None = None):
        super().__init__(descriptor, options)
        self._shape = check_shape(TypeShape, descriptor, "type")
        self._schema: Schema | None = None

    @staticmethod
    def create(
        name: str, options: SchemaOptions | dict | None = None, _aliases: tuple[str, ...] = ()
    ) -> Awaitable[TypeSchema]:
        """
        Resolve a named type through the loader.

        Args:
            name: The type name
            options: Construction options, ``loader`` is required

        Returns:
            Awaitable resolving to the loaded type

        Raises:
            ShapeError: If the name is not a non-empty string
            ConfigurationError: If no usable loader is configured
        """
        if not isinstance(name, str) or not name:
            raise ShapeError(f"Invalid type name: {name!r}")
        options = SchemaOptions.coerce(options)
        loader = TypeLoader.from_option(options.loader)
        return TypeSchema._resolve(name, options, loader, _aliases)

    @staticmethod
    async def _resolve(name: str, options: SchemaOptions, loader: TypeLoader, aliases: tuple[str, ...]) -> TypeSchema:
        if name in aliases:
            chain = " -> ".join((*aliases, name))
            raise ResolutionError(f"Circular type alias: {chain}", type_name=name)

        descriptor = await loader.fetch(name)
        target = descriptor["schema"]
        if isinstance(target, str):
            logger.debug("Type %s is an alias of %s", name, target)
            return await TypeSchema.create(target, options, (*aliases, name))

        node = await TypeSchema(descriptor, options).load()
        logger.debug("Resolved type %s", node.name)
        return node

    @property
    def name(self) -> str:
        return self._shape.name

    @property
    def meta(self) -> Mapping[str, Any]:
        return _frozen(self._shape.meta) or EMPTY

    @property
    def schema(self) -> Schema:
        self._require_loaded()
        return self._schema

    @property
    def properties(self) -> Mapping[str, PropertySchema]:
        return self.schema.properties

    @property
    def validation(self) -> Mapping[str, Any] | None:
        return self.schema.validation

    @property
    def extend(self) -> list[Schema]:
        return self.schema.extend

    async def _load(self) -> None:
        self._schema = await Schema.create(self._shape.inner, self._options)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
