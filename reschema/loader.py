"""
Type loaders.

A loader maps a type name (a slash-delimited path such as ``geo/point``) to a
type descriptor::

    {"name": "geo/point", "meta": {"description": "..."}, "schema": {...}}

Loaders are injected by the host application. Any callable taking the name
works, as does any object exposing a ``resolve(name)`` method; both may return
the descriptor directly or an awaitable resolving to it.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Mapping
from pathlib import Path
from typing import Any, Callable, Protocol, Union, runtime_checkable

from .errors import ConfigurationError, ResolutionError

logger = logging.getLogger(__name__)

TypeDescriptor = dict[str, Any]
LoaderResult = Union[TypeDescriptor, Awaitable[TypeDescriptor]]


@runtime_checkable
class Loader(Protocol):
    """Capability resolving a type name to its descriptor."""

    def resolve(self, name: str) -> LoaderResult: ...


class TypeLoader:
    """Adapts an injected loader and checks the descriptors it returns."""

    def __init__(self, resolve: Callable[[str], LoaderResult]):
        self._resolve = resolve

    @staticmethod
    def from_option(loader: Any) -> TypeLoader:
        """
        Build a TypeLoader from the ``loader`` option.

        Args:
            loader: A callable, an object with a ``resolve`` method, or a TypeLoader

        Returns:
            TypeLoader wrapping the given loader

        Raises:
            ConfigurationError: If no usable loader was supplied
        """
        if isinstance(loader, TypeLoader):
            return loader
        if loader is None:
            raise ConfigurationError("Missing loader: a loader is required to resolve type references")
        if callable(loader):
            return TypeLoader(loader)
        if isinstance(loader, Loader):
            return TypeLoader(loader.resolve)
        raise ConfigurationError(f"Loader must be callable, got {type(loader).__name__}")

    async def fetch(self, name: str) -> TypeDescriptor:
        """
        Resolve a type name and validate the returned descriptor.

        Args:
            name: The type name to resolve

        Returns:
            The type descriptor

        Raises:
            ResolutionError: If the loader fails or returns malformed data
        """
        logger.debug("Loading type %s", name)
        try:
            descriptor = self._resolve(name)
            if inspect.isawaitable(descriptor):
                descriptor = await descriptor
        except ResolutionError:
            raise
        except Exception as e:
            raise ResolutionError(f"Failed to load type '{name}': {e}", type_name=name) from e

        if not isinstance(descriptor, Mapping):
            raise ResolutionError(
                f"Loader returned {type(descriptor).__name__} for type '{name}', expected a mapping",
                type_name=name,
            )
        if not isinstance(descriptor.get("name"), str):
            raise ResolutionError(f"Descriptor for type '{name}' has no valid name", type_name=name)
        if "schema" not in descriptor:
            raise ResolutionError(f"Descriptor for type '{name}' has no schema", type_name=name)
        return dict(descriptor)


class DictLoader:
    """In-memory loader backed by a mapping of name to descriptor."""

    def __init__(self, types: Mapping[str, Mapping[str, Any]]):
        self.types = dict(types)

    def resolve(self, name: str) -> TypeDescriptor:
        if name not in self.types:
            raise ResolutionError(f"Unknown type '{name}'", type_name=name)
        descriptor = dict(self.types[name])
        descriptor.setdefault("name", name)
        return descriptor


class DirectoryLoader:
    """
    File-backed loader reading ``<root>/<name>.json``.

    Slashes in type names map to sub-directories. Files are read in a worker
    thread so unrelated branches of a schema keep loading meanwhile.
    """

    FILE_EXTENSION = ".json"

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        """Get the file path holding the given type."""
        parts = [part for part in name.split("/") if part]
        if not parts or any(part in (".", "..") for part in parts):
            raise ResolutionError(f"Invalid type name '{name}'", type_name=name)
        return self.root.joinpath(*parts[:-1], parts[-1] + self.FILE_EXTENSION)

    def _read(self, path: Path) -> Any:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    async def resolve(self, name: str) -> TypeDescriptor:
        path = self.path_for(name)
        if not path.is_file():
            raise ResolutionError(f"Unknown type '{name}': {path} does not exist", type_name=name)
        descriptor = await asyncio.to_thread(self._read, path)
        if isinstance(descriptor, dict):
            descriptor.setdefault("name", name)
        return descriptor
