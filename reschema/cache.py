"""
Per-instance memoization cache.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable


class Memoizer:
    """Lazy cache keyed by name.

    Calling ``memo(key, value)`` stores ``value`` (or the result of calling it
    when it is callable) the first time ``key`` is seen and returns the stored
    result on every later call. Entries are never evicted.
    """

    def __init__(self):
        self._values: dict[Hashable, Any] = {}

    def __call__(self, key: Hashable, value: Any | Callable[[], Any] = None) -> Any:
        if key in self._values:
            return self._values[key]
        if callable(value):
            value = value()
        self._values[key] = value
        return value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)
