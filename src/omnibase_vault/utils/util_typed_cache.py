# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Concurrency-safe typed key/value cache.

TypedCache is a plain mapping guarded by a ``threading.Lock``. Reads are
type-checked against the value type given at construction: an entry whose
value is not an instance of that type is reported as a miss, never as an
error.

There is no eviction, no expiry and no size bound. Entries only leave the
cache through ``delete`` or ``clear``.

Example:
    >>> cache: TypedCache[str, int] = TypedCache(int)
    >>> cache.store("answer", 42)
    >>> cache.load("answer")
    (42, True)
    >>> cache.load("missing")
    (None, False)
"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import Generic, TypeVar, cast

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING = object()


class TypedCache(Generic[K, V]):
    """Thread-safe mapping from hashable keys to values of one type.

    Thread Safety:
        All operations take the internal lock for the duration of a single
        dict operation. No lock is held while callers compute values, so
        two writers racing on the same key simply leave the last write.
    """

    def __init__(self, value_type: type[V] | tuple[type, ...]) -> None:
        """Initialize an empty cache.

        Args:
            value_type: Type (or tuple of types) every loaded value must match
        """
        self._value_type = value_type
        self._entries: dict[K, object] = {}
        self._lock = threading.Lock()

    def load(self, key: K) -> tuple[V | None, bool]:
        """Return ``(value, True)`` for a present, correctly typed entry.

        A missing key and a value of the wrong type both return ``(None, False)``.
        """
        with self._lock:
            if key not in self._entries:
                return None, False
            value = self._entries[key]

        if not isinstance(value, self._value_type):
            return None, False
        return cast(V, value), True

    def store(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, overwriting any previous entry."""
        with self._lock:
            self._entries[key] = value

    def delete(self, key: K) -> bool:
        """Remove ``key``. Returns True if an entry was removed."""
        with self._lock:
            return self._entries.pop(key, _MISSING) is not _MISSING

    def clear(self) -> int:
        """Remove every entry and return how many were removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def keys(self) -> list[K]:
        """Return a snapshot of the stored keys."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


__all__: list[str] = ["TypedCache"]
