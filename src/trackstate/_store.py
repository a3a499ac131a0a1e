# Copyright (c) 2026 Pointmatic
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

from trackstate._exceptions import DecodeError

if TYPE_CHECKING:
    from trackstate._codec import Codec

T = TypeVar("T")

_log = logging.getLogger("trackstate")

_MISSING = object()


@runtime_checkable
class Store(Protocol):
    """Async key-value store holding JSON-compatible primitives.

    Implementations must not swallow I/O failures; trackers let them
    propagate to the caller.
    """

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def exists(self, key: str) -> bool: ...


class MemoryStore:
    """In-process Store. Values are JSON-encoded on write.

    Encoding on write means readers never share mutable state with the
    store, the same as a store backed by disk.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Any | None:
        encoded = self._data.get(key)
        if encoded is None:
            return None
        return json.loads(encoded)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self._data

    def raw_set(self, key: str, encoded: str) -> None:
        """Store an already-encoded document as-is (for fault injection)."""
        self._data[key] = encoded

    def snapshot(self) -> dict[str, Any]:
        """Decoded copy of every stored key."""
        return {key: json.loads(encoded) for key, encoded in self._data.items()}

    def __len__(self) -> int:
        return len(self._data)


class CachedStore:
    """Read cache in front of another Store.

    Reads are served from memory after the first hit, so writes made to the
    backend by another process are not observed.
    """

    def __init__(self, backend: Store) -> None:
        self._backend = backend
        self._cache: dict[str, Any] = {}

    @property
    def backend(self) -> Store:
        return self._backend

    async def get(self, key: str) -> Any | None:
        cached = self._cache.get(key, _MISSING)
        if cached is not _MISSING:
            return cached
        value = await self._backend.get(key)
        self._cache[key] = value
        return value

    async def set(self, key: str, value: Any) -> None:
        await self._backend.set(key, value)
        self._cache[key] = value

    async def remove(self, key: str) -> None:
        await self._backend.remove(key)
        self._cache[key] = None

    async def exists(self, key: str) -> bool:
        cached = self._cache.get(key, _MISSING)
        if cached is not _MISSING:
            return cached is not None
        return await self._backend.exists(key)

    def invalidate(self, key: str | None = None) -> None:
        """Drop one cached key, or the whole cache."""
        if key is None:
            self._cache.clear()
        else:
            self._cache.pop(key, None)


def bind_store(store: Store, use_cache: bool) -> Store:
    """Pick the handle a tracker reads through."""
    return CachedStore(store) if use_cache else store


class StoredValue(Generic[T]):
    """One typed key in a Store."""

    def __init__(self, store: Store, key: str, codec: Codec[T]) -> None:
        self._store = store
        self._key = key
        self._codec = codec

    @property
    def key(self) -> str:
        return self._key

    async def get(self) -> T | None:
        """Decoded value, or None if absent or undecodable."""
        raw = await self._store.get(self._key)
        if raw is None:
            return None
        try:
            return self._codec.decode(raw)
        except DecodeError as exc:
            _log.warning("Ignoring corrupt value at %r: %s", self._key, exc.reason)
            return None

    async def get_or(self, fallback: T) -> T:
        value = await self.get()
        return fallback if value is None else value

    async def set(self, value: T) -> None:
        await self._store.set(self._key, self._codec.encode(value))

    async def remove(self) -> None:
        await self._store.remove(self._key)

    async def exists(self) -> bool:
        return await self._store.exists(self._key)
