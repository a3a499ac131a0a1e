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

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from trackstate._codec import EnumListCodec, JsonListCodec, ListCodec
from trackstate._config import HistoryConfig
from trackstate._locks import lock_for
from trackstate._store import StoredValue, bind_store

if TYPE_CHECKING:
    import asyncio
    import enum

    from trackstate._codec import Codec
    from trackstate._store import Store
    from trackstate._types import ItemPredicate

T = TypeVar("T")
E = TypeVar("E", bound="enum.Enum")

_log = logging.getLogger("trackstate")

_KEY_PREFIX = "history_tracker_"


def _dedupe(items: Iterable[T]) -> list[T]:
    """Drop repeated items, keeping the first occurrence of each."""
    result: list[T] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


class HistoryTracker(Generic[T]):
    """Persisted newest-first list, capped at ``max_length``.

    With ``deduplicate`` an item that is added again moves to the front
    instead of appearing twice. Every mutation is a read-modify-write
    under the per-key lock. Stored data that fails to decode reads as an
    empty history.
    """

    def __init__(
        self,
        name: str,
        store: Store,
        *,
        codec: Codec[list[T]] | None = None,
        **kwargs: Any,
    ) -> None:
        """Accept all HistoryConfig fields as kwargs."""
        self._config = HistoryConfig(**kwargs)
        self._list: StoredValue[list[T]] = StoredValue(
            bind_store(store, self._config.use_cache),
            self.key_from_name(name),
            codec if codec is not None else ListCodec(),
        )

    @classmethod
    def json(
        cls,
        name: str,
        store: Store,
        *,
        from_json: Callable[[dict[str, Any]], T],
        to_json: Callable[[T], dict[str, Any]],
        **kwargs: Any,
    ) -> HistoryTracker[T]:
        """History of objects serialized one JSON document per entry."""
        return cls(
            name,
            store,
            codec=JsonListCodec(from_json=from_json, to_json=to_json),
            **kwargs,
        )

    @classmethod
    def enumerated(
        cls,
        name: str,
        store: Store,
        enum_type: type[E],
        **kwargs: Any,
    ) -> HistoryTracker[E]:
        """History of enum members, persisted by name."""
        return cls(name, store, codec=EnumListCodec(enum_type), **kwargs)

    @classmethod
    def from_dict(
        cls,
        name: str,
        store: Store,
        data: dict[str, Any],
        codec: Codec[list[T]] | None = None,
    ) -> HistoryTracker[T]:
        config = HistoryConfig.from_dict(data)
        return cls(
            name,
            store,
            codec=codec,
            max_length=config.max_length,
            deduplicate=config.deduplicate,
            use_cache=config.use_cache,
        )

    @staticmethod
    def key_from_name(name: str) -> str:
        return f"{_KEY_PREFIX}{name}"

    @property
    def key(self) -> str:
        return self._list.key

    @property
    def _lock(self) -> asyncio.Lock:
        return lock_for("history", self._list.key)

    @property
    def max_length(self) -> int:
        return self._config.max_length

    @property
    def deduplicate(self) -> bool:
        return self._config.deduplicate

    async def add(self, item: T) -> None:
        """Insert ``item`` as the newest entry, trimming the oldest overflow."""
        async with self._lock:
            items = await self.get_all()
            if self._config.deduplicate and item in items:
                items.remove(item)
            items.insert(0, item)
            del items[self._config.max_length:]
            await self._list.set(items)

    async def set_all(self, items: Iterable[T]) -> None:
        """Replace the whole history. Dedup keeps first occurrences, then trims."""
        async with self._lock:
            values = _dedupe(items) if self._config.deduplicate else list(items)
            await self._list.set(values[: self._config.max_length])

    async def remove(self, item: T) -> None:
        """Remove the first entry equal to ``item``, if any."""
        async with self._lock:
            items = await self.get_all()
            if item in items:
                items.remove(item)
            await self._list.set(items)

    async def remove_where(self, predicate: ItemPredicate) -> None:
        async with self._lock:
            items = await self.get_all()
            await self._list.set([item for item in items if not predicate(item)])

    async def clear(self) -> None:
        """Persist an empty history. The key keeps existing."""
        async with self._lock:
            await self._list.set([])
            _log.debug("Cleared history %s", self._list.key)

    async def remove_key(self) -> None:
        """Delete the history key from storage."""
        async with self._lock:
            await self._list.remove()

    async def exists(self) -> bool:
        return await self._list.exists()

    async def get_all(self) -> list[T]:
        """All entries, newest first. Absent or corrupt storage reads as []."""
        return await self._list.get_or([])

    async def contains(self, item: T) -> bool:
        return item in await self.get_all()

    async def length(self) -> int:
        return len(await self.get_all())

    async def is_empty(self) -> bool:
        return not await self.get_all()

    async def first(self) -> T | None:
        """Newest entry."""
        items = await self.get_all()
        return items[0] if items else None

    async def last(self) -> T | None:
        """Oldest entry."""
        items = await self.get_all()
        return items[-1] if items else None
