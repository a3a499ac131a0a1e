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

import abc
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Generic, TypeVar

from trackstate._codec import DateTimeCodec, IntCodec
from trackstate._locks import lock_for
from trackstate._store import StoredValue, bind_store

if TYPE_CHECKING:
    import asyncio

    from trackstate._codec import Codec
    from trackstate._store import Store
    from trackstate._types import Clock

V = TypeVar("V")

_log = logging.getLogger("trackstate")


class TemporalTracker(abc.ABC, Generic[V]):
    """A persisted value plus its last-update timestamp, reset lazily on read.

    The value lives at ``<key>_<suffix>`` and the timestamp at
    ``<key>_last_<suffix>``. Subclasses decide when the pair is stale
    (:meth:`is_expired`), what a reset writes (:meth:`_reset`) and what an
    absent value reads as (:meth:`fallback_value`). Expiration is only ever
    checked on access; nothing fires on its own.
    """

    def __init__(
        self,
        key: str,
        store: Store,
        *,
        suffix: str,
        use_cache: bool = False,
        clock: Clock = datetime.now,
        codec: Codec[V] | None = None,
    ) -> None:
        self._key = key
        self._use_cache = use_cache
        self._clock = clock
        handle = bind_store(store, use_cache)
        self._value: StoredValue[V] = StoredValue(
            handle, f"{key}_{suffix}", codec if codec is not None else IntCodec()
        )
        self._last_update: StoredValue[datetime] = StoredValue(
            handle, f"{key}_last_{suffix}", DateTimeCodec()
        )

    @property
    def key(self) -> str:
        return self._key

    @property
    def use_cache(self) -> bool:
        return self._use_cache

    @property
    def _lock(self) -> asyncio.Lock:
        return lock_for("tracker", self._value.key)

    @abc.abstractmethod
    def is_expired(self, now: datetime, last: datetime | None) -> bool:
        """True if a value last written at ``last`` is stale at ``now``."""

    @abc.abstractmethod
    async def _reset(self) -> None:
        """Write the post-reset value and timestamp. Caller holds the lock."""

    @abc.abstractmethod
    def fallback_value(self) -> V:
        """Value reported when nothing is stored."""

    async def get(self) -> V:
        """Current value, resetting it first if it has gone stale."""
        async with self._lock:
            return await self._ensure_fresh()

    async def reset(self) -> None:
        async with self._lock:
            await self._reset()

    async def peek(self) -> V:
        """Stored value without expiration check or reset."""
        return await self._value.get_or(self.fallback_value())

    async def is_currently_expired(self) -> bool:
        last = await self._last_update.get()
        return self.is_expired(self._clock(), last)

    async def has_state(self) -> bool:
        """True if either the value or the timestamp is stored."""
        return await self._value.exists() or await self._last_update.exists()

    async def clear(self) -> None:
        await self._value.remove()
        await self._last_update.remove()
        _log.debug("Cleared %s", self._value.key)

    async def get_last_update_time(self) -> datetime | None:
        return await self._last_update.get()

    async def time_since_last_update(self) -> timedelta | None:
        last = await self._last_update.get()
        return None if last is None else self._clock() - last

    async def _ensure_fresh(self) -> V:
        last = await self._last_update.get()
        if self.is_expired(self._clock(), last):
            _log.debug("Resetting stale %s (last update %s)", self._value.key, last)
            await self._reset()
        return await self._value.get_or(self.fallback_value())
