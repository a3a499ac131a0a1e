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

import dataclasses
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from trackstate._config import BestRecordConfig
from trackstate._exceptions import NoRecordError
from trackstate._history import HistoryTracker
from trackstate._locks import lock_for
from trackstate._types import RecordEntry, RecordMode

if TYPE_CHECKING:
    import asyncio

    from trackstate._store import Store
    from trackstate._types import Clock, ItemPredicate

_log = logging.getLogger("trackstate")


class BestRecord:
    """Keeps the best value ever seen (max or min) with a short history.

    Only improvements are accepted, so the history is in acceptance order
    and its first entry is always the current best.
    """

    def __init__(
        self,
        key: str,
        store: Store,
        *,
        clock: Clock = datetime.now,
        **kwargs: Any,
    ) -> None:
        """Accept all BestRecordConfig fields as kwargs."""
        self._key = key
        self._config = BestRecordConfig(**kwargs)
        self._clock = clock
        self._history: HistoryTracker[RecordEntry] = HistoryTracker.json(
            key,
            store,
            from_json=RecordEntry.from_json,
            to_json=RecordEntry.to_json,
            max_length=self._config.history_length,
            deduplicate=False,
            use_cache=self._config.use_cache,
        )

    @classmethod
    def from_dict(
        cls,
        key: str,
        store: Store,
        data: dict[str, Any],
        clock: Clock = datetime.now,
    ) -> BestRecord:
        config = BestRecordConfig.from_dict(data)
        return cls(key, store, clock=clock, **{
            f.name: getattr(config, f.name)
            for f in dataclasses.fields(config)
        })

    @property
    def key(self) -> str:
        return self._key

    @property
    def _lock(self) -> asyncio.Lock:
        return lock_for("best_record", self._history.key)

    @property
    def mode(self) -> RecordMode:
        return self._config.mode

    @property
    def fallback(self) -> RecordEntry | None:
        return self._config.fallback

    def _improves(self, candidate: float, best: float) -> bool:
        if self._config.mode is RecordMode.MAX:
            return candidate > best
        return candidate < best

    async def update(self, value: float) -> None:
        """Record ``value`` if there is no best yet or it strictly beats it."""
        async with self._lock:
            best = await self.get_best()
            if best is None or self._improves(value, best.value):
                await self._history.add(RecordEntry(value, self._clock()))
                _log.debug("New best for %s: %s", self._key, value)

    async def manual_set(self, value: float) -> None:
        """Record ``value`` as the new best without comparing."""
        async with self._lock:
            await self._history.add(RecordEntry(value, self._clock()))

    async def get_best(self) -> RecordEntry | None:
        return await self._history.first()

    async def get_best_record(self) -> float | None:
        best = await self.get_best()
        return None if best is None else best.value

    async def get_best_date(self) -> datetime | None:
        best = await self.get_best()
        return None if best is None else best.date

    async def get_best_or_fallback(self) -> RecordEntry:
        """Best record, else the configured fallback.

        Raises:
            NoRecordError: Nothing is stored and no fallback was configured.
        """
        best = await self.get_best()
        if best is not None:
            return best
        if self._config.fallback is not None:
            return self._config.fallback
        raise NoRecordError(self._key)

    async def get_history(self) -> list[RecordEntry]:
        """Accepted records, most recent first."""
        return await self._history.get_all()

    async def first(self) -> RecordEntry | None:
        return await self._history.first()

    async def last(self) -> RecordEntry | None:
        return await self._history.last()

    async def reset(self) -> None:
        async with self._lock:
            await self._history.clear()

    async def remove_key(self) -> None:
        async with self._lock:
            await self._history.remove_key()

    async def exists(self) -> bool:
        return await self._history.exists()

    async def remove_at(self, index: int) -> None:
        """Drop the record at ``index``. Out-of-range indices are ignored."""
        async with self._lock:
            records = await self._history.get_all()
            if 0 <= index < len(records):
                del records[index]
                await self._history.set_all(records)

    async def remove_where(self, predicate: ItemPredicate) -> None:
        async with self._lock:
            await self._history.remove_where(predicate)
