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
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from trackstate._best_record import BestRecord
from trackstate._period import aligned_start
from trackstate._tracker import TemporalTracker
from trackstate._types import RecordEntry, RecordMode

if TYPE_CHECKING:
    from trackstate._period import TimePeriod
    from trackstate._store import Store
    from trackstate._types import Clock

_log = logging.getLogger("trackstate")


class StreakTracker(TemporalTracker[int]):
    """Counts consecutive periods with activity.

    ``bump()`` stamps the aligned start of the current period. The streak
    survives as long as the next bump lands in the following period and
    breaks once a whole period passes without one. The longest streak is
    kept in :attr:`records`, stored under ``<key>_streak_best_record``.
    """

    def __init__(
        self,
        key: str,
        store: Store,
        *,
        period: TimePeriod,
        records_history: int = 1,
        records_mode: RecordMode = RecordMode.MAX,
        record_fallback: RecordEntry | None = None,
        use_cache: bool = False,
        clock: Clock = datetime.now,
    ) -> None:
        super().__init__(key, store, suffix="streak", use_cache=use_cache, clock=clock)
        self._period = period
        if record_fallback is None:
            record_fallback = RecordEntry(0, clock())
        self.records = BestRecord(
            f"{key}_streak_best_record",
            store,
            clock=clock,
            mode=records_mode,
            history_length=records_history,
            fallback=record_fallback,
            use_cache=use_cache,
        )

    @property
    def period(self) -> TimePeriod:
        return self._period

    @property
    def _grace(self) -> timedelta:
        return self._period.duration * 2

    def is_expired(self, now: datetime, last: datetime | None) -> bool:
        if last is None:
            return True
        gap = aligned_start(self._period, now) - aligned_start(self._period, last)
        return gap >= self._grace

    def fallback_value(self) -> int:
        return 0

    async def _reset(self) -> None:
        await self._value.set(0)
        await self._last_update.remove()

    async def bump(self, amount: int = 1) -> int:
        """Mark the current period as done and return the streak length."""
        async with self._lock:
            now = self._clock()
            last = await self._last_update.get()
            if self.is_expired(now, last):
                if last is not None:
                    _log.debug("Streak %s broken (last bump %s)", self._key, last)
                await self._value.set(0)

            updated = await self._value.get_or(0) + amount
            await self._value.set(updated)
            await self._last_update.set(aligned_start(self._period, now))

            await self.records.update(updated)
            return updated

    async def current_streak(self) -> int:
        return await self.get()

    async def is_streak_broken(self) -> bool:
        return await self.is_currently_expired()

    async def streak_age(self) -> timedelta | None:
        """Time since the aligned start of the last bumped period."""
        return await self.time_since_last_update()

    async def next_reset_time(self) -> datetime | None:
        """When the streak breaks if not bumped again. None if never bumped."""
        last = await self._last_update.get()
        if last is None:
            return None
        return aligned_start(self._period, last) + self._grace

    async def percent_remaining(self) -> float | None:
        """Fraction of the grace window still left, 0.0 to 1.0."""
        end = await self.next_reset_time()
        if end is None:
            return None
        remaining = end - self._clock()
        return min(1.0, max(0.0, remaining / self._grace))

    async def clear(self) -> None:
        """Remove the streak and its best-record history."""
        async with self._lock:
            await super().clear()
            await self.records.remove_key()
