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

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from trackstate._counter import CounterTracker
from trackstate._period import aligned_start

if TYPE_CHECKING:
    from trackstate._period import TimePeriod
    from trackstate._store import Store
    from trackstate._types import Clock


class PeriodicCounter(CounterTracker):
    """Counter that resets to zero at the start of every aligned period."""

    def __init__(
        self,
        key: str,
        store: Store,
        *,
        period: TimePeriod,
        use_cache: bool = False,
        clock: Clock = datetime.now,
    ) -> None:
        super().__init__(key, store, suffix="period", use_cache=use_cache, clock=clock)
        self._period = period

    @property
    def period(self) -> TimePeriod:
        return self._period

    def is_expired(self, now: datetime, last: datetime | None) -> bool:
        return last is None or last < aligned_start(self._period, now)

    async def _reset(self) -> None:
        await self._value.set(0)
        await self._last_update.set(aligned_start(self._period, self._clock()))

    @property
    def current_period_start(self) -> datetime:
        return aligned_start(self._period, self._clock())

    @property
    def next_period_start(self) -> datetime:
        return self.current_period_start + self._period.duration

    @property
    def time_until_next_period(self) -> timedelta:
        return self.next_period_start - self._clock()

    @property
    def elapsed_in_current_period(self) -> timedelta:
        return self._clock() - self.current_period_start

    @property
    def percent_elapsed(self) -> float:
        """Fraction of the current period already elapsed, 0.0 to 1.0."""
        total = self._period.duration.total_seconds()
        if total == 0:
            return 1.0
        elapsed = self.elapsed_in_current_period.total_seconds()
        return min(1.0, max(0.0, elapsed / total))
