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

import asyncio
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from trackstate._config import RolloverConfig
from trackstate._counter import CounterTracker

if TYPE_CHECKING:
    from trackstate._store import Store
    from trackstate._types import Clock


class RolloverCounter(CounterTracker):
    """Counter that resets a fixed duration after its window opened.

    The window opens on the first increment after a reset and is not
    extended by later increments; it is unrelated to calendar boundaries.
    """

    def __init__(
        self,
        key: str,
        store: Store,
        *,
        reset_every: timedelta,
        use_cache: bool = False,
        clock: Clock = datetime.now,
    ) -> None:
        super().__init__(key, store, suffix="roll", use_cache=use_cache, clock=clock)
        self._config = RolloverConfig(reset_every=reset_every)

    @property
    def reset_every(self) -> timedelta:
        return self._config.reset_every

    def is_expired(self, now: datetime, last: datetime | None) -> bool:
        return last is None or now - last >= self._config.reset_every

    async def _reset(self) -> None:
        await self._value.set(0)
        await self._last_update.set(self._clock())

    async def time_remaining(self) -> timedelta | None:
        """Time left before the counter rolls over. None if never written."""
        last = await self._last_update.get()
        if last is None:
            return None
        remaining = self._config.reset_every - (self._clock() - last)
        return max(timedelta(0), remaining)

    async def seconds_remaining(self) -> int | None:
        remaining = await self.time_remaining()
        return None if remaining is None else int(remaining.total_seconds())

    async def percent_elapsed(self) -> float | None:
        last = await self._last_update.get()
        if last is None:
            return None
        elapsed = self._clock() - last
        return min(1.0, max(0.0, elapsed / self._config.reset_every))

    async def get_end_time(self) -> datetime | None:
        last = await self._last_update.get()
        return None if last is None else last + self._config.reset_every

    async def when_expires(self) -> None:
        """Sleep until the current window has run out.

        Returns immediately if the counter was never written or has already
        rolled over. Cancelling the awaiting task just cancels the sleep.
        """
        remaining = await self.time_remaining()
        if remaining is None or remaining <= timedelta(0):
            return
        await asyncio.sleep(remaining.total_seconds())
