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

import calendar
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from trackstate._codec import IntListCodec
from trackstate._locks import lock_for
from trackstate._store import StoredValue, bind_store
from trackstate._types import TimeSpan

if TYPE_CHECKING:
    import asyncio

    from collections.abc import Iterable

    from trackstate._store import Store
    from trackstate._types import Clock

_log = logging.getLogger("trackstate")

BASE_YEAR = 2000

_HOURS_IN_DAY = 24
_DAYS_IN_MONTH = 32  # index 1..31
_MONTHS_IN_YEAR = 13  # index 1..12


def _bucket(span: TimeSpan, date: datetime) -> tuple[int, int]:
    """(index, minimum list length) of ``date`` in ``span``."""
    if span is TimeSpan.YEAR:
        index = date.year - BASE_YEAR
        return index, index + 1
    if span is TimeSpan.MONTH:
        return date.month, _MONTHS_IN_YEAR
    if span is TimeSpan.DAY:
        return date.day, _DAYS_IN_MONTH
    return date.hour, _HOURS_IN_DAY


def _previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def _date_from_index(span: TimeSpan, now: datetime, index: int) -> datetime | None:
    """Most recent datetime not after ``now`` that falls in bucket ``index``."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if span is TimeSpan.YEAR:
        return midnight.replace(year=BASE_YEAR + index, month=1, day=1)
    if span is TimeSpan.MONTH:
        if not 1 <= index <= 12:
            return None
        year = now.year if index <= now.month else now.year - 1
        return midnight.replace(year=year, month=index, day=1)
    if span is TimeSpan.DAY:
        if not 1 <= index <= 31:
            return None
        year, month = now.year, now.month
        if index > now.day:
            year, month = _previous_month(year, month)
        while index > calendar.monthrange(year, month)[1]:
            year, month = _previous_month(year, month)
        return midnight.replace(year=year, month=month, day=index)
    if not 0 <= index < _HOURS_IN_DAY:
        return None
    day = midnight if index <= now.hour else midnight - timedelta(days=1)
    return day.replace(hour=index)


class ActivityCounter:
    """Activity histogram over hour of day, day of month, month and year.

    Every ``add()`` lands in one bucket of each of the four lists, chosen
    from the clock. Hours, days and months wrap around (the day list has no
    notion of which month it belongs to); years are indexed from 2000 and
    grow without bound. Lists grow on write only.
    """

    def __init__(
        self,
        key: str,
        store: Store,
        *,
        use_cache: bool = False,
        clock: Clock = datetime.now,
    ) -> None:
        self._key = key
        self._clock = clock
        handle = bind_store(store, use_cache)
        self._data: dict[TimeSpan, StoredValue[list[int]]] = {
            span: StoredValue(handle, f"{key}_{span.value}", IntListCodec())
            for span in TimeSpan
        }

    @property
    def key(self) -> str:
        return self._key

    @property
    def _lock(self) -> asyncio.Lock:
        return lock_for("activity", self._key)

    async def add(self, amount: int) -> None:
        """Add ``amount`` to the current bucket of every span.

        Raises:
            ValueError: The clock reads a year before 2000.
        """
        now = self._clock()
        if now.year < BASE_YEAR:
            raise ValueError(f"cannot record activity before {BASE_YEAR}, got {now:%Y}")
        async with self._lock:
            for span, stored in self._data.items():
                index, min_length = _bucket(span, now)
                buckets = await stored.get_or([])
                if len(buckets) < min_length:
                    buckets.extend([0] * (min_length - len(buckets)))
                buckets[index] += amount
                await stored.set(buckets)

    async def increment(self) -> None:
        await self.add(1)

    async def amount_for(self, span: TimeSpan, date: datetime) -> int:
        """Bucket value for ``date``; 0 when the bucket was never written."""
        index, _ = _bucket(span, date)
        buckets = await self._buckets(span)
        if index < 0 or index >= len(buckets):
            return 0
        return buckets[index]

    async def amount_this(self, span: TimeSpan) -> int:
        return await self.amount_for(span, self._clock())

    async def this_hour(self) -> int:
        return await self.amount_this(TimeSpan.HOUR)

    async def today(self) -> int:
        return await self.amount_this(TimeSpan.DAY)

    async def this_month(self) -> int:
        return await self.amount_this(TimeSpan.MONTH)

    async def this_year(self) -> int:
        return await self.amount_this(TimeSpan.YEAR)

    async def summary(self) -> dict[TimeSpan, int]:
        now = self._clock()
        return {span: await self.amount_for(span, now) for span in TimeSpan}

    async def total(self, span: TimeSpan) -> int:
        return sum(await self._buckets(span))

    async def all(self, span: TimeSpan) -> dict[int, int]:
        """Non-zero buckets as ``{index: amount}``."""
        buckets = await self._buckets(span)
        return {i: amount for i, amount in enumerate(buckets) if amount != 0}

    async def max_value(self, span: TimeSpan) -> int:
        return max((await self.all(span)).values(), default=0)

    async def active_dates(self, span: TimeSpan) -> list[datetime]:
        """Dates of the non-zero buckets.

        Month, day and hour buckets carry no year, so each maps to its most
        recent occurrence not later than the clock.
        """
        now = self._clock()
        dates = (_date_from_index(span, now, i) for i in await self.all(span))
        return [date for date in dates if date is not None]

    async def has_any_data(self) -> bool:
        for span in TimeSpan:
            if await self.total(span) != 0:
                return True
        return False

    async def clear(self, span: TimeSpan) -> None:
        """Zero one span."""
        async with self._lock:
            await self._data[span].set([])

    async def clear_all_known(self, spans: Iterable[TimeSpan]) -> None:
        async with self._lock:
            for span in spans:
                await self._data[span].set([])

    async def reset(self) -> None:
        await self.clear_all_known(TimeSpan)
        _log.debug("Reset activity counter %s", self._key)

    async def remove_all(self) -> None:
        """Delete every stored list for this counter."""
        async with self._lock:
            for stored in self._data.values():
                await stored.remove()

    async def _buckets(self, span: TimeSpan) -> list[int]:
        return await self._data[span].get_or([])
