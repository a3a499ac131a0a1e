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
from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from conftest import FakeClock
from trackstate import ActivityCounter, TimeSpan

if TYPE_CHECKING:
    from trackstate import MemoryStore

NOW = datetime(2024, 5, 12, 15)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def counter(store: MemoryStore, clock: FakeClock) -> ActivityCounter:
    return ActivityCounter("act", store, clock=clock)


class TestAdd:
    async def test_starts_empty(self, counter: ActivityCounter) -> None:
        for span in TimeSpan:
            assert await counter.amount_this(span) == 0
        assert not await counter.has_any_data()

    async def test_add_hits_every_span(self, counter: ActivityCounter) -> None:
        await counter.add(5)
        for span in TimeSpan:
            assert await counter.amount_this(span) == 5
        assert await counter.has_any_data()

    async def test_increment_and_shortcuts(self, counter: ActivityCounter) -> None:
        await counter.increment()
        await counter.increment()
        assert await counter.this_hour() == 2
        assert await counter.today() == 2
        assert await counter.this_month() == 2
        assert await counter.this_year() == 2

    async def test_indices_from_clock(self, counter: ActivityCounter) -> None:
        await counter.add(2)
        assert await counter.amount_for(TimeSpan.YEAR, datetime(2024, 1, 1)) == 2
        assert await counter.amount_for(TimeSpan.MONTH, datetime(2024, 5, 1)) == 2
        assert await counter.amount_for(TimeSpan.DAY, datetime(2024, 5, 12)) == 2
        assert await counter.amount_for(TimeSpan.HOUR, datetime(2024, 5, 12, 15)) == 2
        assert await counter.amount_for(TimeSpan.HOUR, datetime(2024, 5, 12, 14)) == 0

    async def test_lists_grow_to_minimum_length(
        self, counter: ActivityCounter, store: MemoryStore
    ) -> None:
        await counter.add(1)
        data = store.snapshot()
        assert len(data["act_hour"]) == 24
        assert len(data["act_day"]) == 32
        assert len(data["act_month"]) == 13
        assert len(data["act_year"]) == 25
        assert data["act_day"][0] == 0
        assert data["act_month"][0] == 0

    async def test_negative_amounts(self, counter: ActivityCounter) -> None:
        await counter.add(5)
        await counter.add(-3)
        assert await counter.amount_this(TimeSpan.DAY) == 2

    async def test_concurrent_adds(self, counter: ActivityCounter) -> None:
        await asyncio.gather(*(counter.increment() for _ in range(10)))
        assert await counter.summary() == {span: 10 for span in TimeSpan}

    async def test_rejects_dates_before_2000(self, store: MemoryStore) -> None:
        counter = ActivityCounter("old", store, clock=lambda: datetime(1999, 12, 31))
        with pytest.raises(ValueError, match="2000"):
            await counter.add(1)


class TestYearBoundary:
    async def test_buckets_do_not_cross_contaminate(
        self, counter: ActivityCounter, clock: FakeClock
    ) -> None:
        clock.set(datetime(2024, 12, 31, 23, 59))
        await counter.add(10)
        clock.set(datetime(2025, 1, 1, 0, 0))
        await counter.add(20)

        assert await counter.amount_for(TimeSpan.DAY, datetime(2024, 12, 31)) == 10
        assert await counter.amount_for(TimeSpan.DAY, datetime(2025, 1, 1)) == 20
        assert await counter.amount_for(TimeSpan.YEAR, datetime(2024, 6, 1)) == 10
        assert await counter.amount_for(TimeSpan.YEAR, datetime(2025, 6, 1)) == 20
        assert await counter.amount_for(TimeSpan.MONTH, datetime(2024, 12, 1)) == 10
        assert await counter.amount_for(TimeSpan.MONTH, datetime(2025, 1, 1)) == 20
        assert await counter.total(TimeSpan.YEAR) == 30

    async def test_leap_day(self, counter: ActivityCounter, clock: FakeClock) -> None:
        clock.set(datetime(2024, 2, 29))
        await counter.add(10)
        assert await counter.amount_for(TimeSpan.DAY, datetime(2024, 2, 29)) == 10


class TestReads:
    async def test_out_of_range_reads_zero(
        self, counter: ActivityCounter, store: MemoryStore
    ) -> None:
        assert await counter.amount_for(TimeSpan.YEAR, datetime(1999, 1, 1)) == 0
        assert await counter.amount_for(TimeSpan.YEAR, datetime(2090, 1, 1)) == 0
        assert len(store) == 0

    async def test_reads_never_grow(self, counter: ActivityCounter, store: MemoryStore) -> None:
        await counter.add(1)
        await counter.amount_for(TimeSpan.YEAR, datetime(2090, 1, 1))
        assert len(store.snapshot()["act_year"]) == 25

    async def test_all_total_and_max(self, counter: ActivityCounter, clock: FakeClock) -> None:
        await counter.add(3)
        clock.set(datetime(2024, 5, 12, 18))
        await counter.add(7)
        assert await counter.all(TimeSpan.HOUR) == {15: 3, 18: 7}
        assert await counter.total(TimeSpan.HOUR) == 10
        assert await counter.max_value(TimeSpan.HOUR) == 7
        assert await counter.max_value(TimeSpan.DAY) == 10

    async def test_max_value_empty(self, counter: ActivityCounter) -> None:
        assert await counter.max_value(TimeSpan.YEAR) == 0

    async def test_independent_keys(self, store: MemoryStore, clock: FakeClock) -> None:
        a = ActivityCounter("a", store, clock=clock)
        b = ActivityCounter("b", store, clock=clock)
        await a.add(1)
        await b.add(2)
        assert await a.today() == 1
        assert await b.today() == 2


class TestActiveDates:
    async def test_year_dates(self, counter: ActivityCounter, clock: FakeClock) -> None:
        await counter.add(1)
        clock.set(datetime(2022, 3, 1))
        await counter.add(1)
        clock.set(NOW)
        assert await counter.active_dates(TimeSpan.YEAR) == [
            datetime(2022, 1, 1),
            datetime(2024, 1, 1),
        ]

    async def test_month_anchors_to_most_recent_occurrence(
        self, counter: ActivityCounter, clock: FakeClock
    ) -> None:
        clock.set(datetime(2023, 11, 20))
        await counter.add(1)
        clock.set(NOW)
        await counter.add(1)
        assert await counter.active_dates(TimeSpan.MONTH) == [
            datetime(2024, 5, 1),
            datetime(2023, 11, 1),
        ]

    async def test_day_skips_months_without_that_day(
        self, counter: ActivityCounter, clock: FakeClock
    ) -> None:
        clock.set(datetime(2024, 1, 31, 9))
        await counter.add(1)
        clock.set(datetime(2024, 3, 30, 9))
        assert await counter.active_dates(TimeSpan.DAY) == [datetime(2024, 1, 31)]

    async def test_hour_from_yesterday(self, counter: ActivityCounter, clock: FakeClock) -> None:
        clock.set(datetime(2024, 5, 11, 22))
        await counter.add(1)
        clock.set(NOW)
        await counter.add(1)
        assert await counter.active_dates(TimeSpan.HOUR) == [
            datetime(2024, 5, 12, 15),
            datetime(2024, 5, 11, 22),
        ]


class TestClearing:
    async def test_clear_one_span(self, counter: ActivityCounter) -> None:
        await counter.add(4)
        await counter.clear(TimeSpan.HOUR)
        assert await counter.this_hour() == 0
        assert await counter.today() == 4

    async def test_clear_all_known(self, counter: ActivityCounter) -> None:
        await counter.add(1)
        await counter.clear_all_known([TimeSpan.YEAR, TimeSpan.MONTH])
        assert await counter.this_year() == 0
        assert await counter.this_month() == 0
        assert await counter.today() == 1
        assert await counter.this_hour() == 1

    async def test_reset_keeps_keys(self, counter: ActivityCounter, store: MemoryStore) -> None:
        await counter.add(5)
        await counter.reset()
        assert not await counter.has_any_data()
        assert len(store) == 4

    async def test_remove_all_deletes_keys(
        self, counter: ActivityCounter, store: MemoryStore
    ) -> None:
        await counter.add(42)
        await counter.remove_all()
        assert len(store) == 0
        assert await counter.summary() == {span: 0 for span in TimeSpan}
