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

import pytest

from trackstate import BestRecord, NoRecordError, RecordEntry, RecordMode, TrackStateError

if TYPE_CHECKING:
    from conftest import FakeClock

    from trackstate import MemoryStore


class TestComparator:
    async def test_max_mode(self, store: MemoryStore, fake_clock: FakeClock) -> None:
        record = BestRecord("r", store, clock=fake_clock)
        await record.update(5)
        await record.update(10)
        assert await record.get_best_record() == 10

    async def test_min_mode(self, store: MemoryStore, fake_clock: FakeClock) -> None:
        record = BestRecord("r", store, mode=RecordMode.MIN, clock=fake_clock)
        await record.update(5)
        await record.update(10)
        assert await record.get_best_record() == 5

    async def test_equal_value_is_not_an_improvement(
        self, store: MemoryStore, fake_clock: FakeClock
    ) -> None:
        record = BestRecord("r", store, history_length=5, clock=fake_clock)
        await record.update(5)
        fake_clock.advance(hours=1)
        await record.update(5)
        assert len(await record.get_history()) == 1
        assert await record.get_best_date() == datetime(2024, 5, 12, 15, 30)

    async def test_rejections_do_not_touch_history(
        self, store: MemoryStore, fake_clock: FakeClock
    ) -> None:
        record = BestRecord("r", store, history_length=5, clock=fake_clock)
        for value in (3, 1, 4, 1, 5, 2):
            await record.update(value)
        assert [r.value for r in await record.get_history()] == [5, 4, 3]

    async def test_history_is_capped(self, store: MemoryStore, fake_clock: FakeClock) -> None:
        record = BestRecord("r", store, history_length=2, clock=fake_clock)
        for value in (1, 2, 3):
            await record.update(value)
        assert [r.value for r in await record.get_history()] == [3, 2]
        assert (await record.first()).value == 3
        assert (await record.last()).value == 2

    async def test_concurrent_updates_keep_the_maximum(
        self, store: MemoryStore, fake_clock: FakeClock
    ) -> None:
        record = BestRecord("r", store, history_length=50, clock=fake_clock)
        await asyncio.gather(*(record.update(v) for v in (4, 9, 2, 7, 9, 1)))
        assert await record.get_best_record() == 9


class TestManualSet:
    async def test_bypasses_comparison(self, store: MemoryStore, fake_clock: FakeClock) -> None:
        record = BestRecord("r", store, history_length=3, clock=fake_clock)
        await record.update(10)
        fake_clock.advance(minutes=1)
        await record.manual_set(2)
        best = await record.get_best()
        assert best == RecordEntry(2, fake_clock.now)
        assert [r.value for r in await record.get_history()] == [2, 10]


class TestFallback:
    async def test_raises_without_fallback(
        self, store: MemoryStore, fake_clock: FakeClock
    ) -> None:
        record = BestRecord("r", store, clock=fake_clock)
        with pytest.raises(NoRecordError, match="'r'"):
            await record.get_best_or_fallback()

    async def test_error_hierarchy(self) -> None:
        err = NoRecordError("r")
        assert isinstance(err, TrackStateError)
        assert isinstance(err, LookupError)
        assert err.key == "r"

    async def test_uses_fallback(self, store: MemoryStore, fake_clock: FakeClock) -> None:
        fallback = RecordEntry(0, datetime(2020, 1, 1))
        record = BestRecord("r", store, fallback=fallback, clock=fake_clock)
        assert await record.get_best_or_fallback() == fallback
        assert await record.get_best() is None
        await record.update(3)
        assert (await record.get_best_or_fallback()).value == 3


class TestMaintenance:
    async def test_reset_and_remove_key(
        self, store: MemoryStore, fake_clock: FakeClock
    ) -> None:
        record = BestRecord("r", store, clock=fake_clock)
        await record.update(1)
        await record.reset()
        assert await record.exists()
        assert await record.get_history() == []
        await record.remove_key()
        assert not await record.exists()

    async def test_remove_at(self, store: MemoryStore, fake_clock: FakeClock) -> None:
        record = BestRecord("r", store, history_length=3, clock=fake_clock)
        for value in (1, 2, 3):
            await record.update(value)
        await record.remove_at(0)
        assert await record.get_best_record() == 2
        await record.remove_at(10)
        await record.remove_at(-1)
        assert [r.value for r in await record.get_history()] == [2, 1]

    async def test_remove_where(self, store: MemoryStore, fake_clock: FakeClock) -> None:
        record = BestRecord("r", store, history_length=3, clock=fake_clock)
        for value in (1, 2, 3):
            await record.update(value)
            fake_clock.advance(days=1)
        cutoff = datetime(2024, 5, 13)
        await record.remove_where(lambda r: r.date >= cutoff)
        assert [r.value for r in await record.get_history()] == [1]

    async def test_persisted_as_json_documents(
        self, store: MemoryStore, fake_clock: FakeClock
    ) -> None:
        record = BestRecord("r", store, clock=fake_clock)
        await record.update(2.5)
        stored = store.snapshot()["history_tracker_r"]
        assert stored == ['{"value": 2.5, "date": "2024-05-12T15:30:00"}']

    async def test_survives_new_instance(
        self, store: MemoryStore, fake_clock: FakeClock
    ) -> None:
        await BestRecord("r", store, clock=fake_clock).update(8)
        fake_clock.advance(timedelta(days=1))
        again = BestRecord("r", store, clock=fake_clock)
        await again.update(7)
        assert await again.get_best_record() == 8


class TestConfiguration:
    def test_invalid_history_length(self, store: MemoryStore) -> None:
        with pytest.raises(ValueError, match="history_length"):
            BestRecord("r", store, history_length=0)

    def test_invalid_mode(self, store: MemoryStore) -> None:
        with pytest.raises(ValueError, match="mode"):
            BestRecord("r", store, mode="max")

    async def test_from_dict(self, store: MemoryStore, fake_clock: FakeClock) -> None:
        record = BestRecord.from_dict(
            "r",
            store,
            {
                "mode": "min",
                "history_length": 2,
                "fallback": {"value": 99, "date": "2020-01-01T00:00:00"},
            },
            clock=fake_clock,
        )
        assert record.mode is RecordMode.MIN
        assert record.fallback == RecordEntry(99, datetime(2020, 1, 1))
        await record.update(3)
        await record.update(1)
        assert [r.value for r in await record.get_history()] == [1, 3]
