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

import pytest

from trackstate import MemoryStore


class FakeClock:
    """Deterministic wall clock for testing. Advances only when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start if start is not None else datetime(2024, 5, 12, 15, 30)

    def __call__(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta | None = None, **kwargs: float) -> None:
        """Move forward by ``delta`` or by timedelta keyword arguments."""
        self._now += delta if delta is not None else timedelta(**kwargs)

    def set(self, now: datetime) -> None:
        self._now = now

    @property
    def now(self) -> datetime:
        return self._now


@pytest.fixture()
def fake_clock() -> FakeClock:
    """Provide a FakeClock starting at 2024-05-12 15:30 (a Sunday)."""
    return FakeClock()


@pytest.fixture()
def store() -> MemoryStore:
    """Provide an empty in-memory store."""
    return MemoryStore()
