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

from datetime import datetime
from typing import TYPE_CHECKING

from trackstate._counter import CounterTracker

if TYPE_CHECKING:
    from trackstate._store import Store
    from trackstate._types import Clock


class BasicCounter(CounterTracker):
    """Plain accumulator. Never expires; only an explicit reset() zeroes it."""

    def __init__(
        self,
        key: str,
        store: Store,
        *,
        use_cache: bool = False,
        clock: Clock = datetime.now,
    ) -> None:
        super().__init__(key, store, suffix="basic", use_cache=use_cache, clock=clock)

    def is_expired(self, now: datetime, last: datetime | None) -> bool:
        return False

    async def _reset(self) -> None:
        await self._value.set(self.fallback_value())
        await self._last_update.set(self._clock())
