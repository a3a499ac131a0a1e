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

from trackstate._tracker import TemporalTracker


class CounterTracker(TemporalTracker[int]):
    """Integer counter on top of TemporalTracker. Falls back to 0."""

    async def increment(self, amount: int = 1) -> int:
        """Add ``amount`` to the fresh value and return the new total.

        Runs under the same lock as :meth:`get`, so concurrent increments
        on one key are never lost.
        """
        async with self._lock:
            current = await self._ensure_fresh()
            updated = current + amount
            await self._value.set(updated)
            return updated

    async def clear_value_only(self) -> None:
        """Zero the value, keeping the timestamp (and so the current window)."""
        async with self._lock:
            await self._value.set(self.fallback_value())

    async def raw(self) -> int:
        return await self.peek()

    async def is_non_zero(self) -> bool:
        return await self.peek() > 0

    def fallback_value(self) -> int:
        return 0
