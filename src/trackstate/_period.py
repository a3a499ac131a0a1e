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

import enum
from datetime import datetime, timedelta

_CALENDAR = ("daily", "weekly", "monthly")


class TimePeriod(enum.Enum):
    """Reset window of a period-based tracker.

    Fixed-width members are aligned to the Unix epoch. ``DAILY``, ``WEEKLY``
    and ``MONTHLY`` are aligned to wall-clock boundaries instead: midnight,
    Monday 00:00 and the first of the month. ``MONTHLY`` reports a nominal
    duration of 31 days.
    """

    SECONDS_10 = "seconds10"
    SECONDS_20 = "seconds20"
    SECONDS_30 = "seconds30"
    MINUTES_1 = "minutes1"
    MINUTES_2 = "minutes2"
    MINUTES_3 = "minutes3"
    MINUTES_5 = "minutes5"
    MINUTES_10 = "minutes10"
    MINUTES_15 = "minutes15"
    MINUTES_20 = "minutes20"
    MINUTES_30 = "minutes30"
    HOURLY = "hourly"
    EVERY_2_HOURS = "every2Hours"
    EVERY_3_HOURS = "every3Hours"
    EVERY_6_HOURS = "every6Hours"
    EVERY_12_HOURS = "every12Hours"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def duration(self) -> timedelta:
        return _DURATIONS[self]

    @property
    def is_calendar(self) -> bool:
        """True for periods aligned to local calendar boundaries."""
        return self.value in _CALENDAR

    def aligned_start(self, instant: datetime) -> datetime:
        """Start of the period containing ``instant``."""
        return aligned_start(self, instant)


_DURATIONS: dict[TimePeriod, timedelta] = {
    TimePeriod.SECONDS_10: timedelta(seconds=10),
    TimePeriod.SECONDS_20: timedelta(seconds=20),
    TimePeriod.SECONDS_30: timedelta(seconds=30),
    TimePeriod.MINUTES_1: timedelta(minutes=1),
    TimePeriod.MINUTES_2: timedelta(minutes=2),
    TimePeriod.MINUTES_3: timedelta(minutes=3),
    TimePeriod.MINUTES_5: timedelta(minutes=5),
    TimePeriod.MINUTES_10: timedelta(minutes=10),
    TimePeriod.MINUTES_15: timedelta(minutes=15),
    TimePeriod.MINUTES_20: timedelta(minutes=20),
    TimePeriod.MINUTES_30: timedelta(minutes=30),
    TimePeriod.HOURLY: timedelta(hours=1),
    TimePeriod.EVERY_2_HOURS: timedelta(hours=2),
    TimePeriod.EVERY_3_HOURS: timedelta(hours=3),
    TimePeriod.EVERY_6_HOURS: timedelta(hours=6),
    TimePeriod.EVERY_12_HOURS: timedelta(hours=12),
    TimePeriod.DAILY: timedelta(days=1),
    TimePeriod.WEEKLY: timedelta(days=7),
    TimePeriod.MONTHLY: timedelta(days=31),
}


def _midnight(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0, fold=0)


def aligned_start(period: TimePeriod, instant: datetime) -> datetime:
    """Map ``instant`` to the start of its enclosing ``period``.

    Pure and deterministic: every instant inside one window maps to the same
    result, and the result maps to itself. Naive instants are treated as
    local time, aware instants keep their ``tzinfo``.

    Args:
        period: The window kind.
        instant: Any point in time.

    Returns:
        The aligned window start, in the same zone as ``instant``.
    """
    if period is TimePeriod.DAILY:
        return _midnight(instant)
    if period is TimePeriod.WEEKLY:
        return _midnight(instant - timedelta(days=instant.weekday()))
    if period is TimePeriod.MONTHLY:
        return _midnight(instant).replace(day=1)

    seconds = int(period.duration.total_seconds())
    epoch_seconds = int(instant.timestamp() // seconds) * seconds
    return datetime.fromtimestamp(epoch_seconds, tz=instant.tzinfo)
