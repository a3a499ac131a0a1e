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
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any


class TimeSpan(enum.Enum):
    """Bucket granularity of an activity histogram."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"


class RecordMode(enum.Enum):
    MAX = "max"
    MIN = "min"


@dataclass(frozen=True)
class RecordEntry:
    """A best-record observation and the moment it was accepted."""

    value: float
    date: datetime

    def to_json(self) -> dict[str, Any]:
        return {"value": self.value, "date": self.date.isoformat()}

    @staticmethod
    def from_json(data: dict[str, Any]) -> RecordEntry:
        return RecordEntry(
            value=data["value"],
            date=datetime.fromisoformat(data["date"]),
        )


Clock = Callable[[], datetime]
ItemPredicate = Callable[[Any], bool]
