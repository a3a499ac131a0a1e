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

"""Persisted streaks, counters, histories, activity histograms and best records."""

from __future__ import annotations

from trackstate._activity import ActivityCounter
from trackstate._basic import BasicCounter
from trackstate._best_record import BestRecord
from trackstate._codec import (
    Codec,
    DateTimeCodec,
    EnumListCodec,
    IntCodec,
    IntListCodec,
    JsonListCodec,
    ListCodec,
)
from trackstate._config import BestRecordConfig, HistoryConfig, RolloverConfig
from trackstate._counter import CounterTracker
from trackstate._exceptions import DecodeError, NoRecordError, TrackStateError
from trackstate._history import HistoryTracker
from trackstate._period import TimePeriod, aligned_start
from trackstate._periodic import PeriodicCounter
from trackstate._rollover import RolloverCounter
from trackstate._store import CachedStore, MemoryStore, Store, StoredValue
from trackstate._streak import StreakTracker
from trackstate._tracker import TemporalTracker
from trackstate._types import Clock, ItemPredicate, RecordEntry, RecordMode, TimeSpan

__version__ = "0.1.0"

__all__ = [
    "ActivityCounter",
    "BasicCounter",
    "BestRecord",
    "BestRecordConfig",
    "CachedStore",
    "Clock",
    "Codec",
    "CounterTracker",
    "DateTimeCodec",
    "DecodeError",
    "EnumListCodec",
    "HistoryConfig",
    "HistoryTracker",
    "IntCodec",
    "IntListCodec",
    "ItemPredicate",
    "JsonListCodec",
    "ListCodec",
    "MemoryStore",
    "NoRecordError",
    "PeriodicCounter",
    "RecordEntry",
    "RecordMode",
    "RolloverConfig",
    "RolloverCounter",
    "Store",
    "StoredValue",
    "StreakTracker",
    "TemporalTracker",
    "TimePeriod",
    "TimeSpan",
    "TrackStateError",
    "aligned_start",
]
