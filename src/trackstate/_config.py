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

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from trackstate._types import RecordEntry, RecordMode

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class HistoryConfig:
    """Bounded history configuration with validation."""

    max_length: int = 50
    deduplicate: bool = False
    use_cache: bool = False

    def __post_init__(self) -> None:
        if self.max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {self.max_length}")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> HistoryConfig:
        """Build config from a plain dict. Unknown keys are ignored."""
        kwargs: dict[str, Any] = {}
        if "max_length" in data:
            kwargs["max_length"] = int(data["max_length"])
        for flag in ("deduplicate", "use_cache"):
            if flag in data:
                kwargs[flag] = bool(data[flag])
        return HistoryConfig(**kwargs)

    @staticmethod
    def from_env(prefix: str = "TRACKSTATE") -> HistoryConfig:
        """Build config from ``<prefix>_HISTORY_*`` environment variables."""
        kwargs: dict[str, Any] = {}

        max_length = os.environ.get(f"{prefix}_HISTORY_MAX_LENGTH")
        if max_length is not None:
            kwargs["max_length"] = int(max_length)

        for env_suffix, field in (
            ("HISTORY_DEDUPLICATE", "deduplicate"),
            ("USE_CACHE", "use_cache"),
        ):
            val = os.environ.get(f"{prefix}_{env_suffix}")
            if val is not None:
                kwargs[field] = _env_bool(val)

        return HistoryConfig(**kwargs)


@dataclass(frozen=True)
class BestRecordConfig:
    """Best-record tracker configuration."""

    mode: RecordMode = RecordMode.MAX
    history_length: int = 1
    fallback: RecordEntry | None = None
    use_cache: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.mode, RecordMode):
            raise ValueError(f"mode must be a RecordMode, got {self.mode!r}")
        if self.history_length < 1:
            raise ValueError(f"history_length must be >= 1, got {self.history_length}")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> BestRecordConfig:
        """Build config from a plain dict. ``mode`` may be "max"/"min" and
        ``fallback`` may be a RecordEntry or its JSON form."""
        kwargs: dict[str, Any] = {}

        if "mode" in data:
            mode = data["mode"]
            kwargs["mode"] = mode if isinstance(mode, RecordMode) else RecordMode(mode)
        if "history_length" in data:
            kwargs["history_length"] = int(data["history_length"])
        if "use_cache" in data:
            kwargs["use_cache"] = bool(data["use_cache"])

        fb = data.get("fallback")
        if isinstance(fb, RecordEntry):
            kwargs["fallback"] = fb
        elif isinstance(fb, dict):
            kwargs["fallback"] = RecordEntry.from_json(fb)

        return BestRecordConfig(**kwargs)


@dataclass(frozen=True)
class RolloverConfig:
    reset_every: timedelta

    def __post_init__(self) -> None:
        if self.reset_every <= timedelta(0):
            raise ValueError(f"reset_every must be > 0, got {self.reset_every}")
