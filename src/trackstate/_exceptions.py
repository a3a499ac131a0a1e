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


class TrackStateError(Exception):
    """Base exception for all trackstate errors."""


class NoRecordError(TrackStateError, LookupError):
    """Raised when a best record is requested but none is stored and no fallback exists."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No record found for '{key}' and no fallback provided.")


class DecodeError(TrackStateError, ValueError):
    """Raised by a codec when a stored value cannot be decoded."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot decode stored value: {reason}")
