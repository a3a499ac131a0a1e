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

"""Codecs between Python values and the JSON-compatible primitives a Store holds."""

from __future__ import annotations

import enum
import json
from collections.abc import Callable
from datetime import datetime
from typing import Any, Generic, Protocol, TypeVar

from trackstate._exceptions import DecodeError

T = TypeVar("T")
E = TypeVar("E", bound=enum.Enum)


class Codec(Protocol[T]):
    def encode(self, value: T) -> Any: ...

    def decode(self, raw: Any) -> T: ...


class IntCodec:
    def encode(self, value: int) -> int:
        return int(value)

    def decode(self, raw: Any) -> int:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise DecodeError(f"expected int, got {type(raw).__name__}")
        return raw


class DateTimeCodec:
    """Timestamps are stored as ISO 8601 strings (round-trips exactly)."""

    def encode(self, value: datetime) -> str:
        return value.isoformat()

    def decode(self, raw: Any) -> datetime:
        if not isinstance(raw, str):
            raise DecodeError(f"expected ISO timestamp, got {type(raw).__name__}")
        try:
            return datetime.fromisoformat(raw)
        except ValueError as exc:
            raise DecodeError(str(exc)) from exc


class ListCodec(Generic[T]):
    """List of JSON-compatible elements stored as-is."""

    def encode(self, value: list[T]) -> list[Any]:
        return list(value)

    def decode(self, raw: Any) -> list[T]:
        if not isinstance(raw, list):
            raise DecodeError(f"expected list, got {type(raw).__name__}")
        return list(raw)


class IntListCodec:
    def encode(self, value: list[int]) -> list[int]:
        return [int(v) for v in value]

    def decode(self, raw: Any) -> list[int]:
        if not isinstance(raw, list):
            raise DecodeError(f"expected list, got {type(raw).__name__}")
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in raw):
            raise DecodeError("expected a list of ints")
        return list(raw)


class JsonListCodec(Generic[T]):
    """List of objects, each persisted as its own JSON document string.

    A single element that fails to parse makes the whole list undecodable.
    """

    def __init__(
        self,
        from_json: Callable[[dict[str, Any]], T],
        to_json: Callable[[T], dict[str, Any]],
    ) -> None:
        self._from_json = from_json
        self._to_json = to_json

    def encode(self, value: list[T]) -> list[str]:
        return [json.dumps(self._to_json(item)) for item in value]

    def decode(self, raw: Any) -> list[T]:
        if not isinstance(raw, list):
            raise DecodeError(f"expected list, got {type(raw).__name__}")
        try:
            return [self._from_json(json.loads(item)) for item in raw]
        except (TypeError, ValueError, KeyError) as exc:
            raise DecodeError(str(exc)) from exc


class EnumListCodec(Generic[E]):
    """List of enum members persisted by member name."""

    def __init__(self, enum_type: type[E]) -> None:
        self._enum_type = enum_type

    def encode(self, value: list[E]) -> list[str]:
        return [member.name for member in value]

    def decode(self, raw: Any) -> list[E]:
        if not isinstance(raw, list):
            raise DecodeError(f"expected list, got {type(raw).__name__}")
        try:
            return [self._enum_type[name] for name in raw]
        except (KeyError, TypeError) as exc:
            raise DecodeError(f"unknown {self._enum_type.__name__} member {exc}") from exc
