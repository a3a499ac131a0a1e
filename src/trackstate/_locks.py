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
import weakref


class KeyedLocks:
    """One asyncio lock per name and event loop.

    Entries are weak: a lock disappears once nobody holds or awaits it, and
    a loop's table goes away with the loop. Resolve the lock each time it
    is needed so a tracker outliving one ``asyncio.run()`` works in the next.
    The locks only serialize callers inside one process.
    """

    def __init__(self) -> None:
        self._loops: weakref.WeakKeyDictionary[
            asyncio.AbstractEventLoop, weakref.WeakValueDictionary[str, asyncio.Lock]
        ] = weakref.WeakKeyDictionary()

    def _current(self) -> weakref.WeakValueDictionary[str, asyncio.Lock]:
        loop = asyncio.get_running_loop()
        locks = self._loops.get(loop)
        if locks is None:
            locks = weakref.WeakValueDictionary()
            self._loops[loop] = locks
        return locks

    def get(self, name: str) -> asyncio.Lock:
        """Return the running loop's lock for ``name``, creating it on first use.

        Raises:
            RuntimeError: No event loop is running.
        """
        locks = self._current()
        lock = locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            locks[name] = lock
        return lock

    def __contains__(self, name: object) -> bool:
        return name in self._current()

    def __len__(self) -> int:
        return len(self._current())


_registry = KeyedLocks()


def lock_for(scope: str, key: str) -> asyncio.Lock:
    """Lock shared by everything in ``scope`` bound to storage ``key``.

    The scope names the kind of data behind the key, not the Python class,
    so subclasses share their base's lock.
    """
    return _registry.get(f"{scope}:{key}")
