# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Output accumulators used by the encoder.

A `StrBuilder` is owned by a single encoding step. Since encoding recurses once per nesting level, builders are
requested and released very often, a `BuilderPool` keeps released builders around so they can be handed out again
instead of allocating new ones.

>>> pool = BuilderPool(max_size=1)
>>> with pool.acquire() as builder:
...     builder.write('foo')
...     builder.write_char('=')
...     builder.write('bar')
...     builder.getvalue()
'foo=bar'
>>> with pool.acquire() as builder:
...     len(builder)
0
"""

import threading
from collections import deque
from contextlib import contextmanager
from typing import Iterator

from urlform.consts import DEFAULT_POOL_MAX_SIZE


class StrBuilder:
    """Append-only text buffer.

    This implementation defers joining everything until `getvalue` is called, before that every write is stored as a
    str in a list.
    """

    __slots__ = ('_parts', '_len')

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._len: int = 0

    def __len__(self) -> int:
        return self._len

    def write(self, data: str) -> None:
        """Write a piece of text."""
        if not data:
            return
        self._parts.append(data)
        self._len += len(data)

    def write_char(self, char: str) -> None:
        """Write a single character."""
        assert len(char) == 1
        self._parts.append(char)
        self._len += 1

    def getvalue(self) -> str:
        """Get the resulting text."""
        if len(self._parts) > 1:
            # keep the joined result so repeated calls don't join again
            self._parts = [''.join(self._parts)]
        return self._parts[0] if self._parts else ''

    def reset(self) -> None:
        """Discard everything written so far."""
        self._parts.clear()
        self._len = 0


class BuilderPool:
    """Thread-safe free list of `StrBuilder` instances.

    A builder handed out by `acquire` belongs to the caller until the context exits, it is then reset and returned to
    the pool, also when the context exits with an exception. At most `max_size` idle builders are kept.
    """

    def __init__(self, *, max_size: int = DEFAULT_POOL_MAX_SIZE) -> None:
        assert max_size >= 0
        self.max_size = max_size
        self._free: deque[StrBuilder] = deque()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._free)

    def get(self) -> StrBuilder:
        with self._lock:
            if self._free:
                return self._free.pop()
        return StrBuilder()

    def put(self, builder: StrBuilder) -> None:
        builder.reset()
        with self._lock:
            if len(self._free) < self.max_size:
                self._free.append(builder)

    @contextmanager
    def acquire(self) -> Iterator[StrBuilder]:
        builder = self.get()
        try:
            yield builder
        finally:
            self.put(builder)
