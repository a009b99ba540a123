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
Conversion of arbitrary values to the x-www-form-urlencoded format.

The encoder is a single recursive traversal. Each step looks at the kind of the visited value (see `ValueKind`):
leaf values write a bare `=value` segment, structs and mappings write `key=value` pairs for their leaf members and
recurse into composite members, sequences recurse into every element. The `is_last` flag passed down the recursion
tells a step whether it has to end its contribution with a `&` separator.

Two behaviors are worth knowing about:

- a struct field (or mapping entry) whose value is composite does not write its own key, only the pairs produced by
  the nested value appear in the output;
- there is no protection against self-referencing values, they recurse until the interpreter gives up.
"""

from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from structlog import get_logger

from urlform.builder import BuilderPool, StrBuilder
from urlform.conf.settings import UrlformSettings
from urlform.encoding import encode_leaf, encode_pair
from urlform.encoding.duration import format_duration
from urlform.encoding.instant import format_instant
from urlform.encoding.scalar import format_scalar
from urlform.escape import query_escape
from urlform.fields import MISSING, FieldDescriptor, get_field_descriptors
from urlform.types import Urlencoded, ValueKind, classify, deref, is_empty

logger = get_logger()


class Encoder:
    """Encoder bound to a set of settings.

    Instances are safe to share between threads, the only shared state is the builder pool.
    """

    def __init__(self, settings: Optional[UrlformSettings] = None) -> None:
        self.log = logger.new()
        self.settings = settings or UrlformSettings()
        self._pool: Optional[BuilderPool] = None
        if self.settings.POOL_ENABLED:
            self._pool = BuilderPool(max_size=self.settings.POOL_MAX_SIZE)
        self.log.debug('encoder created', pool_enabled=self.settings.POOL_ENABLED)

    def convert(self, value: Any) -> str:
        """Convert a value to the x-www-form-urlencoded format."""
        return self.encode(value, True)

    @contextmanager
    def _builder(self) -> Iterator[StrBuilder]:
        if self._pool is None:
            yield StrBuilder()
        else:
            with self._pool.acquire() as builder:
                yield builder

    def encode(self, value: Any, is_last: bool) -> str:
        """Encode a value, followed by a `&` unless it is the last one in its enclosing context."""
        if value is None:
            return ''
        if isinstance(value, Urlencoded):
            return value.to_urlencoded()

        value = deref(value)
        kind = classify(value)
        if kind is ValueKind.NIL:
            return ''
        if kind is ValueKind.CUSTOM:
            return value.to_urlencoded()

        with self._builder() as builder:
            match kind:
                case ValueKind.STRUCT:
                    self._encode_struct(builder, value, is_last)
                case ValueKind.MAPPING:
                    self._encode_mapping(builder, value, is_last)
                case ValueKind.SEQUENCE:
                    self._encode_sequence(builder, value, is_last)
                case _:
                    encode_leaf(builder, self._format_leaf(value, kind), is_last)
            return builder.getvalue()

    def _format_leaf(
        self,
        value: Any,
        kind: ValueKind,
        time_format: Optional[str] = None,
        duration_format: Optional[str] = None,
    ) -> str | bytes:
        match kind:
            case ValueKind.SCALAR:
                return format_scalar(value)
            case ValueKind.TIME:
                return format_instant(value, time_format or self.settings.DEFAULT_TIME_FORMAT)
            case ValueKind.DURATION:
                return format_duration(value, duration_format or self.settings.DEFAULT_DURATION_FORMAT)
            case ValueKind.NIL:
                return ''
            case _:
                self.log.debug('unclassified value encoded as text', type=type(value).__qualname__)
                return str(value)

    def _encode_struct(self, builder: StrBuilder, value: Any, is_last: bool) -> None:
        pieces: list[str] = []
        for descriptor in get_field_descriptors(type(value)):
            piece = self._encode_field(descriptor, value)
            if piece:
                pieces.append(piece)
        builder.write('&'.join(pieces))
        if not is_last and len(builder) != 0:
            builder.write_char('&')

    def _encode_field(self, descriptor: FieldDescriptor, obj: Any) -> Optional[str]:
        value = descriptor.get_value(obj)
        if value is MISSING:
            return None
        if isinstance(value, Urlencoded):
            return value.to_urlencoded()
        value = deref(value)
        kind = classify(value)
        if kind.is_composite() or kind is ValueKind.CUSTOM:
            # the key of a composite field is dropped, only its nested pairs are kept
            return self.encode(value, True)
        if descriptor.omitempty and is_empty(value):
            return None
        text = self._format_leaf(value, kind, descriptor.time_format, descriptor.duration_format)
        return query_escape(descriptor.name) + '=' + query_escape(text)

    def _encode_mapping(self, builder: StrBuilder, value: Mapping, is_last: bool) -> None:
        remaining = len(value)
        for key, item in value.items():
            remaining -= 1
            entry_is_last = is_last and remaining == 0
            item = deref(item)
            kind = classify(item)
            if kind.is_leaf():
                encode_pair(builder, self._format_key(key), self._format_leaf(item, kind), entry_is_last)
            else:
                builder.write(self.encode(item, entry_is_last))

    def _format_key(self, key: Any) -> str:
        text = format_scalar(deref(key))
        if isinstance(text, bytes):
            return text.decode('utf-8', errors='replace')
        return text

    def _encode_sequence(self, builder: StrBuilder, value: Any, is_last: bool) -> None:
        items = list(value)
        if not items:
            return
        for item in items[:-1]:
            builder.write(self.encode(item, False))
        builder.write(self.encode(items[-1], is_last))


_default_encoder: Optional[Encoder] = None


def get_default_encoder() -> Encoder:
    """Get the process-wide encoder, built from the global settings on first use."""
    global _default_encoder
    if _default_encoder is None:
        from urlform.conf.get_settings import get_global_settings
        _default_encoder = Encoder(get_global_settings())
    return _default_encoder


def convert(value: Any) -> str:
    """Convert any value to the x-www-form-urlencoded format.

    See the module docstring for how each kind of value is encoded.
    """
    return get_default_encoder().convert(value)
