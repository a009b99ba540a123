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

import dataclasses
import numbers
import weakref
from collections.abc import Mapping, Sequence, Set
from datetime import date, timedelta
from enum import Enum, IntEnum, auto
from typing import Any, Generic, Optional, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

T = TypeVar('T')


@runtime_checkable
class Urlencoded(Protocol):
    """Values implementing this protocol supply their own encoded text and are not traversed."""

    def to_urlencoded(self) -> str:
        ...


@runtime_checkable
class Zeroable(Protocol):
    """Values implementing this protocol decide by themselves whether they are empty for `omitempty`."""

    def is_zero(self) -> bool:
        ...


@dataclasses.dataclass(slots=True)
class Ref(Generic[T]):
    """Explicit reference to a value, it is dereferenced (repeatedly) before encoding.

    A `Ref` pointing to `None` contributes nothing to the output.
    """
    value: Optional[T] = None


class ValueKind(IntEnum):
    NIL = auto()
    CUSTOM = auto()
    SCALAR = auto()
    TIME = auto()
    DURATION = auto()
    STRUCT = auto()
    MAPPING = auto()
    SEQUENCE = auto()
    UNCLASSIFIED = auto()

    def is_composite(self) -> bool:
        return self in _COMPOSITE_KINDS

    def is_leaf(self) -> bool:
        return self in _LEAF_KINDS


_COMPOSITE_KINDS = frozenset([ValueKind.STRUCT, ValueKind.MAPPING, ValueKind.SEQUENCE])
_LEAF_KINDS = frozenset([ValueKind.SCALAR, ValueKind.TIME, ValueKind.DURATION, ValueKind.UNCLASSIFIED])

SCALAR_TYPES = (str, bytes, bytearray, bool, int, float, complex, Enum)
TEXT_TYPES = (str, bytes, bytearray)


def deref(value: Any) -> Any:
    """Follow `Ref` and `weakref.ref` indirections until a plain value or `None` is reached."""
    while True:
        if isinstance(value, Ref):
            value = value.value
        elif isinstance(value, weakref.ReferenceType):
            value = value()
        else:
            return value


def is_struct_type(type_: type) -> bool:
    """Whether instances of the given type are encoded field by field."""
    if not isinstance(type_, type):
        return False
    if dataclasses.is_dataclass(type_):
        return True
    if issubclass(type_, BaseModel):
        return True
    return is_namedtuple_type(type_)


def is_namedtuple_type(type_: type) -> bool:
    return issubclass(type_, tuple) and hasattr(type_, '_fields')


def classify(value: Any) -> ValueKind:
    """Find the kind of an already dereferenced value."""
    if value is None:
        return ValueKind.NIL
    if isinstance(value, Urlencoded):
        return ValueKind.CUSTOM
    if isinstance(value, SCALAR_TYPES):
        return ValueKind.SCALAR
    # datetime is a subclass of date
    if isinstance(value, date):
        return ValueKind.TIME
    if isinstance(value, timedelta):
        return ValueKind.DURATION
    if is_struct_type(type(value)):
        return ValueKind.STRUCT
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (Sequence, Set)):
        return ValueKind.SEQUENCE
    return ValueKind.UNCLASSIFIED


def is_empty(value: Any) -> bool:
    """Whether a field holding this value is left out when marked with `omitempty`."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, numbers.Number):
        return value == 0
    if isinstance(value, TEXT_TYPES):
        return len(value) == 0
    if isinstance(value, timedelta):
        return value == timedelta(0)
    if isinstance(value, Zeroable):
        return value.is_zero()
    if isinstance(value, (Mapping, Sequence, Set)) and not is_namedtuple_type(type(value)):
        return len(value) == 0
    return False
