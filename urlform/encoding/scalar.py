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

r"""
This module implements the textual form of scalar values.

Strings are used as they are, bytes are kept as bytes so they get escaped octet by octet, booleans are lowercase and
enum members are represented by their value:

>>> format_scalar('foo bar')
'foo bar'
>>> format_scalar(True), format_scalar(False)
('true', 'false')
>>> format_scalar(18), format_scalar(1.5), format_scalar(-3)
('18', '1.5', '-3')
>>> format_scalar(b'\x00ab')
b'\x00ab'

>>> from enum import Enum
>>> class Color(Enum):
...     RED = 'red'
>>> format_scalar(Color.RED)
'red'

As a standalone value a scalar becomes a bare segment:

>>> from urlform.builder import StrBuilder
>>> builder = StrBuilder()
>>> encode_scalar(builder, 'a b', is_last=False)
>>> encode_scalar(builder, 18, is_last=True)
>>> builder.getvalue()
'=a+b&=18'
"""

from enum import Enum
from typing import Any

from urlform.builder import StrBuilder
from urlform.encoding import encode_leaf


def format_scalar(value: Any) -> str | bytes:
    """ Textual form of a scalar, or of any other value that is rendered as text.
    """
    if isinstance(value, Enum):
        return format_scalar(value.value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return str(value)


def encode_scalar(builder: StrBuilder, value: Any, is_last: bool) -> None:
    """ Encodes a scalar as a bare `=value` segment.
    """
    encode_leaf(builder, format_scalar(value), is_last)
