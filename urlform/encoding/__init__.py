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
This module holds the encoders of leaf values: scalars, time instants and durations.

Leaf values end the recursion of the encoder. Each submodule `x` deals with a single kind and looks like this:

    def format_x(value: ValueType, ...format params...) -> str:
        ...

    def encode_x(builder: StrBuilder, value: ValueType, is_last: bool, ...format params...) -> None:
        ...

`format_x` gives the textual form of the value before escaping, it is what struct fields and mapping entries place
after `key=`. `encode_x` writes a bare `=value` segment, followed by `&` unless it is the last segment of its
enclosing context.
"""

from urlform.builder import StrBuilder
from urlform.escape import query_escape


def encode_leaf(builder: StrBuilder, text: str | bytes, is_last: bool) -> None:
    """Write `=text`, escaped, and the separator when `is_last` is false."""
    builder.write_char('=')
    builder.write(query_escape(text))
    if not is_last:
        builder.write_char('&')


def encode_pair(builder: StrBuilder, key: str, text: str | bytes, is_last: bool) -> None:
    """Write `key=text`, both escaped, and the separator when `is_last` is false."""
    builder.write(query_escape(key))
    encode_leaf(builder, text, is_last)
