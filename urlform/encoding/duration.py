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
This module implements the textual form of durations.

The default form is compact and human-readable, with microsecond resolution:

>>> from datetime import timedelta
>>> format_duration(timedelta(seconds=10, milliseconds=1))
'10.001s'
>>> format_duration(timedelta(seconds=90))
'1m30s'
>>> format_duration(timedelta(hours=1))
'1h0m0s'
>>> format_duration(timedelta(microseconds=1500))
'1.5ms'
>>> format_duration(timedelta(microseconds=750))
'750us'
>>> format_duration(timedelta(0))
'0s'
>>> format_duration(-timedelta(seconds=2))
'-2s'

A unit can be chosen instead. Sub-second units are integral (truncated toward zero), the others have six decimals:

>>> ten = timedelta(seconds=10)
>>> format_duration(ten, 'ms')
'10000ms'
>>> format_duration(ten, 'ns')
'10000000000ns'
>>> format_duration(ten, 'second')
'10.000000s'
>>> format_duration(timedelta(hours=36), 'day')
'1.500000d'
"""

from datetime import timedelta
from typing import Optional

from structlog import get_logger

from urlform.builder import StrBuilder
from urlform.consts import DEFAULT_DURATION_FORMAT, HUMAN_READABLE_FORMAT, NORMAL_FORMAT
from urlform.encoding import encode_leaf

logger = get_logger()

MICROSECOND = timedelta(microseconds=1)

# unit: (suffix, microseconds per unit)
_INTEGRAL_UNITS: dict[str, tuple[str, int]] = {
    'us': ('us', 1),
    'µs': ('us', 1),
    'μs': ('us', 1),
    'ms': ('ms', 1_000),
}

_FRACTIONAL_UNITS: dict[str, tuple[str, int]] = {
    's': ('s', 1_000_000),
    'second': ('s', 1_000_000),
    'm': ('m', 60_000_000),
    'minute': ('m', 60_000_000),
    'h': ('h', 3_600_000_000),
    'hour': ('h', 3_600_000_000),
    'd': ('d', 86_400_000_000),
    'day': ('d', 86_400_000_000),
}


def _fraction(value: int, digits: int) -> str:
    """Render `value / 10**digits` without trailing zeros, `value` must not be negative."""
    whole, frac = divmod(value, 10 ** digits)
    if not frac:
        return str(whole)
    return f'{whole}.{frac:0{digits}d}'.rstrip('0')


def _truncate(value: int, unit: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(value) // unit
    return -quotient if value < 0 else quotient


def format_human(value: timedelta) -> str:
    micros = value // MICROSECOND
    if micros == 0:
        return '0s'
    sign = '-' if micros < 0 else ''
    micros = abs(micros)

    if micros < 1_000:
        return f'{sign}{micros}us'
    if micros < 1_000_000:
        return f'{sign}{_fraction(micros, 3)}ms'

    seconds, frac = divmod(micros, 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    text = _fraction(seconds * 1_000_000 + frac, 6) + 's'
    if minutes or hours:
        text = f'{minutes}m{text}'
    if hours:
        text = f'{hours}h{text}'
    return sign + text


def format_duration(value: timedelta, unit: Optional[str] = None) -> str:
    """ Textual form of a duration, either human-readable or in a given unit.

    This modules's docstring has more details and examples.
    """
    unit = unit or DEFAULT_DURATION_FORMAT
    micros = value // MICROSECOND
    if unit == 'ns':
        return f'{micros * 1000}ns'
    if unit in _INTEGRAL_UNITS:
        suffix, size = _INTEGRAL_UNITS[unit]
        return f'{_truncate(micros, size)}{suffix}'
    if unit in _FRACTIONAL_UNITS:
        suffix, size = _FRACTIONAL_UNITS[unit]
        return f'{micros / size:f}{suffix}'
    if unit not in (HUMAN_READABLE_FORMAT, NORMAL_FORMAT):
        logger.debug('unknown duration unit, using human-readable form', unit=unit)
    return format_human(value)


def encode_duration(builder: StrBuilder, value: timedelta, is_last: bool, unit: Optional[str] = None) -> None:
    """ Encodes a duration as a bare `=value` segment.
    """
    encode_leaf(builder, format_duration(value, unit), is_last)
