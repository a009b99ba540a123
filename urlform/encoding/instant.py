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
This module implements the textual form of time instants.

The default format is RFC 3339 with seconds precision, a zero offset is written as `Z`:

>>> from datetime import datetime, timedelta, timezone
>>> format_instant(datetime(2002, 5, 31, 0, 0, tzinfo=timezone(timedelta(hours=8))))
'2002-05-31T00:00:00+08:00'
>>> format_instant(datetime(2023, 5, 28, 23, 6, 31, 123456, tzinfo=timezone.utc))
'2023-05-28T23:06:31Z'

Naive datetimes are taken to be in the local timezone. Dates without a time of day are written as `YYYY-MM-DD`:

>>> from datetime import date
>>> format_instant(date(2002, 5, 31))
'2002-05-31'

The format can be either a strftime pattern or one of the epoch formats:

>>> born = datetime(2002, 5, 31, tzinfo=timezone.utc)
>>> format_instant(born, '%Y%m%d')
'20020531'
>>> format_instant(born, 'unix')
'1022803200'
>>> format_instant(born, 'unixmilli')
'1022803200000'
>>> format_instant(born, 'unixnano')
'1022803200000000000'
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from urlform.builder import StrBuilder
from urlform.consts import DEFAULT_TIME_FORMAT, RFC3339_FORMAT, UNIX_FORMAT, UNIXMILLI_FORMAT, UNIXNANO_FORMAT
from urlform.encoding import encode_leaf

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_EPOCH_UNITS = {
    UNIX_FORMAT: timedelta(seconds=1),
    UNIXMILLI_FORMAT: timedelta(milliseconds=1),
}


def _as_aware(value: date) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    if value.tzinfo is None or value.utcoffset() is None:
        # naive values are local time
        value = value.astimezone()
    return value


def format_rfc3339(value: date) -> str:
    if not isinstance(value, datetime):
        return value.isoformat()
    value = _as_aware(value).replace(microsecond=0)
    text = value.isoformat()
    if value.utcoffset() == timedelta(0):
        text = text[:-len('+00:00')] + 'Z'
    return text


def format_epoch(value: date, time_format: str) -> str:
    delta = _as_aware(value) - EPOCH
    if time_format == UNIXNANO_FORMAT:
        return str(delta // timedelta(microseconds=1) * 1000)
    return str(delta // _EPOCH_UNITS[time_format])


def format_instant(value: date, time_format: Optional[str] = None) -> str:
    """ Textual form of a date or datetime.

    This modules's docstring has more details and examples.
    """
    time_format = time_format or DEFAULT_TIME_FORMAT
    if time_format == RFC3339_FORMAT:
        return format_rfc3339(value)
    if time_format in (UNIX_FORMAT, UNIXMILLI_FORMAT, UNIXNANO_FORMAT):
        return format_epoch(value, time_format)
    return value.strftime(time_format)


def encode_instant(builder: StrBuilder, value: date, is_last: bool, time_format: Optional[str] = None) -> None:
    """ Encodes a date or datetime as a bare `=value` segment.
    """
    encode_leaf(builder, format_instant(value, time_format), is_last)
