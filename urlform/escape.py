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
Percent-encoding used for every key and value written by the encoder.

This is the escaping of HTML form submissions: unreserved characters pass through, space becomes `+` and every other
octet becomes `%XX`. Text is encoded as UTF-8 first, bytes are escaped as they are.

>>> query_escape('foo bar')
'foo+bar'
>>> query_escape('a&b=c')
'a%26b%3Dc'
>>> query_escape('2002-05-31T00:00:00+08:00')
'2002-05-31T00%3A00%3A00%2B08%3A00'
>>> query_escape('~name_1.x-y')
'~name_1.x-y'
>>> query_escape(b'\xff/')
'%FF%2F'
"""

from urllib.parse import quote_plus


def query_escape(value: str | bytes) -> str:
    """Escape a key or value so it can be placed inside an x-www-form-urlencoded string."""
    return quote_plus(value, safe='')
