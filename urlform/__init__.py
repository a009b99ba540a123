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
Convert arbitrary Python values to the x-www-form-urlencoded format used by HTML forms and query strings.

    @dataclass
    class User:
        name: str = form_field('name', omitempty=True)
        age: int = form_field('age', omitempty=True)
        _token: str = ''

    convert(User(name='equation', age=18, _token='secret'))  # name=equation&age=18
    convert(['device', 'ip', 'type'])                      # =device&=ip&=type
"""

from urlform.encoder import Encoder, convert, get_default_encoder
from urlform.escape import query_escape
from urlform.exceptions import FieldDefinitionError, SettingsError, UrlformError
from urlform.fields import FieldDescriptor, form_field, form_metadata, get_field_descriptors
from urlform.types import Ref, Urlencoded, ValueKind, Zeroable, classify
from urlform.version import __version__

__all__ = [
    'Encoder',
    'convert',
    'get_default_encoder',
    'query_escape',
    'UrlformError',
    'FieldDefinitionError',
    'SettingsError',
    'FieldDescriptor',
    'form_field',
    'form_metadata',
    'get_field_descriptors',
    'Ref',
    'Urlencoded',
    'Zeroable',
    'ValueKind',
    'classify',
    '__version__',
]
