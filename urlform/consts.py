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

# Metadata keys recognized on struct fields.
URLENCODED_TAG = 'urlencoded'
JSON_TAG = 'json'
TIME_FORMAT_TAG = 'time_format'
TIME_DURATION_FORMAT_TAG = 'time_duration_format'
EMBED_TAG = 'embed'

# Modifiers that may follow the name in a `urlencoded` or `json` tag.
OMITEMPTY_TAG = 'omitempty'

# A tag with this name excludes the field.
EXCLUDE_NAME = '-'

# Time instant formats that are not strftime patterns.
RFC3339_FORMAT = 'rfc3339'
UNIX_FORMAT = 'unix'
UNIXMILLI_FORMAT = 'unixmilli'
UNIXNANO_FORMAT = 'unixnano'

# Duration formats.
HUMAN_READABLE_FORMAT = 'human'
NORMAL_FORMAT = 'normal'
DURATION_UNITS = frozenset([
    'ns',
    'us', 'µs', 'μs',
    'ms',
    's', 'second',
    'm', 'minute',
    'h', 'hour',
    'd', 'day',
    HUMAN_READABLE_FORMAT,
    NORMAL_FORMAT,
])

DEFAULT_TIME_FORMAT = RFC3339_FORMAT
DEFAULT_DURATION_FORMAT = HUMAN_READABLE_FORMAT

# Builders kept around by a pool, anything above is dropped on release.
DEFAULT_POOL_MAX_SIZE = 64
