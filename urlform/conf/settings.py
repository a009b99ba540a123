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

from pathlib import Path
from typing import Union

from pydantic import Field, field_validator

from urlform.consts import DEFAULT_DURATION_FORMAT, DEFAULT_POOL_MAX_SIZE, DEFAULT_TIME_FORMAT, DURATION_UNITS
from urlform.utils import pydantic


class UrlformSettings(pydantic.BaseModel):
    # Reuse output builders between encoding steps instead of allocating one per step.
    POOL_ENABLED: bool = True

    # Maximum number of idle builders kept by the pool.
    POOL_MAX_SIZE: int = Field(default=DEFAULT_POOL_MAX_SIZE, ge=0)

    # Format of time instants when a field does not set `time_format`, either a strftime pattern or one of `rfc3339`,
    # `unix`, `unixmilli` and `unixnano`.
    DEFAULT_TIME_FORMAT: str = DEFAULT_TIME_FORMAT

    # Format of durations when a field does not set `time_duration_format`.
    DEFAULT_DURATION_FORMAT: str = DEFAULT_DURATION_FORMAT

    @field_validator('DEFAULT_TIME_FORMAT')
    @classmethod
    def _validate_time_format(cls, time_format: str) -> str:
        if not time_format:
            raise ValueError('DEFAULT_TIME_FORMAT cannot be empty')
        return time_format

    @field_validator('DEFAULT_DURATION_FORMAT')
    @classmethod
    def _validate_duration_format(cls, duration_format: str) -> str:
        if duration_format not in DURATION_UNITS:
            raise ValueError(f'unknown duration format: {duration_format!r}')
        return duration_format

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'UrlformSettings':
        """Takes a filepath to a yaml file and returns a validated UrlformSettings instance."""
        from urlform.utils.yaml import dict_from_yaml
        settings_dict = dict_from_yaml(filepath=filepath)
        return cls.model_validate(settings_dict)
