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

import os
from typing import NamedTuple, Optional

from structlog import get_logger

from urlform.conf import CONFIG_YAML_ENV_VAR
from urlform.conf.settings import UrlformSettings
from urlform.exceptions import SettingsError

logger = get_logger()

# source used when no yaml file is configured
BUILTIN_SOURCE = '<builtin>'


class _SettingsMetadata(NamedTuple):
    source: str
    settings: UrlformSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> UrlformSettings:
    """
    Returns the settings used by `urlform.convert`.

    Settings are read from the yaml filepath in the 'URLFORM_CONFIG_YAML' env var. If it is not set, the built-in
    defaults are used.
    """
    source = os.environ.get(CONFIG_YAML_ENV_VAR, BUILTIN_SOURCE)
    return _load_settings_singleton(source)


def get_settings_source() -> str:
    """ Returns the path of the settings YAML file that was loaded, or `BUILTIN_SOURCE`.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source


def _load_settings_singleton(source: str) -> UrlformSettings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise SettingsError('loading settings twice with a different file')
        return _settings_singleton.settings

    _settings_singleton = _SettingsMetadata(source=source, settings=_load_settings(source))
    return _settings_singleton.settings


def _load_settings(source: str) -> UrlformSettings:
    if source == BUILTIN_SOURCE:
        return UrlformSettings()
    log = logger.new()
    settings = UrlformSettings.from_yaml(filepath=source)
    log.info('settings loaded', source=source)
    return settings
