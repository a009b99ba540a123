#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import os
import re

from setuptools import find_packages, setup


def read_version() -> str:
    # urlform/__init__.py imports the third-party stack, so the version is read without importing the package
    version_file = os.path.join(os.path.dirname(__file__), 'urlform', 'version.py')
    with open(version_file) as fp:
        match = re.search(r"^__version__ = '([^']+)'", fp.read(), re.MULTILINE)
    assert match is not None
    return match.group(1)


setup(
    name='urlform',
    version=read_version(),
    description='Convert Python values to the x-www-form-urlencoded format',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache-2.0',
    entry_points={
        'console_scripts': ['urlform-cli=urlform_cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    python_requires='>=3.11',
    packages=find_packages(exclude=('urlform_tests', 'urlform_tests.*')),
    install_requires=[
        'colorama',
        'configargparse',
        'pydantic>=2',
        'pyyaml',
        'structlog',
        'typing_extensions',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
)
