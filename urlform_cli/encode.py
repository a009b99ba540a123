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

import json
import sys
from typing import Any, TextIO

import yaml
from structlog import get_logger

logger = get_logger()


def load_document(stream: TextIO, *, is_yaml: bool) -> Any:
    if is_yaml:
        return yaml.safe_load(stream)
    return json.load(stream)


def main() -> int:
    from urlform import convert
    from urlform_cli.util import create_parser

    parser = create_parser()
    parser.add_argument('path', nargs='?', default='-', help='JSON or YAML file to encode, `-` reads from stdin')
    parser.add_argument('--yaml', action='store_true', help='Parse the input as YAML instead of JSON')
    args = parser.parse_args()

    log = logger.new(path=args.path)
    if args.path == '-':
        document = load_document(sys.stdin, is_yaml=args.yaml)
    else:
        with open(args.path, 'r') as fp:
            document = load_document(fp, is_yaml=args.yaml)
    log.debug('document loaded', type=type(document).__name__)

    print(convert(document))
    return 0
