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


def main() -> int:
    from urlform import query_escape
    from urlform_cli.util import create_parser

    parser = create_parser()
    parser.add_argument('value', help='Value to percent-encode, as used in query parameters')
    args = parser.parse_args()

    print(query_escape(args.value))
    return 0
