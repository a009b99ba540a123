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
Field descriptors of struct types.

A struct type is a dataclass, a pydantic model or a `NamedTuple`. Its fields are described by a table of
`FieldDescriptor`, built once per type from the metadata attached to each field:

    @dataclass
    class User:
        name: str = form_field('name', omitempty=True)
        age: int = form_field('age', omitempty=True)
        born: datetime | None = form_field('born', omitempty=True, time_format='%Y%m%d')

The key of a field is taken, in this order, from its `urlencoded` tag, from its `json` tag (or the alias of a
pydantic field) and from the attribute name. Either tag can carry modifiers after a comma (only `omitempty` for now)
and a name of `-` excludes the field. Private attributes (leading underscore) are left out, except for embedded
fields, whose own fields are flattened into the table of the embedding type.
"""

import dataclasses
import typing
from functools import cache
from typing import Any, Iterator, NamedTuple, Optional

from pydantic import BaseModel
from structlog import get_logger

from urlform.consts import (
    EMBED_TAG,
    EXCLUDE_NAME,
    JSON_TAG,
    OMITEMPTY_TAG,
    TIME_DURATION_FORMAT_TAG,
    TIME_FORMAT_TAG,
    URLENCODED_TAG,
)
from urlform.exceptions import FieldDefinitionError
from urlform.types import deref, is_namedtuple_type, is_struct_type

logger = get_logger()

# returned by FieldDescriptor.get_value when an embedding attribute is None
MISSING = object()


class FieldDescriptor(NamedTuple):
    # resolved key written to the output
    name: str
    # attribute names leading to the value, more than one when the field comes from an embedded struct
    path: tuple[str, ...]
    omitempty: bool = False
    time_format: Optional[str] = None
    duration_format: Optional[str] = None
    exported: bool = True
    embedded: bool = False
    excluded: bool = False

    @property
    def attr(self) -> str:
        return self.path[-1]

    def get_value(self, obj: Any) -> Any:
        for attr in self.path[:-1]:
            obj = deref(getattr(obj, attr))
            if obj is None:
                return MISSING
        return getattr(obj, self.path[-1])


class _RawField(NamedTuple):
    attr: str
    metadata: typing.Mapping[str, Any]
    annotation: Any


def form_metadata(
    name: Optional[str] = None,
    *,
    omitempty: bool = False,
    exclude: bool = False,
    json: Optional[str] = None,
    time_format: Optional[str] = None,
    duration_format: Optional[str] = None,
    embed: bool = False,
) -> dict[str, Any]:
    """Build the metadata mapping of a field.

    The result can be passed as `metadata` of a `dataclasses.field` or as `json_schema_extra` of a pydantic `Field`.
    """
    metadata: dict[str, Any] = {}
    if exclude:
        metadata[URLENCODED_TAG] = EXCLUDE_NAME
    elif name is not None or omitempty:
        tag = name or ''
        if omitempty:
            tag += ',' + OMITEMPTY_TAG
        metadata[URLENCODED_TAG] = tag
    if json is not None:
        metadata[JSON_TAG] = json
    if time_format is not None:
        metadata[TIME_FORMAT_TAG] = time_format
    if duration_format is not None:
        metadata[TIME_DURATION_FORMAT_TAG] = duration_format
    if embed:
        metadata[EMBED_TAG] = True
    return metadata


def form_field(
    name: Optional[str] = None,
    *,
    omitempty: bool = False,
    exclude: bool = False,
    json: Optional[str] = None,
    time_format: Optional[str] = None,
    duration_format: Optional[str] = None,
    embed: bool = False,
    **kwargs: Any,
) -> Any:
    """`dataclasses.field` carrying urlencoded metadata, extra keyword arguments are passed to `dataclasses.field`."""
    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata.update(form_metadata(
        name,
        omitempty=omitempty,
        exclude=exclude,
        json=json,
        time_format=time_format,
        duration_format=duration_format,
        embed=embed,
    ))
    return dataclasses.field(metadata=metadata, **kwargs)


def split_tag(tag: str) -> tuple[str, list[str]]:
    """Split a `name,modifier,...` tag into the name and its modifiers.

    >>> split_tag('notempty,omitempty')
    ('notempty', ['omitempty'])
    >>> split_tag('device')
    ('device', [])
    >>> split_tag(',omitempty')
    ('', ['omitempty'])
    """
    name, *modifiers = tag.split(',')
    return name, modifiers


def _iter_raw_fields(type_: type) -> Iterator[_RawField]:
    if dataclasses.is_dataclass(type_):
        try:
            hints = typing.get_type_hints(type_)
        except (NameError, TypeError):
            hints = {}
        for field in dataclasses.fields(type_):
            yield _RawField(field.name, field.metadata, hints.get(field.name, field.type))
    elif issubclass(type_, BaseModel):
        for attr, info in type_.model_fields.items():
            metadata = dict(info.json_schema_extra) if isinstance(info.json_schema_extra, dict) else {}
            if info.alias is not None:
                metadata.setdefault(JSON_TAG, info.alias)
            yield _RawField(attr, metadata, info.annotation)
    elif is_namedtuple_type(type_):
        annotations = getattr(type_, '__annotations__', {})
        for attr in type_._fields:
            yield _RawField(attr, {}, annotations.get(attr))
    else:
        raise FieldDefinitionError(f'not a struct type: {type_!r}')


def _resolve_name(raw: _RawField) -> tuple[str, list[str], bool]:
    """Resolve the key of a field, returns the key, its modifiers and whether the field is excluded."""
    tag = raw.metadata.get(URLENCODED_TAG) or raw.metadata.get(JSON_TAG) or ''
    if tag == EXCLUDE_NAME:
        return raw.attr, [], True
    name, modifiers = split_tag(tag)
    return name or raw.attr, modifiers, False


def _embedded_type(raw: _RawField, owner: type) -> type:
    annotation = raw.annotation
    # unwrap Optional[X] and X | None
    args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
    if len(args) == 1 and not is_struct_type(annotation):
        annotation = args[0]
    if not is_struct_type(annotation):
        raise FieldDefinitionError(
            f'{owner.__qualname__}.{raw.attr} is embedded but its type is not a struct type: {annotation!r}'
        )
    return annotation


def describe_field(raw: _RawField) -> FieldDescriptor:
    """Build the descriptor of a single field, without flattening."""
    name, modifiers, excluded = _resolve_name(raw)
    return FieldDescriptor(
        name=name,
        path=(raw.attr,),
        omitempty=OMITEMPTY_TAG in modifiers,
        time_format=raw.metadata.get(TIME_FORMAT_TAG) or None,
        duration_format=raw.metadata.get(TIME_DURATION_FORMAT_TAG) or None,
        exported=not raw.attr.startswith('_'),
        embedded=bool(raw.metadata.get(EMBED_TAG, False)),
        excluded=excluded,
    )


@cache
def get_field_descriptors(type_: type) -> tuple[FieldDescriptor, ...]:
    """Get the descriptors of the fields that are encoded for a struct type, in declaration order.

    Excluded fields and private fields are not part of the result, embedded fields are replaced by the descriptors of
    the fields of the embedded type.
    """
    descriptors: list[FieldDescriptor] = []
    for raw in _iter_raw_fields(type_):
        descriptor = describe_field(raw)
        if descriptor.excluded:
            continue
        if descriptor.embedded:
            inner_type = _embedded_type(raw, type_)
            for inner in get_field_descriptors(inner_type):
                descriptors.append(inner._replace(path=(raw.attr,) + inner.path))
            continue
        if not descriptor.exported:
            continue
        descriptors.append(descriptor)
    logger.debug('field descriptors resolved', type=type_.__qualname__, fields=len(descriptors))
    return tuple(descriptors)
