import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional

import pytest
from pydantic import BaseModel, Field

from urlform.exceptions import FieldDefinitionError
from urlform.fields import MISSING, FieldDescriptor, form_field, form_metadata, get_field_descriptors


@dataclass
class Device:
    device: str = form_field('device', json='device', default='')
    ip: str = form_field(json='ip', default='')
    Type: str = ''
    not_empty: str = form_field('notempty', omitempty=True, default='')
    empty0: str = form_field('empty0', omitempty=True, default='')
    empty1: str = form_field(omitempty=True, default='')
    hidden: str = form_field(json='-', default='')
    dropped: str = form_field(exclude=True, default='')
    _unexported: str = ''


@dataclass
class Inner:
    X: str = ''
    _x: str = ''


@dataclass
class Embedding:
    device: Device = form_field(embed=True)
    _inner: Inner = form_field(embed=True)
    extra: int = 0


def test_form_metadata():
    assert form_metadata() == {}
    assert form_metadata('name') == {'urlencoded': 'name'}
    assert form_metadata('name', omitempty=True) == {'urlencoded': 'name,omitempty'}
    assert form_metadata(omitempty=True) == {'urlencoded': ',omitempty'}
    assert form_metadata('name', exclude=True) == {'urlencoded': '-'}
    assert form_metadata(json='alt', time_format='%Y', duration_format='ms', embed=True) == {
        'json': 'alt',
        'time_format': '%Y',
        'time_duration_format': 'ms',
        'embed': True,
    }


def test_form_field_keeps_user_metadata_and_field_options():
    @dataclass
    class Record:
        tags: list = form_field('tags', metadata={'doc': 'free text'}, default_factory=list)

    field, = dataclasses.fields(Record)
    assert field.metadata == {'doc': 'free text', 'urlencoded': 'tags'}
    assert Record().tags == []


def test_descriptors_naming_and_visibility():
    descriptors = get_field_descriptors(Device)
    assert [d.name for d in descriptors] == ['device', 'ip', 'Type', 'notempty', 'empty0', 'empty1']
    assert [d.omitempty for d in descriptors] == [False, False, False, True, True, True]
    assert all(d.exported and not d.excluded for d in descriptors)
    assert descriptors[3].attr == 'not_empty'


def test_descriptors_are_cached():
    assert get_field_descriptors(Device) is get_field_descriptors(Device)


def test_primary_tag_wins_over_fallback():
    @dataclass
    class Record:
        a: str = field_with({'urlencoded': 'primary', 'json': 'fallback'})
        b: str = field_with({'json': 'fallback,omitempty'})
        c: str = field_with({'urlencoded': ',omitempty', 'json': 'ignored'})
        d: str = field_with({'urlencoded': '-', 'json': 'visible'})

    descriptors = get_field_descriptors(Record)
    assert [(d.name, d.omitempty) for d in descriptors] == [('primary', False), ('fallback', True), ('c', True)]


def field_with(metadata: dict) -> str:
    return dataclasses.field(default='', metadata=metadata)


def test_embedded_fields_are_flattened():
    descriptors = get_field_descriptors(Embedding)
    assert [d.name for d in descriptors] == ['device', 'ip', 'Type', 'notempty', 'empty0', 'empty1', 'X', 'extra']
    assert descriptors[0].path == ('device', 'device')
    assert descriptors[6].path == ('_inner', 'X')
    assert descriptors[7].path == ('extra',)


def test_get_value_through_embedded_none():
    @dataclass
    class Outer:
        inner: Optional[Inner] = form_field(embed=True, default=None)

    descriptor, = get_field_descriptors(Outer)
    assert descriptor.get_value(Outer(inner=Inner(X='1'))) == '1'
    assert descriptor.get_value(Outer()) is MISSING


def test_embedding_a_non_struct_type_fails():
    @dataclass
    class Broken:
        values: list[int] = form_field(embed=True, default_factory=list)

    with pytest.raises(FieldDefinitionError):
        get_field_descriptors(Broken)


def test_not_a_struct_type():
    with pytest.raises(FieldDefinitionError):
        get_field_descriptors(dict)


def test_pydantic_model_descriptors():
    class Model(BaseModel):
        a: str = Field('1', alias='fallback', json_schema_extra=form_metadata('primary'))
        b: str = Field('2', alias='alias_b')
        c: datetime = Field(
            datetime(2002, 5, 31),
            json_schema_extra=form_metadata('born', omitempty=True, time_format='%Y%m%d'),
        )

    descriptors = get_field_descriptors(Model)
    assert descriptors == (
        FieldDescriptor(name='primary', path=('a',)),
        FieldDescriptor(name='alias_b', path=('b',)),
        FieldDescriptor(name='born', path=('c',), omitempty=True, time_format='%Y%m%d'),
    )


def test_namedtuple_descriptors():
    class Point(NamedTuple):
        x: int
        y: int

    assert [d.name for d in get_field_descriptors(Point)] == ['x', 'y']
