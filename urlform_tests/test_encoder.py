import weakref
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple, Optional
from uuid import UUID

import pytest
from pydantic import BaseModel, Field

from urlform import Encoder, Ref, convert, form_field, form_metadata
from urlform.conf.settings import UrlformSettings

UTC_PLUS_8 = timezone(timedelta(hours=8))


@dataclass
class Device:
    device: str = form_field('device', json='device', default='')
    ip: str = form_field(json='ip', default='')
    Type: str = ''
    not_empty: str = form_field('notempty', omitempty=True, default='')
    empty0: str = form_field('empty0', omitempty=True, default='')
    _unexported: str = ''


@dataclass
class Inner:
    X: str = ''
    _x: str = ''


@dataclass
class User:
    name: str = form_field('name', omitempty=True, default='')
    age: int = form_field('age', omitempty=True, default=0)
    born: Optional[datetime] = form_field('born', omitempty=True, time_format='%Y%m%d', default=None)


@dataclass
class Item:
    a: int = 0


class Custom:
    def to_urlencoded(self) -> str:
        return 'custom=1'


class Color(Enum):
    RED = 'red'


def make_device() -> Device:
    return Device(device='device', ip='ip', Type='type', not_empty='notempty', _unexported='secret')


@pytest.fixture
def encoder() -> Encoder:
    return Encoder(UrlformSettings())


def test_struct(encoder):
    assert encoder.convert(make_device()) == 'device=device&ip=ip&Type=type&notempty=notempty'


def test_struct_with_embedded_fields(encoder):
    @dataclass
    class Embedding:
        device: Device = form_field(embed=True)
        _inner: Inner = form_field(embed=True)

    value = Embedding(device=make_device(), _inner=Inner(X='123', _x='321'))
    assert encoder.convert(value) == 'device=device&ip=ip&Type=type&notempty=notempty&X=123'


def test_struct_with_embedded_none(encoder):
    @dataclass
    class Outer:
        inner: Optional[Inner] = form_field(embed=True, default=None)
        name: str = 'x'

    assert encoder.convert(Outer()) == 'name=x'
    assert encoder.convert(Outer(inner=Inner(X='1'))) == 'X=1&name=x'


def test_struct_user(encoder):
    user = User(name='equation', age=18, born=datetime(2002, 5, 31))
    assert encoder.convert(user) == 'name=equation&age=18&born=20020531'
    assert encoder.convert(User()) == ''


def test_sequence(encoder):
    assert encoder.convert(['device', 'ip', 'type']) == '=device&=ip&=type'
    assert encoder.convert(('a b', 18, True)) == '=a+b&=18&=true'


@pytest.mark.parametrize('value', [[], (), set(), frozenset()])
def test_empty_sequence(encoder, value):
    assert encoder.convert(value) == ''


def test_sequence_with_trailing_nil(encoder):
    assert encoder.convert(['equation', '18', None]) == '=equation&=18&'


def test_sequence_of_mixed_values(encoder):
    value = ['equation', 18, datetime(2002, 5, 31, tzinfo=UTC_PLUS_8)]
    assert encoder.convert(value) == '=equation&=18&=2002-05-31T00%3A00%3A00%2B08%3A00'


def test_sequence_of_structs(encoder):
    assert encoder.convert([Item(a=1), Item(a=2)]) == 'a=1&a=2'


def test_sequence_of_mappings(encoder):
    assert encoder.convert([{'a': 1}, {'b': 2, 'c': 3}]) == 'a=1&b=2&c=3'


def test_mapping(encoder):
    assert encoder.convert({'device': 'device'}) == 'device=device'
    assert encoder.convert({'device': 'device', 'ip': 'ip', 'Type': 'type'}) == 'device=device&ip=ip&Type=type'
    assert encoder.convert({}) == ''


def test_mapping_escapes_keys_and_values(encoder):
    assert encoder.convert({'a b': 'c&d', 1: Color.RED}) == 'a+b=c%26d&1=red'


def test_mapping_with_leaf_values(encoder):
    value = {
        'name': 'equation',
        'age': 18,
        'born': datetime(2002, 5, 31, tzinfo=UTC_PLUS_8),
        'timeout': timedelta(seconds=10),
        'price': Decimal('9.90'),
        'id': UUID('12345678-1234-5678-1234-567812345678'),
    }
    assert encoder.convert(value) == (
        'name=equation&age=18&born=2002-05-31T00%3A00%3A00%2B08%3A00&timeout=10s&price=9.90'
        '&id=12345678-1234-5678-1234-567812345678'
    )


def test_mapping_with_composite_values(encoder):
    assert encoder.convert({'outer': {'b': 1}, 'c': 2}) == 'b=1&c=2'
    assert encoder.convert({'c': 2, 'outer': {'b': 1}}) == 'c=2&b=1'
    assert encoder.convert({'item': Item(a=1), 'c': 2}) == 'a=1&c=2'
    assert encoder.convert({'tags': ['x', 'y']}) == '=x&=y'
    assert encoder.convert({'ref': Ref('v'), 'custom': Custom()}) == 'ref=v&custom=1'


def test_composite_field_drops_its_key(encoder):
    @dataclass
    class Record:
        name: str = 'x'
        extra: dict = form_field('extra', default_factory=dict)
        tags: list = form_field('tags', default_factory=list)
        item: Item = form_field('item', default_factory=Item)

    assert encoder.convert(Record()) == 'name=x&a=0'
    value = Record(extra={'map1': 'a', 'map2': 'b'}, tags=['t1', 't2'], item=Item(a=5))
    assert encoder.convert(value) == 'name=x&map1=a&map2=b&=t1&=t2&a=5'


@pytest.mark.parametrize('value', ['', 0, 0.0, Decimal('0'), False, None, timedelta(0), Ref(None), b''])
def test_omitempty_excludes_empty_values(encoder, value):
    @dataclass
    class Record:
        v: Any = form_field('v', omitempty=True, default=None)
        w: Any = field(default=None, metadata={'json': 'w,omitempty'})

    assert encoder.convert(Record(v=value, w=value)) == ''


@pytest.mark.parametrize('value, expected', [
    ('x', 'x'),
    (1, '1'),
    (-0.5, '-0.5'),
    (True, 'true'),
    (timedelta(seconds=1), '1s'),
    (Ref('y'), 'y'),
])
def test_omitempty_keeps_non_empty_values(encoder, value, expected):
    @dataclass
    class Record:
        v: Any = form_field('v', omitempty=True, default=None)
        w: Any = field(default=None, metadata={'json': 'w,omitempty'})

    assert encoder.convert(Record(v=value, w=value)) == f'v={expected}&w={expected}'


def test_empty_values_without_omitempty(encoder):
    @dataclass
    class Record:
        a: str = ''
        b: int = 0
        c: bool = False
        d: Optional[str] = None

    assert encoder.convert(Record()) == 'a=&b=0&c=false&d='


def test_omitempty_with_zero_capability(encoder):
    class Token:
        def __init__(self, raw: str) -> None:
            self.raw = raw

        def is_zero(self) -> bool:
            return not self.raw

        def __str__(self) -> str:
            return self.raw

    @dataclass
    class Record:
        token: Any = form_field('token', omitempty=True, default=None)

    assert encoder.convert(Record(token=Token(''))) == ''
    assert encoder.convert(Record(token=Token('abc'))) == 'token=abc'


def test_excluded_fields(encoder):
    @dataclass
    class Record:
        a: str = field(default='1', metadata={'json': '-'})
        b: str = field(default='2', metadata={'urlencoded': '-', 'json': 'b'})
        c: str = form_field(exclude=True, default='3')
        d: str = '4'

    assert encoder.convert(Record()) == 'd=4'


def test_duration_fields(encoder):
    @dataclass
    class Record:
        human: timedelta = form_field('human', default=timedelta(seconds=90))
        ms: timedelta = form_field('ms', duration_format='ms', default=timedelta(seconds=10))
        day: timedelta = form_field('day', duration_format='day', default=timedelta(hours=36))
        unknown: timedelta = form_field('unknown', duration_format='weeks', default=timedelta(seconds=1))

    assert encoder.convert(Record()) == 'human=1m30s&ms=10000ms&day=1.500000d&unknown=1s'


def test_time_fields(encoder):
    @dataclass
    class Record:
        default: datetime = form_field('default', default=datetime(2002, 5, 31, tzinfo=timezone.utc))
        custom: datetime = form_field(
            'custom', time_format='%Y-%m-%d-%H-%M-%S', default=datetime(2002, 5, 31, 8, 15, tzinfo=timezone.utc)
        )
        unix: date = form_field('unix', time_format='unix', default=datetime(2002, 5, 31, tzinfo=timezone.utc))

    assert encoder.convert(Record()) == 'default=2002-05-31T00%3A00%3A00Z&custom=2002-05-31-08-15-00&unix=1022803200'


def test_pydantic_model(encoder):
    class Model(BaseModel):
        a: str = Field('1', alias='fallback', json_schema_extra=form_metadata('primary'))
        b: str = Field('2', alias='alias_b')
        c: str = '3'
        empty: str = Field('', json_schema_extra=form_metadata('empty', omitempty=True))

    assert encoder.convert(Model()) == 'primary=1&alias_b=2&c=3'


def test_namedtuple(encoder):
    class Point(NamedTuple):
        x: int
        y: int

    assert encoder.convert(Point(1, 2)) == 'x=1&y=2'
    assert encoder.convert([Point(1, 2), Point(3, 4)]) == 'x=1&y=2&x=3&y=4'


def test_nil_values(encoder):
    assert encoder.convert(None) == ''
    assert encoder.convert(Ref()) == ''
    assert encoder.convert(Ref(Ref(None))) == ''


def test_references_are_followed(encoder):
    assert encoder.convert(Ref(Ref('x'))) == '=x'
    item = Item(a=7)
    assert encoder.convert(weakref.ref(item)) == 'a=7'
    assert encoder.convert(Ref(Custom())) == 'custom=1'


def test_custom_encodable(encoder):
    assert encoder.convert(Custom()) == 'custom=1'

    @dataclass
    class Record:
        name: str = 'x'
        custom: Custom = form_field('ignored', default_factory=Custom)

    assert encoder.convert(Record()) == 'name=x&custom=1'

    @dataclass
    class SelfEncoded:
        a: int = 1

        def to_urlencoded(self) -> str:
            return 'self=encoded'

    assert encoder.convert(SelfEncoded()) == 'self=encoded'


def test_leaf_values(encoder):
    assert encoder.convert('a b') == '=a+b'
    assert encoder.convert(18) == '=18'
    assert encoder.convert(False) == '=false'
    assert encoder.convert(Color.RED) == '=red'
    assert encoder.convert(Decimal('1.50')) == '=1.50'
    assert encoder.convert(timedelta(seconds=10, milliseconds=1)) == '=10.001s'
    assert encoder.convert(datetime(2023, 5, 28, 23, 6, 31, tzinfo=timezone.utc)) == '=2023-05-28T23%3A06%3A31Z'


def test_separators_when_not_last(encoder):
    assert encoder.encode('x', False) == '=x&'
    assert encoder.encode(Item(a=1), False) == 'a=1&'
    assert encoder.encode(User(), False) == ''
    assert encoder.encode({'a': 1}, False) == 'a=1&'
    assert encoder.encode(['a', 'b'], False) == '=a&=b&'


def test_settings_defaults_are_used():
    encoder = Encoder(UrlformSettings(DEFAULT_TIME_FORMAT='unix', DEFAULT_DURATION_FORMAT='ms'))
    value = {'born': datetime(2002, 5, 31, tzinfo=timezone.utc), 'timeout': timedelta(seconds=1)}
    assert encoder.convert(value) == 'born=1022803200&timeout=1000ms'


def test_pool_disabled_gives_same_output():
    pooled = Encoder(UrlformSettings(POOL_ENABLED=True))
    unpooled = Encoder(UrlformSettings(POOL_ENABLED=False))
    value = [make_device(), {'a': [1, 2]}, User(name='n')]
    assert pooled.convert(value) == unpooled.convert(value)


def test_pool_builders_are_released_on_error():
    class Broken:
        def to_urlencoded(self) -> str:
            raise RuntimeError('broken')

    encoder = Encoder(UrlformSettings(POOL_MAX_SIZE=4))
    with pytest.raises(RuntimeError):
        encoder.convert([['a', Broken()]])
    assert encoder._pool is not None
    # the outer list, the inner list and the leaf "a"
    assert len(encoder._pool) == 3


def test_concurrent_conversions(encoder):
    values = [{'n': n, 'items': [Item(a=n)]} for n in range(50)]
    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(encoder.convert, values))
    assert results == [f'n={n}&a={n}' for n in range(50)]


def test_convert_uses_default_encoder():
    assert convert(make_device()) == 'device=device&ip=ip&Type=type&notempty=notempty'
    assert convert(None) == ''
