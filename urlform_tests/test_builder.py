import threading

import pytest

from urlform.builder import BuilderPool, StrBuilder


def test_builder_accumulates_writes():
    builder = StrBuilder()
    builder.write('device')
    builder.write_char('=')
    builder.write('')
    builder.write('ip')
    assert len(builder) == 9
    assert builder.getvalue() == 'device=ip'
    # calling it again gives the same result
    assert builder.getvalue() == 'device=ip'
    builder.write_char('&')
    assert builder.getvalue() == 'device=ip&'


def test_builder_reset():
    builder = StrBuilder()
    builder.write('foo')
    builder.reset()
    assert len(builder) == 0
    assert builder.getvalue() == ''


def test_pool_reuses_released_builders():
    pool = BuilderPool(max_size=2)
    with pool.acquire() as first:
        first.write('foo')
    assert len(pool) == 1
    with pool.acquire() as second:
        assert second is first
        assert second.getvalue() == ''
    assert len(pool) == 1


def test_pool_hands_out_distinct_builders_while_in_use():
    pool = BuilderPool(max_size=2)
    with pool.acquire() as outer:
        with pool.acquire() as inner:
            assert inner is not outer
    assert len(pool) == 2


def test_pool_respects_max_size():
    pool = BuilderPool(max_size=0)
    with pool.acquire() as builder:
        builder.write('foo')
    assert len(pool) == 0


def test_pool_releases_on_exception():
    pool = BuilderPool(max_size=1)
    with pytest.raises(RuntimeError):
        with pool.acquire() as builder:
            builder.write('partial')
            raise RuntimeError('boom')
    assert len(pool) == 1
    with pool.acquire() as builder:
        assert len(builder) == 0


def test_pool_from_many_threads():
    pool = BuilderPool(max_size=4)
    errors: list[str] = []

    def worker(n: int) -> None:
        for _ in range(200):
            with pool.acquire() as builder:
                builder.write(str(n))
                if builder.getvalue() != str(n):
                    errors.append(builder.getvalue())

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(pool) <= 4
