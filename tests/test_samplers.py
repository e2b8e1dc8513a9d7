import math, random
import pytest
from accessloggen.utils.errors import RandomSourceError
from accessloggen.utils.randutil import SeededIntSource
from accessloggen.producer.samplers import (
    BytesSentSampler, FactorialTable, norm_rand, rand_bytes_sent, rand_host,
)
from conftest import FailingSource, FixedSource


def test_factorial_base_and_recurrence():
    t = FactorialTable()
    assert t.factorial(0) == 1
    for n in range(1, 120):
        assert t.factorial(n) == n * t.factorial(n - 1)
    assert t.factorial(20) == math.factorial(20)


def test_factorial_is_memoized_per_table():
    t = FactorialTable()
    t.factorial(5)
    assert t.facts[:6] == [1, 1, 2, 6, 24, 120]
    assert FactorialTable().facts[5] == 0


@pytest.mark.parametrize("n", [-1, 120])
def test_factorial_outside_capacity(n):
    with pytest.raises(ValueError):
        FactorialTable().factorial(n)


def test_rand_host():
    assert rand_host(FixedSource(7), 10) == "7.example.jp"
    assert rand_host(FixedSource(123), 1) == "0.example.jp"


def test_rand_host_propagates_failure():
    with pytest.raises(RandomSourceError):
        rand_host(FailingSource(), 10)


@pytest.mark.parametrize("draw,max_bytes,expected", [
    (0, 12001, 1000),      # x=0: y=1
    (3200, 1200, 1066),    # x=4: y=256/24
    (3199, 1000, 1000),    # x just under 4: clamped
    (11999, 100, 0),       # far tail
])
def test_bytes_sent_shape(draw, max_bytes, expected):
    source = FixedSource(draw)
    assert BytesSentSampler(source).sample(max_bytes) == expected
    assert source.calls == [12000]


def test_bytes_sent_within_bounds():
    s = BytesSentSampler(SeededIntSource(99))
    for max_bytes in (0, 1, 7, 5000, 10 ** 7):
        for _ in range(300):
            assert 0 <= s.sample(max_bytes) <= max_bytes


def test_bytes_sent_every_draw_within_bounds():
    for v in range(0, 12000, 7):
        assert 0 <= BytesSentSampler(FixedSource(v)).sample(10 ** 6) <= 10 ** 6


def test_bytes_sent_zero_max():
    s = BytesSentSampler(SeededIntSource(5))
    assert {s.sample(0) for _ in range(200)} == {0}
    assert rand_bytes_sent(SeededIntSource(5), 0) == 0


def test_bytes_sent_propagates_failure():
    with pytest.raises(RandomSourceError):
        BytesSentSampler(FailingSource()).sample(100)


@pytest.mark.parametrize("mean,std", [(0, 1), (1e5, 1e4), (-1e6, 10), (1e9, 1e3), (50, 1e6)])
def test_norm_rand_clamped(mean, std):
    rng = random.Random(11)
    for _ in range(200):
        assert 0 <= norm_rand(0, 1000, mean, std, rng) <= 1000


def test_norm_rand_clamps_to_edges():
    assert norm_rand(0, 10, -1e9, 1.0) == 0
    assert norm_rand(0, 10, 1e9, 1.0) == 10
    assert norm_rand(5, 5, 0.0, 100.0) == 5
