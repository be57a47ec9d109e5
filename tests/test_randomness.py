import threading

import pytest

from primesearch import RandomSource, gen_start
from primesearch.randomness import LockedStream


class FixedStream:
    """Returns a chosen draw, clamped into [0, bound)."""

    def __init__(self, pick):
        self.pick = pick

    def below(self, bound):
        return self.pick(bound)


@pytest.mark.parametrize("digits", [10, 11, 50, 300])
def test_gen_start_extremes(digits):
    lo = gen_start(digits, FixedStream(lambda b: 0))
    hi = gen_start(digits, FixedStream(lambda b: b - 1))
    assert lo == 10**(digits - 1) + 1
    assert hi == 10**digits - 1


def test_gen_start_covers_odd_ten_digit_range():
    rs = RandomSource(2024)
    for _ in range(2000):
        n = int(rs.gen_start(10))
        assert n % 2 == 1
        assert len(str(n)) == 10


def test_gen_start_rejects_tiny_digit_counts():
    with pytest.raises(ValueError):
        gen_start(1, LockedStream(0))


def test_same_seed_same_sequence():
    a, b = LockedStream(42), LockedStream(42)
    assert [a.below(10**30) for _ in range(50)] == [b.below(10**30) for _ in range(50)]


def test_streams_are_independent():
    rs = RandomSource(42)
    first_start = rs.gen_start(20)
    for _ in range(25):
        rs.witness.below(10**6)
    # witness draws must not shift the start-point sequence
    again = RandomSource(42)
    assert again.gen_start(20) == first_start
    assert rs.gen_start(20) == again.gen_start(20)


def test_below_bounds():
    s = LockedStream(1)
    assert all(0 <= s.below(7) < 7 for _ in range(500))
    with pytest.raises(ValueError):
        s.below(0)


def test_negative_seed_rejected():
    with pytest.raises(ValueError):
        RandomSource(-1)


def test_concurrent_draws_match_sequential():
    bound = 10**20
    solo = LockedStream(9)
    expected = sorted(solo.below(bound) for _ in range(800))
    shared = LockedStream(9)
    got, lock = [], threading.Lock()

    def draw():
        local = [shared.below(bound) for _ in range(100)]
        with lock:
            got.extend(local)

    threads = [threading.Thread(target=draw) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(got) == expected
    assert shared.draws == 800
