# primesearch/randomness.py
# Seeded GMP random streams shared by all search workers.
#
# Start points and Miller-Rabin witnesses come from two separate streams
# seeded with the same value, so witness draws never shift which start point
# a search receives. A gmpy2 random_state is not safe to mutate from several
# threads at once; each stream carries its own lock.

from __future__ import annotations
import threading

import gmpy2


class LockedStream:
    __slots__ = ("_state", "_lock", "draws")

    def __init__(self, seed: int):
        self._state = gmpy2.random_state(int(seed))
        self._lock = threading.Lock()
        self.draws = 0

    def below(self, bound):
        """Uniform integer in [0, bound)."""
        if bound <= 0:
            raise ValueError("bound must be positive")
        with self._lock:
            self.draws += 1
            return gmpy2.mpz_random(self._state, bound)


class RandomSource:
    """The start-point stream and the witness stream, both from one seed."""

    def __init__(self, seed: int):
        if seed < 0:
            raise ValueError("seed value must be greater than or equal to 0")
        self.seed = int(seed)
        self.start = LockedStream(self.seed)
        self.witness = LockedStream(self.seed)

    def gen_start(self, num_digits: int):
        return gen_start(num_digits, self.start)


def gen_start(num_digits: int, stream: LockedStream):
    """Random odd integer with exactly num_digits decimal digits.

    u in [0, 45*10^(d-2)), then 2u in [0, 9*10^(d-1) - 2], + 10^(d-1) + 1
    lands on every odd integer from 10^(d-1) + 1 to 10^d - 1.
    """
    if num_digits < 2:
        raise ValueError("num_digits must be >= 2")
    u = stream.below(45 * gmpy2.mpz(10) ** (num_digits - 2))
    return 2 * u + gmpy2.mpz(10) ** (num_digits - 1) + 1
