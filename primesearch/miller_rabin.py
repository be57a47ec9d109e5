# primesearch/miller_rabin.py
# Randomized Miller-Rabin test driven by a shared, locked witness stream.
# A composite survives k rounds with probability at most 4^-k.

from __future__ import annotations
from typing import Tuple

import gmpy2

from .randomness import LockedStream

MIN_ROUNDS, MAX_ROUNDS = 1, 199


def split_power_of_two(m) -> Tuple[int, "gmpy2.mpz"]:
    """Write m = 2^s * d with d odd; returns (s, d). m must be > 0."""
    d = gmpy2.mpz(m)
    if d <= 0:
        raise ValueError("m must be positive")
    s = 0
    while gmpy2.is_even(d):
        d >>= 1
        s += 1
    return s, d


def _round_passes(n, a, s: int, d, n_minus_1) -> bool:
    """One strong round for witness a; False proves n composite."""
    x = gmpy2.powmod(a, d, n)
    if x == 1 or x == n_minus_1:
        return True
    for _ in range(1, s):
        x = gmpy2.powmod(x, 2, n)
        if x == 1:
            # non-trivial square root of 1
            return False
        if x == n_minus_1:
            return True
    return False


def miller_rabin(n, rounds: int, witnesses: LockedStream) -> bool:
    """
    True if n passes `rounds` rounds (probable prime), False if composite.
    Witnesses are uniform in [2, n-2]; each draw takes the stream lock.
    Precondition: n odd, n > 4.
    """
    n = gmpy2.mpz(n)
    if n <= 4 or gmpy2.is_even(n):
        raise ValueError("n must be odd and greater than 4")
    n_minus_1 = n - 1
    s, d = split_power_of_two(n_minus_1)
    for _ in range(rounds):
        a = witnesses.below(n - 3) + 2
        if not _round_passes(n, a, s, d, n_minus_1):
            return False
    return True
