# primesearch/offsets.py
# Offset sieve: per-low-prime counters that track a sequential odd search
# without taking a big-integer modulus on every step.
#
# For an odd candidate c and odd prime p, let r = c mod p. The offset
#     o = (r + (r % 2) * p) / 2
# is the number of +2 steps since the last odd multiple of p, so o == 0
# exactly when p | c, and stepping c -> c + 2 is o -> (o + 1) mod p.

from __future__ import annotations
from typing import Optional

import gmpy2
import numpy as np

from .low_primes import LowPrimeTable


class SieveExhausted(RuntimeError):
    """skip_to_candidate() hit its step bound without leaving the sieve."""


def init_offsets(candidate, table: LowPrimeTable) -> np.ndarray:
    """One modulus per table prime, then the odd/even adjustment."""
    c = gmpy2.mpz(candidate)
    r = np.fromiter((int(c % p) for p in table), dtype=np.int64, count=len(table))
    return (r + (r % 2) * table.primes) // 2


def is_rejectable(offsets: np.ndarray) -> bool:
    """True iff some table prime divides the candidate."""
    return not offsets.all()


def step_offsets(offsets: np.ndarray, primes: np.ndarray) -> None:
    offsets += 1
    offsets[offsets == primes] = 0


class CandidateAdvancer:
    """A worker-private candidate together with its offset vector."""

    __slots__ = ("table", "value", "offsets", "steps")

    def __init__(self, start, table: LowPrimeTable):
        value = gmpy2.mpz(start)
        if value < 3 or gmpy2.is_even(value):
            raise ValueError("candidate must be an odd integer >= 3")
        self.table = table
        self.value = value
        self.offsets = init_offsets(value, table)
        self.steps = 0

    @property
    def rejectable(self) -> bool:
        return is_rejectable(self.offsets)

    def advance(self) -> None:
        self.value += 2  # next odd integer
        step_offsets(self.offsets, self.table.primes)
        self.steps += 1

    def skip_to_candidate(self, max_steps: Optional[int] = None):
        """Advance until no table prime divides the candidate; return it."""
        taken = 0
        while self.rejectable:
            if max_steps is not None and taken >= max_steps:
                raise SieveExhausted(f"still sieved out after {taken} steps from {self.value - 2 * taken}")
            self.advance()
            taken += 1
        return self.value
