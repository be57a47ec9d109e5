# primesearch/low_primes.py
# First K odd primes, used by the offset sieve to reject candidates cheaply.

from __future__ import annotations
from typing import Iterator

import numpy as np

DEFAULT_TABLE_SIZE = 10000


class LowPrimeTable:
    """Immutable ordered table of the first K odd primes (3, 5, 7, ...).

    Built once before any search starts and then shared read-only by every
    worker, so no locking is needed after construction.
    """

    __slots__ = ("_primes",)

    def __init__(self, primes):
        arr = np.array(primes, dtype=np.int64)
        if arr.ndim != 1 or arr.size == 0:
            raise ValueError("low prime table must be a non-empty sequence")
        arr.flags.writeable = False
        self._primes = arr

    @classmethod
    def generate(cls, count: int) -> "LowPrimeTable":
        """Trial-division sieve: keep every odd n not divisible by an earlier table prime."""
        if count <= 0:
            raise ValueError("number of offset primes must be greater than 0")
        table = []
        n = 3
        while len(table) < count:
            for p in table:
                if p * p > n:
                    table.append(n)
                    break
                if n % p == 0:
                    break
            else:
                table.append(n)
            n += 2  # next odd integer
        return cls(table)

    @property
    def primes(self) -> np.ndarray:
        return self._primes

    @property
    def largest(self) -> int:
        return int(self._primes[-1])

    def __len__(self) -> int:
        return int(self._primes.size)

    def __iter__(self) -> Iterator[int]:
        return (int(p) for p in self._primes)

    def __getitem__(self, i: int) -> int:
        return int(self._primes[i])

    def __repr__(self) -> str:
        return f"LowPrimeTable(size={len(self)}, largest={self.largest})"
