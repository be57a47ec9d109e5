from math import isqrt

import pytest

from primesearch import LowPrimeTable


def is_prime_td(n: int) -> bool:
    """Exhaustive trial division, fine for n up to ~10^12."""
    if n < 2:
        return False
    if n % 2 == 0:
        return n == 2
    for i in range(3, isqrt(n) + 1, 2):
        if n % i == 0:
            return False
    return True


@pytest.fixture(scope="session")
def small_table():
    return LowPrimeTable.generate(200)


@pytest.fixture(scope="session")
def table_1000():
    return LowPrimeTable.generate(1000)
