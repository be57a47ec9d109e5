# primesearch/config.py
# Search configuration record. Defaults may be overridden from the environment.

from __future__ import annotations
import os
import time
from dataclasses import dataclass, field, asdict
from typing import Optional

from .low_primes import DEFAULT_TABLE_SIZE
from .miller_rabin import MIN_ROUNDS, MAX_ROUNDS

MIN_DIGITS = 10


class ConfigError(ValueError):
    pass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw, 10)
    except ValueError:
        raise ConfigError(f"{name} must be an integer (got {raw!r})")


def _env_workers() -> Optional[int]:
    raw = os.getenv("PRIMES_WORKERS", "").strip()
    return _env_int("PRIMES_WORKERS", 0) if raw else None


@dataclass
class SearchConfig:
    output: str = field(default_factory=lambda: os.getenv("PRIMES_OUTPUT", "primes.txt"))
    count: int = field(default_factory=lambda: _env_int("PRIMES_COUNT", 10))
    digits: int = field(default_factory=lambda: _env_int("PRIMES_DIGITS", 300))
    rounds: int = field(default_factory=lambda: _env_int("PRIMES_ROUNDS", 8))
    seed: int = field(default_factory=lambda: int(time.time()))
    append: bool = False
    table_size: int = field(default_factory=lambda: _env_int("PRIMES_TABLE_SIZE", DEFAULT_TABLE_SIZE))
    workers: Optional[int] = field(default_factory=_env_workers)

    def validate(self) -> "SearchConfig":
        if self.count <= 0:
            raise ConfigError("number of primes must be a valid integer greater than 0.")
        if self.digits < MIN_DIGITS:
            raise ConfigError(f"number of digits must be a valid integer greater than or equal to {MIN_DIGITS}.")
        if not MIN_ROUNDS <= self.rounds <= MAX_ROUNDS:
            raise ConfigError("Miller Rabin test precision must be a valid integer greater than 0 and less than 200.")
        if self.seed < 0:
            raise ConfigError("seed value must be a valid integer greater than or equal to 0.")
        if self.table_size <= 0:
            raise ConfigError("number of offset primes must be a valid integer greater than 0.")
        if self.workers is not None and self.workers <= 0:
            raise ConfigError("number of workers must be a valid integer greater than 0.")
        if not self.output:
            raise ConfigError("output file name must not be empty.")
        return self

    def pool_size(self) -> int:
        if self.workers:
            return min(self.workers, self.count)
        return min(self.count, os.cpu_count() or 1)

    def to_dict(self) -> dict:
        return asdict(self)
