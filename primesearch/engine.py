# primesearch/engine.py
# Parallel probable-prime search: shared low-prime table + shared random
# streams, one private candidate per search unit, results through a locked sink.

from __future__ import annotations
import os, sys, time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .config import SearchConfig
from .low_primes import LowPrimeTable
from .miller_rabin import miller_rabin
from .offsets import CandidateAdvancer
from .randomness import RandomSource
from .sink import DiscoveryCounter, OutputError, ResultSink

EXIT_FAILURE = 1

# worker states
START, SIEVE, TEST, RETRY, FOUND, DONE = "start", "sieve", "test", "retry", "found", "done"


def print_progress(index: int, prime) -> None:
    print(f"Prime #{index} found", flush=True)


def die_on_output_error(err: OutputError) -> None:
    """Default fatal handler: stop the whole process now, other workers included."""
    print("Error: failure to open output file.", file=sys.stderr, flush=True)
    os._exit(EXIT_FAILURE)


@dataclass
class SearchContext:
    """Everything search units share. Only the three locked objects are mutable."""
    table: LowPrimeTable
    randomness: RandomSource
    counter: DiscoveryCounter
    sink: ResultSink
    digits: int
    rounds: int
    on_found: Callable[[int, object], None] = print_progress
    on_fatal: Callable[[OutputError], None] = die_on_output_error


class SearchWorker:
    """Finds exactly one probable prime, then stops. There is no cancellation."""

    def __init__(self, ctx: SearchContext):
        self.ctx = ctx
        self.state = START
        self.tested = 0
        self.prime = None

    def run(self):
        ctx = self.ctx
        self.state = START
        adv = CandidateAdvancer(ctx.randomness.gen_start(ctx.digits), ctx.table)
        while True:
            self.state = SIEVE
            adv.skip_to_candidate()
            self.state = TEST
            self.tested += 1
            if miller_rabin(adv.value, ctx.rounds, ctx.randomness.witness):
                break
            self.state = RETRY
            adv.advance()

        self.state = FOUND
        self.prime = adv.value
        index = ctx.counter.increment()
        ctx.on_found(index, self.prime)
        try:
            ctx.sink.append(self.prime)
        except OutputError as e:
            ctx.on_fatal(e)
            self.state = DONE
            return None
        self.state = DONE
        return self.prime


@dataclass
class SearchReport:
    requested: int
    found: int
    primes: List[int] = field(default_factory=list)
    candidates_tested: int = 0
    init_seconds: float = 0.0
    search_seconds: float = 0.0
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.found == self.requested and not self.errors


def run_search(config: SearchConfig, *,
               table: Optional[LowPrimeTable] = None,
               on_found: Optional[Callable[[int, object], None]] = None,
               on_fatal: Optional[Callable[[OutputError], None]] = None) -> SearchReport:
    """
    Run config.count independent search units on a bounded thread pool.
    The output file is appended to; truncating it first is the caller's job
    (see sink.prepare_output). A prebuilt table may be passed to skip the sieve.
    """
    t0 = time.perf_counter()
    if table is None or len(table) != config.table_size:
        table = LowPrimeTable.generate(config.table_size)
    errors: List[str] = []
    fatal = on_fatal or die_on_output_error

    def record_fatal(err: OutputError) -> None:
        errors.append(f"{err.strerror}: {err.filename}")
        fatal(err)

    ctx = SearchContext(
        table=table,
        randomness=RandomSource(config.seed),
        counter=DiscoveryCounter(),
        sink=ResultSink(config.output),
        digits=config.digits,
        rounds=config.rounds,
        on_found=on_found or print_progress,
        on_fatal=record_fatal,
    )
    t1 = time.perf_counter()

    workers = [SearchWorker(ctx) for _ in range(config.count)]
    with ThreadPoolExecutor(max_workers=config.pool_size(), thread_name_prefix="prime-search") as pool:
        futures = [pool.submit(w.run) for w in workers]
        for fut in futures:
            fut.result()
    t2 = time.perf_counter()

    return SearchReport(
        requested=config.count,
        found=ctx.sink.written,
        primes=list(ctx.sink.primes),
        candidates_tested=sum(w.tested for w in workers),
        init_seconds=t1 - t0,
        search_seconds=t2 - t1,
        errors=errors,
    )
