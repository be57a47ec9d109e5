__version__ = "1.1.0"

from .config import ConfigError, SearchConfig
from .engine import SearchReport, SearchWorker, run_search
from .low_primes import LowPrimeTable
from .miller_rabin import miller_rabin, split_power_of_two
from .offsets import CandidateAdvancer, init_offsets, is_rejectable
from .randomness import RandomSource, gen_start
from .sink import OutputError, ResultSink, prepare_output
__all__ = [
    "ConfigError", "SearchConfig", "SearchReport", "SearchWorker", "run_search",
    "LowPrimeTable", "miller_rabin", "split_power_of_two",
    "CandidateAdvancer", "init_offsets", "is_rejectable",
    "RandomSource", "gen_start", "OutputError", "ResultSink", "prepare_output",
]
