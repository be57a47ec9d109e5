#!/usr/bin/env python3
import sys, argparse, time

from primesearch import __version__, ConfigError, LowPrimeTable, SearchConfig, run_search, prepare_output
from primesearch.sink import OutputError

VERSION_TEXT = f"primesearch {__version__} (offset sieve + Miller-Rabin)"


class _Parser(argparse.ArgumentParser):
    # bad flag values are configuration errors: "Error: ..." and exit 1, not usage + exit 2
    def error(self, message):
        raise ConfigError(message)


def build_parser():
    d = SearchConfig(seed=0)
    ap = _Parser(prog="primes-cli",
                 description="Generate large probable primes with a sieved Miller-Rabin search.")
    ap.add_argument("-o", "--output", default=d.output, help="output file (default %(default)s)")
    ap.add_argument("-n", "--numprimes", dest="count", type=int, default=d.count, help="number of primes to generate")
    ap.add_argument("-d", "--numdigits", dest="digits", type=int, default=d.digits, help="digits per prime (>= 10)")
    ap.add_argument("-p", "--precision", dest="rounds", type=int, default=d.rounds, help="Miller-Rabin rounds (1..199)")
    ap.add_argument("-O", "--numoffsets", dest="table_size", type=int, default=d.table_size, help="number of offset primes")
    ap.add_argument("-s", "--seed", type=int, default=None, help="random seed (default: current time)")
    ap.add_argument("-a", "--append", action="store_true", help="append to an existing output file")
    ap.add_argument("-w", "--workers", type=int, default=d.workers, help="worker threads (default: min(n, cpus))")
    ap.add_argument("-v", "--version", action="version", version=VERSION_TEXT)
    return ap


def main(argv=None):
    t0 = time.perf_counter()
    try:
        args = build_parser().parse_args(argv)
        cfg = SearchConfig(output=args.output, count=args.count, digits=args.digits,
                           rounds=args.rounds, seed=int(time.time()) if args.seed is None else args.seed,
                           append=args.append, table_size=args.table_size, workers=args.workers).validate()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    try:
        prepare_output(cfg.output, append=cfg.append)
    except OutputError:
        print("Error: failure to open output file.", file=sys.stderr)
        return 1

    table = LowPrimeTable.generate(cfg.table_size)
    print(f"Initialization time: {time.perf_counter() - t0:.6f} seconds.", flush=True)

    rep = run_search(cfg, table=table)
    print(f"Execution time: {rep.search_seconds:.6f} seconds.")
    return 0 if rep.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
