# primesearch/sink.py
# Shared discovery counter and append-only prime output.

from __future__ import annotations
import os
import threading


class OutputError(OSError):
    """The output file could not be opened or written."""


class DiscoveryCounter:
    __slots__ = ("_value", "_lock")

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        return self._value


class ResultSink:
    """
    Appends one decimal integer per line. The file is opened and closed on
    every write so primes already written survive an interrupted run.
    """

    def __init__(self, path: str):
        self.path = os.fspath(path)
        self._lock = threading.Lock()
        self.written = 0
        self.primes: list[int] = []

    def append(self, value) -> None:
        value = int(value)
        line = f"{value}\n"
        with self._lock:
            try:
                with open(self.path, "a", encoding="ascii") as fh:
                    fh.write(line)
            except OSError as e:
                raise OutputError(e.errno, "failure to open output file", self.path) from e
            self.written += 1
            self.primes.append(value)


def prepare_output(path: str, append: bool = False) -> None:
    """Truncate the output unless appending; create it in either case."""
    try:
        with open(path, "a" if append else "w", encoding="ascii"):
            pass
    except OSError as e:
        raise OutputError(e.errno, "failure to open output file", os.fspath(path)) from e


def read_primes(path: str) -> list[int]:
    with open(path, "r", encoding="ascii") as fh:
        return [int(ln) for ln in fh if ln.strip()]
