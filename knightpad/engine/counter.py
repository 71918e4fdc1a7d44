"""Memoized knight-move sequence counter.

The count is a memoized recursion over ``(state, length, budget)``
subproblems. Parallel runs work in two phases:

  1. Fan-out: the calling thread expands the first ``split_depth`` levels of
     the recursion and submits every subproblem at the cutoff to a thread
     pool. Every subproblem is expanded once per run: identical cutoff
     subproblems share one future and identical upper nodes share one join.
     The split depth never exceeds the recursion band, which bounds the
     calling thread's stack the same way banded warming bounds the workers'.
  2. Join: each expanded node waits for its children, sums them and stores
     the sum in the shared cache.

Pool workers only run the sequential recursion, so no worker ever waits on
another task.
"""

from __future__ import annotations

import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..core.constants import (DEFAULT_RECURSION_BAND, DEFAULT_SPLIT_DEPTH, DEFAULT_VOWEL_BUDGET,
                              STRIPES_PER_WORKER, U64_MAX)
from ..core.exceptions import CountCancelledError, CountOverflowError, InvalidLengthError
from ..core.models import CountReport, SubproblemKey
from .cache import SubproblemCache
from .keypad import Keypad, default_keypad
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class CounterConfig:
    """Configuration values driving one counter."""

    vowel_budget: int = DEFAULT_VOWEL_BUDGET
    workers: Optional[int] = None
    split_depth: int = DEFAULT_SPLIT_DEPTH
    expected_entries: Optional[int] = None
    concurrency_level: Optional[int] = None
    recursion_band: int = DEFAULT_RECURSION_BAND
    enforce_u64: bool = False

    def __post_init__(self) -> None:
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.split_depth < 0:
            raise ValueError("split_depth cannot be negative")
        if self.recursion_band < 1:
            raise ValueError("recursion_band must be at least 1")
        if self.concurrency_level is not None and self.concurrency_level < 1:
            raise ValueError("concurrency_level must be at least 1")

    def resolved_workers(self) -> int:
        if self.workers is not None:
            return self.workers
        return os.cpu_count() or 1


class _CountRun:
    """State of one top-level count: keypad tables, shared cache and budget cap."""

    def __init__(
        self,
        keypad: Keypad,
        cache: SubproblemCache,
        max_budget: int,
        recursion_band: int,
        cancel_event: Optional[threading.Event],
    ) -> None:
        self.keypad = keypad
        self.cache = cache
        self.max_budget = max_budget
        self.recursion_band = recursion_band
        self.cancel_event = cancel_event
        self.start = len(keypad)
        self.state_count = len(keypad) + 1

    def pack(self, state: int, length: int, budget: int) -> int:
        return SubproblemKey(state, length, budget).pack(self.state_count, self.max_budget)

    def moves(self, state: int, budget: int) -> Iterator[Tuple[int, int]]:
        """Yield ``(next_index, next_budget)`` for every allowed next press."""

        if state == self.start:
            candidates: Tuple[int, ...] = tuple(range(len(self.keypad)))
        else:
            candidates = self.keypad.neighbor_indices(state)
        for candidate in candidates:
            if self.keypad.is_vowel_index(candidate):
                if budget <= 0:
                    continue
                yield candidate, budget - 1
            else:
                yield candidate, budget

    def check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise CountCancelledError("Sequence count cancelled")

    def count(self, state: int, length: int, budget: int) -> int:
        self.check_cancelled()
        if length <= 0:
            return 1
        key = self.pack(state, length, budget)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        total = 0
        for candidate, next_budget in self.moves(state, budget):
            total += self.count(candidate, length - 1, next_budget)
        return self.cache.put(key, total)

    def solve(self, state: int, length: int, budget: int) -> int:
        """Sequential entry point; warms the cache in bands to bound recursion depth."""

        band = self.recursion_band
        if length > band:
            LOGGER.debug("Warming cache up to length %d in bands of %d", length - 1, band)
        for level in range(band, length, band):
            for index in range(len(self.keypad)):
                for remaining in range(budget + 1):
                    self.count(index, level, remaining)
        return self.count(state, length, budget)


class SequenceCounter:
    """Counts knight-move key sequences under a vowel budget."""

    def __init__(
        self,
        config: Optional[CounterConfig] = None,
        keypad: Optional[Keypad] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.config = config or CounterConfig()
        self.keypad = keypad if keypad is not None else default_keypad()
        self.cancel_event = cancel_event
        self.last_report: Optional[CountReport] = None

    def count(self, length: int) -> int:
        """Return the number of valid sequences of ``length`` presses."""

        if isinstance(length, bool) or not isinstance(length, int):
            raise InvalidLengthError(f"Sequence length must be an integer, got {length!r}")

        started = time.perf_counter()
        budget = max(0, self.config.vowel_budget)
        workers = self.config.resolved_workers()
        cache = self._new_cache(length, budget, workers)
        run = _CountRun(self.keypad, cache, budget, self.config.recursion_band, self.cancel_event)
        LOGGER.info(
            "Counting sequences of length %d (vowel budget %d, %d worker%s)",
            length,
            budget,
            workers,
            "" if workers == 1 else "s",
        )

        if workers == 1 or length <= 0:
            result = run.solve(run.start, length, budget)
        else:
            result = self._count_parallel(run, length, budget, workers)

        elapsed = time.perf_counter() - started
        self.last_report = CountReport(
            length=length,
            result=result,
            vowel_budget=budget,
            workers=workers,
            elapsed_seconds=elapsed,
            cache=cache.stats(),
        )
        LOGGER.info("Counted %d sequences of length %d in %.3fs", result, length, elapsed)

        if self.config.enforce_u64 and result > U64_MAX:
            raise CountOverflowError(
                f"Sequence count for length {length} exceeds the unsigned 64-bit range"
            )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _new_cache(self, length: int, budget: int, workers: int) -> SubproblemCache:
        expected = self.config.expected_entries
        if expected is None:
            expected = (len(self.keypad) + 1) * (max(length, 0) + 1) * (budget + 1)
        stripes = self.config.concurrency_level or STRIPES_PER_WORKER * workers
        return SubproblemCache(expected_entries=expected, concurrency_level=stripes)

    def _count_parallel(self, run: _CountRun, length: int, budget: int, workers: int) -> int:
        split_depth = min(self.config.split_depth, run.recursion_band)
        if split_depth < self.config.split_depth:
            LOGGER.debug(
                "Split depth %d clamped to recursion band %d",
                self.config.split_depth,
                run.recursion_band,
            )
        submitted: Dict[int, Future] = {}
        joins: Dict[int, Callable[[], int]] = {}
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="knightpad") as executor:
            try:
                join = self._fork(
                    run, executor, submitted, joins, run.start, length, budget, 0, split_depth
                )
                LOGGER.debug(
                    "Fanned out %d subproblems (%d join nodes) at split depth %d",
                    len(submitted),
                    len(joins),
                    split_depth,
                )
                return join()
            except Exception:
                for future in submitted.values():
                    future.cancel()
                if self.cancel_event is not None and self.cancel_event.is_set():
                    LOGGER.warning("Count of length %d cancelled", length)
                raise

    def _fork(
        self,
        run: _CountRun,
        executor: ThreadPoolExecutor,
        submitted: Dict[int, Future],
        joins: Dict[int, Callable[[], int]],
        state: int,
        length: int,
        budget: int,
        depth: int,
        split_depth: int,
    ) -> Callable[[], int]:
        """Expand one subproblem and return a callable that joins its result.

        Each packed key is expanded once per run: repeated paths to the same
        subproblem reuse its future below the cutoff and its join above it.
        """

        run.check_cancelled()
        if length <= 0:
            return lambda: 1
        key = run.pack(state, length, budget)
        cached = run.cache.get(key)
        if cached is not None:
            return lambda: cached

        if depth >= split_depth:
            future = submitted.get(key)
            if future is None:
                future = executor.submit(run.solve, state, length, budget)
                submitted[key] = future
            return future.result

        existing = joins.get(key)
        if existing is not None:
            return existing

        children: List[Callable[[], int]] = [
            self._fork(
                run, executor, submitted, joins, candidate, length - 1, next_budget, depth + 1, split_depth
            )
            for candidate, next_budget in run.moves(state, budget)
        ]

        def join() -> int:
            done = run.cache.get(key)
            if done is not None:
                return done
            total = 0
            for child in children:
                total += child()
            return run.cache.put(key, total)

        joins[key] = join
        return join


def count_sequences(
    length: int,
    *,
    vowel_budget: int = DEFAULT_VOWEL_BUDGET,
    workers: Optional[int] = None,
    keypad: Optional[Keypad] = None,
    cancel_event: Optional[threading.Event] = None,
) -> int:
    """Count knight-move sequences of ``length`` presses with a fresh cache.

    Lengths of zero or less count the empty sequence only and return 1.
    """

    config = CounterConfig(vowel_budget=vowel_budget, workers=workers)
    return SequenceCounter(config, keypad=keypad, cancel_event=cancel_event).count(length)
