"""Thread-safe memo cache shared by all workers of one count."""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from ..core.models import CacheStats
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class SubproblemCache:
    """Lock-striped map from packed subproblem keys to counts.

    A packed key selects one of ``concurrency_level`` shards; each shard is a
    plain dict guarded by its own lock, so readers only ever observe whole
    entries. Two workers may compute and store the same key concurrently;
    both store the same value and the later write wins.
    """

    def __init__(self, expected_entries: int = 1024, concurrency_level: int = 16) -> None:
        if concurrency_level < 1:
            raise ValueError("concurrency_level must be at least 1")
        self.expected_entries = max(0, expected_entries)
        self._shards: List[Dict[int, int]] = [{} for _ in range(concurrency_level)]
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(concurrency_level)]
        self._hits = 0
        self._misses = 0
        self._writes = 0
        self._stats_lock = threading.Lock()
        LOGGER.debug(
            "Subproblem cache sized for %d entries across %d stripes",
            self.expected_entries,
            concurrency_level,
        )

    @property
    def stripes(self) -> int:
        return len(self._shards)

    def get(self, key: int) -> Optional[int]:
        stripe = key % len(self._shards)
        with self._locks[stripe]:
            value = self._shards[stripe].get(key)
        with self._stats_lock:
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
        return value

    def put(self, key: int, value: int) -> int:
        stripe = key % len(self._shards)
        with self._locks[stripe]:
            self._shards[stripe][key] = value
        with self._stats_lock:
            self._writes += 1
        return value

    def __contains__(self, key: int) -> bool:
        stripe = key % len(self._shards)
        with self._locks[stripe]:
            return key in self._shards[stripe]

    def __len__(self) -> int:
        total = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                total += len(shard)
        return total

    def stats(self) -> CacheStats:
        entries = len(self)
        with self._stats_lock:
            return CacheStats(
                entries=entries,
                hits=self._hits,
                misses=self._misses,
                writes=self._writes,
                stripes=self.stripes,
                expected_entries=self.expected_entries,
            )
