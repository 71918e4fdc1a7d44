"""Data models supporting the keypad counter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Key:
    """A physical key with its grid coordinate."""

    label: str
    row: int
    col: int
    vowel: bool = False

    @property
    def coord(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class SubproblemKey:
    """Memoization key: current state, remaining length and vowel budget.

    ``state`` is a key index, or the start sentinel index when no key has
    been pressed yet.
    """

    state: int
    length: int
    budget: int

    def pack(self, state_count: int, max_budget: int) -> int:
        return ((self.length * (max_budget + 1)) + self.budget) * state_count + self.state


@dataclass(frozen=True)
class CacheStats:
    entries: int
    hits: int
    misses: int
    writes: int
    stripes: int
    expected_entries: int

    @property
    def hit_ratio(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


@dataclass(frozen=True)
class CountReport:
    """Summary of one top-level count."""

    length: int
    result: int
    vowel_budget: int
    workers: int
    elapsed_seconds: float
    cache: Optional[CacheStats] = None
