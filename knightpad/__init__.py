"""Knight-move keypad sequence counter.

This package exposes the public API surface via:

- ``knightpad.engine.counter.count_sequences``: counts sequences with a fresh cache.
- ``knightpad.engine.counter.SequenceCounter``: configurable counter with run reports.
- ``knightpad.engine.keypad.Keypad``: the 18-key knight-move graph.
- ``knightpad.engine.solver.count_with_solver``: CP-SAT cross-check for short lengths.
"""

from .engine.counter import CounterConfig, SequenceCounter, count_sequences
from .engine.keypad import Keypad, default_keypad

__all__ = [
    "CounterConfig",
    "SequenceCounter",
    "count_sequences",
    "Keypad",
    "default_keypad",
]

__version__ = "0.1.0"
