"""Pretty-print helpers for keypads and count reports."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..core.models import CountReport, Key
    from ..engine.keypad import Keypad


def key_symbol(key: Key) -> str:
    return f"({key.label})" if key.vowel else f" {key.label} "


def format_keypad(keypad: Keypad) -> str:
    """Render the keypad on its grid; vowels are shown in parentheses."""

    rows = [key.row for key in keypad]
    cols = [key.col for key in keypad]
    by_coord = {key.coord: key for key in keypad}
    first_col, last_col = min(cols), max(cols)
    lines = []
    for r in range(min(rows), max(rows) + 1):
        cells = []
        for c in range(first_col, last_col + 1):
            key = by_coord.get((r, c))
            cells.append(key_symbol(key) if key is not None else "   ")
        lines.append(" ".join(cells).rstrip())
    return "\n".join(lines)


def format_neighbors(keypad: Keypad) -> str:
    lines = []
    for key in keypad:
        targets = ",".join(neighbor.label for neighbor in keypad.neighbors(key))
        lines.append(f"  {key.label} ({keypad.degree(key)}): {targets}")
    return "\n".join(lines)


def pretty_print_keypad(keypad: Keypad, *, label: str | None = None, stream=None) -> None:
    """Print the keypad layout and its knight-move adjacency."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_keypad(keypad), file=stream)
    print(file=stream)
    print("--- Knight moves ---", file=stream)
    print(format_neighbors(keypad), file=stream)


def print_count_stats(
    report: CountReport,
    verified: Optional[int] = None,
    *,
    stream=None,
) -> None:
    """Print timing, pool and cache statistics for a completed count."""

    stream = stream or sys.stdout
    print(file=stream)
    print("--- Count ---", file=stream)
    print(f"  Length:        {report.length}", file=stream)
    print(f"  Vowel budget:  {report.vowel_budget}", file=stream)
    print(f"  Workers:       {report.workers}", file=stream)
    print(f"  Elapsed:       {report.elapsed_seconds:.3f}s", file=stream)

    cache = report.cache
    if cache is not None:
        print(file=stream)
        print("--- Cache ---", file=stream)
        print(f"  Entries:       {cache.entries} (expected {cache.expected_entries})", file=stream)
        print(f"  Stripes:       {cache.stripes}", file=stream)
        print(f"  Writes:        {cache.writes}", file=stream)
        print(f"  Hits/misses:   {cache.hits}/{cache.misses} ({cache.hit_ratio * 100:.1f}% hits)", file=stream)

    if verified is not None:
        status = "match" if verified == report.result else "MISMATCH"
        print(file=stream)
        print("--- Verification ---", file=stream)
        print(f"  CP-SAT count:  {verified} ({status})", file=stream)
