"""Keypad representation and knight-move adjacency tables."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..core.constants import KEY_LAYOUT, KNIGHT_STEPS
from ..core.exceptions import LayoutError, UnknownKeyError
from ..core.models import Key
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

Position = Union[Key, str, int]


class Keypad:
    """Immutable keypad graph with precomputed adjacency and vowel tables.

    Keys are addressed by :class:`Key`, by label, or by index in layout
    order. Neighbor tuples are ordered by index so results are reproducible.
    """

    def __init__(self, keys: Sequence[Key]) -> None:
        self._keys: Tuple[Key, ...] = tuple(keys)
        self._by_label: Dict[str, int] = {}
        by_coord: Dict[Tuple[int, int], int] = {}
        for index, key in enumerate(self._keys):
            if key.label in self._by_label:
                raise LayoutError(f"Duplicate key label {key.label!r}")
            if key.coord in by_coord:
                raise LayoutError(
                    f"Keys {self._keys[by_coord[key.coord]].label!r} and {key.label!r} share {key.coord}"
                )
            self._by_label[key.label] = index
            by_coord[key.coord] = index

        adjacency: List[Tuple[int, ...]] = []
        for key in self._keys:
            targets = {
                by_coord[(key.row + dr, key.col + dc)]
                for dr, dc in KNIGHT_STEPS
                if (key.row + dr, key.col + dc) in by_coord
            }
            adjacency.append(tuple(sorted(targets)))
        self._adjacency: Tuple[Tuple[int, ...], ...] = tuple(adjacency)
        self._vowels: Tuple[bool, ...] = tuple(key.vowel for key in self._keys)
        LOGGER.debug(
            "Keypad ready: %d keys, %d knight edges, %d vowels",
            len(self._keys),
            sum(len(targets) for targets in self._adjacency) // 2,
            sum(self._vowels),
        )

    @classmethod
    def from_layout(cls, layout: Iterable[Tuple[str, int, int, bool]]) -> "Keypad":
        return cls([Key(label, row, col, vowel) for label, row, col, vowel in layout])

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------
    @property
    def keys(self) -> Tuple[Key, ...]:
        return self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[Key]:
        return iter(self._keys)

    def __contains__(self, position: object) -> bool:
        if isinstance(position, (Key, str, int)):
            try:
                self.index_of(position)
            except UnknownKeyError:
                return False
            return True
        return False

    def index_of(self, position: Position) -> int:
        if isinstance(position, Key):
            index = self._by_label.get(position.label)
            if index is None or self._keys[index] != position:
                raise UnknownKeyError(f"Key {position} is not on this keypad")
            return index
        if isinstance(position, str):
            if position not in self._by_label:
                raise UnknownKeyError(f"No key labelled {position!r}")
            return self._by_label[position]
        if isinstance(position, bool) or not 0 <= position < len(self._keys):
            raise UnknownKeyError(f"Key index out of range: {position!r}")
        return position

    def key(self, position: Position) -> Key:
        return self._keys[self.index_of(position)]

    # ------------------------------------------------------------------
    # Graph queries
    # ------------------------------------------------------------------
    def neighbors(self, position: Position) -> Tuple[Key, ...]:
        """Return every key one knight move away from ``position``."""

        return tuple(self._keys[i] for i in self._adjacency[self.index_of(position)])

    def neighbor_indices(self, index: int) -> Tuple[int, ...]:
        return self._adjacency[index]

    def degree(self, position: Position) -> int:
        return len(self._adjacency[self.index_of(position)])

    def is_vowel(self, position: Position) -> bool:
        return self._vowels[self.index_of(position)]

    def is_vowel_index(self, index: int) -> bool:
        return self._vowels[index]

    def edges(self) -> List[Tuple[int, int]]:
        """Directed knight edges as ``(from_index, to_index)`` pairs."""

        return [(src, dst) for src, targets in enumerate(self._adjacency) for dst in targets]


_DEFAULT_KEYPAD: Optional[Keypad] = None


def default_keypad() -> Keypad:
    """Return the shared 18-key keypad, building it on first use."""

    global _DEFAULT_KEYPAD
    if _DEFAULT_KEYPAD is None:
        _DEFAULT_KEYPAD = Keypad.from_layout(KEY_LAYOUT)
    return _DEFAULT_KEYPAD
