from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class Empty:
    """A cleared cell waiting for gravity and refill."""

    def __repr__(self) -> str:
        return "EMPTY"


@dataclass(frozen=True, slots=True)
class Normal:
    base: int


@dataclass(frozen=True, slots=True)
class Special:
    """Power tile spawned from a run of four or more.

    ``uid`` is the tile's identity, so the same special can be followed while
    it falls; ``base`` is the element it still matches with.
    """

    uid: int
    base: int


Tile = Union[Empty, Normal, Special]

EMPTY = Empty()


def base_of(tile: Tile) -> int | None:
    """Return the base used for matching, or None for an empty cell."""
    if isinstance(tile, Empty):
        return None
    return tile.base


def is_empty(tile: Tile) -> bool:
    return isinstance(tile, Empty)


def is_special(tile: Tile) -> bool:
    return isinstance(tile, Special)


@dataclass(slots=True)
class TileSlot:
    """Per-cell tile assignment.

    Cell entities never move; tiles are copied between slots by swaps and
    gravity, which is why specials carry their own identity.
    """

    tile: Tile = EMPTY
