"""
Level Grouper

Given the sorted coordinate sequence, decide for every entry the shallowest
level at which a new fiber opens. Levels at or below that point open a new
group; levels above it stay in the group opened by an earlier entry.

The decision is a pure function of consecutive coordinate pairs:

    (1,1,1,2)  ->  0   first entry, every level opens
    (1,1,1,3)  ->  3
    (1,2,1,1)  ->  1
    (1,2,1,1)  ->  3   duplicate, still opens a new leaf
"""

from __future__ import annotations
from typing import Iterable, Iterator, Optional

from .ordering import Coordinate


def divergence_level(previous: Optional[Coordinate], current: Coordinate) -> int:
    """
    Shallowest level at which `current` differs from `previous`.

    Args:
        previous: Coordinate of the preceding sorted entry, or None for the first
        current: Coordinate of this entry

    Returns:
        Level in [0, D). Identical coordinates return D - 1 so that every
        entry owns its own leaf.
    """
    if previous is None:
        return 0
    last = len(current) - 1
    for level in range(last):
        if previous[level] != current[level]:
            return level
    return last


def divergence_levels(coordinates: Iterable[Coordinate]) -> Iterator[int]:
    """Yield the divergence level of every coordinate in sorted order."""
    previous = None
    for coord in coordinates:
        yield divergence_level(previous, coord)
        previous = coord
