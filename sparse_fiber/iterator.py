"""
Fiber Decompressor

Lazily re-expands a CompressedSparseFiber into (coordinate, value) pairs in
canonical order by walking the implicit D-level tree depth first.

State per level l:
- idx[l]: current position in fids[l]
- hi[l]:  exclusive end of the window idx[l] may move within; the window of
          level l is fptr[l-1][idx[l-1]] .. fptr[l-1][idx[l-1] + 1]

Advancing moves the deepest level that still has room, then re-descends
through every deeper level resetting it to the start of its new window. The
cursor is an explicit array, so stack usage does not depend on D.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Tuple

if TYPE_CHECKING:
    from .fiber import CompressedSparseFiber


class FiberIterator:
    """
    Forward-only, single-use pass over a CompressedSparseFiber.

    Obtain one with iter(fiber). Once exhausted it keeps raising
    StopIteration; start a new pass with another iter(fiber).
    """

    def __init__(self, fiber: 'CompressedSparseFiber'):
        self._fptr = fiber.fptr
        self._fids = fiber.fids
        self._vals = fiber.vals
        self._dims = fiber.dims

        self._idx = [0] * self._dims
        self._hi = [0] * self._dims
        # Root window spans every level-0 fiber; start one before it
        self._hi[0] = len(self._fids[0])
        self._idx[0] = -1

        self._started = False
        self._exhausted = False

    def __iter__(self) -> 'FiberIterator':
        return self

    def __next__(self) -> Tuple[Tuple[Any, ...], Any]:
        if self._exhausted:
            raise StopIteration

        if self._started:
            level = self._dims - 1
        else:
            level = 0
            self._started = True

        if not self._advance(level):
            self._exhausted = True
            raise StopIteration
        return self._emit()

    def _descend(self, start: int) -> int:
        """
        Reset every level from `start` down to the leaves.

        Returns:
            D on success, or the first level whose window is empty.
        """
        idx = self._idx
        for level in range(start, self._dims):
            ptr = self._fptr[level - 1]
            parent = idx[level - 1]
            lo, hi = ptr[parent], ptr[parent + 1]
            idx[level] = lo
            self._hi[level] = hi
            if lo >= hi:
                return level
        return self._dims

    def _advance(self, level: int) -> bool:
        """Move to the next leaf, trying `level` first. False when exhausted."""
        idx = self._idx
        hi = self._hi
        while True:
            while level >= 0 and idx[level] + 1 >= hi[level]:
                level -= 1
            if level < 0:
                return False
            idx[level] += 1
            blocked = self._descend(level + 1)
            if blocked == self._dims:
                return True
            # empty fiber: continue from its parent
            level = blocked - 1

    def _emit(self) -> Tuple[Tuple[Any, ...], Any]:
        idx = self._idx
        coord = tuple(self._fids[level][idx[level]] for level in range(self._dims))
        return coord, self._vals[idx[-1]]
