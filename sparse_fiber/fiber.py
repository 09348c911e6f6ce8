"""
Compressed Sparse Fiber Container

Immutable D-level generalization of CSR. For a tensor of order D:

    fptr: D-1 pointer arrays. Level l+1 group j belongs to level l group i
          iff fptr[l][i] <= j < fptr[l][i+1].
    fids: D id arrays. fids[l][i] is the dimension-l coordinate shared by
          every entry under group i at level l.
    vals: nnz values aligned with fids[D-1].

Example (D = 4, eight entries):

    fptr = [[0,2,3], [0,1,3,4], [0,2,4,5,8]]
    fids = [[1,2], [1,2,2], [1,1,2,2], [2,3,1,3,1,1,2,3]]
    vals = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]

Design Principles:
- Flat integer-indexed arrays per level, no node objects
- Frozen after creation; all arrays are tuples, numpy scalars unwrapped
- Content-addressed name = SHA1(dims, fptr, fids, vals)
- Iteration is delegated to FiberIterator (explicit cursor, no recursion)
"""

from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, Sequence, Tuple, TypeVar
import hashlib

import numpy as np

from .constants import DEFAULT_INDEX_DTYPE, MIN_DIMS, POINTER_DTYPE
from .exceptions import InvalidDimension
from .iterator import FiberIterator
from .validation import check_invariants

IndexT = TypeVar("IndexT")
ValueT = TypeVar("ValueT")


def compute_sha1(data: str) -> str:
    """Compute SHA1 hash of a string."""
    return hashlib.sha1(data.encode('utf-8')).hexdigest()


def _plain(item: Any) -> Any:
    """Unwrap numpy scalars so equal contents share one repr."""
    if isinstance(item, np.generic):
        return item.item()
    return item


@dataclass(frozen=True)
class CompressedSparseFiber(Generic[IndexT, ValueT]):
    """
    Immutable Compressed Sparse Fiber index.

    Generic over the index type (any totally ordered type) and the value
    type (opaque). Built by sparse_fiber.build(); consumed through the
    read accessors below and by iterating:

        for coord, value in csf:
            ...

    Every iter() call starts a fresh, independent pass.
    """
    _dims: int
    _fptr: Tuple[Tuple[int, ...], ...]
    _fids: Tuple[Tuple[IndexT, ...], ...]
    _vals: Tuple[ValueT, ...]
    _name: str = field(default="", compare=False, repr=False)

    def __post_init__(self):
        """Freeze arrays as tuples of plain Python scalars."""
        object.__setattr__(self, '_fptr', tuple(tuple(int(p) for p in row) for row in self._fptr))
        object.__setattr__(self, '_fids', tuple(tuple(_plain(i) for i in row) for row in self._fids))
        object.__setattr__(self, '_vals', tuple(_plain(v) for v in self._vals))

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_arrays(
        cls,
        fptr: Sequence[Sequence[int]],
        fids: Sequence[Sequence[IndexT]],
        vals: Sequence[ValueT],
        validate: bool = True
    ) -> CompressedSparseFiber[IndexT, ValueT]:
        """
        Wrap pre-assembled arrays.

        The order D is taken from len(fids).

        Raises:
            InvariantViolation: if validate is True and the arrays do not
                form a valid structure.
        """
        fiber = cls(_dims=len(fids), _fptr=fptr, _fids=fids, _vals=vals)
        if validate:
            check_invariants(fiber)
        return fiber

    @classmethod
    def empty(cls, dims: int) -> CompressedSparseFiber[IndexT, ValueT]:
        """Create an empty structure of order `dims`."""
        if dims < MIN_DIMS:
            raise InvalidDimension(dims)
        return cls(
            _dims=dims,
            _fptr=tuple(() for _ in range(dims - 1)),
            _fids=tuple(() for _ in range(dims)),
            _vals=()
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def dims(self) -> int:
        """Tensor order D."""
        return self._dims

    @property
    def nnz(self) -> int:
        """Number of stored entries (duplicates included)."""
        return len(self._vals)

    @property
    def fptr(self) -> Tuple[Tuple[int, ...], ...]:
        """Read-only pointer arrays, one per level 0..D-2."""
        return self._fptr

    @property
    def fids(self) -> Tuple[Tuple[IndexT, ...], ...]:
        """Read-only id arrays, one per level 0..D-1."""
        return self._fids

    @property
    def vals(self) -> Tuple[ValueT, ...]:
        """Read-only values aligned with fids[D-1]."""
        return self._vals

    @property
    def name(self) -> str:
        """Content-addressed name."""
        if not self._name:
            content = repr((self._dims, self._fptr, self._fids, self._vals))
            object.__setattr__(self, '_name', compute_sha1(content))
        return self._name

    @property
    def storage_size(self) -> int:
        """Total integers stored across fptr and fids."""
        return sum(len(row) for row in self._fptr) + sum(len(row) for row in self._fids)

    @property
    def compression_ratio(self) -> float:
        """storage_size relative to listing every coordinate (nnz * D)."""
        if self.nnz == 0:
            return 0.0
        return self.storage_size / (self.nnz * self._dims)

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[Tuple[Tuple[IndexT, ...], ValueT]]:
        return FiberIterator(self)

    def __len__(self) -> int:
        return self.nnz

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    def _check_level(self, level: int) -> None:
        if not 0 <= level < self._dims:
            raise IndexError(f"Level {level} out of range for tensor of order {self._dims}")

    def expand_row(self, index: int) -> Tuple[Tuple[IndexT, ...], ValueT]:
        """
        Reconstruct the index-th entry in canonical order.

        Walks from the leaf up to the root, locating the parent group at each
        level by binary search over the pointer array.

        Args:
            index: Leaf position in [0, nnz)

        Returns:
            (coordinate, value)
        """
        if not 0 <= index < self.nnz:
            raise IndexError(f"Entry index {index} out of range for nnz={self.nnz}")

        last = self._dims - 1
        coord = [self._fids[last][index]]
        current = index
        for level in range(last - 1, -1, -1):
            current = bisect_right(self._fptr[level], current) - 1
            coord.append(self._fids[level][current])
        coord.reverse()
        return tuple(coord), self._vals[index]

    def leaf_counts(self, level: int) -> Tuple[int, ...]:
        """
        Number of entries under each group at `level`.

        Args:
            level: Dimension in [0, D)

        Returns:
            Tuple aligned with fids[level].
        """
        self._check_level(level)
        if self.nnz == 0:
            return ()
        if level == self._dims - 1:
            return (1,) * self.nnz

        counts = np.diff(np.asarray(self._fptr[self._dims - 2], dtype=POINTER_DTYPE))
        for ptr_level in range(self._dims - 3, level - 1, -1):
            ptr = np.asarray(self._fptr[ptr_level], dtype=POINTER_DTYPE)
            cumulative = np.concatenate(([0], np.cumsum(counts)))
            counts = cumulative[ptr[1:]] - cumulative[ptr[:-1]]
        return tuple(counts.tolist())

    def sum_column(self, level: int) -> Any:
        """
        Sum of the dimension-`level` coordinate over all entries.

        Each group's id is weighted by the number of entries beneath it, so
        no row is expanded.
        """
        weights = self.leaf_counts(level)
        return sum(ident * weight for ident, weight in zip(self._fids[level], weights))

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def as_arrays(self, dtype=DEFAULT_INDEX_DTYPE) -> Tuple[Tuple[np.ndarray, ...], Tuple[np.ndarray, ...]]:
        """
        Read-only numpy copies of the pointer and id arrays.

        Intended for exporters that need contiguous buffers. Requires
        integral ids.

        Returns:
            (fptr_arrays, fids_arrays)
        """
        def frozen(row, row_dtype):
            arr = np.asarray(row, dtype=row_dtype)
            arr.setflags(write=False)
            return arr

        fptr = tuple(frozen(row, POINTER_DTYPE) for row in self._fptr)
        fids = tuple(frozen(row, dtype) for row in self._fids)
        return fptr, fids

    def __repr__(self) -> str:
        return (
            f"CompressedSparseFiber(dims={self._dims}, nnz={self.nnz}, "
            f"storage={self.storage_size}, name={self.name[:16]}...)"
        )
