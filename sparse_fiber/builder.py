"""
Fiber Builder

Converts an unordered batch of (coordinate, value) entries into the
compressed fptr/fids/vals arrays of a CompressedSparseFiber.

Pipeline:
    entries -> sort_entries (ordering) -> divergence_levels (grouping)
            -> FiberBuilder.push ... finish -> CompressedSparseFiber

A new group at level l closes the previous group at l, whose end boundary
is the number of level-(l+1) groups opened so far. The final boundaries are
written when the input ends.
"""

from __future__ import annotations
from typing import Any, Iterable, List, Optional, Sequence, Tuple
import logging

from .config import DEFAULT_CONFIG, FiberConfig
from .constants import MIN_DIMS
from .exceptions import DimensionMismatch, InvalidDimension
from .fiber import CompressedSparseFiber
from .grouping import divergence_levels
from .ordering import Coordinate, Entry, sort_entries
from .validation import check_invariants

logger = logging.getLogger(__name__)


class FiberBuilder:
    """
    Single-use accumulator for sorted entries.

    Entries must be pushed in canonical order together with their divergence
    level (see grouping.divergence_levels).
    """

    def __init__(self, dims: int):
        if dims < MIN_DIMS:
            raise InvalidDimension(dims)
        self._dims = dims
        self._fptr: List[List[int]] = [[0] for _ in range(dims - 1)]
        self._fids: List[List[Any]] = [[] for _ in range(dims)]
        self._vals: List[Any] = []
        self._finished = False

    @property
    def nnz(self) -> int:
        """Entries pushed so far."""
        return len(self._vals)

    def push(self, coord: Coordinate, value: Any, level: int) -> None:
        """
        Append one sorted entry.

        Args:
            coord: Coordinate of length D
            value: Payload stored in vals
            level: Shallowest level at which this entry opens a new group

        Raises:
            DimensionMismatch: coord length differs from D
            ValueError: level outside [0, D), or the first entry does not
                open level 0
        """
        if self._finished:
            raise RuntimeError("FiberBuilder already finished")
        if len(coord) != self._dims:
            raise DimensionMismatch(self._dims, len(coord), self.nnz)
        if not 0 <= level < self._dims:
            raise ValueError(f"Level {level} out of range for tensor of order {self._dims}")
        if not self._vals and level != 0:
            raise ValueError(f"First entry must open every level, got level {level}")

        fids = self._fids
        fptr = self._fptr
        closing = bool(self._vals)
        for lvl in range(level, self._dims):
            if closing and lvl < self._dims - 1:
                fptr[lvl].append(len(fids[lvl + 1]))
            fids[lvl].append(coord[lvl])
        self._vals.append(value)

    def finish(self) -> CompressedSparseFiber:
        """Close every open group and return the immutable structure."""
        if self._finished:
            raise RuntimeError("FiberBuilder already finished")
        self._finished = True

        if not self._vals:
            return CompressedSparseFiber.empty(self._dims)

        for lvl in range(self._dims - 1):
            self._fptr[lvl].append(len(self._fids[lvl + 1]))

        return CompressedSparseFiber(
            _dims=self._dims,
            _fptr=self._fptr,
            _fids=self._fids,
            _vals=self._vals
        )


def _normalize(entries: Iterable[Tuple[Sequence[Any], Any]]) -> List[Entry]:
    return [(tuple(coord), value) for coord, value in entries]


def _resolve_dims(entries: List[Entry], dims: Optional[int]) -> int:
    if dims is None:
        dims = len(entries[0][0]) if entries else MIN_DIMS
    if dims < MIN_DIMS:
        logger.error("Cannot build CSF of order %d", dims)
        raise InvalidDimension(dims)
    for position, (coord, _) in enumerate(entries):
        if len(coord) != dims:
            logger.error(
                "Entry %d has coordinate length %d, expected %d",
                position, len(coord), dims
            )
            raise DimensionMismatch(dims, len(coord), position)
    return dims


def build(
    entries: Iterable[Tuple[Sequence[Any], Any]],
    dims: Optional[int] = None,
    config: Optional[FiberConfig] = None
) -> CompressedSparseFiber:
    """
    Build a CompressedSparseFiber from (coordinate, value) entries.

    Entries may arrive in any order. Duplicate coordinates are kept as
    separate leaves in their input order.

    Args:
        entries: Finite iterable of (coordinate, value) pairs
        dims: Tensor order D. Inferred from the first entry when None; an
            empty batch without dims builds an empty order-1 structure.
        config: Build options (default: DEFAULT_CONFIG)

    Returns:
        Fully built, immutable structure.

    Raises:
        InvalidDimension: D < 1
        DimensionMismatch: some coordinate length differs from D
    """
    config = config or DEFAULT_CONFIG
    batch = _normalize(entries)
    dims = _resolve_dims(batch, dims)

    ordered = sort_entries(batch, use_numpy=config.use_numpy_sort)

    builder = FiberBuilder(dims)
    levels = divergence_levels(coord for coord, _ in ordered)
    for (coord, value), level in zip(ordered, levels):
        builder.push(coord, value, level)
    fiber = builder.finish()

    if config.check_invariants:
        check_invariants(fiber)

    logger.debug(
        "Built CSF: dims=%d nnz=%d storage=%d ratio=%.3f",
        fiber.dims, fiber.nnz, fiber.storage_size, fiber.compression_ratio
    )
    return fiber
