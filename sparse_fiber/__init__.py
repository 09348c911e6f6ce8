"""
sparse_fiber - Compressed Sparse Fiber index for N-dimensional sparse tensors

Stores only the non-zero entries of a tensor, sharing coordinate prefixes
across dimensions so that storage drops below listing every coordinate.

Components:
- ordering:   lexicographic coordinate order (stable)
- grouping:   per-entry divergence level over the sorted sequence
- builder:    FiberBuilder and build(), assembling fptr/fids/vals
- iterator:   FiberIterator, explicit-cursor depth-first decompression
- validation: structural invariant checks

Quick Start:
    >>> from sparse_fiber import build
    >>> csf = build([((1, 2), 'a'), ((0, 5), 'b'), ((1, 0), 'c')])
    >>> csf.fptr
    ((0, 1, 3),)
    >>> list(csf)
    [((0, 5), 'b'), ((1, 0), 'c'), ((1, 2), 'a')]
"""

__version__ = "0.1.0"

from .builder import FiberBuilder, build
from .config import DEFAULT_CONFIG, FiberConfig
from .exceptions import (
    BuildError,
    DimensionMismatch,
    FiberError,
    InvalidDimension,
    InvariantViolation,
)
from .fiber import CompressedSparseFiber
from .grouping import divergence_level, divergence_levels
from .iterator import FiberIterator
from .logging_config import setup_logging
from .ordering import lexsort_order, sort_entries
from .validation import check_invariants, find_violations, is_canonical

__all__ = [
    # Construction
    "build",
    "FiberBuilder",
    "FiberConfig",
    "DEFAULT_CONFIG",
    # Structure
    "CompressedSparseFiber",
    "FiberIterator",
    # Ordering / grouping
    "sort_entries",
    "lexsort_order",
    "divergence_level",
    "divergence_levels",
    # Validation
    "check_invariants",
    "find_violations",
    "is_canonical",
    # Errors
    "FiberError",
    "BuildError",
    "DimensionMismatch",
    "InvalidDimension",
    "InvariantViolation",
    # Logging
    "setup_logging",
]
