"""
Coordinate Ordering

Total lexicographic order over D-tuples of indices: dimension 0 is the most
significant key, dimension D-1 the least. Ties (identical coordinates) keep
their input order, which decides which copy of a duplicate is emitted first.

Two interchangeable paths produce the same permutation:
- numpy.lexsort for integral coordinate matrices (stable, vectorized)
- sorted() with the coordinate tuple as key (stable, any ordered index type)
"""

from __future__ import annotations
from typing import Any, List, Sequence, Tuple

import numpy as np


# Components must be totally ordered (compared with <)
Coordinate = Tuple[Any, ...]
Entry = Tuple[Coordinate, Any]


def coordinate_key(entry: Entry) -> Coordinate:
    """Sort key of an entry: its coordinate tuple."""
    return entry[0]


def lexsort_order(coordinates: np.ndarray) -> np.ndarray:
    """
    Stable lexicographic permutation of an integer coordinate matrix.

    Args:
        coordinates: Array of shape (n, D)

    Returns:
        Permutation array p such that coordinates[p] is sorted with column 0
        as the primary key.
    """
    if coordinates.ndim != 2:
        raise ValueError(f"Expected (n, D) coordinate matrix, got shape {coordinates.shape}")
    # lexsort treats the LAST key as primary
    return np.lexsort(coordinates.T[::-1])


def _integral_matrix(coordinates: Sequence[Coordinate]):
    """Return coordinates as an (n, D) integer array, or None if not integral."""
    try:
        matrix = np.asarray(coordinates)
    except (ValueError, TypeError, OverflowError):
        return None
    if matrix.ndim != 2 or not np.issubdtype(matrix.dtype, np.integer):
        return None
    return matrix


def sort_entries(entries: Sequence[Entry], use_numpy: bool = True) -> List[Entry]:
    """
    Sort entries by coordinate in full lexicographic order (stable).

    Args:
        entries: (coordinate, value) pairs with coordinates of equal length
        use_numpy: Use numpy.lexsort when every coordinate is integral

    Returns:
        New list of entries in canonical order.
    """
    entries = list(entries)
    if len(entries) < 2:
        return entries

    if use_numpy:
        matrix = _integral_matrix([coord for coord, _ in entries])
        if matrix is not None:
            return [entries[i] for i in lexsort_order(matrix).tolist()]

    return sorted(entries, key=coordinate_key)
