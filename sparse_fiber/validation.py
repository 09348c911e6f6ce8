# sparse_fiber/validation.py
"""
Structural validation for Compressed Sparse Fiber structures.

Read-only checks over the flat arrays of a built (or hand-assembled)
structure. build() only runs them when FiberConfig.check_invariants is set;
the test suite runs them on everything it builds.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Sequence
import logging

from .constants import MIN_DIMS
from .exceptions import InvariantViolation

if TYPE_CHECKING:
    from .fiber import CompressedSparseFiber

logger = logging.getLogger(__name__)


def _pointer_violations(level: int, ptr: Sequence[int], groups: int, children: int) -> List[str]:
    problems: List[str] = []
    if len(ptr) != groups + 1:
        problems.append(
            f"fptr[{level}] has length {len(ptr)}, expected {groups + 1} "
            f"(len(fids[{level}]) + 1)"
        )
    if ptr and ptr[0] != 0:
        problems.append(f"fptr[{level}] starts at {ptr[0]}, expected 0")
    if ptr and ptr[-1] != children:
        problems.append(
            f"fptr[{level}] ends at {ptr[-1]}, expected len(fids[{level + 1}]) = {children}"
        )
    for i, bound in enumerate(ptr):
        if not 0 <= bound <= children:
            problems.append(f"fptr[{level}][{i}] = {bound} outside [0, {children}]")
    for i in range(1, len(ptr)):
        if ptr[i] < ptr[i - 1]:
            problems.append(f"fptr[{level}] decreases at position {i}")
            break
    return problems


def find_violations(fiber: 'CompressedSparseFiber') -> List[str]:
    """
    Collect every structural invariant the fiber breaks.

    Returns:
        Human-readable violation messages; empty when the structure is valid.
    """
    dims = fiber.dims
    fptr, fids, vals = fiber.fptr, fiber.fids, fiber.vals

    if dims < MIN_DIMS:
        return [f"dims = {dims}, expected >= {MIN_DIMS}"]
    if len(fids) != dims:
        return [f"{len(fids)} id arrays for a tensor of order {dims}"]
    if len(fptr) != dims - 1:
        return [f"{len(fptr)} pointer arrays for a tensor of order {dims}, expected {dims - 1}"]

    problems: List[str] = []
    if len(fids[-1]) != len(vals):
        problems.append(f"len(fids[{dims - 1}]) = {len(fids[-1])} but len(vals) = {len(vals)}")

    if not vals and not fids[-1]:
        for level, row in enumerate(fids):
            if row:
                problems.append(f"fids[{level}] not empty in a structure with no entries")
        for level, row in enumerate(fptr):
            if row:
                problems.append(f"fptr[{level}] not empty in a structure with no entries")
        return problems

    for level, ptr in enumerate(fptr):
        problems.extend(_pointer_violations(level, ptr, len(fids[level]), len(fids[level + 1])))
    return problems


def check_invariants(fiber: 'CompressedSparseFiber') -> None:
    """
    Raise InvariantViolation if the fiber breaks any structural invariant.
    """
    problems = find_violations(fiber)
    if problems:
        logger.error("CSF validation failed: %s", "; ".join(problems))
        raise InvariantViolation(problems)


def is_canonical(fiber: 'CompressedSparseFiber') -> bool:
    """
    True if the fiber has the exact shape build() produces.

    Beyond validity this requires that no fiber is empty and that sibling
    ids are strictly increasing, except at the leaf level where duplicate
    coordinates leave equal neighbours.
    """
    if find_violations(fiber):
        return False

    dims = fiber.dims
    fptr, fids = fiber.fptr, fiber.fids
    if not fiber.vals:
        return True

    windows = [[(0, len(fids[0]))]]
    for ptr in fptr:
        windows.append([(ptr[i], ptr[i + 1]) for i in range(len(ptr) - 1)])

    for level in range(dims):
        leaf = level == dims - 1
        row = fids[level]
        for lo, hi in windows[level]:
            if lo >= hi:
                return False
            for j in range(lo + 1, hi):
                if row[j] < row[j - 1] or (not leaf and row[j] == row[j - 1]):
                    return False
    return True
