# sparse_fiber/exceptions.py
from typing import Optional


class FiberError(Exception):
    """Base exception for sparse_fiber errors."""
    pass


class BuildError(FiberError, ValueError):
    """Raised when a batch of entries cannot be compressed."""
    pass


class InvalidDimension(BuildError):
    """Raised when a structure of order D < 1 is requested."""

    def __init__(self, dims: int):
        self.dims = dims
        super().__init__(f"Tensor order must be >= 1, got {dims}")


class DimensionMismatch(BuildError):
    """Raised when an entry's coordinate length differs from the tensor order."""

    def __init__(self, expected: int, actual: int, position: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        self.position = position
        where = f" at entry {position}" if position is not None else ""
        super().__init__(
            f"Coordinate length {actual} does not match tensor order {expected}{where}"
        )


class InvariantViolation(FiberError, ValueError):
    """Raised when a structure fails structural validation."""

    def __init__(self, violations):
        self.violations = list(violations)
        super().__init__("Invalid CSF structure: " + "; ".join(self.violations))
