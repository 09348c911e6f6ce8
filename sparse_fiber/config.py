"""
Build configuration for Compressed Sparse Fiber construction.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FiberConfig:
    """
    Configuration for CSF construction.

    Attributes:
        check_invariants: Run the structural validator on every built
            structure before returning it.
        use_numpy_sort: Order integral coordinates with numpy.lexsort instead
            of sorted(). Both orders are identical; numpy is faster on
            large batches.
    """
    check_invariants: bool = False
    use_numpy_sort: bool = True

    def __post_init__(self):
        """Validate configuration."""
        if not isinstance(self.check_invariants, bool):
            raise TypeError("check_invariants must be a bool")
        if not isinstance(self.use_numpy_sort, bool):
            raise TypeError("use_numpy_sort must be a bool")


DEFAULT_CONFIG = FiberConfig()
