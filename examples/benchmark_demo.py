"""
Compressed Sparse Fiber Timing Demo

Builds random order-8 tensors of increasing size and times the three main
operations: construction, random-access row expansion, and column sums.
"""

import logging
import time

import numpy as np

from sparse_fiber import build, setup_logging


def print_section(title):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def sample_entries(rng, count, width=8):
    """Random entries with coordinates in [1, 100) and values in [0, 10)."""
    coords = rng.integers(1, 100, size=(count, width)).tolist()
    values = rng.uniform(0.0, 10.0, size=count).tolist()
    return list(zip(map(tuple, coords), values))


def timed(label, fn, repeat=1):
    start = time.perf_counter()
    for _ in range(repeat):
        result = fn()
    elapsed = (time.perf_counter() - start) / repeat
    print(f"  {label:<28} {elapsed * 1e3:10.3f} ms")
    return result


def main():
    setup_logging(logging.DEBUG)
    rng = np.random.default_rng(0)

    for count in (1_000, 100_000):
        print_section(f"{count:,} entries, order 8")
        entries = sample_entries(rng, count)

        csf = timed("build", lambda: build(entries))
        timed("expand_row x10", lambda: [csf.expand_row(i) for i in range(10)], repeat=20)
        timed("sum_column(1)", lambda: csf.sum_column(1), repeat=5)
        timed("full iteration", lambda: sum(1 for _ in csf))

        print(f"  storage: {csf.storage_size:,} ints "
              f"(ratio {csf.compression_ratio:.3f} of nnz * D)")


if __name__ == "__main__":
    main()
