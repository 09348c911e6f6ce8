import numpy as np
import pytest

from sparse_fiber import CompressedSparseFiber


SAMPLE_ROWS = [
    ((1, 1, 1, 2), 1.0),
    ((1, 1, 1, 3), 2.0),
    ((1, 2, 1, 1), 3.0),
    ((1, 2, 1, 3), 4.0),
    ((1, 2, 2, 1), 5.0),
    ((2, 2, 2, 1), 6.0),
    ((2, 2, 2, 2), 7.0),
    ((2, 2, 2, 3), 8.0),
]

SAMPLE_FPTR = [[0, 2, 3], [0, 1, 3, 4], [0, 2, 4, 5, 8]]
SAMPLE_FIDS = [[1, 2], [1, 2, 2], [1, 1, 2, 2], [2, 3, 1, 3, 1, 1, 2, 3]]
SAMPLE_VALS = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]


def random_entries(rng, n, dims, high=4):
    """Random (coordinate, value) entries; a small `high` forces shared prefixes."""
    coords = rng.integers(0, high, size=(n, dims)).tolist()
    return [(tuple(coord), i) for i, coord in enumerate(coords)]


@pytest.fixture
def sample_rows():
    return list(SAMPLE_ROWS)


@pytest.fixture
def sample_csf():
    return CompressedSparseFiber.from_arrays(SAMPLE_FPTR, SAMPLE_FIDS, SAMPLE_VALS)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
