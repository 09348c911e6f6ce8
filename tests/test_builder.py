"""
Tests for CSF construction
"""

import logging

import pytest

from sparse_fiber import (
    BuildError,
    CompressedSparseFiber,
    DimensionMismatch,
    FiberBuilder,
    FiberConfig,
    InvalidDimension,
    build,
    find_violations,
    is_canonical,
)

from conftest import SAMPLE_FIDS, SAMPLE_FPTR, SAMPLE_VALS, random_entries


def as_lists(rows):
    return [list(row) for row in rows]


class TestBuildRegression:
    def test_sample_arrays(self, sample_rows):
        csf = build(sample_rows)

        assert as_lists(csf.fptr) == SAMPLE_FPTR
        assert as_lists(csf.fids) == SAMPLE_FIDS
        assert list(csf.vals) == SAMPLE_VALS

    def test_sample_unsorted_input(self, sample_rows):
        shuffled = sample_rows[::-1]
        shuffled[2], shuffled[5] = shuffled[5], shuffled[2]
        csf = build(shuffled)

        assert as_lists(csf.fptr) == SAMPLE_FPTR
        assert as_lists(csf.fids) == SAMPLE_FIDS
        assert list(csf.vals) == SAMPLE_VALS

    def test_sample_matches_hand_assembled(self, sample_rows, sample_csf):
        assert build(sample_rows) == sample_csf

    def test_sample_is_canonical(self, sample_rows):
        csf = build(sample_rows)
        assert find_violations(csf) == []
        assert is_canonical(csf)

    def test_lists_accepted_as_coordinates(self):
        csf = build([([0, 1], 'x'), ([0, 0], 'y')])
        assert csf.fids == ((0,), (0, 1))
        assert csf.vals == ('y', 'x')


class TestBuildDegenerate:
    def test_empty_with_dims(self):
        csf = build([], dims=3)
        assert csf.dims == 3
        assert csf.nnz == 0
        assert csf.fptr == ((), ())
        assert csf.fids == ((), (), ())
        assert csf.vals == ()

    def test_empty_without_dims(self):
        csf = build([])
        assert csf.dims == 1
        assert csf.fptr == ()
        assert csf.fids == ((),)
        assert find_violations(csf) == []

    def test_one_dimension(self):
        csf = build([((3,), 'c'), ((1,), 'a'), ((2,), 'b')])
        assert csf.dims == 1
        assert csf.fptr == ()
        assert csf.fids == ((1, 2, 3),)
        assert csf.vals == ('a', 'b', 'c')

    def test_single_entry(self):
        csf = build([((4, 5, 6), 9)])
        assert csf.fptr == ((0, 1), (0, 1))
        assert csf.fids == ((4,), (5,), (6,))
        assert csf.vals == (9,)


class TestBuildDuplicates:
    def test_duplicates_kept_as_leaves(self):
        csf = build([((1, 2), 'first'), ((0, 0), 'z'), ((1, 2), 'second')])
        assert csf.nnz == 3
        assert csf.fids == ((0, 1), (0, 2, 2))
        assert csf.fptr == ((0, 1, 3),)
        assert csf.vals == ('z', 'first', 'second')

    def test_duplicates_keep_input_order(self):
        entries = [((0, 0, 0), v) for v in 'abc']
        csf = build(entries)
        assert csf.vals == ('a', 'b', 'c')
        assert csf.fids == ((0,), (0,), (0, 0, 0))
        assert is_canonical(csf)

    def test_duplicates_same_order_with_python_sort(self):
        entries = [((1, 1), 'a'), ((0, 9), 'b'), ((1, 1), 'c')]
        numpy_sorted = build(entries)
        python_sorted = build(entries, config=FiberConfig(use_numpy_sort=False))
        assert numpy_sorted == python_sorted


class TestBuildErrors:
    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatch) as excinfo:
            build([((1, 2), 1.0), ((1, 2, 3), 2.0)])
        err = excinfo.value
        assert err.expected == 2
        assert err.actual == 3
        assert err.position == 1

    def test_dimension_mismatch_against_declared_dims(self):
        with pytest.raises(DimensionMismatch):
            build([((1, 2), 1.0)], dims=3)

    def test_zero_dims_declared(self):
        with pytest.raises(InvalidDimension):
            build([], dims=0)

    def test_zero_dims_inferred(self):
        with pytest.raises(InvalidDimension):
            build([((), 1.0)])

    def test_errors_are_build_errors(self):
        with pytest.raises(BuildError):
            build([((1,), 1.0), ((1, 1), 2.0)])
        with pytest.raises(ValueError):
            build([], dims=-1)

    def test_error_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="sparse_fiber.builder"):
            with pytest.raises(DimensionMismatch):
                build([((1, 2), 1.0), ((1,), 2.0)])
        assert "coordinate length 1" in caplog.text


class TestBuildProperties:
    @pytest.mark.parametrize("dims", [1, 2, 3, 5])
    def test_determinism_under_permutation(self, rng, dims):
        # value == coordinate, so reordering duplicates is unobservable
        entries = [(coord, coord) for coord, _ in random_entries(rng, 200, dims)]
        permuted = [entries[i] for i in rng.permutation(len(entries))]

        first = build(entries)
        second = build(permuted)
        assert first.fptr == second.fptr
        assert first.fids == second.fids
        assert first.vals == second.vals
        assert first.name == second.name

    @pytest.mark.parametrize("dims", [1, 2, 4, 7])
    def test_random_structures_are_valid(self, rng, dims):
        csf = build(random_entries(rng, 300, dims))
        assert find_violations(csf) == []
        assert is_canonical(csf)
        assert len(csf.fids[-1]) == len(csf.vals) == csf.nnz == 300

    def test_numpy_and_python_sort_agree(self, rng):
        entries = random_entries(rng, 500, 4, high=3)
        assert build(entries) == build(entries, config=FiberConfig(use_numpy_sort=False))

    def test_compression_bound(self, rng):
        entries = random_entries(rng, 400, 4, high=3)
        csf = build(entries)
        # prefixes repeat with only 3**4 distinct coordinates
        assert csf.storage_size < csf.nnz * csf.dims
        assert csf.compression_ratio < 1.0

    def test_no_shared_prefix_bound(self):
        entries = [((i, i + 1, i + 2), i) for i in range(10)]
        csf = build(entries)
        # D id arrays of length n plus D-1 pointer arrays of length n + 1
        assert csf.storage_size == 3 * 10 + 2 * 11

    def test_non_integer_indices(self):
        entries = [(('b', 'x'), 1), (('a', 'y'), 2), (('a', 'x'), 3)]
        csf = build(entries)
        assert csf.fids == (('a', 'b'), ('x', 'y', 'x'))
        assert csf.fptr == ((0, 2, 3),)
        assert csf.vals == (3, 2, 1)

    def test_check_invariants_config(self, sample_rows):
        csf = build(sample_rows, config=FiberConfig(check_invariants=True))
        assert csf.nnz == 8


class TestFiberBuilder:
    def test_push_and_finish(self):
        builder = FiberBuilder(2)
        builder.push((0, 1), 'a', 0)
        builder.push((0, 3), 'b', 1)
        builder.push((2, 0), 'c', 0)
        assert builder.nnz == 3

        csf = builder.finish()
        assert isinstance(csf, CompressedSparseFiber)
        assert csf.fptr == ((0, 2, 3),)
        assert csf.fids == ((0, 2), (1, 3, 0))

    def test_first_push_must_open_root(self):
        builder = FiberBuilder(2)
        with pytest.raises(ValueError):
            builder.push((0, 1), 'a', 1)

    def test_coordinate_length_checked(self):
        builder = FiberBuilder(2)
        with pytest.raises(DimensionMismatch) as excinfo:
            builder.push((0, 1, 9), 'a', 0)
        assert excinfo.value.expected == 2
        assert excinfo.value.actual == 3
        with pytest.raises(DimensionMismatch):
            builder.push((0,), 'a', 0)
        assert builder.nnz == 0

    @pytest.mark.parametrize("level", [-1, 2, 5])
    def test_level_range_checked(self, level):
        builder = FiberBuilder(2)
        builder.push((0, 1), 'a', 0)
        with pytest.raises(ValueError):
            builder.push((0, 2), 'b', level)

        csf = builder.finish()
        assert find_violations(csf) == []
        assert csf.vals == ('a',)

    def test_single_use(self):
        builder = FiberBuilder(1)
        builder.finish()
        with pytest.raises(RuntimeError):
            builder.finish()
        with pytest.raises(RuntimeError):
            builder.push((0,), 'a', 0)

    def test_invalid_order(self):
        with pytest.raises(InvalidDimension):
            FiberBuilder(0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
