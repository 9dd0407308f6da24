"""
Tests for column partitioning and the parallel driver.
"""

import threading

import numpy as np
import pytest

from sparsemm import (
    CscMatrix,
    DimensionMismatchError,
    InvalidArgumentError,
    PartitionScheme,
    partition_columns,
)
from sparsemm._kernel import parallel, spgemm

from conftest import random_sparse_dense


class TestPartitionColumns:
    """Test partition_columns."""

    def test_contiguous(self):
        assert partition_columns(5, 2) == [range(0, 3), range(3, 5)]

    def test_contiguous_balanced(self):
        parts = partition_columns(10, 4)
        assert [len(p) for p in parts] == [3, 3, 2, 2]

    def test_round_robin(self):
        parts = partition_columns(5, 2, PartitionScheme.ROUND_ROBIN)
        assert [list(p) for p in parts] == [[0, 2, 4], [1, 3]]

    def test_scheme_by_name(self):
        assert partition_columns(4, 2, "round_robin") == partition_columns(
            4, 2, PartitionScheme.ROUND_ROBIN)

    def test_oversubscribed_is_clamped(self):
        parts = partition_columns(3, 8)
        assert [list(p) for p in parts] == [[0], [1], [2]]

    def test_no_columns(self):
        assert partition_columns(0, 4) == []

    @pytest.mark.parametrize("scheme", list(PartitionScheme))
    @pytest.mark.parametrize("n_cols, n_parts", [(1, 1), (7, 3), (16, 4), (5, 16)])
    def test_covers_each_column_once(self, scheme, n_cols, n_parts):
        parts = partition_columns(n_cols, n_parts, scheme)
        assert all(len(p) > 0 for p in parts)
        assert sorted(j for p in parts for j in p) == list(range(n_cols))

    def test_invalid_parts(self):
        with pytest.raises(InvalidArgumentError):
            partition_columns(4, 0)

    def test_unknown_scheme(self):
        with pytest.raises(InvalidArgumentError):
            partition_columns(4, 2, "zigzag")


class TestMultiplyParallel:
    """Test multiply_parallel against the sequential kernel."""

    def test_reference_scenario(self, csc_a, csc_b, permutation_product):
        result = parallel.multiply_parallel(csc_a, csc_b, num_threads=2)
        np.testing.assert_array_equal(result, permutation_product)

    @pytest.mark.parametrize("scheme", list(PartitionScheme))
    @pytest.mark.parametrize("num_threads", [1, 2, 3, 64])
    def test_identical_to_sequential(self, rng, scheme, num_threads):
        a = CscMatrix.from_dense(random_sparse_dense(rng, 25, 30, 0.3))
        b = CscMatrix.from_dense(random_sparse_dense(rng, 30, 20, 0.3))
        expected = spgemm.multiply(a, b)
        result = parallel.multiply_parallel(a, b, num_threads=num_threads, partition=scheme)
        # bit-for-bit: each column is computed the same way by one worker
        np.testing.assert_array_equal(result, expected)

    def test_more_workers_than_columns(self, rng):
        a = CscMatrix.from_dense(random_sparse_dense(rng, 6, 4, 0.6))
        b = CscMatrix.from_dense(random_sparse_dense(rng, 4, 2, 0.6))
        result = parallel.multiply_parallel(a, b, num_threads=b.n_cols + 5)
        np.testing.assert_array_equal(result, spgemm.multiply(a, b))

    def test_zero_operands(self):
        a = CscMatrix.from_dense(np.zeros((4, 6)))
        b = CscMatrix.from_dense(np.zeros((6, 2)))
        result = parallel.multiply_parallel(a, b, num_threads=4)
        np.testing.assert_array_equal(result, np.zeros((4, 2)))

    @pytest.mark.parametrize("a_shape, b_shape", [((0, 3), (3, 2)), ((2, 3), (3, 0))])
    def test_degenerate_spawns_no_workers(self, monkeypatch, a_shape, b_shape):
        def no_pool(*args, **kwargs):
            raise AssertionError("thread pool created for an empty product")

        monkeypatch.setattr(parallel, "ThreadPoolExecutor", no_pool)
        result = parallel.multiply_parallel(
            CscMatrix.zeros(*a_shape), CscMatrix.zeros(*b_shape), num_threads=4)
        assert result.shape == (a_shape[0], b_shape[1])
        assert result.size == 0

    def test_workers_get_disjoint_columns(self, monkeypatch, rng):
        seen = []
        lock = threading.Lock()
        real = parallel.accumulate_columns

        def recording(a, b, out, columns):
            with lock:
                seen.append(list(columns))
            real(a, b, out, columns)

        monkeypatch.setattr(parallel, "accumulate_columns", recording)
        a = CscMatrix.from_dense(random_sparse_dense(rng, 8, 8, 0.5))
        b = CscMatrix.from_dense(random_sparse_dense(rng, 8, 10, 0.5))
        parallel.multiply_parallel(a, b, num_threads=4)

        assert len(seen) == 4
        assert sorted(j for cols in seen for j in cols) == list(range(10))

    def test_worker_error_propagates(self, monkeypatch, csc_a, csc_b):
        def failing(a, b, out, columns):
            if 0 in columns:
                raise RuntimeError("worker failed")

        monkeypatch.setattr(parallel, "accumulate_columns", failing)
        with pytest.raises(RuntimeError, match="worker failed"):
            parallel.multiply_parallel(csc_a, csc_b, num_threads=3)

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            parallel.multiply_parallel(CscMatrix.zeros(2, 3), CscMatrix.zeros(2, 3), num_threads=2)

    def test_uses_configured_partition(self, monkeypatch, csc_a, csc_b):
        import sparsemm

        captured = {}
        real = parallel.partition_columns

        def spy(n_cols, n_parts, scheme):
            captured["scheme"] = scheme
            return real(n_cols, n_parts, scheme)

        monkeypatch.setattr(parallel, "partition_columns", spy)
        sparsemm.config.parallel.partition = PartitionScheme.ROUND_ROBIN
        parallel.multiply_parallel(csc_a, csc_b, num_threads=2)
        assert captured["scheme"] == PartitionScheme.ROUND_ROBIN
