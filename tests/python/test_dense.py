"""
Tests for DenseMatrixView and dimension checks.
"""

import array

import numpy as np
import pytest

from sparsemm import DenseMatrixView, InvalidArgumentError, BufferSizeMismatchError
from sparsemm.core.dense import check_dimension


class TestCheckDimension:
    """Test dimension validation."""

    def test_accepts_ints(self):
        assert check_dimension("rows", 0) == 0
        assert check_dimension("rows", 7) == 7
        assert check_dimension("rows", np.int64(3)) == 3

    @pytest.mark.parametrize("value", [-1, 2.5, "3", None, True])
    def test_rejects_invalid(self, value):
        with pytest.raises(InvalidArgumentError):
            check_dimension("rows", value)


class TestDenseMatrixViewWrap:
    """Test wrapping caller buffers."""

    def test_wrap_list(self):
        view = DenseMatrixView.wrap([1, 2, 3, 4, 5, 6], 2, 3)
        assert view.shape == (2, 3)
        assert view.size == 6
        assert view[1, 0] == 4.0
        assert view.data.dtype == np.float64

    def test_wrap_array_array(self):
        buf = array.array('d', [1.0, 0.0, 0.0, 1.0])
        view = DenseMatrixView.wrap(buf, 2, 2)
        np.testing.assert_array_equal(view.as_array(), np.eye(2))

    def test_wrap_2d_numpy_shares_memory(self):
        arr = np.arange(6, dtype=np.float64).reshape(2, 3)
        view = DenseMatrixView.wrap(arr, 2, 3)
        assert np.shares_memory(view.data, arr)

    def test_wrap_converts_integer_dtype(self):
        arr = np.arange(4, dtype=np.int32)
        view = DenseMatrixView.wrap(arr, 2, 2)
        assert view.data.dtype == np.float64
        assert view[1, 1] == 3.0

    def test_view_is_read_only(self):
        arr = np.zeros(4)
        view = DenseMatrixView.wrap(arr, 2, 2)
        with pytest.raises(ValueError):
            view.data[0] = 1.0
        # caller's array stays writable
        arr[0] = 1.0
        assert view[0, 0] == 1.0

    def test_length_mismatch(self):
        with pytest.raises(BufferSizeMismatchError):
            DenseMatrixView.wrap([1.0, 2.0, 3.0], 2, 2)

    def test_empty(self):
        view = DenseMatrixView.wrap([], 0, 5)
        assert view.shape == (0, 5)
        assert view.as_array().shape == (0, 5)

    def test_uninterpretable_buffer(self):
        with pytest.raises(InvalidArgumentError):
            DenseMatrixView.wrap(["a", "b"], 1, 2)

    def test_negative_dimension(self):
        with pytest.raises(InvalidArgumentError):
            DenseMatrixView.wrap([], -1, 0)


class TestDenseMatrixViewFromArray:
    """Test construction from 2-D array-likes."""

    def test_from_nested_list(self):
        view = DenseMatrixView.from_array([[1, 2], [3, 4], [5, 6]])
        assert view.shape == (3, 2)
        assert len(view) == 3

    def test_rejects_1d(self):
        with pytest.raises(InvalidArgumentError):
            DenseMatrixView.from_array([1, 2, 3])

    def test_index_out_of_bounds(self):
        view = DenseMatrixView.from_array([[1, 2]])
        with pytest.raises(IndexError):
            view[1, 0]


class TestNonNumericBuffers:
    """Only numeric elements are accepted."""

    @pytest.mark.parametrize("buffer", [
        ["1.5", "2"],
        np.array(["1", "2"]),
        [b"1", b"2"],
        [1.0, None],
        np.array([1.0, 2.0], dtype=object),
    ])
    def test_wrap_rejects(self, buffer):
        with pytest.raises(InvalidArgumentError):
            DenseMatrixView.wrap(buffer, 1, 2)

    def test_from_array_rejects_strings(self):
        with pytest.raises(InvalidArgumentError):
            DenseMatrixView.from_array([["1", "2"]])

    def test_bool_is_numeric(self):
        view = DenseMatrixView.wrap([True, False], 1, 2)
        assert view[0, 0] == 1.0
