"""
DenseMatrixView - read-only typed view over a caller-owned dense buffer.

The view is the only place where raw caller buffers are interpreted. The
buffer is reinterpreted exactly once, at construction, as a flat row-major
float64 array of length ``rows * cols``; nothing downstream ever looks at
the source object again.

Accepted buffers:
    - numpy arrays of any shape whose size equals ``rows * cols``
      (flattened in C order, no copy when already contiguous float64)
    - objects exposing the buffer protocol (``array.array('d')``,
      ``memoryview``, ...)
    - plain Python sequences of numbers (copied)

Strings, bytes and other non-numeric elements are rejected, not parsed.

Typical usage:
    >>> buf = [4.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 2.0, 0.0]
    >>> view = DenseMatrixView.wrap(buf, 3, 3)
    >>> view.shape
    (3, 3)
    >>> view[2, 1]
    2.0
"""

from __future__ import annotations

import operator
from typing import Any, Tuple

import numpy as np

from .error import BufferSizeMismatchError, InvalidArgumentError


def check_dimension(name: str, value: Any) -> int:
    """
    Validate a matrix dimension and return it as a plain ``int``.

    Raises:
        InvalidArgumentError: If ``value`` is not a non-negative integer
    """
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be an integer, got bool")
    try:
        value = operator.index(value)
    except TypeError:
        raise InvalidArgumentError(
            f"{name} must be an integer, got {type(value).__name__}"
        ) from None
    if value < 0:
        raise InvalidArgumentError(f"{name} must be non-negative, got {value}")
    return value


def _as_float64(buffer: Any) -> np.ndarray:
    """Interpret ``buffer`` as a float64 array of numbers (copying only if needed).

    Text, bytes and object elements are rejected rather than parsed.
    """
    try:
        arr = np.asarray(buffer)
        if arr.dtype.kind in "USOV":
            raise TypeError(f"non-numeric elements (dtype {arr.dtype})")
        arr = arr.astype(np.float64, copy=False)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            f"cannot interpret {type(buffer).__name__} as a float64 buffer: {e}"
        ) from e
    return arr


def _as_flat_float64(buffer: Any) -> np.ndarray:
    """Interpret ``buffer`` as a flat float64 array (copying only if needed)."""
    return np.ascontiguousarray(_as_float64(buffer)).reshape(-1)


class DenseMatrixView:
    """
    Read-only row-major float64 view of a dense matrix.

    Use ``wrap()`` to construct. The underlying array is marked read-only;
    when the source was already a contiguous float64 numpy array the view
    shares its memory, so the caller must not mutate it while the view is
    in use.
    """

    __slots__ = ("_data", "_rows", "_cols")

    def __init__(self, data: np.ndarray, rows: int, cols: int):
        """
        Internal constructor - use wrap() instead.

        Args:
            data: Flat float64 array of length rows * cols
            rows: Number of rows
            cols: Number of columns
        """
        self._data = data
        self._rows = rows
        self._cols = cols

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def wrap(cls, buffer: Any, rows: int, cols: int) -> "DenseMatrixView":
        """
        Create a view over ``buffer`` with explicit dimensions.

        Args:
            buffer: Row-major dense data (see module docstring)
            rows: Number of rows
            cols: Number of columns

        Returns:
            DenseMatrixView

        Raises:
            InvalidArgumentError: Bad dimension or uninterpretable buffer
            BufferSizeMismatchError: ``len(buffer) != rows * cols``
        """
        rows = check_dimension("rows", rows)
        cols = check_dimension("cols", cols)

        flat = _as_flat_float64(buffer)
        if flat.size != rows * cols:
            raise BufferSizeMismatchError(
                f"buffer holds {flat.size} values, expected {rows} x {cols} = {rows * cols}"
            )

        view = flat.view()
        view.flags.writeable = False
        return cls(view, rows, cols)

    @classmethod
    def from_array(cls, array: Any) -> "DenseMatrixView":
        """
        Create a view from a 2-D array-like, taking dimensions from its shape.

        Raises:
            InvalidArgumentError: If ``array`` is not two-dimensional
        """
        arr = _as_float64(array)
        if arr.ndim != 2:
            raise InvalidArgumentError(f"expected a 2-D array, got {arr.ndim}-D")
        return cls.wrap(arr, arr.shape[0], arr.shape[1])

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix shape (rows, cols)."""
        return (self._rows, self._cols)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def size(self) -> int:
        """Total number of elements."""
        return self._data.size

    @property
    def data(self) -> np.ndarray:
        """Flat row-major read-only array."""
        return self._data

    def as_array(self) -> np.ndarray:
        """Read-only 2-D array view of shape (rows, cols)."""
        return self._data.reshape(self._rows, self._cols)

    def __getitem__(self, key: Tuple[int, int]) -> float:
        i, j = key
        if not (0 <= i < self._rows and 0 <= j < self._cols):
            raise IndexError(f"index ({i}, {j}) out of bounds for shape {self.shape}")
        return float(self._data[i * self._cols + j])

    def __len__(self) -> int:
        return self._rows

    def __repr__(self) -> str:
        return f"DenseMatrixView(shape={self.shape})"
