"""Compressed-Column (CSC) Matrix and Sparse Encoder.

A CscMatrix stores a matrix column by column:

    values       stored entries, all of column 0, then column 1, ...
    row_indices  row of each stored entry (same length as values)
    col_offsets  length cols + 1; column j occupies
                 [col_offsets[j], col_offsets[j + 1])

An entry is stored iff it compares unequal to zero. The test is exact:
-0.0 is absent, NaN is stored. Sparsity here is structural, not a
tolerance.

Example:
    >>> mat = CscMatrix.from_dense([[4, 0, 0], [0, 0, 1], [0, 2, 0]])
    >>> mat.values.tolist()
    [4.0, 2.0, 1.0]
    >>> mat.row_indices.tolist()
    [0, 2, 1]
    >>> mat.col_offsets.tolist()
    [0, 1, 2, 3]
"""

from typing import Any, Tuple, Union

import numpy as np

from ..core.dense import DenseMatrixView, check_dimension
from ..core.error import InvalidFormatError
from ._base import CSCBase

__all__ = ['CscMatrix', 'encode']


VALUE_DTYPE = np.float64
INDEX_DTYPE = np.int64


class CscMatrix(CSCBase):
    """In-memory compressed-column matrix.

    Attributes:
        values: Stored entries in column-major order (float64).
        row_indices: Row index of each stored entry (int64).
        col_offsets: Column start offsets, length n_cols + 1 (int64).
        shape: Matrix dimensions (n_rows, n_cols), kept even when nnz == 0.

    Example:
        >>> mat = CscMatrix.from_dense(np.eye(3))
        >>> mat.nnz
        3
        >>> mat.get_col(1)
        (array([1.]), array([1]))
    """

    __slots__ = ('_values', '_row_indices', '_col_offsets', '_shape')

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(
        self,
        values: Any,
        row_indices: Any,
        col_offsets: Any,
        shape: Tuple[int, int],
        *,
        validate: bool = True,
    ):
        """Initialize from the three compressed-column arrays.

        Args:
            values: Stored values.
            row_indices: Row index of each stored value.
            col_offsets: Column offsets (length cols + 1).
            shape: (rows, cols).
            validate: Check the format invariants. The encoder skips this
                because its output satisfies them by construction.

        Raises:
            InvalidArgumentError: Bad shape.
            InvalidFormatError: Arrays violate the format invariants.
        """
        rows = check_dimension("rows", shape[0])
        cols = check_dimension("cols", shape[1])

        self._values = np.asarray(values, dtype=VALUE_DTYPE)
        self._row_indices = np.asarray(row_indices, dtype=INDEX_DTYPE)
        self._col_offsets = np.asarray(col_offsets, dtype=INDEX_DTYPE)
        self._shape = (rows, cols)

        if validate:
            self._validate_arrays()

    def _validate_arrays(self) -> None:
        """Check array dimensions and the index invariants."""
        rows, cols = self._shape
        values, row_indices, col_offsets = self._values, self._row_indices, self._col_offsets

        if values.ndim != 1 or row_indices.ndim != 1 or col_offsets.ndim != 1:
            raise InvalidFormatError("values, row_indices and col_offsets must be 1-D")
        if len(col_offsets) != cols + 1:
            raise InvalidFormatError(
                f"col_offsets size mismatch: expected {cols + 1}, got {len(col_offsets)}"
            )
        if len(values) != len(row_indices):
            raise InvalidFormatError(
                f"values/row_indices length mismatch: {len(values)} vs {len(row_indices)}"
            )

        nnz = len(values)
        if col_offsets[0] != 0:
            raise InvalidFormatError(f"col_offsets[0] must be 0, got {col_offsets[0]}")
        if col_offsets[-1] != nnz:
            raise InvalidFormatError(
                f"col_offsets[-1] must equal nnz ({nnz}), got {col_offsets[-1]}"
            )
        if np.any(np.diff(col_offsets) < 0):
            raise InvalidFormatError("col_offsets must be non-decreasing")

        if nnz == 0:
            return

        if row_indices.min() < 0 or row_indices.max() >= rows:
            raise InvalidFormatError(f"row index out of range [0, {rows})")

        # Strictly increasing within a column; a column start may drop.
        within_column = np.ones(nnz - 1, dtype=bool)
        starts = col_offsets[1:-1]
        starts = starts[(starts > 0) & (starts < nnz)]
        within_column[starts - 1] = False
        if np.any(np.diff(row_indices)[within_column] <= 0):
            raise InvalidFormatError("row indices must be strictly increasing within each column")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        return self._shape

    @property
    def n_rows(self) -> int:
        return self._shape[0]

    @property
    def n_cols(self) -> int:
        return self._shape[1]

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return int(self._col_offsets[-1])

    @property
    def dtype(self) -> np.dtype:
        return self._values.dtype

    @property
    def values(self) -> np.ndarray:
        """Stored values, column-major."""
        return self._values

    @property
    def row_indices(self) -> np.ndarray:
        """Row index of each stored value."""
        return self._row_indices

    @property
    def col_offsets(self) -> np.ndarray:
        """Column offsets (length n_cols + 1)."""
        return self._col_offsets

    @property
    def col_lengths(self) -> np.ndarray:
        """Number of stored entries per column."""
        return np.diff(self._col_offsets)

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_dense(cls, dense: Union[DenseMatrixView, Any]) -> 'CscMatrix':
        """Encode a dense matrix.

        Args:
            dense: DenseMatrixView, or any 2-D array-like.

        Returns:
            CscMatrix holding every entry that is not exactly zero.
        """
        if not isinstance(dense, DenseMatrixView):
            dense = DenseMatrixView.from_array(dense)
        return encode(dense)

    @classmethod
    def from_scipy(cls, mat: Any) -> 'CscMatrix':
        """Create from any scipy sparse matrix (converted to canonical CSC).

        Explicitly stored zeros are dropped so the result follows the same
        sparsity rule as the encoder.
        """
        import scipy.sparse as sp

        if not sp.issparse(mat):
            raise TypeError(f"expected a scipy sparse matrix, got {type(mat).__name__}")

        csc = sp.csc_matrix(mat, dtype=VALUE_DTYPE, copy=True)
        csc.eliminate_zeros()
        csc.sum_duplicates()
        csc.sort_indices()
        return cls(csc.data, csc.indices, csc.indptr, csc.shape)

    @classmethod
    def zeros(cls, rows: int, cols: int) -> 'CscMatrix':
        """Create an all-zero matrix (no stored entries)."""
        cols = check_dimension("cols", cols)
        return cls(
            np.empty(0, dtype=VALUE_DTYPE),
            np.empty(0, dtype=INDEX_DTYPE),
            np.zeros(cols + 1, dtype=INDEX_DTYPE),
            (rows, cols),
            validate=False,
        )

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_dense(self) -> np.ndarray:
        """Convert to a dense (rows, cols) float64 array."""
        out = np.zeros(self._shape, dtype=VALUE_DTYPE)
        cols = np.repeat(np.arange(self.n_cols, dtype=INDEX_DTYPE), self.col_lengths)
        out[self._row_indices, cols] = self._values
        return out

    def to_scipy(self) -> Any:
        """Convert to scipy.sparse.csc_matrix (arrays are copied)."""
        import scipy.sparse as sp
        return sp.csc_matrix(
            (self._values.copy(), self._row_indices.copy(), self._col_offsets.copy()),
            shape=self._shape,
        )

    def copy(self) -> 'CscMatrix':
        """Deep copy."""
        return CscMatrix(
            self._values.copy(),
            self._row_indices.copy(),
            self._col_offsets.copy(),
            self._shape,
            validate=False,
        )

    # =========================================================================
    # Column Access
    # =========================================================================

    def _check_col(self, j: int) -> None:
        if not 0 <= j < self.n_cols:
            raise IndexError(f"column {j} out of range for {self.n_cols} columns")

    def col_values(self, j: int) -> np.ndarray:
        self._check_col(j)
        return self._values[self._col_offsets[j]:self._col_offsets[j + 1]]

    def col_indices(self, j: int) -> np.ndarray:
        self._check_col(j)
        return self._row_indices[self._col_offsets[j]:self._col_offsets[j + 1]]

    def col_length(self, j: int) -> int:
        self._check_col(j)
        return int(self._col_offsets[j + 1] - self._col_offsets[j])

    def info(self) -> str:
        """Multi-line summary of shape and storage."""
        nbytes = self._values.nbytes + self._row_indices.nbytes + self._col_offsets.nbytes
        return (
            f"CscMatrix\n"
            f"  shape:   {self.n_rows} x {self.n_cols}\n"
            f"  nnz:     {self.nnz}\n"
            f"  density: {self.density:.6f}\n"
            f"  memory:  {nbytes} bytes"
        )


# =============================================================================
# Sparse Encoder
# =============================================================================

def encode(dense: DenseMatrixView) -> CscMatrix:
    """Encode a dense view into compressed-column form.

    Columns are scanned left to right and rows top to bottom within each
    column, so row indices come out strictly increasing per column and
    col_offsets[j] is the number of entries stored before column j.

    Args:
        dense: Validated dense view.

    Returns:
        CscMatrix of the same shape. An all-zero input yields nnz == 0 and
        all-zero col_offsets.
    """
    rows, cols = dense.shape

    # Transposed view: C-order traversal of it is the column-major scan.
    by_col = dense.as_array().T
    stored = by_col != 0

    values = by_col[stored]
    _, row_indices = np.nonzero(stored)

    col_offsets = np.zeros(cols + 1, dtype=INDEX_DTYPE)
    np.cumsum(stored.sum(axis=1), out=col_offsets[1:])

    return CscMatrix(
        values.astype(VALUE_DTYPE, copy=False),
        row_indices.astype(INDEX_DTYPE, copy=False),
        col_offsets,
        (rows, cols),
        validate=False,
    )
