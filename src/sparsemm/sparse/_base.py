"""
Compressed-Column Base Class

Defines the column-access interface shared by compressed-column matrices.
The multiplication kernel only relies on three arrays (values, row indices,
column offsets); everything here is convenience built on top of them.

Type Hierarchy:

    CSCBase (ABC)
    └── CscMatrix - in-memory compressed-column matrix
"""

from abc import ABC, abstractmethod
from typing import Iterator, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from scipy.sparse import csc_matrix

__all__ = [
    'CSCBase',
    'SparseFormat',
]


class SparseFormat:
    """Enumeration of sparse matrix formats."""
    CSC = 'csc'


class CSCBase(ABC):
    """
    Abstract base class for compressed-column matrices.

    Required Properties (subclasses must implement):
        shape: Matrix dimensions (rows, cols)
        nnz: Number of stored entries

    Required Methods (subclasses must implement):
        col_values(j): Stored values of column j
        col_indices(j): Row indices of column j
        col_length(j): Number of stored entries in column j
        to_dense(): Dense numpy copy
        to_scipy(): scipy.sparse.csc_matrix copy
    """

    # =========================================================================
    # Abstract Properties
    # =========================================================================

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        ...

    @property
    @abstractmethod
    def nnz(self) -> int:
        """Number of stored (non-zero) entries."""
        ...

    # =========================================================================
    # Derived Properties
    # =========================================================================

    @property
    def format(self) -> str:
        """Sparse format (always 'csc')."""
        return SparseFormat.CSC

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self.shape[0]

    @property
    def cols(self) -> int:
        """Number of columns."""
        return self.shape[1]

    @property
    def size(self) -> int:
        """Total number of elements (rows * cols)."""
        return self.rows * self.cols

    @property
    def density(self) -> float:
        """Fraction of elements that are stored (0.0 for empty shapes)."""
        total = self.size
        return self.nnz / total if total > 0 else 0.0

    # =========================================================================
    # Abstract Methods - Column Access
    # =========================================================================

    @abstractmethod
    def col_values(self, j: int) -> np.ndarray:
        """Get stored values for column j.

        Args:
            j: Column index

        Returns:
            Array of values in column j, ordered by ascending row
        """
        ...

    @abstractmethod
    def col_indices(self, j: int) -> np.ndarray:
        """Get row indices for column j.

        Args:
            j: Column index

        Returns:
            Strictly increasing row indices of column j
        """
        ...

    @abstractmethod
    def col_length(self, j: int) -> int:
        """Get number of stored entries in column j."""
        ...

    @abstractmethod
    def to_dense(self) -> np.ndarray:
        """Convert to a dense (rows, cols) float64 array."""
        ...

    @abstractmethod
    def to_scipy(self) -> 'csc_matrix':
        """Convert to scipy.sparse.csc_matrix."""
        ...

    # =========================================================================
    # Convenience Methods
    # =========================================================================

    def get_col(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        """Get both values and row indices for column j.

        Returns:
            Tuple of (values, row_indices)
        """
        return self.col_values(j), self.col_indices(j)

    def iter_cols(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Iterate over columns, yielding (values, row_indices) tuples."""
        for j in range(self.cols):
            yield self.col_values(j), self.col_indices(j)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(shape={self.shape}, "
                f"nnz={self.nnz}, density={self.density:.4f})")

    def __len__(self) -> int:
        return self.rows

    def __bool__(self) -> bool:
        return self.nnz > 0
