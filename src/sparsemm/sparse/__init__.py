"""
sparsemm.sparse - compressed-column storage.

Classes:
    CSCBase: Abstract column-access interface
    CscMatrix: In-memory compressed-column matrix

Functions:
    encode: Dense view -> CscMatrix (exact-zero sparsity)

Example:
    >>> from sparsemm.sparse import CscMatrix
    >>> mat = CscMatrix.from_dense([[1.0, 0.0], [0.0, 2.0]])
    >>> mat.nnz
    2
"""

from ._base import CSCBase, SparseFormat
from ._csc import CscMatrix, encode

__all__ = [
    'CSCBase',
    'SparseFormat',
    'CscMatrix',
    'encode',
]
