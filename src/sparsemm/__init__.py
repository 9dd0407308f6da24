"""
sparsemm - Sparse Matrix Multiplication

Multiplies dense matrices by encoding them in compressed-column (CSC) form
and accumulating only structurally non-zero products, sequentially or
across a column-partitioned thread pool.

Entry Points:
    multiply_sparse: Caller buffers in, caller buffer out (validated boundary)
    matmul: Two dense 2-D arrays in, new ndarray out
    multiply_csc: Two CscMatrix operands in, new ndarray out

Storage:
    CscMatrix: Compressed-column matrix (values, row_indices, col_offsets)
    DenseMatrixView: Read-only typed view over caller-owned dense buffers

Usage:
    >>> import sparsemm
    >>> out = [0.0] * 9
    >>> sparsemm.multiply_sparse([4, 0, 0, 0, 0, 1, 0, 2, 0], 3, 3,
    ...                          [9, 1, 0, 0, 0, 7, 3, 0, 0], 3, 3, out)
    >>> out
    [36.0, 4.0, 0.0, 3.0, 0.0, 0.0, 0.0, 0.0, 14.0]

    # Force four workers for one block of code
    >>> with sparsemm.config.local(parallel=sparsemm.ParallelConfig(
    ...         strategy=sparsemm.ParallelStrategy.PARALLEL, num_threads=4)):
    ...     c = sparsemm.matmul(a, b)
"""

__version__ = "0.1.0"

# Error handling and dense boundary
from .core import (
    SparseMMError,
    ValidationError,
    InvalidArgumentError,
    BufferSizeMismatchError,
    DimensionMismatchError,
    OutputSizeMismatchError,
    InvalidFormatError,
    DenseMatrixView,
)

# Configuration
from ._config import (
    ParallelStrategy,
    PartitionScheme,
    ParallelConfig,
    config,
    get_config,
    set_parallel,
)

# Compressed-column storage
from .sparse import (
    CSCBase,
    CscMatrix,
    encode,
)

# Operations
from ._kernel.parallel import partition_columns
from .ops import (
    multiply_sparse,
    multiply_csc,
    matmul,
)

__all__ = [
    # Version
    "__version__",
    # Error handling
    "SparseMMError",
    "ValidationError",
    "InvalidArgumentError",
    "BufferSizeMismatchError",
    "DimensionMismatchError",
    "OutputSizeMismatchError",
    "InvalidFormatError",
    # Dense boundary
    "DenseMatrixView",
    # Configuration
    "ParallelStrategy",
    "PartitionScheme",
    "ParallelConfig",
    "config",
    "get_config",
    "set_parallel",
    # Compressed-column storage
    "CSCBase",
    "CscMatrix",
    "encode",
    # Operations
    "partition_columns",
    "multiply_sparse",
    "multiply_csc",
    "matmul",
]
