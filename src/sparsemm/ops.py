"""
sparsemm Ops - public multiplication entry points.

    multiply_sparse  caller buffers in, caller buffer out (validated boundary)
    matmul           two dense 2-D arrays in, new ndarray out
    multiply_csc     two CscMatrix operands in, new ndarray out

All three share one pipeline: validate -> encode -> kernel (sequential or
column-partitioned) -> emit. The execution strategy is the only thing that
varies between sequential and parallel runs.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from ._config import ParallelStrategy, get_config, resolve_num_threads
from .core.dense import DenseMatrixView, check_dimension
from .core.error import DimensionMismatchError
from .sparse import CscMatrix, encode
from ._kernel import spgemm
from ._kernel.emit import check_destination, emit
from ._kernel.parallel import multiply_parallel

__all__ = [
    "multiply_sparse",
    "multiply_csc",
    "matmul",
]

logger = logging.getLogger("sparsemm.ops")


# =============================================================================
# Strategy Selection
# =============================================================================

def _use_parallel(
    a: CscMatrix,
    b: CscMatrix,
    parallel: Optional[bool],
    num_threads: Optional[int],
) -> bool:
    """Decide between the sequential kernel and the parallel driver."""
    if parallel is not None:
        return bool(parallel)

    cfg = get_config().parallel
    if cfg.strategy == ParallelStrategy.SEQUENTIAL:
        return False
    if cfg.strategy == ParallelStrategy.PARALLEL:
        return True

    # AUTO
    if b.n_cols < 2 or a.n_rows == 0:
        return False
    if resolve_num_threads(num_threads) < 2:
        return False
    return spgemm.count_products(a, b) >= 2 * cfg.min_products_per_thread


def multiply_csc(
    a: CscMatrix,
    b: CscMatrix,
    *,
    parallel: Optional[bool] = None,
    num_threads: Optional[int] = None,
) -> np.ndarray:
    """
    Multiply two compressed-column matrices into a new dense array.

    Args:
        a: Left operand
        b: Right operand
        parallel: True/False forces the parallel driver / sequential
            kernel; None follows ``config.parallel.strategy``
        num_threads: Worker count for the parallel driver

    Returns:
        (a.n_rows, b.n_cols) float64 array

    Raises:
        InvalidArgumentError: If ``num_threads`` is not a non-negative integer
        DimensionMismatchError: If ``a.n_cols != b.n_rows``
    """
    if num_threads is not None:
        num_threads = check_dimension("num_threads", num_threads)
    spgemm.check_operands(a, b)

    if _use_parallel(a, b, parallel, num_threads):
        logger.debug("multiply_csc: parallel driver")
        return multiply_parallel(a, b, num_threads=num_threads)

    logger.debug("multiply_csc: sequential kernel")
    return spgemm.multiply(a, b)


# =============================================================================
# Buffer Boundary
# =============================================================================

def multiply_sparse(
    a_buffer: Any,
    a_rows: int,
    a_cols: int,
    b_buffer: Any,
    b_rows: int,
    b_cols: int,
    out_buffer: Any,
    *,
    parallel: Optional[bool] = None,
    num_threads: Optional[int] = None,
) -> None:
    """
    Multiply two dense row-major buffers through compressed-column encoding.

    Every check runs before encoding or allocation; on failure
    ``out_buffer`` is left untouched. On success it is fully overwritten
    with the row-major product.

    Args:
        a_buffer: A, row-major, a_rows * a_cols values
        a_rows, a_cols: Dimensions of A
        b_buffer: B, row-major, b_rows * b_cols values
        b_rows, b_cols: Dimensions of B
        out_buffer: Destination for a_rows * b_cols values (numpy array,
            list, or writable buffer of doubles)
        parallel: True/False forces the parallel driver / sequential
            kernel; None follows ``config.parallel.strategy``
        num_threads: Worker count for the parallel driver

    Raises:
        InvalidArgumentError: Bad dimension or ``num_threads``, buffer type
            or read-only output
        DimensionMismatchError: ``a_cols != b_rows``
        OutputSizeMismatchError: Output does not hold ``a_rows x b_cols``
        BufferSizeMismatchError: Input length differs from ``rows * cols``

    Example:
        >>> out = [0.0] * 9
        >>> multiply_sparse([4, 0, 0, 0, 0, 1, 0, 2, 0], 3, 3,
        ...                 [9, 1, 0, 0, 0, 7, 3, 0, 0], 3, 3, out)
        >>> out
        [36.0, 4.0, 0.0, 3.0, 0.0, 0.0, 0.0, 0.0, 14.0]
    """
    a_rows = check_dimension("a_rows", a_rows)
    a_cols = check_dimension("a_cols", a_cols)
    b_rows = check_dimension("b_rows", b_rows)
    b_cols = check_dimension("b_cols", b_cols)
    if num_threads is not None:
        num_threads = check_dimension("num_threads", num_threads)

    if a_cols != b_rows:
        raise DimensionMismatchError(
            f"cols(A) = {a_cols} does not match rows(B) = {b_rows}"
        )
    check_destination(out_buffer, (a_rows, b_cols))

    a_view = DenseMatrixView.wrap(a_buffer, a_rows, a_cols)
    b_view = DenseMatrixView.wrap(b_buffer, b_rows, b_cols)

    a = encode(a_view)
    b = encode(b_view)
    logger.debug(
        "multiply_sparse: A %dx%d nnz=%d, B %dx%d nnz=%d",
        a_rows, a_cols, a.nnz, b_rows, b_cols, b.nnz,
    )

    result = multiply_csc(a, b, parallel=parallel, num_threads=num_threads)
    emit(result, out_buffer)


def matmul(
    a: Any,
    b: Any,
    *,
    parallel: Optional[bool] = None,
    num_threads: Optional[int] = None,
) -> np.ndarray:
    """
    Multiply two dense 2-D array-likes, returning a new float64 array.

    Example:
        >>> matmul([[4, 0, 0], [0, 0, 1], [0, 2, 0]],
        ...        [[9, 1, 0], [0, 0, 7], [3, 0, 0]])
        array([[36.,  4.,  0.],
               [ 3.,  0.,  0.],
               [ 0.,  0., 14.]])
    """
    a_view = DenseMatrixView.from_array(a)
    b_view = DenseMatrixView.from_array(b)

    out = np.empty((a_view.rows, b_view.cols), dtype=np.float64)
    multiply_sparse(
        a_view.data, a_view.rows, a_view.cols,
        b_view.data, b_view.rows, b_view.cols,
        out,
        parallel=parallel,
        num_threads=num_threads,
    )
    return out
