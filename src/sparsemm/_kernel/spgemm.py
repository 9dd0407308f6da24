"""
Sparse x Sparse Multiplication Kernel

Column-by-column accumulation of C = A @ B with both operands in
compressed-column form:

    for each column j of B:
        for each stored (val2, row2) in column j of B:
            for each stored (val1, row1) in column row2 of A:
                C[row1, j] += val1 * val2

Only structurally non-zero triples are visited. Within column row2 of A the
row indices are unique, so the innermost loop is a single vectorised
scatter-add into column j of the accumulator; each cell still receives its
contributions one at a time in ascending position of B's column j.

Destination column j is written only while processing column j, which is
what lets the parallel driver split the outer loop without locks.
"""

from typing import Iterable

import numpy as np

from ..core.error import DimensionMismatchError
from ..sparse import CscMatrix

__all__ = [
    'check_operands',
    'allocate_accumulator',
    'accumulate_columns',
    'count_products',
    'multiply',
]


def check_operands(a: CscMatrix, b: CscMatrix) -> None:
    """
    Ensure the inner dimensions agree.

    Raises:
        DimensionMismatchError: If ``a.n_cols != b.n_rows``
    """
    if a.n_cols != b.n_rows:
        raise DimensionMismatchError(
            f"cols(A) = {a.n_cols} does not match rows(B) = {b.n_rows}"
        )


def allocate_accumulator(a: CscMatrix, b: CscMatrix) -> np.ndarray:
    """Zero-initialised (rows(A), cols(B)) float64 accumulator."""
    return np.zeros((a.n_rows, b.n_cols), dtype=np.float64)


def accumulate_columns(
    a: CscMatrix,
    b: CscMatrix,
    out: np.ndarray,
    columns: Iterable[int],
) -> None:
    """
    Accumulate destination columns ``columns`` of A @ B into ``out``.

    Reads A and B only and writes only ``out[:, j]`` for j in ``columns``;
    concurrent calls with disjoint column sets never touch the same cell.

    Args:
        a: Left operand
        b: Right operand (a.n_cols == b.n_rows)
        out: Accumulator of shape (a.n_rows, b.n_cols)
        columns: Destination column indices
    """
    a_values = a.values
    a_rows = a.row_indices
    a_offsets = a.col_offsets.tolist()

    b_values = b.values.tolist()
    b_rows = b.row_indices.tolist()
    b_offsets = b.col_offsets.tolist()

    for j in columns:
        dest = out[:, j]
        for k in range(b_offsets[j], b_offsets[j + 1]):
            row2 = b_rows[k]
            start, end = a_offsets[row2], a_offsets[row2 + 1]
            if start == end:
                continue
            dest[a_rows[start:end]] += a_values[start:end] * b_values[k]


def count_products(a: CscMatrix, b: CscMatrix) -> int:
    """
    Number of multiply-adds the kernel performs for A @ B.

    Each stored entry of B in row k pairs with every stored entry of
    column k of A.
    """
    if b.nnz == 0:
        return 0
    return int(a.col_lengths[b.row_indices].sum())


def multiply(a: CscMatrix, b: CscMatrix) -> np.ndarray:
    """
    Sequential kernel: dense A @ B from two compressed-column operands.

    Args:
        a: Left operand
        b: Right operand

    Returns:
        (a.n_rows, b.n_cols) float64 array

    Raises:
        DimensionMismatchError: If ``a.n_cols != b.n_rows``
    """
    check_operands(a, b)
    out = allocate_accumulator(a, b)
    if out.size:
        accumulate_columns(a, b, out, range(b.n_cols))
    return out
