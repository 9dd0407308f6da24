"""
Parallel Driver

Splits the outer loop of the kernel (destination columns of the product)
across a bounded thread pool. Every destination column belongs to exactly
one worker, so workers share A, B and the accumulator without locks; the
only synchronisation point is waiting for all workers before returning.

Because a column's value depends on nothing but that column's own scan,
the result is bit-identical to the sequential kernel for any worker count
and any partition scheme.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Union

import numpy as np

from .._config import PartitionScheme, get_config, resolve_num_threads
from ..core.error import InvalidArgumentError
from ..sparse import CscMatrix
from .spgemm import accumulate_columns, allocate_accumulator, check_operands

__all__ = [
    'partition_columns',
    'multiply_parallel',
]

logger = logging.getLogger("sparsemm.parallel")


def partition_columns(
    n_cols: int,
    n_parts: int,
    scheme: Union[PartitionScheme, str] = PartitionScheme.CONTIGUOUS,
) -> List[range]:
    """
    Split ``range(n_cols)`` into at most ``n_parts`` disjoint, non-empty parts.

    Args:
        n_cols: Number of destination columns
        n_parts: Requested number of parts (clamped to n_cols)
        scheme: CONTIGUOUS (balanced blocks, sizes differ by at most one)
            or ROUND_ROBIN (column j goes to part j % n_parts)

    Returns:
        List of ranges covering every column exactly once; empty when
        ``n_cols == 0``

    Example:
        >>> partition_columns(5, 2)
        [range(0, 3), range(3, 5)]
        >>> partition_columns(5, 2, PartitionScheme.ROUND_ROBIN)
        [range(0, 5, 2), range(1, 5, 2)]
    """
    if n_parts < 1:
        raise InvalidArgumentError(f"n_parts must be >= 1, got {n_parts}")
    if isinstance(scheme, str):
        try:
            scheme = PartitionScheme[scheme.upper()]
        except KeyError:
            raise InvalidArgumentError(f"unknown partition scheme: {scheme!r}") from None

    if n_cols <= 0:
        return []
    n_parts = min(n_parts, n_cols)

    if scheme == PartitionScheme.ROUND_ROBIN:
        return [range(p, n_cols, n_parts) for p in range(n_parts)]

    base, extra = divmod(n_cols, n_parts)
    parts = []
    start = 0
    for p in range(n_parts):
        stop = start + base + (1 if p < extra else 0)
        parts.append(range(start, stop))
        start = stop
    return parts


def multiply_parallel(
    a: CscMatrix,
    b: CscMatrix,
    num_threads: Optional[int] = None,
    partition: Optional[Union[PartitionScheme, str]] = None,
) -> np.ndarray:
    """
    Column-partitioned A @ B.

    Args:
        a: Left operand
        b: Right operand
        num_threads: Worker count; None defers to configuration/environment
        partition: Partition scheme; None uses ``config.parallel.partition``

    Returns:
        (a.n_rows, b.n_cols) float64 array, identical to ``spgemm.multiply``

    Raises:
        DimensionMismatchError: If ``a.n_cols != b.n_rows``
    """
    check_operands(a, b)
    out = allocate_accumulator(a, b)

    # rows(A) == 0 or cols(B) == 0: nothing to schedule
    if out.size == 0:
        return out

    workers = resolve_num_threads(num_threads)
    if partition is None:
        partition = get_config().parallel.partition
    parts = partition_columns(b.n_cols, workers, partition)

    logger.debug(
        "multiply_parallel: A %dx%d (nnz=%d), B %dx%d (nnz=%d), %d worker(s), %s",
        a.n_rows, a.n_cols, a.nnz, b.n_rows, b.n_cols, b.nnz,
        len(parts), getattr(partition, "name", partition),
    )

    if len(parts) == 1:
        accumulate_columns(a, b, out, parts[0])
        return out

    with ThreadPoolExecutor(max_workers=len(parts), thread_name_prefix="sparsemm") as pool:
        futures = [pool.submit(accumulate_columns, a, b, out, cols) for cols in parts]
        # Barrier: every worker finishes before the accumulator is handed out.
        for future in futures:
            future.result()

    return out
