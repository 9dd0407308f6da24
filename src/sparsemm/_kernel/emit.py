"""
Result Emitter

Copies the finished accumulator into a caller-owned destination, row-major
and verbatim. Destinations are checked by ``check_destination`` at the
boundary, before any work starts, so ``emit`` itself never fails on a
destination that passed the check.

Supported destinations:
    - numpy arrays: writable, floating dtype, either 2-D with shape
      (rows, cols) or any other shape with rows * cols elements
    - Python lists with rows * cols items (replaced in place)
    - writable C-contiguous buffers of doubles (``array.array('d')``,
      ``memoryview``, ``bytearray`` cast to 'd', ...)
"""

from typing import Any, Tuple

import numpy as np

from ..core.error import InvalidArgumentError, OutputSizeMismatchError

__all__ = [
    'check_destination',
    'emit',
]


def _buffer_view(destination: Any) -> memoryview:
    try:
        view = memoryview(destination)
    except TypeError:
        raise InvalidArgumentError(
            f"unsupported output buffer type: {type(destination).__name__}"
        ) from None
    if view.readonly:
        raise InvalidArgumentError("output buffer is read-only")
    if view.format not in ('d', '@d'):
        raise InvalidArgumentError(
            f"output buffer must hold doubles, got format {view.format!r}"
        )
    if not view.c_contiguous:
        raise InvalidArgumentError("output buffer must be C-contiguous")
    return view


def check_destination(destination: Any, shape: Tuple[int, int]) -> None:
    """
    Validate that ``destination`` can receive a product of ``shape``.

    Raises:
        InvalidArgumentError: Unsupported, read-only or non-float destination
        OutputSizeMismatchError: Wrong shape or element count
    """
    rows, cols = shape
    expected = rows * cols

    if isinstance(destination, np.ndarray):
        if not destination.flags.writeable:
            raise InvalidArgumentError("output array is read-only")
        if not np.issubdtype(destination.dtype, np.floating):
            raise InvalidArgumentError(
                f"output array must have a floating dtype, got {destination.dtype}"
            )
        if destination.ndim == 2:
            if destination.shape != (rows, cols):
                raise OutputSizeMismatchError(
                    f"output shape {destination.shape} != expected {(rows, cols)}"
                )
        elif destination.size != expected:
            raise OutputSizeMismatchError(
                f"output holds {destination.size} values, expected {rows} x {cols} = {expected}"
            )
        return

    if isinstance(destination, list):
        size = len(destination)
    else:
        size = _buffer_view(destination).nbytes // np.dtype(np.float64).itemsize

    if size != expected:
        raise OutputSizeMismatchError(
            f"output holds {size} values, expected {rows} x {cols} = {expected}"
        )


def emit(accumulator: np.ndarray, destination: Any) -> None:
    """
    Copy ``accumulator`` into ``destination`` in row-major order.

    Args:
        accumulator: Finished (rows, cols) product
        destination: Buffer accepted by ``check_destination``
    """
    flat = accumulator.reshape(-1)

    if isinstance(destination, list):
        destination[:] = flat.tolist()
    elif flat.size == 0:
        return
    elif isinstance(destination, np.ndarray):
        np.copyto(destination, flat.reshape(destination.shape))
    else:
        target = np.frombuffer(_buffer_view(destination), dtype=np.float64)
        target[:] = flat
