"""
sparsemm core - errors and the dense boundary view.

Provides:
- SparseMMError and the validation error hierarchy
- DenseMatrixView: typed read-only view over caller-owned dense buffers
"""

from .error import (
    SparseMMError,
    ValidationError,
    InvalidArgumentError,
    BufferSizeMismatchError,
    DimensionMismatchError,
    OutputSizeMismatchError,
    InvalidFormatError,
    error_message,
    # Error codes
    SPARSEMM_OK,
    SPARSEMM_ERROR_UNKNOWN,
    SPARSEMM_ERROR_INTERNAL,
    SPARSEMM_ERROR_INVALID_ARGUMENT,
    SPARSEMM_ERROR_DIMENSION_MISMATCH,
    SPARSEMM_ERROR_OUTPUT_SIZE_MISMATCH,
    SPARSEMM_ERROR_BUFFER_SIZE_MISMATCH,
    SPARSEMM_ERROR_INVALID_FORMAT,
)

from .dense import (
    DenseMatrixView,
    check_dimension,
)

__all__ = [
    # Error handling
    "SparseMMError",
    "ValidationError",
    "InvalidArgumentError",
    "BufferSizeMismatchError",
    "DimensionMismatchError",
    "OutputSizeMismatchError",
    "InvalidFormatError",
    "error_message",
    "SPARSEMM_OK",
    "SPARSEMM_ERROR_UNKNOWN",
    "SPARSEMM_ERROR_INTERNAL",
    "SPARSEMM_ERROR_INVALID_ARGUMENT",
    "SPARSEMM_ERROR_DIMENSION_MISMATCH",
    "SPARSEMM_ERROR_OUTPUT_SIZE_MISMATCH",
    "SPARSEMM_ERROR_BUFFER_SIZE_MISMATCH",
    "SPARSEMM_ERROR_INVALID_FORMAT",
    # Dense boundary
    "DenseMatrixView",
    "check_dimension",
]
