"""
Error handling for sparsemm.

Every failure multiply_sparse reports is a validation failure detected at the
boundary, before any encoding or allocation. Once validation passes, encoding
and multiplication cannot fail.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
SPARSEMM_OK = 0

# General errors (1-9)
SPARSEMM_ERROR_UNKNOWN = 1
SPARSEMM_ERROR_INTERNAL = 2

# Argument errors (10-19)
SPARSEMM_ERROR_INVALID_ARGUMENT = 10
SPARSEMM_ERROR_DIMENSION_MISMATCH = 11
SPARSEMM_ERROR_OUTPUT_SIZE_MISMATCH = 12
SPARSEMM_ERROR_BUFFER_SIZE_MISMATCH = 13

# Format errors (20-29)
SPARSEMM_ERROR_INVALID_FORMAT = 20


_ERROR_MESSAGES = {
    SPARSEMM_OK: "Success",
    SPARSEMM_ERROR_UNKNOWN: "Unknown error",
    SPARSEMM_ERROR_INTERNAL: "Internal error",
    SPARSEMM_ERROR_INVALID_ARGUMENT: "Invalid argument",
    SPARSEMM_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    SPARSEMM_ERROR_OUTPUT_SIZE_MISMATCH: "Output size mismatch",
    SPARSEMM_ERROR_BUFFER_SIZE_MISMATCH: "Buffer size mismatch",
    SPARSEMM_ERROR_INVALID_FORMAT: "Invalid compressed-column format",
}


# =============================================================================
# Exception Classes
# =============================================================================

class SparseMMError(Exception):
    """
    Base exception for all sparsemm errors.

    Attributes:
        code: Numeric error code (one of the SPARSEMM_* constants)
        message: Human-readable description
    """

    OK = SPARSEMM_OK
    ERROR_UNKNOWN = SPARSEMM_ERROR_UNKNOWN
    ERROR_INTERNAL = SPARSEMM_ERROR_INTERNAL
    ERROR_INVALID_ARGUMENT = SPARSEMM_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = SPARSEMM_ERROR_DIMENSION_MISMATCH
    ERROR_OUTPUT_SIZE_MISMATCH = SPARSEMM_ERROR_OUTPUT_SIZE_MISMATCH
    ERROR_BUFFER_SIZE_MISMATCH = SPARSEMM_ERROR_BUFFER_SIZE_MISMATCH
    ERROR_INVALID_FORMAT = SPARSEMM_ERROR_INVALID_FORMAT

    def __init__(self, code: int, message: Optional[str] = None):
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(f"sparsemm error {code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "SparseMMError":
        """Create the exception matching ``code``, with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        error_cls = _ERROR_CLASSES.get(code)
        if error_cls is not None:
            return error_cls(msg)
        return cls(code, msg)


class ValidationError(SparseMMError, ValueError):
    """Raised when caller-supplied buffers or dimensions are rejected."""

    default_code = SPARSEMM_ERROR_INVALID_ARGUMENT

    def __init__(self, message: Optional[str] = None):
        super().__init__(self.default_code, message)


class InvalidArgumentError(ValidationError):
    """Negative or non-integer dimension, unsupported or read-only buffer."""

    default_code = SPARSEMM_ERROR_INVALID_ARGUMENT


class BufferSizeMismatchError(ValidationError):
    """Input buffer length differs from ``rows * cols``."""

    default_code = SPARSEMM_ERROR_BUFFER_SIZE_MISMATCH


class DimensionMismatchError(ValidationError):
    """Inner dimensions disagree: ``cols(A) != rows(B)``."""

    default_code = SPARSEMM_ERROR_DIMENSION_MISMATCH


class OutputSizeMismatchError(ValidationError):
    """Output buffer does not hold exactly ``rows(A) x cols(B)`` values."""

    default_code = SPARSEMM_ERROR_OUTPUT_SIZE_MISMATCH


class InvalidFormatError(SparseMMError, ValueError):
    """Compressed-column arrays violate the format invariants."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(SPARSEMM_ERROR_INVALID_FORMAT, message)


_ERROR_CLASSES = {
    SPARSEMM_ERROR_INVALID_ARGUMENT: InvalidArgumentError,
    SPARSEMM_ERROR_DIMENSION_MISMATCH: DimensionMismatchError,
    SPARSEMM_ERROR_OUTPUT_SIZE_MISMATCH: OutputSizeMismatchError,
    SPARSEMM_ERROR_BUFFER_SIZE_MISMATCH: BufferSizeMismatchError,
    SPARSEMM_ERROR_INVALID_FORMAT: InvalidFormatError,
}


def error_message(code: int) -> str:
    """Get the default message for an error code."""
    return _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
