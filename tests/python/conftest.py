"""
Pytest configuration and shared fixtures for sparsemm tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import sparsemm
from sparsemm import CscMatrix


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore default configuration after every test."""
    yield
    sparsemm.config.reset()


@pytest.fixture
def permutation_a():
    """3x3 matrix from the reference scenario.

    Matrix:
    [[4, 0, 0],
     [0, 0, 1],
     [0, 2, 0]]
    """
    return np.array([
        [4, 0, 0],
        [0, 0, 1],
        [0, 2, 0],
    ], dtype=np.float64)


@pytest.fixture
def permutation_b():
    """3x3 right operand from the reference scenario.

    Matrix:
    [[9, 1, 0],
     [0, 0, 7],
     [3, 0, 0]]
    """
    return np.array([
        [9, 1, 0],
        [0, 0, 7],
        [3, 0, 0],
    ], dtype=np.float64)


@pytest.fixture
def permutation_product():
    """Expected product of permutation_a and permutation_b."""
    return np.array([
        [36, 4, 0],
        [3, 0, 0],
        [0, 0, 14],
    ], dtype=np.float64)


@pytest.fixture
def csc_a(permutation_a):
    return CscMatrix.from_dense(permutation_a)


@pytest.fixture
def csc_b(permutation_b):
    return CscMatrix.from_dense(permutation_b)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


# =============================================================================
# Helper Functions
# =============================================================================

def random_sparse_dense(rng, rows, cols, density=0.3):
    """Dense float64 array with roughly ``density`` non-zero entries."""
    dense = rng.standard_normal((rows, cols))
    dense[rng.random((rows, cols)) >= density] = 0.0
    return dense


def dense_reference(a, b):
    """Straightforward triple-loop product, used as ground truth."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    rows, inner = a.shape
    cols = b.shape[1]
    out = np.zeros((rows, cols), dtype=np.float64)
    for i in range(rows):
        for j in range(cols):
            total = 0.0
            for k in range(inner):
                total += a[i, k] * b[k, j]
            out[i, j] = total
    return out


def assert_array_equal(a1, a2, rtol=1e-9, atol=1e-12):
    """Assert two arrays are approximately equal."""
    np.testing.assert_allclose(np.asarray(a1), np.asarray(a2), rtol=rtol, atol=atol)
