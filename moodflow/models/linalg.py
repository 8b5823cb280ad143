"""
Linear Algebra Utilities

Small dense-matrix helpers for the closed-form least-squares solver:
- Intercept column augmentation
- Transpose, matrix-matrix and matrix-vector products
- Gauss-Jordan inversion with partial pivoting
"""

import numpy as np

from .base import ModelFittingError

PIVOT_TOLERANCE = 1e-10


class SingularMatrixError(ModelFittingError):
    """Raised when a matrix has no usable pivot in some column."""

    def __init__(self, column: int, pivot: float):
        super().__init__(
            f"Matrix is singular or ill-conditioned: pivot {pivot:.3e} "
            f"in column {column} is below {PIVOT_TOLERANCE:.0e}"
        )
        self.column = column
        self.pivot = pivot


def add_intercept_column(X: np.ndarray) -> np.ndarray:
    """Prepend a column of ones: (n, d) -> (n, d + 1)."""
    X = np.asarray(X, dtype=float)
    return np.hstack([np.ones((X.shape[0], 1)), X])


def transpose(A: np.ndarray) -> np.ndarray:
    return np.asarray(A, dtype=float).T


def matmul(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """Matrix-matrix product with a shape check."""
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)
    if A.shape[1] != B.shape[0]:
        raise ValueError(f"Cannot multiply {A.shape} by {B.shape}")
    return A @ B


def matvec(A: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Matrix-vector product with a shape check."""
    A = np.asarray(A, dtype=float)
    v = np.asarray(v, dtype=float)
    if A.shape[1] != v.shape[0]:
        raise ValueError(f"Cannot multiply {A.shape} by vector of length {v.shape[0]}")
    return A @ v


def invert(A: np.ndarray) -> np.ndarray:
    """
    Invert a square matrix by Gauss-Jordan elimination.

    The matrix is augmented with the identity and reduced column by column.
    In each column the row with the largest absolute value at or below the
    diagonal becomes the pivot (partial pivoting).

    Raises:
        ValueError: If the matrix is not square
        SingularMatrixError: If a pivot magnitude falls below PIVOT_TOLERANCE
    """
    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Only square matrices can be inverted, got {A.shape}")

    n = A.shape[0]
    augmented = np.hstack([A.copy(), np.eye(n)])

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(augmented[col:, col])))
        pivot = augmented[pivot_row, col]

        if abs(pivot) < PIVOT_TOLERANCE:
            raise SingularMatrixError(col, pivot)

        if pivot_row != col:
            augmented[[col, pivot_row]] = augmented[[pivot_row, col]]

        augmented[col] = augmented[col] / augmented[col, col]

        for row in range(n):
            if row != col:
                factor = augmented[row, col]
                if factor != 0.0:
                    augmented[row] = augmented[row] - factor * augmented[col]

    return augmented[:, n:]
