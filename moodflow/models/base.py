"""
Common interface for trained mood regressors.

Each estimator exposes a ``fit_*`` function that returns an immutable
trained model; every trained model satisfies the ``TrainedModel`` protocol.
"""

from typing import Protocol, Tuple, runtime_checkable

import numpy as np


class ModelFittingError(Exception):
    """Raised when an estimator cannot be fitted on the given data."""


@runtime_checkable
class TrainedModel(Protocol):
    """A fitted regressor with in-sample (or leave-one-out) metrics."""

    name: str
    display_name: str
    train_r2: float
    train_mse: float

    def predict(self, X: np.ndarray) -> np.ndarray:
        ...


def validate_training_data(X: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Coerce training data to float arrays and check shapes.

    Raises:
        ModelFittingError: On empty data, non-2D X or length mismatch
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float).ravel()

    if X.ndim != 2:
        raise ModelFittingError(f"X must be 2-dimensional, got shape {X.shape}")
    if X.shape[0] == 0:
        raise ModelFittingError("Cannot fit on an empty training set")
    if X.shape[0] != y.shape[0]:
        raise ModelFittingError(
            f"X has {X.shape[0]} rows but y has {y.shape[0]} targets"
        )
    if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
        raise ModelFittingError("Training data contains NaN or infinite values")

    return X, y


def as_query_matrix(X: np.ndarray, n_features: int) -> np.ndarray:
    """Accept a single row or a matrix of rows for prediction."""
    X = np.asarray(X, dtype=float)
    if X.ndim == 1:
        X = X.reshape(1, -1)
    if X.shape[1] != n_features:
        raise ValueError(f"Expected {n_features} features, got {X.shape[1]}")
    return X
