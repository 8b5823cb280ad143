"""
K-Nearest-Neighbors Regression

Instance-based regressor: a query's mood is the distance-weighted mean of
the k closest training targets (Euclidean distance, weight 1/(d + ε)).
Exact matches (d = 0) get a fixed large weight instead.

Training metrics use leave-one-out evaluation, since a training point is
always its own nearest neighbour and in-sample scores would be trivially
perfect.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np

from ..evaluation.metrics import mean_squared_error, r2_score
from .base import ModelFittingError, as_query_matrix, validate_training_data

logger = logging.getLogger(__name__)

DEFAULT_K = 5
DISTANCE_EPSILON = 1e-5
EXACT_MATCH_WEIGHT = 1000.0


def _weighted_neighbour_mean(distances: np.ndarray, targets: np.ndarray, k: int) -> float:
    """Weighted mean of the targets of the k smallest distances."""
    k = min(k, len(distances))
    nearest = np.argsort(distances, kind="stable")[:k]
    nearest_distances = distances[nearest]

    weights = np.where(
        nearest_distances == 0,
        EXACT_MATCH_WEIGHT,
        1.0 / (nearest_distances + DISTANCE_EPSILON),
    )
    return float(np.sum(weights * targets[nearest]) / np.sum(weights))


@dataclass(frozen=True, eq=False)
class TrainedKnnModel:
    """KNN model retaining its training data."""

    X_train: np.ndarray
    y_train: np.ndarray
    k: int
    train_r2: float
    train_mse: float
    name: str = field(default="knn", init=False)
    display_name: str = field(default="K-Nearest Neighbors", init=False)

    def predict(self, X: np.ndarray) -> np.ndarray:
        X = as_query_matrix(X, self.X_train.shape[1])
        predictions = np.empty(len(X))
        for i, row in enumerate(X):
            distances = np.sqrt(np.sum((self.X_train - row) ** 2, axis=1))
            predictions[i] = _weighted_neighbour_mean(distances, self.y_train, self.k)
        return predictions

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.name,
            'k': self.k,
            'n_train': int(len(self.y_train)),
            'train_r2': self.train_r2,
            'train_mse': self.train_mse,
        }


def leave_one_out_predictions(X: np.ndarray, y: np.ndarray, k: int) -> np.ndarray:
    """Predict each training row from the other n - 1 rows."""
    n = len(X)
    predictions = np.empty(n)
    for i in range(n):
        others = np.arange(n) != i
        distances = np.sqrt(np.sum((X[others] - X[i]) ** 2, axis=1))
        predictions[i] = _weighted_neighbour_mean(distances, y[others], k)
    return predictions


def fit_knn(X: np.ndarray, y: np.ndarray, k: int = DEFAULT_K) -> TrainedKnnModel:
    """
    Store the training data and compute leave-one-out training metrics.

    With fewer than k training points, every available point is used.
    """
    if k < 1:
        raise ModelFittingError(f"k must be at least 1, got {k}")

    X, y = validate_training_data(X, y)
    X = X.copy()
    y = y.copy()
    X.setflags(write=False)
    y.setflags(write=False)

    if len(y) > 1:
        loo = leave_one_out_predictions(X, y, k)
        train_r2 = r2_score(y, loo)
        train_mse = mean_squared_error(y, loo)
    else:
        # a single point has no neighbours to be evaluated against
        train_r2, train_mse = 0.0, 0.0

    if len(y) < k:
        logger.warning(f"Only {len(y)} training points for k={k}; using all of them")

    model = TrainedKnnModel(
        X_train=X, y_train=y, k=k, train_r2=train_r2, train_mse=train_mse
    )
    logger.info(f"KNN (k={k}) fitted on {len(y)} rows (LOO R²={train_r2:.4f})")
    return model
