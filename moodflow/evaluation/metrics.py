"""
Regression Metrics for Mood Models

Provides:
- Point metrics: MSE, RMSE, MAE, R²
- Chronological train/test split
- Held-out evaluation of a trained model
- Model comparison table
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_TRAIN_RATIO = 0.8


@dataclass(frozen=True)
class EvaluationResult:
    """Held-out and training metrics for one model."""

    test_r2: float
    test_mse: float
    test_rmse: float
    train_r2: float
    train_mse: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"test R²={self.test_r2:.4f} test MSE={self.test_mse:.4f} "
            f"test RMSE={self.test_rmse:.4f} train R²={self.train_r2:.4f}"
        )


def mean_squared_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Mean Squared Error (MSE)

    MSE = (1/n) * Σ(y_true - y_pred)²
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if y_true.size == 0:
        return 0.0
    return float(np.mean((y_true - y_pred) ** 2))


def root_mean_squared_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Square root of the MSE, in mood-scale units."""
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def mean_absolute_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if y_true.size == 0:
        return 0.0
    return float(np.mean(np.abs(y_true - y_pred)))


def r2_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    R² (Coefficient of Determination)

    R² = 1 - (SS_res / SS_tot)
    where SS_res = Σ(y_true - y_pred)²
          SS_tot = Σ(y_true - mean(y_true))²

    Negative when the model does worse than predicting the mean. A constant
    target has SS_tot = 0; R² is then 1 for a perfect fit and 0 otherwise.
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if y_true.size == 0:
        return 0.0

    ss_res = float(np.sum((y_true - y_pred) ** 2))
    ss_tot = float(np.sum((y_true - np.mean(y_true)) ** 2))

    if ss_tot == 0:
        return 1.0 if ss_res == 0 else 0.0

    return 1 - (ss_res / ss_tot)


def chronological_split(
    X: np.ndarray,
    y: np.ndarray,
    train_ratio: float = DEFAULT_TRAIN_RATIO,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Split time-ordered rows into a leading train block and trailing test block.

    No shuffling: train has floor(train_ratio * n) rows and precedes every
    test row, so no future data leaks into training.

    Returns:
        X_train, X_test, y_train, y_test
    """
    if not 0 < train_ratio < 1:
        raise ValueError(f"train_ratio must be in (0, 1), got {train_ratio}")

    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    if len(X) != len(y):
        raise ValueError(f"X has {len(X)} rows but y has {len(y)} targets")

    split = int(np.floor(train_ratio * len(X)))
    return X[:split], X[split:], y[:split], y[split:]


def evaluate_model(model, X_test: np.ndarray, y_test: np.ndarray) -> EvaluationResult:
    """
    Evaluate a trained model on held-out rows.

    Args:
        model: Any trained model exposing predict(), train_r2 and train_mse
        X_test: Held-out feature matrix
        y_test: Held-out targets

    Returns:
        EvaluationResult combining held-out and training metrics
    """
    y_pred = model.predict(X_test) if len(X_test) else np.empty(0)
    test_mse = mean_squared_error(y_test, y_pred)

    result = EvaluationResult(
        test_r2=r2_score(y_test, y_pred),
        test_mse=test_mse,
        test_rmse=float(np.sqrt(test_mse)),
        train_r2=float(model.train_r2),
        train_mse=float(model.train_mse),
    )
    logger.info(f"{model.display_name}: {result}")
    return result


def compare_models(results: Mapping[str, EvaluationResult]) -> pd.DataFrame:
    """
    Tabulate evaluation results, best test R² first.

    Args:
        results: Mapping of model name to its EvaluationResult

    Returns:
        DataFrame with one row per model
    """
    rows = [
        {
            'model': name,
            'test_r2': result.test_r2,
            'test_mse': result.test_mse,
            'test_rmse': result.test_rmse,
            'train_r2': result.train_r2,
        }
        for name, result in results.items()
    ]
    columns = ['model', 'test_r2', 'test_mse', 'test_rmse', 'train_r2']
    df = pd.DataFrame(rows, columns=columns)
    return df.sort_values('test_r2', ascending=False).reset_index(drop=True)
