"""
Multivariate Linear Regression

Ordinary least squares solved in closed form through the normal equations:

    β = (X'ᵀX')⁻¹ X'ᵀy

where X' is X with a leading column of ones, so β[0] is the intercept.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np

from ..evaluation.metrics import mean_squared_error, r2_score
from .base import as_query_matrix, validate_training_data
from .linalg import add_intercept_column, invert, matmul, matvec, transpose

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TrainedLinearModel:
    """Fitted OLS model."""

    intercept: float
    coefficients: np.ndarray
    train_r2: float
    train_mse: float
    name: str = field(default="linear", init=False)
    display_name: str = field(default="Linear Regression", init=False)

    def predict(self, X: np.ndarray) -> np.ndarray:
        """intercept + Σ coefficients[i] * row[i], for each row."""
        X = as_query_matrix(X, len(self.coefficients))
        return self.intercept + X @ self.coefficients

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.name,
            'intercept': float(self.intercept),
            'coefficients': [float(c) for c in self.coefficients],
            'train_r2': self.train_r2,
            'train_mse': self.train_mse,
        }


def fit_linear_regression(X: np.ndarray, y: np.ndarray) -> TrainedLinearModel:
    """
    Fit OLS on (X, y).

    Raises:
        ModelFittingError: On invalid data
        SingularMatrixError: When XᵀX cannot be inverted
    """
    X, y = validate_training_data(X, y)

    design = add_intercept_column(X)
    design_t = transpose(design)
    gram_inverse = invert(matmul(design_t, design))
    beta = matvec(gram_inverse, matvec(design_t, y))

    intercept = float(beta[0])
    coefficients = beta[1:].copy()
    coefficients.setflags(write=False)

    fitted = intercept + X @ coefficients
    model = TrainedLinearModel(
        intercept=intercept,
        coefficients=coefficients,
        train_r2=r2_score(y, fitted),
        train_mse=mean_squared_error(y, fitted),
    )
    logger.info(
        f"Linear regression fitted on {len(y)} rows "
        f"(train R²={model.train_r2:.4f})"
    )
    return model
