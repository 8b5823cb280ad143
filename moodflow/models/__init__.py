"""
Mood regressors built from first principles

This package contains:
- Linear algebra helpers (Gauss-Jordan inversion with partial pivoting)
- Ordinary least squares linear regression
- Distance-weighted k-nearest-neighbors regression
- Variance-reduction regression tree
"""

from .base import ModelFittingError, TrainedModel
from .linalg import SingularMatrixError, invert
from .linear import TrainedLinearModel, fit_linear_regression
from .knn import TrainedKnnModel, fit_knn
from .tree import Leaf, Node, TrainedTreeModel, fit_decision_tree

__all__ = [
    'ModelFittingError',
    'TrainedModel',
    'SingularMatrixError',
    'invert',
    'TrainedLinearModel',
    'fit_linear_regression',
    'TrainedKnnModel',
    'fit_knn',
    'Leaf',
    'Node',
    'TrainedTreeModel',
    'fit_decision_tree',
]
