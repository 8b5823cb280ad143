"""
Regression Decision Tree

Greedy recursive binary splitting that maximises variance reduction:

    gain = Var(parent) - (n_L·Var(left) + n_R·Var(right)) / n

Candidate thresholds are the midpoints between consecutive sorted unique
values of each feature. A node becomes a leaf (mean target) when it reaches
max_depth, holds fewer than min_samples_split rows, or no split gains at
least MIN_GAIN.

The fitted tree is a plain nested value: Leaf | Node.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from ..evaluation.metrics import mean_squared_error, r2_score
from .base import ModelFittingError, as_query_matrix, validate_training_data

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5
DEFAULT_MIN_SAMPLES_SPLIT = 10
MIN_GAIN = 0.01


@dataclass(frozen=True)
class Leaf:
    value: float
    n_samples: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'leaf', 'value': self.value, 'n_samples': self.n_samples}


@dataclass(frozen=True)
class Node:
    feature_index: int
    threshold: float
    left: "TreeNode"
    right: "TreeNode"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'node',
            'feature_index': self.feature_index,
            'threshold': self.threshold,
            'left': self.left.to_dict(),
            'right': self.right.to_dict(),
        }


TreeNode = Union[Leaf, Node]


def tree_depth(node: TreeNode) -> int:
    """Number of split levels below ``node`` (a lone leaf has depth 0)."""
    if isinstance(node, Leaf):
        return 0
    return 1 + max(tree_depth(node.left), tree_depth(node.right))


def count_leaves(node: TreeNode) -> int:
    if isinstance(node, Leaf):
        return 1
    return count_leaves(node.left) + count_leaves(node.right)


def predict_one(node: TreeNode, x: np.ndarray) -> float:
    """Walk from ``node`` to a leaf, going left when x[f] <= threshold."""
    while isinstance(node, Node):
        node = node.left if x[node.feature_index] <= node.threshold else node.right
    return node.value


@dataclass(frozen=True, eq=False)
class TrainedTreeModel:
    """Fitted regression tree."""

    root: TreeNode
    n_features: int
    max_depth: int
    min_samples_split: int
    train_r2: float
    train_mse: float
    name: str = field(default="tree", init=False)
    display_name: str = field(default="Decision Tree", init=False)

    @property
    def depth(self) -> int:
        return tree_depth(self.root)

    @property
    def n_leaves(self) -> int:
        return count_leaves(self.root)

    def predict(self, X: np.ndarray) -> np.ndarray:
        X = as_query_matrix(X, self.n_features)
        return np.array([predict_one(self.root, row) for row in X], dtype=float)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.name,
            'max_depth': self.max_depth,
            'min_samples_split': self.min_samples_split,
            'train_r2': self.train_r2,
            'train_mse': self.train_mse,
            'root': self.root.to_dict(),
        }


def best_split(X: np.ndarray, y: np.ndarray) -> Optional[Tuple[int, float, float]]:
    """
    Search every feature and midpoint threshold for the largest gain.

    Returns:
        (feature_index, threshold, gain), or None when every candidate
        leaves one side empty
    """
    n = len(y)
    parent_variance = float(np.var(y))
    best: Optional[Tuple[int, float, float]] = None

    for feature in range(X.shape[1]):
        order = np.argsort(X[:, feature], kind="stable")
        xs = X[order, feature]
        ys = y[order]

        # split after position i keeps xs[:i + 1] on the left; only
        # positions between distinct values are valid thresholds
        positions = np.nonzero(xs[:-1] < xs[1:])[0]
        if len(positions) == 0:
            continue

        cum_sum = np.cumsum(ys)
        cum_sq = np.cumsum(ys ** 2)
        total_sum, total_sq = cum_sum[-1], cum_sq[-1]

        n_left = positions + 1.0
        n_right = n - n_left
        left_sum, left_sq = cum_sum[positions], cum_sq[positions]
        right_sum, right_sq = total_sum - left_sum, total_sq - left_sq

        left_var = np.maximum(left_sq / n_left - (left_sum / n_left) ** 2, 0.0)
        right_var = np.maximum(right_sq / n_right - (right_sum / n_right) ** 2, 0.0)
        gains = parent_variance - (n_left * left_var + n_right * right_var) / n

        i = int(np.argmax(gains))
        if best is None or gains[i] > best[2]:
            position = positions[i]
            threshold = (xs[position] + xs[position + 1]) / 2
            best = (feature, float(threshold), float(gains[i]))

    return best


def build_tree(
    X: np.ndarray,
    y: np.ndarray,
    depth: int,
    max_depth: int,
    min_samples_split: int,
) -> TreeNode:
    """Recursively grow the tree from the rows reaching this node."""
    leaf = Leaf(value=float(np.mean(y)), n_samples=len(y))

    if depth >= max_depth or len(y) < min_samples_split:
        return leaf

    split = best_split(X, y)
    if split is None or split[2] < MIN_GAIN:
        return leaf

    feature, threshold, _ = split
    mask = X[:, feature] <= threshold
    # a midpoint between adjacent floats can round onto the upper value
    if mask.all() or not mask.any():
        return leaf
    return Node(
        feature_index=feature,
        threshold=threshold,
        left=build_tree(X[mask], y[mask], depth + 1, max_depth, min_samples_split),
        right=build_tree(X[~mask], y[~mask], depth + 1, max_depth, min_samples_split),
    )


def fit_decision_tree(
    X: np.ndarray,
    y: np.ndarray,
    max_depth: int = DEFAULT_MAX_DEPTH,
    min_samples_split: int = DEFAULT_MIN_SAMPLES_SPLIT,
) -> TrainedTreeModel:
    """
    Grow a regression tree on (X, y).

    Fewer than min_samples_split rows yields a single-leaf tree.
    """
    if max_depth < 0:
        raise ModelFittingError(f"max_depth must be non-negative, got {max_depth}")

    X, y = validate_training_data(X, y)
    root = build_tree(X, y, 0, max_depth, min_samples_split)

    fitted = np.array([predict_one(root, row) for row in X], dtype=float)
    model = TrainedTreeModel(
        root=root,
        n_features=X.shape[1],
        max_depth=max_depth,
        min_samples_split=min_samples_split,
        train_r2=r2_score(y, fitted),
        train_mse=mean_squared_error(y, fitted),
    )
    logger.info(
        f"Decision tree fitted on {len(y)} rows: depth={model.depth}, "
        f"leaves={model.n_leaves} (train R²={model.train_r2:.4f})"
    )
    return model
