"""
Tests for evaluation metrics, the chronological split and model comparison.
"""

import numpy as np
import pandas as pd
import pytest


class TestPointMetrics:
    """MSE, RMSE, MAE and R²."""

    def test_perfect_prediction(self):
        from moodflow.evaluation.metrics import mean_squared_error, r2_score

        y = np.array([1.0, 2.5, 4.0, 3.2])
        assert r2_score(y, y) == 1.0
        assert mean_squared_error(y, y) == 0.0

    def test_predicting_the_mean_scores_zero(self):
        from moodflow.evaluation.metrics import r2_score

        y = np.array([1.0, 2.0, 4.0, 5.0])
        assert r2_score(y, np.full_like(y, y.mean())) == pytest.approx(0.0)

    def test_worse_than_mean_is_negative(self):
        from moodflow.evaluation.metrics import r2_score

        y = np.array([1.0, 2.0, 3.0])
        assert r2_score(y, y[::-1]) < 0

    def test_constant_target(self):
        from moodflow.evaluation.metrics import r2_score

        y = np.full(4, 3.0)
        assert r2_score(y, y) == 1.0
        assert r2_score(y, y + 1) == 0.0

    def test_known_values(self):
        from moodflow.evaluation.metrics import (
            mean_absolute_error,
            mean_squared_error,
            root_mean_squared_error,
        )

        y_true = np.array([1.0, 2.0, 3.0, 4.0])
        y_pred = np.array([2.0, 2.0, 3.0, 2.0])
        assert mean_squared_error(y_true, y_pred) == pytest.approx(1.25)
        assert root_mean_squared_error(y_true, y_pred) == pytest.approx(np.sqrt(1.25))
        assert mean_absolute_error(y_true, y_pred) == pytest.approx(0.75)

    def test_empty_inputs(self):
        from moodflow.evaluation.metrics import mean_squared_error, r2_score

        assert mean_squared_error([], []) == 0.0
        assert r2_score([], []) == 0.0

    def test_r2_matches_sklearn(self, rng):
        from sklearn.metrics import r2_score as sk_r2_score

        from moodflow.evaluation.metrics import r2_score

        y_true = rng.uniform(1, 5, size=50)
        y_pred = y_true + rng.normal(0, 0.5, size=50)
        assert r2_score(y_true, y_pred) == pytest.approx(sk_r2_score(y_true, y_pred))


class TestChronologicalSplit:
    """Train/test split without shuffling."""

    @pytest.mark.parametrize("n", [501, 100, 7, 1])
    def test_sizes(self, n):
        from moodflow.evaluation.metrics import chronological_split

        X = np.arange(n * 2, dtype=float).reshape(n, 2)
        y = np.arange(n, dtype=float)
        X_train, X_test, y_train, y_test = chronological_split(X, y)

        assert len(X_train) == len(y_train) == int(np.floor(0.8 * n))
        assert len(X_test) == len(y_test) == n - len(y_train)

    def test_train_precedes_test(self):
        from moodflow.evaluation.metrics import chronological_split

        y = np.arange(50, dtype=float)
        X = y.reshape(-1, 1)
        _, _, y_train, y_test = chronological_split(X, y)

        assert y_train.max() < y_test.min()
        np.testing.assert_array_equal(np.concatenate([y_train, y_test]), y)

    @pytest.mark.parametrize("ratio", [0.0, 1.0, -0.2, 1.5])
    def test_invalid_ratio(self, ratio):
        from moodflow.evaluation.metrics import chronological_split

        with pytest.raises(ValueError):
            chronological_split(np.ones((5, 1)), np.ones(5), ratio)

    def test_length_mismatch(self):
        from moodflow.evaluation.metrics import chronological_split

        with pytest.raises(ValueError):
            chronological_split(np.ones((5, 1)), np.ones(4))


class TestEvaluateModel:
    """Held-out evaluation."""

    def test_combines_test_and_train_metrics(self):
        from moodflow.evaluation.metrics import evaluate_model
        from moodflow.models.linear import fit_linear_regression

        X = np.arange(20, dtype=float).reshape(-1, 1)
        y = 1 + 0.5 * X[:, 0]
        model = fit_linear_regression(X[:16], y[:16])
        result = evaluate_model(model, X[16:], y[16:])

        assert result.test_r2 == pytest.approx(1.0)
        assert result.test_rmse == pytest.approx(0.0, abs=1e-9)
        assert result.train_r2 == model.train_r2
        assert set(result.to_dict()) == {'test_r2', 'test_mse', 'test_rmse', 'train_r2', 'train_mse'}

    def test_empty_test_block(self):
        from moodflow.evaluation.metrics import evaluate_model
        from moodflow.models.knn import fit_knn

        model = fit_knn(np.ones((3, 1)), np.ones(3))
        result = evaluate_model(model, np.empty((0, 1)), np.empty(0))
        assert result.test_mse == 0.0


class TestCompareModels:
    """Comparison table."""

    def test_sorted_by_test_r2(self):
        from moodflow.evaluation.metrics import EvaluationResult, compare_models

        table = compare_models({
            'Linear Regression': EvaluationResult(0.6, 0.2, 0.45, 0.65, 0.18),
            'K-Nearest Neighbors': EvaluationResult(0.75, 0.1, 0.32, 0.7, 0.12),
            'Decision Tree': EvaluationResult(0.5, 0.3, 0.55, 0.9, 0.05),
        })

        assert isinstance(table, pd.DataFrame)
        assert list(table['model']) == ['K-Nearest Neighbors', 'Linear Regression', 'Decision Tree']
        assert list(table.columns) == ['model', 'test_r2', 'test_mse', 'test_rmse', 'train_r2']

    def test_empty(self):
        from moodflow.evaluation.metrics import compare_models

        assert compare_models({}).empty
