"""
Evaluation utilities for mood models.
"""

from .metrics import (
    EvaluationResult,
    chronological_split,
    compare_models,
    evaluate_model,
    mean_absolute_error,
    mean_squared_error,
    r2_score,
    root_mean_squared_error,
)

__all__ = [
    'EvaluationResult',
    'chronological_split',
    'compare_models',
    'evaluate_model',
    'mean_absolute_error',
    'mean_squared_error',
    'r2_score',
    'root_mean_squared_error',
]
