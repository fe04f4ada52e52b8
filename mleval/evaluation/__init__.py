"""
Evaluation module for model assessment
"""

from .exceptions import (
    EmptyDatasetException,
    EvaluationException,
    LabelOutOfRangeException,
    UndefinedScoreException,
)
from .metrics import (
    ClassificationScore,
    Prediction,
    RegressionScore,
    compare_models,
    compute_mean_label,
    evaluate_classification,
    evaluate_regression,
)
from .evaluator import ModelEvaluator
from .report import format_classification_report, format_regression_report

__all__ = [
    "evaluate_regression",
    "evaluate_classification",
    "compute_mean_label",
    "compare_models",
    "RegressionScore",
    "ClassificationScore",
    "Prediction",
    "ModelEvaluator",
    "format_regression_report",
    "format_classification_report",
    "EvaluationException",
    "EmptyDatasetException",
    "UndefinedScoreException",
    "LabelOutOfRangeException",
]
