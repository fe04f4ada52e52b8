"""
Scoring of trained models against labeled datasets
"""

from .datasets import FrameDataset, InMemoryDataset, LabeledExample
from .evaluation import (
    ModelEvaluator,
    evaluate_classification,
    evaluate_regression,
)
from .log import configure_logging
from .models import as_model, load_model

__all__ = [
    "LabeledExample",
    "InMemoryDataset",
    "FrameDataset",
    "ModelEvaluator",
    "evaluate_regression",
    "evaluate_classification",
    "as_model",
    "load_model",
    "configure_logging",
]
