"""
Model adapters
"""

from .loader import (
    EstimatorModel,
    FunctionModel,
    Model,
    ModelLoadException,
    as_model,
    load_model,
)

__all__ = [
    "Model",
    "FunctionModel",
    "EstimatorModel",
    "ModelLoadException",
    "as_model",
    "load_model",
]
