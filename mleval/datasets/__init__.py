"""
Labeled dataset adapters
"""

from .dataset import (
    FrameDataset,
    InMemoryDataset,
    LabeledDataset,
    LabeledExample,
    ensure_restartable,
)

__all__ = [
    "LabeledExample",
    "LabeledDataset",
    "InMemoryDataset",
    "FrameDataset",
    "ensure_restartable",
]
