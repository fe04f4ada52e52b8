"""Shared fixtures."""

import pytest

from mleval.datasets import InMemoryDataset, LabeledExample


@pytest.fixture
def doubling_dataset():
    """y = 2x over three points."""
    return InMemoryDataset([([1.0], 2.0), ([2.0], 4.0), ([3.0], 6.0)])


@pytest.fixture
def binary_dataset():
    """Truths [0, 0, 1, 1]; the first feature is what the lookup model predicts."""
    return InMemoryDataset(
        [
            LabeledExample.of([0.0], 0),
            LabeledExample.of([1.0], 0),
            LabeledExample.of([1.0], 1),
            LabeledExample.of([1.0], 1),
        ]
    )


@pytest.fixture
def echo_model():
    """Predicts its first feature."""
    return lambda features: features[0]


class FlakyDataset:
    """Raises after yielding a few examples, like a storage read that fails."""

    def __init__(self, good: int = 2):
        self.good = good

    def __iter__(self):
        for i in range(self.good):
            yield LabeledExample.of([float(i)], float(i % 2))
        raise IOError("storage read failed")


@pytest.fixture
def flaky_dataset():
    return FlakyDataset()
