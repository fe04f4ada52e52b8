"""Tests for dataset adapters."""

import dataclasses

import numpy as np
import pandas as pd
import pytest

from mleval.datasets import FrameDataset, InMemoryDataset, LabeledExample, ensure_restartable


def test_labeled_example_is_immutable():
    example = LabeledExample.of([1, 2], 3)

    assert example.features == (1.0, 2.0)
    assert example.label == 3.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        example.label = 4.0


def test_in_memory_dataset_restarts():
    dataset = InMemoryDataset([([1.0], 1.0), ([2.0], 0.0)])

    assert list(dataset) == list(dataset)
    assert len(dataset) == 2
    assert dataset.n_features == 1


def test_in_memory_dataset_rejects_ragged_features():
    with pytest.raises(ValueError):
        InMemoryDataset([([1.0, 2.0], 1.0), ([2.0], 0.0)])


def test_from_arrays():
    X = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
    y = np.array([0, 1, 0])

    dataset = InMemoryDataset.from_arrays(X, y)

    examples = list(dataset)
    assert len(examples) == 3
    assert examples[1] == LabeledExample((3.0, 4.0), 1.0)


def test_from_arrays_one_dimensional_features():
    dataset = InMemoryDataset.from_arrays([1.0, 2.0], [2.0, 4.0])

    assert dataset.n_features == 1


def test_from_arrays_length_mismatch():
    with pytest.raises(ValueError):
        InMemoryDataset.from_arrays([[1.0], [2.0]], [1.0])


def test_frame_dataset():
    frame = pd.DataFrame({"a": [1.0, 2.0], "b": [3.0, 4.0], "price": [10.0, 20.0]})

    dataset = FrameDataset(frame, label_column="price")

    assert list(dataset) == [
        LabeledExample((1.0, 3.0), 10.0),
        LabeledExample((2.0, 4.0), 20.0),
    ]
    assert len(dataset) == 2
    # Restartable
    assert len(list(dataset)) == 2


def test_frame_dataset_feature_order():
    frame = pd.DataFrame({"a": [1.0], "b": [3.0], "price": [10.0]})

    dataset = FrameDataset(frame, label_column="price", feature_columns=["b", "a"])

    assert next(iter(dataset)).features == (3.0, 1.0)


def test_frame_dataset_missing_columns():
    frame = pd.DataFrame({"a": [1.0], "price": [10.0]})

    with pytest.raises(KeyError):
        FrameDataset(frame, label_column="label")
    with pytest.raises(KeyError):
        FrameDataset(frame, label_column="price", feature_columns=["a", "z"])


def test_ensure_restartable():
    generator = (LabeledExample.of([x], x) for x in range(3))
    buffered = ensure_restartable(generator)

    assert len(list(buffered)) == 3
    assert len(list(buffered)) == 3

    dataset = InMemoryDataset([([1.0], 1.0)])
    assert ensure_restartable(dataset) is dataset
