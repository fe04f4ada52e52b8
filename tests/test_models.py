"""Tests for model adapters."""

import joblib
import numpy as np
import pytest
from sklearn.linear_model import LinearRegression, LogisticRegression

from mleval.datasets import InMemoryDataset
from mleval.evaluation import evaluate_classification, evaluate_regression
from mleval.models import (
    EstimatorModel,
    FunctionModel,
    ModelLoadException,
    as_model,
    load_model,
)


@pytest.fixture
def linear_regression():
    X = np.array([[1.0], [2.0], [3.0], [4.0]])
    y = 2 * X.ravel()
    return LinearRegression().fit(X, y)


def test_function_model():
    model = FunctionModel(lambda x: x[0] + x[1])

    assert model.predict([1.0, 2.0]) == 3.0


def test_estimator_model(linear_regression):
    model = EstimatorModel(linear_regression)

    assert model.predict([5.0]) == pytest.approx(10.0)


def test_estimator_model_requires_predict():
    with pytest.raises(TypeError):
        EstimatorModel(object())


def test_as_model(linear_regression):
    assert isinstance(as_model(linear_regression), EstimatorModel)
    assert isinstance(as_model(lambda x: 0.0), FunctionModel)

    wrapped = FunctionModel(lambda x: 0.0)
    assert as_model(wrapped) is wrapped

    with pytest.raises(TypeError):
        as_model(42)


def test_load_model(tmp_path, linear_regression):
    path = tmp_path / "linear_model.pkl"
    joblib.dump(linear_regression, path)

    model = load_model(path)

    assert model.predict([3.0]) == pytest.approx(6.0)


def test_load_model_missing_file(tmp_path):
    with pytest.raises(ModelLoadException):
        load_model(tmp_path / "missing.pkl")


def test_sklearn_regressor_end_to_end(linear_regression):
    dataset = InMemoryDataset.from_arrays([[1.0], [2.0], [3.0]], [2.0, 4.0, 6.0])

    score = evaluate_regression(as_model(linear_regression), dataset)

    assert score.score == pytest.approx(1.0)


def test_sklearn_classifier_end_to_end():
    X = np.array([[-2.0], [-1.0], [1.0], [2.0]])
    y = np.array([0, 0, 1, 1])
    classifier = LogisticRegression().fit(X, y)
    dataset = InMemoryDataset.from_arrays(X, y)

    score = evaluate_classification(as_model(classifier), dataset, num_classes=2)

    assert score.accuracy == 1.0
    assert score.confusion_matrix.tolist() == [[2, 0], [0, 2]]


class Doubler:
    def predict(self, features):
        return 2 * features[0] + features[1]


def test_predict_object_is_used_as_is():
    model = Doubler()

    assert as_model(model) is model
    assert as_model(model).predict([1.0, 3.0]) == 5.0


def test_predict_object_scores_without_wrapping():
    dataset = InMemoryDataset.from_arrays(
        [[1.0, 0.0], [2.0, 1.0], [3.0, 2.0]], [2.0, 5.0, 8.0]
    )

    score = evaluate_regression(Doubler(), dataset)

    assert score.score == 1.0


def test_raw_sklearn_regressor(linear_regression):
    dataset = InMemoryDataset.from_arrays([[1.0], [2.0], [3.0]], [2.0, 4.0, 6.0])

    score = evaluate_regression(linear_regression, dataset)

    assert score.score == pytest.approx(1.0)


def test_raw_sklearn_classifier():
    X = np.array([[-2.0], [-1.0], [1.0], [2.0]])
    y = np.array([0, 0, 1, 1])
    classifier = LogisticRegression().fit(X, y)

    score = evaluate_classification(
        classifier, InMemoryDataset.from_arrays(X, y), num_classes=2
    )

    assert score.accuracy == 1.0
