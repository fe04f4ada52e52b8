"""
Model adapters exposing a single-example predict()
"""

from pathlib import Path
from typing import Any, Callable, Protocol, Sequence, Union

import joblib
import numpy as np
import structlog
from sklearn.base import BaseEstimator

log = structlog.stdlib.get_logger()


class ModelLoadException(Exception):
    pass


class Model(Protocol):
    """Обученная модель: один вектор признаков на входе, одно число на выходе"""

    def predict(self, features: Sequence[float]) -> float: ...


class FunctionModel:
    """Обертка над обычной функцией"""

    def __init__(self, fn: Callable[[Sequence[float]], float]):
        self.fn = fn

    def predict(self, features: Sequence[float]) -> float:
        return float(self.fn(features))

    def __repr__(self) -> str:
        return f"FunctionModel({getattr(self.fn, '__name__', self.fn)!r})"


class EstimatorModel:
    """
    Обертка над эстиматором в стиле scikit-learn: predict() принимает
    двумерный массив и возвращает по значению на строку
    """

    def __init__(self, estimator: Any):
        if not hasattr(estimator, "predict"):
            raise TypeError(f"У {type(estimator).__name__} нет метода predict()")
        self.estimator = estimator

    def predict(self, features: Sequence[float]) -> float:
        row = np.asarray(features, dtype=float).reshape(1, -1)
        y_pred = np.asarray(self.estimator.predict(row)).ravel()
        return float(y_pred[0])

    def __repr__(self) -> str:
        return f"EstimatorModel({type(self.estimator).__name__})"


def as_model(obj: Any) -> Model:
    """
    Приводит объект к Model

    Эстиматоры scikit-learn оборачиваются в EstimatorModel. Объекты, у которых
    уже есть predict(features) на одном векторе, возвращаются как есть.
    Для других эстиматоров с двумерным predict() используйте EstimatorModel явно.

    Args:
        obj: Эстиматор scikit-learn, объект с predict() или функция

    Returns:
        Объект с predict() для одного примера
    """
    if isinstance(obj, BaseEstimator):
        return EstimatorModel(obj)
    if hasattr(obj, "predict"):
        return obj
    if callable(obj):
        return FunctionModel(obj)
    raise TypeError(f"{type(obj).__name__} нельзя использовать как модель")


def load_model(path: Union[str, Path]) -> EstimatorModel:
    """
    Загружает эстиматор, сохраненный через joblib.dump()

    Args:
        path: Путь к файлу .pkl/.joblib

    Returns:
        Обернутый эстиматор
    """
    model_path = Path(path)
    if not model_path.exists():
        raise ModelLoadException(f"Файл модели не найден: {model_path}")

    estimator = joblib.load(model_path)
    log.info("Модель загружена", path=str(model_path), model_type=type(estimator).__name__)
    return EstimatorModel(estimator)
