"""
Metrics for scoring trained models against labeled datasets
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

import numpy as np
import structlog
from sklearn.metrics import mean_absolute_error, mean_squared_error
from tqdm import tqdm

from ..config import settings
from ..datasets import LabeledExample, ensure_restartable
from ..models import as_model
from .exceptions import (
    EmptyDatasetException,
    EvaluationException,
    LabelOutOfRangeException,
    UndefinedScoreException,
)

log = structlog.stdlib.get_logger()

# Класс 0 считается положительным для precision/recall.
POSITIVE_CLASS = 0


class Prediction(NamedTuple):
    raw: float
    predicted: int
    truth: int


@dataclass
class RegressionScore:
    """
    Коэффициент детерминации R² = 1 - u/v, где u — остаточная сумма
    квадратов, v — полная сумма квадратов относительно среднего значения метки
    """

    score: float
    u: float
    v: float
    mean_label: float
    count: int
    mae: float
    mse: float
    rmse: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "R2": self.score,
            "u": self.u,
            "v": self.v,
            "mean_label": self.mean_label,
            "n_samples": self.count,
            "MAE": self.mae,
            "MSE": self.mse,
            "RMSE": self.rmse,
        }


@dataclass
class ClassificationScore:
    """Счетчики ошибок и матрица ошибок с индексами [предсказание][истина]"""

    accuracy: float
    precision: Optional[float]
    recall: Optional[float]
    confusion_matrix: np.ndarray
    error_count: int
    total_count: int
    num_classes: int
    predictions: Optional[List[Prediction]] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "confusion_matrix": self.confusion_matrix.tolist(),
            "error_count": self.error_count,
            "n_samples": self.total_count,
            "num_classes": self.num_classes,
        }


def _progress(dataset: Iterable[LabeledExample], desc: str, show_progress: Optional[bool]):
    if show_progress is None:
        show_progress = settings.SHOW_PROGRESS
    total = len(dataset) if hasattr(dataset, "__len__") else None
    return tqdm(dataset, desc=desc, total=total, disable=not show_progress)


def compute_mean_label(dataset: Iterable[LabeledExample], show_progress: Optional[bool] = None) -> float:
    """
    Среднее арифметическое истинных меток

    Raises:
        EmptyDatasetException: датасет пуст
    """
    count = 0
    total = 0.0
    for example in _progress(dataset, "mean label", show_progress):
        total += example.label
        count += 1

    if count == 0:
        raise EmptyDatasetException("Нельзя посчитать среднее по пустому датасету")

    return total / count


def evaluate_regression(
    model,
    dataset: Iterable[LabeledExample],
    mean_label: Optional[float] = None,
    show_progress: Optional[bool] = None,
) -> RegressionScore:
    """
    Оценивает регрессионную модель по R²

    Лучшее значение 1.0; модель, всегда предсказывающая среднее, получает 0.0,
    а сколь угодно плохая модель — отрицательное значение.

    Args:
        model: Объект с predict(features) -> float, sklearn-эстиматор или функция
        dataset: Размеченные примеры; обходится дважды, если mean_label не задан
        mean_label: Заранее посчитанное среднее истинных меток
        show_progress: Показывать прогресс tqdm (по умолчанию settings.SHOW_PROGRESS)

    Returns:
        RegressionScore

    Raises:
        EmptyDatasetException: датасет пуст
        UndefinedScoreException: v == 0 либо все истинные метки одинаковы.
            Одинаковые метки отклоняются всегда, даже если переданный
            mean_label дает v != 0
    """
    predict = as_model(model).predict

    if mean_label is None:
        dataset = ensure_restartable(dataset)
        mean_label = compute_mean_label(dataset, show_progress)

    u = 0.0
    v = 0.0
    low = math.inf
    high = -math.inf
    y_true: List[float] = []
    y_pred: List[float] = []

    for example in _progress(dataset, "residuals", show_progress):
        truth = example.label
        predicted = float(predict(example.features))

        u += (truth - predicted) ** 2
        v += (truth - mean_label) ** 2
        low = min(low, truth)
        high = max(high, truth)

        y_true.append(truth)
        y_pred.append(predicted)

    if not y_true:
        raise EmptyDatasetException("Нельзя оценить регрессию на пустом датасете")

    # Среднее одинаковых меток в float может дать крошечное v != 0.
    if v == 0 or low == high:
        raise UndefinedScoreException(
            f"R² не определен: все {len(y_true)} меток равны {low}"
        )

    if not math.isfinite(u):
        raise UndefinedScoreException("R² не определен: модель вернула нечисловые предсказания")

    mse = float(mean_squared_error(y_true, y_pred))
    result = RegressionScore(
        score=1 - u / v,
        u=u,
        v=v,
        mean_label=mean_label,
        count=len(y_true),
        mae=float(mean_absolute_error(y_true, y_pred)),
        mse=mse,
        rmse=math.sqrt(mse),
    )

    log.info("Регрессия оценена", n_samples=result.count, r2=result.score)
    return result


def _class_index(value: float, num_classes: int, kind: str, exact: bool) -> int:
    if not math.isfinite(value):
        raise LabelOutOfRangeException(value, num_classes, kind)

    if exact:
        if value != int(value):
            raise LabelOutOfRangeException(value, num_classes, kind)
        index = int(value)
    else:
        # Округление half-up: 0.5 относится к классу 1
        index = math.floor(value + 0.5)

    if not 0 <= index < num_classes:
        raise LabelOutOfRangeException(value, num_classes, kind)

    return index


def evaluate_classification(
    model,
    dataset: Iterable[LabeledExample],
    num_classes: int,
    keep_predictions: bool = False,
    show_progress: Optional[bool] = None,
) -> ClassificationScore:
    """
    Оценивает классификатор (или кластеризацию, у которой номера кластеров
    совпадают с метками классов) за один проход

    Args:
        model: Объект с predict(features) -> float, sklearn-эстиматор или функция
        dataset: Размеченные примеры с целочисленными метками
        num_classes: Количество классов, метки лежат в [0, num_classes)
        keep_predictions: Сохранять журнал пар (предсказание, истина)
        show_progress: Показывать прогресс tqdm (по умолчанию settings.SHOW_PROGRESS)

    Returns:
        ClassificationScore; precision и recall определены только для двух классов

    Raises:
        EmptyDatasetException: датасет пуст
        LabelOutOfRangeException: предсказанный или истинный класс вне [0, num_classes)
    """
    if num_classes < 1:
        raise ValueError(f"num_classes должен быть положительным, получено {num_classes}")

    predict = as_model(model).predict

    matrix = np.zeros((num_classes, num_classes), dtype=np.int64)
    error_count = 0
    total_count = 0
    predictions: Optional[List[Prediction]] = [] if keep_predictions else None

    for example in _progress(dataset, "classification", show_progress):
        raw = float(predict(example.features))

        predicted = _class_index(raw, num_classes, "predicted", exact=False)
        truth = _class_index(example.label, num_classes, "truth", exact=True)

        matrix[predicted, truth] += 1
        if predicted != truth:
            error_count += 1
        total_count += 1

        if predictions is not None:
            predictions.append(Prediction(raw, predicted, truth))

    if total_count == 0:
        raise EmptyDatasetException("Нельзя оценить классификатор на пустом датасете")

    precision = None
    recall = None
    if num_classes == 2:
        precision = _ratio(matrix, axis=0)
        recall = _ratio(matrix, axis=1)

    result = ClassificationScore(
        accuracy=1 - error_count / total_count,
        precision=precision,
        recall=recall,
        confusion_matrix=matrix,
        error_count=error_count,
        total_count=total_count,
        num_classes=num_classes,
        predictions=predictions,
    )

    log.info(
        "Классификация оценена",
        n_samples=total_count,
        errors=error_count,
        accuracy=result.accuracy,
    )
    return result


def _ratio(matrix: np.ndarray, axis: int) -> Optional[float]:
    """
    Доля true positives в строке (axis=0, precision) или столбце
    (axis=1, recall) положительного класса
    """
    tp = int(matrix[POSITIVE_CLASS, POSITIVE_CLASS])
    if axis == 0:
        denominator = int(matrix[POSITIVE_CLASS, :].sum())
    else:
        denominator = int(matrix[:, POSITIVE_CLASS].sum())

    if denominator == 0:
        return None
    return tp / denominator


def compare_models(
    models: Dict[str, Any],
    dataset: Iterable[LabeledExample],
    task: str = "classification",
    num_classes: Optional[int] = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Сравнивает несколько моделей на одном датасете

    Args:
        models: Словарь {название_модели: модель}
        dataset: Размеченные примеры, обходятся для каждой модели
        task: "regression" (ранжирование по R²) или "classification" (по accuracy)
        num_classes: Обязателен для классификации

    Returns:
        Словарь {название_модели: метрики}; успешные результаты получают "rank" с 1

    Raises:
        EmptyDatasetException: датасет пуст, сравнивать нечего
    """
    if task not in ("regression", "classification"):
        raise ValueError(f"Неизвестная задача: {task}")
    if task == "classification" and num_classes is None:
        raise ValueError("Для классификации нужен num_classes")

    dataset = ensure_restartable(dataset)
    if next(iter(dataset), None) is None:
        raise EmptyDatasetException("Нельзя сравнить модели на пустом датасете")

    primary_metric = "R2" if task == "regression" else "accuracy"

    # Для регрессии среднее считается один раз на все модели
    shared_mean = None
    if task == "regression":
        shared_mean = compute_mean_label(dataset)

    results: Dict[str, Dict[str, Any]] = {}
    for model_name, model in models.items():
        try:
            if task == "regression":
                score = evaluate_regression(model, dataset, mean_label=shared_mean)
            else:
                score = evaluate_classification(model, dataset, num_classes)
        except EvaluationException as e:
            log.warning("Модель не удалось оценить", model_name=model_name, error=str(e))
            results[model_name] = {"model_name": model_name, "error": str(e)}
            continue

        metrics = score.to_dict()
        metrics["model_name"] = model_name
        results[model_name] = metrics

    # Больше = лучше и для R², и для accuracy
    ranked = sorted(
        (name for name, res in results.items() if primary_metric in res),
        key=lambda name: results[name][primary_metric],
        reverse=True,
    )
    for rank, model_name in enumerate(ranked, 1):
        results[model_name]["rank"] = rank

    return results
