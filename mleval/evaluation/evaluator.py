"""
Model evaluator keeping a history of results
"""

from typing import Dict, Any, List, Optional, Iterable
from pathlib import Path
import json

import numpy as np
import pandas as pd
import structlog

from ..config import settings
from ..datasets import LabeledExample
from .metrics import (
    ClassificationScore,
    RegressionScore,
    compare_models,
    evaluate_classification,
    evaluate_regression,
)

log = structlog.stdlib.get_logger()


class ModelEvaluator:
    """Класс для оценки моделей с историей результатов"""

    def __init__(self, show_progress: Optional[bool] = None):
        """
        Инициализация evaluator

        Args:
            show_progress: Показывать прогресс tqdm (по умолчанию settings.SHOW_PROGRESS)
        """
        self.show_progress = show_progress
        self.evaluation_history: List[Dict[str, Any]] = []

    def evaluate_regression(
        self,
        model,
        dataset: Iterable[LabeledExample],
        model_name: str = "Unknown",
        dataset_name: str = "Unknown",
        mean_label: Optional[float] = None,
    ) -> RegressionScore:
        """
        Оценивает регрессионную модель по R²

        Args:
            model: Модель с predict(features) -> float
            dataset: Размеченные примеры
            model_name: Название модели
            dataset_name: Название датасета
            mean_label: Заранее посчитанное среднее истинных меток

        Returns:
            RegressionScore
        """
        with structlog.contextvars.bound_contextvars(
            model_name=model_name, dataset_name=dataset_name
        ):
            log.info("Оцениваю регрессионную модель")
            score = evaluate_regression(
                model, dataset, mean_label=mean_label, show_progress=self.show_progress
            )

        self._record(score.to_dict(), "regression", model_name, dataset_name)
        return score

    def evaluate_classification(
        self,
        model,
        dataset: Iterable[LabeledExample],
        num_classes: int,
        model_name: str = "Unknown",
        dataset_name: str = "Unknown",
        keep_predictions: bool = False,
    ) -> ClassificationScore:
        """
        Оценивает классификатор

        Args:
            model: Модель с predict(features) -> float
            dataset: Размеченные примеры
            num_classes: Количество классов
            model_name: Название модели
            dataset_name: Название датасета
            keep_predictions: Сохранять журнал пар (предсказание, истина)

        Returns:
            ClassificationScore
        """
        with structlog.contextvars.bound_contextvars(
            model_name=model_name, dataset_name=dataset_name
        ):
            log.info("Оцениваю классификатор", num_classes=num_classes)
            score = evaluate_classification(
                model,
                dataset,
                num_classes,
                keep_predictions=keep_predictions,
                show_progress=self.show_progress,
            )

        self._record(score.to_dict(), "classification", model_name, dataset_name)
        return score

    def compare_models(
        self,
        models: Dict[str, Any],
        dataset: Iterable[LabeledExample],
        task: str = "classification",
        num_classes: Optional[int] = None,
        dataset_name: str = "Unknown",
    ) -> Dict[str, Any]:
        """
        Сравнивает несколько моделей на одном датасете

        Args:
            models: Словарь {название_модели: модель}
            dataset: Размеченные примеры
            task: "regression" или "classification"
            num_classes: Обязателен для классификации
            dataset_name: Название датасета

        Returns:
            {"results": метрики по моделям, "best_model": название или None, ...}
        """
        results = compare_models(models, dataset, task=task, num_classes=num_classes)

        for model_name, metrics in results.items():
            self._record(dict(metrics), task, model_name, dataset_name)

        ranked = [name for name, res in results.items() if res.get("rank") == 1]
        best_model = ranked[0] if ranked else None

        return {
            "results": results,
            "best_model": best_model,
            "dataset_name": dataset_name,
            "task": task,
        }

    def _record(
        self,
        metrics: Dict[str, Any],
        task: str,
        model_name: str,
        dataset_name: str,
    ) -> None:
        metrics["model_name"] = model_name
        metrics["dataset_name"] = dataset_name
        metrics["task"] = task
        metrics["evaluation_timestamp"] = pd.Timestamp.now().isoformat()
        self.evaluation_history.append(metrics)

    def get_evaluation_history(
        self,
        model_name: Optional[str] = None,
        dataset_name: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Возвращает историю оценок с фильтрацией

        Args:
            model_name: Фильтр по названию модели
            dataset_name: Фильтр по названию датасета
        """
        filtered_history = self.evaluation_history

        if model_name:
            filtered_history = [
                eval_result for eval_result in filtered_history
                if eval_result.get("model_name") == model_name
            ]

        if dataset_name:
            filtered_history = [
                eval_result for eval_result in filtered_history
                if eval_result.get("dataset_name") == dataset_name
            ]

        return filtered_history

    def history_frame(self) -> pd.DataFrame:
        """История оценок в виде DataFrame, по строке на оценку"""
        return pd.DataFrame(self.evaluation_history)

    def save_evaluation_report(
        self,
        filepath: str,
        evaluation_results: Dict[str, Any]
    ) -> Path:
        """
        Сохраняет отчет об оценке в JSON файл

        Args:
            filepath: Путь к файлу; относительные пути — внутри settings.REPORT_DIR
            evaluation_results: Результаты оценки

        Returns:
            Путь к записанному файлу
        """
        file_path = Path(filepath)
        if not file_path.is_absolute():
            file_path = Path(settings.REPORT_DIR) / file_path
        file_path.parent.mkdir(parents=True, exist_ok=True)

        serializable_results = self._make_json_serializable(evaluation_results)

        with open(file_path, 'w') as f:
            json.dump(serializable_results, f, indent=2)

        log.info("Отчет об оценке сохранен", path=str(file_path))
        return file_path

    def _make_json_serializable(self, obj: Any) -> Any:
        """Преобразует объект для JSON сериализации"""
        if isinstance(obj, (RegressionScore, ClassificationScore)):
            return self._make_json_serializable(obj.to_dict())
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, dict):
            return {key: self._make_json_serializable(value) for key, value in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._make_json_serializable(item) for item in obj]
        else:
            return obj

    def clear_history(self) -> None:
        """Очищает историю оценок"""
        self.evaluation_history.clear()
