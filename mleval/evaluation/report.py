"""
Human-readable summaries of evaluation results
"""

from typing import List, Optional, Sequence

from ..config import settings
from .metrics import ClassificationScore, RegressionScore


def _fmt(value: Optional[float], precision: int) -> str:
    if value is None:
        return "undefined"
    return f"{value:.{precision}f}"


def format_regression_report(score: RegressionScore, precision: Optional[int] = None) -> str:
    """Форматирует R² вместе с суммами, из которых он получен"""
    if precision is None:
        precision = settings.REPORT_PRECISION

    lines = [
        f">>> Score (R^2) {_fmt(score.score, precision)}",
        f">>> Residual sum of squares (u) {_fmt(score.u, precision)}",
        f">>> Total sum of squares (v) {_fmt(score.v, precision)}",
        f">>> Mean label {_fmt(score.mean_label, precision)}",
        f">>> MAE {_fmt(score.mae, precision)}",
        f">>> RMSE {_fmt(score.rmse, precision)}",
        f">>> Samples {score.count}",
    ]
    return "\n".join(lines)


def _predictions_table(score: ClassificationScore, precision: int) -> List[str]:
    rule = ">>> -----------------------------"
    lines = [rule, ">>> | Prediction | Ground Truth |", rule]
    for p in score.predictions or []:
        lines.append(f">>> | {p.raw:.{precision}f}\t | {p.truth}\t\t\t|")
    lines.append(rule)
    return lines


def _binary_table(matrix, class_names: Sequence[str]) -> List[str]:
    negative, positive = class_names[1], class_names[0]
    return [
        f"{'|':>32}{positive + ' |':>32}{negative + ' |':>32}",
        f"{positive + ' |':>32}{matrix[0][0]:>4}{' (true positives) |':>28}"
        f"{matrix[0][1]:>4}{' (false positives) |':>28}",
        f"{'|':>32}{'|':>32}{'|':>32}",
        f"{negative + ' |':>32}{matrix[1][0]:>4}{' (false negatives) |':>28}"
        f"{matrix[1][1]:>4}{' (true negatives) |':>28}",
    ]


def format_classification_report(
    score: ClassificationScore,
    class_names: Optional[Sequence[str]] = None,
    precision: Optional[int] = None,
) -> str:
    """
    Форматирует метрики классификации

    Args:
        score: Результат evaluate_classification
        class_names: Названия классов по индексу; для двух классов добавляется
            размеченная таблица 2x2 (строки — предсказания)
        precision: Знаков после запятой (по умолчанию settings.REPORT_PRECISION)

    Returns:
        Многострочный отчет; таблица по примерам выводится, если оценка
        посчитана с keep_predictions=True
    """
    if precision is None:
        precision = settings.REPORT_PRECISION

    if class_names is not None and len(class_names) != score.num_classes:
        raise ValueError(
            f"Ожидалось {score.num_classes} названий классов, получено {len(class_names)}"
        )

    lines: List[str] = []
    if score.predictions is not None:
        lines.extend(_predictions_table(score, precision))
        lines.append("")

    lines.append(f">>> Absolute amount of errors {score.error_count}")
    lines.append(f">>> Accuracy {_fmt(score.accuracy, precision)}")
    if score.num_classes == 2:
        lines.append(f">>> Precision {_fmt(score.precision, precision)}")
        lines.append(f">>> Recall {_fmt(score.recall, precision)}")
    lines.append(f">>> Confusion matrix is {score.confusion_matrix.tolist()}")

    if class_names is not None and score.num_classes == 2:
        lines.append("")
        lines.extend(_binary_table(score.confusion_matrix, class_names))

    return "\n".join(lines)
