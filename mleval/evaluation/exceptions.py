"""
Exceptions raised while scoring a model
"""


class EvaluationException(Exception):
    pass


class EmptyDatasetException(EvaluationException):
    """Датасет не содержит примеров"""


class UndefinedScoreException(EvaluationException):
    """R² не определен: все истинные метки одинаковы"""


class LabelOutOfRangeException(EvaluationException):
    """Предсказанный или истинный класс вне [0, num_classes)"""

    def __init__(self, value, num_classes: int, kind: str):
        self.value = value
        self.num_classes = num_classes
        self.kind = kind
        super().__init__(
            f"Класс {value!r} ({kind}) вне диапазона [0, {num_classes})"
        )
