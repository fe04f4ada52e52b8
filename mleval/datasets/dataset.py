"""
Labeled datasets consumed by the evaluator
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple, Union

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class LabeledExample:
    """Вектор признаков вместе с истинной меткой"""

    features: Tuple[float, ...]
    label: float

    @classmethod
    def of(cls, features: Iterable[float], label: float) -> "LabeledExample":
        return cls(tuple(float(x) for x in features), float(label))


class LabeledDataset(Protocol):
    """
    Конечный источник размеченных примеров

    Каждый вызов iter() должен начинать обход с первого примера
    """

    def __iter__(self) -> Iterator[LabeledExample]: ...


class InMemoryDataset:
    """Датасет в памяти, допускающий повторный обход"""

    def __init__(self, examples: Iterable[Union[LabeledExample, Tuple[Sequence[float], float]]]):
        """
        Args:
            examples: Объекты LabeledExample или пары (признаки, метка)
        """
        self._examples: List[LabeledExample] = []
        n_features: Optional[int] = None

        for example in examples:
            if not isinstance(example, LabeledExample):
                features, label = example
                example = LabeledExample.of(features, label)

            if n_features is None:
                n_features = len(example.features)
            elif len(example.features) != n_features:
                raise ValueError(
                    f"У примера {len(self._examples)} {len(example.features)} признаков, "
                    f"ожидалось {n_features}"
                )

            self._examples.append(example)

        self.n_features = n_features or 0

    @classmethod
    def from_arrays(cls, X, y) -> "InMemoryDataset":
        """
        Строит датасет из матрицы признаков и вектора меток

        Args:
            X: Массив формы (n_samples, n_features)
            y: Массив формы (n_samples,)
        """
        X_arr = np.asarray(X, dtype=float)
        y_arr = np.asarray(y, dtype=float).ravel()

        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)

        if len(X_arr) != len(y_arr):
            raise ValueError("Количество строк X и y должно совпадать")

        return cls(
            LabeledExample.of(row, label) for row, label in zip(X_arr, y_arr)
        )

    def __iter__(self) -> Iterator[LabeledExample]:
        return iter(self._examples)

    def __len__(self) -> int:
        return len(self._examples)


class FrameDataset:
    """Ленивый обход строк pandas DataFrame"""

    def __init__(
        self,
        frame: pd.DataFrame,
        label_column: str,
        feature_columns: Optional[List[str]] = None,
    ):
        """
        Args:
            frame: Исходная таблица
            label_column: Колонка с истинной меткой
            feature_columns: Колонки признаков по порядку (по умолчанию все остальные)
        """
        if label_column not in frame.columns:
            raise KeyError(f"Колонка метки не найдена: {label_column}")

        if feature_columns is None:
            feature_columns = [c for c in frame.columns if c != label_column]

        missing = set(feature_columns) - set(frame.columns)
        if missing:
            raise KeyError(f"Колонки признаков не найдены: {sorted(missing)}")

        self.frame = frame
        self.label_column = label_column
        self.feature_columns = list(feature_columns)

    def __iter__(self) -> Iterator[LabeledExample]:
        features = self.frame[self.feature_columns].to_numpy(dtype=float)
        labels = self.frame[self.label_column].to_numpy(dtype=float)
        for row, label in zip(features, labels):
            yield LabeledExample.of(row, label)

    def __len__(self) -> int:
        return len(self.frame)


def ensure_restartable(dataset: Iterable[LabeledExample]) -> Iterable[LabeledExample]:
    """Буферизует одноразовые итераторы, чтобы их можно было обойти повторно"""
    if iter(dataset) is dataset:
        return list(dataset)
    return dataset
