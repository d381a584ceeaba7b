"""Dense linear predictor: weights plus bias."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np

from vectors import FeatureVector


@dataclass
class LinearPredictor:
    weights: np.ndarray
    bias: float = 0.0

    def __post_init__(self) -> None:
        self.weights = np.array(self.weights, dtype=float)
        if self.weights.ndim != 1:
            raise ValueError("predictor weights must be a 1-D array")
        self.bias = float(self.bias)

    @classmethod
    def zeros(cls, dimension: int) -> "LinearPredictor":
        return cls(np.zeros(dimension, dtype=float), 0.0)

    @property
    def dimension(self) -> int:
        return int(self.weights.size)

    def predict(self, features: FeatureVector) -> float:
        """Return ``weights . features + bias``."""
        return features.dot(self.weights) + self.bias

    def predict_many(self, examples: Iterable[Any]) -> np.ndarray:
        return np.array([self.predict(ex.features) for ex in examples], dtype=float)

    def scale(self, factor: float) -> None:
        """Multiply weights and bias by ``factor`` in place."""
        self.weights *= factor
        self.bias *= factor

    def copy(self) -> "LinearPredictor":
        return LinearPredictor(self.weights.copy(), self.bias)

    def to_dict(self) -> dict[str, Any]:
        return {"weights": self.weights.tolist(), "bias": self.bias}
