"""Synthetic example streams drawn from a hidden linear model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

import numpy as np

from vectors import DenseVector, SparseVector

from .example import LabeledExample


def sign_label(score: float) -> float:
    return 1.0 if score >= 0 else -1.0


def identity_label(score: float) -> float:
    return score


@dataclass
class LinearStream:
    """Examples whose label is ``labeler(w . x + bias + noise)``."""

    weights: np.ndarray
    bias: float = 0.0
    noise_std: float = 0.0
    density: float = 1.0
    rng: Optional[np.random.Generator] = None
    labeler: Callable[[float], float] = sign_label

    def __post_init__(self) -> None:
        self.weights = np.asarray(self.weights, dtype=float).reshape(-1)
        if not 0.0 < self.density <= 1.0:
            raise ValueError("density must lie in (0, 1]")
        if self.noise_std < 0:
            raise ValueError("noise_std must be non-negative")
        if self.rng is None:
            self.rng = np.random.default_rng()

    @property
    def dimension(self) -> int:
        return int(self.weights.size)

    def sample(self, count: int) -> list[LabeledExample]:
        return [self._draw() for _ in range(count)]

    def __iter__(self) -> Iterator[LabeledExample]:
        while True:
            yield self._draw()

    def _draw(self) -> LabeledExample:
        x = self.rng.standard_normal(self.dimension)
        if self.density < 1.0:
            x[self.rng.random(self.dimension) >= self.density] = 0.0
            features = SparseVector.from_dense(x)
        else:
            features = DenseVector(x)
        noise = 0.0 if self.noise_std <= 0 else float(self.rng.normal(0.0, self.noise_std))
        score = float(self.weights @ x) + self.bias + noise
        return LabeledExample(features, self.labeler(score))


@dataclass
class LinearClassificationStream(LinearStream):
    """Labels in {-1, +1} from the sign of a noisy linear score."""

    labeler: Callable[[float], float] = sign_label


@dataclass
class LinearRegressionStream(LinearStream):
    """Real labels equal to a noisy linear score."""

    labeler: Callable[[float], float] = identity_label
