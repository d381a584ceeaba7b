"""Logistic (log) loss for labels in {-1, +1}."""

from __future__ import annotations

from dataclasses import dataclass

from scipy.special import expit, log_expit


@dataclass(frozen=True)
class LogisticLoss:
    """``log(1 + exp(-scale * margin * label)) / scale``.

    Evaluated through ``scipy.special`` so large margins neither overflow nor
    lose the tail of the derivative.
    """

    scale: float = 1.0

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise ValueError("logistic loss scale must be positive")

    def evaluate(self, margin: float, label: float) -> float:
        return float(-log_expit(self.scale * margin * label) / self.scale)

    def derivative(self, margin: float, label: float) -> float:
        return float(-label * expit(-self.scale * margin * label))
