"""Weighted loss and error of a predictor over a collection of examples."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from dataset import LabeledExample
from losses import LossFunction
from predictors import LinearPredictor


@dataclass(frozen=True)
class Evaluation:
    count: int
    total_weight: float
    mean_loss: float
    error_rate: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "total_weight": self.total_weight,
            "mean_loss": self.mean_loss,
            "error_rate": self.error_rate,
        }


def evaluate(
    predictor: LinearPredictor,
    examples: Iterable[LabeledExample],
    loss: LossFunction,
    *,
    classification: bool = True,
) -> Evaluation:
    """Weighted mean loss and, for {-1, +1} labels, weighted sign-disagreement rate.

    A zero prediction counts as an error. With ``classification=False`` the
    error rate is left as ``None``.
    """
    count = 0
    total_weight = 0.0
    loss_sum = 0.0
    error_sum = 0.0
    for example in examples:
        margin = predictor.predict(example.features)
        count += 1
        total_weight += example.weight
        loss_sum += example.weight * loss.evaluate(margin, example.label)
        if classification and margin * example.label <= 0:
            error_sum += example.weight
    if total_weight <= 0:
        return Evaluation(count, 0.0, 0.0, 0.0 if classification else None)
    error_rate = error_sum / total_weight if classification else None
    return Evaluation(count, total_weight, loss_sum / total_weight, error_rate)
