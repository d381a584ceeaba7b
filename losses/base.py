"""Loss-function protocol used by the incremental trainers."""

from __future__ import annotations

from typing import Protocol


class LossFunction(Protocol):
    """Scalar loss of a margin (prediction) against a label."""

    def evaluate(self, margin: float, label: float) -> float:
        """Return the loss value at ``margin``."""

    def derivative(self, margin: float, label: float) -> float:
        """Return the derivative of the loss with respect to ``margin``."""
