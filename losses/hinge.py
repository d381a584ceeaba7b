"""Hinge losses for labels in {-1, +1}."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HingeLoss:
    """``max(0, 1 - margin * label)``; the subgradient at the hinge is 0."""

    def evaluate(self, margin: float, label: float) -> float:
        return max(0.0, 1.0 - margin * label)

    def derivative(self, margin: float, label: float) -> float:
        if margin * label < 1.0:
            return -label
        return 0.0


@dataclass(frozen=True)
class SmoothHingeLoss:
    """Hinge loss with a quadratic segment of width ``smoothness`` below 1."""

    smoothness: float = 1.0

    def __post_init__(self) -> None:
        if not self.smoothness > 0:
            raise ValueError("smooth hinge smoothness must be positive")

    def evaluate(self, margin: float, label: float) -> float:
        z = margin * label
        if z >= 1.0:
            return 0.0
        if z <= 1.0 - self.smoothness:
            return 1.0 - z - 0.5 * self.smoothness
        gap = 1.0 - z
        return gap * gap / (2.0 * self.smoothness)

    def derivative(self, margin: float, label: float) -> float:
        z = margin * label
        if z >= 1.0:
            return 0.0
        if z <= 1.0 - self.smoothness:
            return -label
        return -label * (1.0 - z) / self.smoothness
