"""Squared-error loss."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SquaredLoss:
    """``0.5 * (margin - label) ** 2``."""

    def evaluate(self, margin: float, label: float) -> float:
        residual = margin - label
        return 0.5 * residual * residual

    def derivative(self, margin: float, label: float) -> float:
        return margin - label
