"""Labeled, weighted training examples."""

from __future__ import annotations

import math
from dataclasses import dataclass

from vectors import FeatureVector


@dataclass(frozen=True)
class LabeledExample:
    features: FeatureVector
    label: float
    weight: float = 1.0

    def __post_init__(self) -> None:
        label = float(self.label)
        weight = float(self.weight)
        if not math.isfinite(label):
            raise ValueError(f"example label must be finite, got {self.label!r}")
        if not math.isfinite(weight) or weight < 0:
            raise ValueError(f"example weight must be finite and >= 0, got {self.weight!r}")
        object.__setattr__(self, "label", label)
        object.__setattr__(self, "weight", weight)

    @property
    def dimension(self) -> int:
        return self.features.size
