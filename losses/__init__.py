"""Loss functions and a name-based registry."""

from __future__ import annotations

from typing import Any

from .base import LossFunction
from .hinge import HingeLoss, SmoothHingeLoss
from .logistic import LogisticLoss
from .squared import SquaredLoss

_REGISTRY = {
    "squared": SquaredLoss,
    "logistic": LogisticLoss,
    "log": LogisticLoss,
    "hinge": HingeLoss,
    "smooth_hinge": SmoothHingeLoss,
}


def make_loss(name: str, **params: Any) -> LossFunction:
    """Instantiate the loss registered under ``name`` with ``params``."""
    try:
        factory = _REGISTRY[name.lower()]
    except KeyError:
        known = ", ".join(sorted(_REGISTRY))
        raise ValueError(f"unknown loss function: {name!r} (expected one of {known})") from None
    return factory(**params)


__all__ = [
    "HingeLoss",
    "LogisticLoss",
    "LossFunction",
    "SmoothHingeLoss",
    "SquaredLoss",
    "make_loss",
]
