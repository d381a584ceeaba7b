"""Feature-vector protocol shared by dense and sparse storage."""

from __future__ import annotations

from typing import Protocol

import numpy as np


class DimensionMismatchError(ValueError):
    """Raised when a vector meets an array of a different length."""


class FeatureVector(Protocol):
    """Fixed-size numeric vector that can be dotted with and added into arrays.

    ``dot`` and ``add_to`` must cost time proportional to ``nnz``, the number of
    structurally non-zero entries, not to ``size``.
    """

    size: int

    @property
    def nnz(self) -> int:
        ...

    def dot(self, array: np.ndarray) -> float:
        """Return the inner product with the dense 1-D ``array``."""

    def add_to(self, array: np.ndarray, coefficient: float) -> None:
        """Add ``coefficient * self`` into ``array`` in place."""

    def norm2_squared(self) -> float:
        ...

    def to_array(self) -> np.ndarray:
        ...


def check_target(vector: FeatureVector, array: np.ndarray) -> None:
    if array.ndim != 1 or array.shape[0] != vector.size:
        raise DimensionMismatchError(
            f"vector of size {vector.size} does not match array of shape {array.shape}"
        )
