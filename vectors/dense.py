"""Dense feature vectors backed by a read-only numpy array."""

from __future__ import annotations

import numpy as np

from .base import check_target


class DenseVector:
    __slots__ = ("_values", "size")

    def __init__(self, values) -> None:
        arr = np.array(values, dtype=float)
        if arr.ndim != 1:
            raise ValueError("dense vector values must be 1-D")
        arr.setflags(write=False)
        self._values = arr
        self.size = int(arr.size)

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def nnz(self) -> int:
        return self.size

    def dot(self, array: np.ndarray) -> float:
        check_target(self, array)
        return float(self._values @ array)

    def add_to(self, array: np.ndarray, coefficient: float) -> None:
        check_target(self, array)
        if coefficient == 0.0:
            return
        array += coefficient * self._values

    def norm2_squared(self) -> float:
        return float(self._values @ self._values)

    def to_array(self) -> np.ndarray:
        return self._values.copy()

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"DenseVector({self._values.tolist()!r})"
