"""Sparse feature vectors stored as sorted index/value pairs."""

from __future__ import annotations

import numpy as np
import scipy.sparse

from .base import check_target


class SparseVector:
    """Coordinate-format vector of a fixed ``size``.

    Indices are kept sorted and unique so ``add_to`` can use fancy-index
    assignment instead of ``np.add.at``. Explicit zeros are dropped.
    """

    __slots__ = ("_indices", "_values", "size")

    def __init__(self, indices, values, size: int) -> None:
        idx = np.asarray(indices, dtype=np.int64).reshape(-1)
        vals = np.asarray(values, dtype=float).reshape(-1)
        if idx.size != vals.size:
            raise ValueError("indices and values must have the same length")
        size = int(size)
        if size < 0:
            raise ValueError("size must be non-negative")
        if idx.size and (idx.min() < 0 or idx.max() >= size):
            raise ValueError(f"indices must lie in [0, {size})")

        order = np.argsort(idx, kind="stable")
        idx, vals = idx[order], vals[order]
        if idx.size > 1 and np.any(idx[1:] == idx[:-1]):
            raise ValueError("indices must be unique")
        keep = vals != 0.0
        idx, vals = idx[keep], vals[keep]
        idx.setflags(write=False)
        vals.setflags(write=False)

        self._indices = idx
        self._values = vals
        self.size = size

    @classmethod
    def from_dense(cls, array) -> "SparseVector":
        arr = np.asarray(array, dtype=float).reshape(-1)
        idx = np.flatnonzero(arr)
        return cls(idx, arr[idx], arr.size)

    @classmethod
    def from_scipy(cls, row) -> "SparseVector":
        """Build from a single-row ``scipy.sparse`` matrix."""
        if not scipy.sparse.issparse(row):
            raise TypeError("expected a scipy.sparse matrix")
        if row.shape[0] != 1:
            raise ValueError(f"expected a single row, got shape {row.shape}")
        coo = scipy.sparse.coo_matrix(row)
        coo.sum_duplicates()
        return cls(coo.col, coo.data, row.shape[1])

    @property
    def indices(self) -> np.ndarray:
        return self._indices

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def nnz(self) -> int:
        return int(self._indices.size)

    def dot(self, array: np.ndarray) -> float:
        check_target(self, array)
        return float(array[self._indices] @ self._values)

    def add_to(self, array: np.ndarray, coefficient: float) -> None:
        check_target(self, array)
        if coefficient == 0.0 or not self._indices.size:
            return
        array[self._indices] += coefficient * self._values

    def norm2_squared(self) -> float:
        return float(self._values @ self._values)

    def to_array(self) -> np.ndarray:
        out = np.zeros(self.size, dtype=float)
        out[self._indices] = self._values
        return out

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        pairs = ", ".join(f"{i}:{v:g}" for i, v in zip(self._indices, self._values))
        return f"SparseVector({{{pairs}}}, size={self.size})"
