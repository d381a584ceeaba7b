"""Loading labeled examples from arrays and files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import scipy.sparse

from vectors import DenseVector, SparseVector

from .example import LabeledExample

_DENSE_SUFFIXES = {".npy", ".csv", ".txt"}
_SPARSE_SUFFIXES = {".svm", ".libsvm"}


def examples_from_arrays(X, y, weights=None) -> list[LabeledExample]:
    """Pair the rows of ``X`` with ``y`` (and optional ``weights``).

    Dense rows become :class:`DenseVector`; rows of a ``scipy.sparse`` matrix
    become :class:`SparseVector`.
    """
    labels = np.asarray(y, dtype=float).reshape(-1)
    n_rows = X.shape[0]
    if labels.size != n_rows:
        raise ValueError(f"got {labels.size} labels for {n_rows} rows")
    if weights is None:
        w = np.ones(n_rows, dtype=float)
    else:
        w = np.asarray(weights, dtype=float).reshape(-1)
        if w.size != n_rows:
            raise ValueError(f"got {w.size} weights for {n_rows} rows")

    if scipy.sparse.issparse(X):
        csr = scipy.sparse.csr_matrix(X)
        return [
            LabeledExample(SparseVector.from_scipy(csr[i]), labels[i], w[i])
            for i in range(n_rows)
        ]
    dense = np.asarray(X, dtype=float)
    if dense.ndim != 2:
        raise ValueError("feature matrix must be 2-D")
    return [LabeledExample(DenseVector(dense[i]), labels[i], w[i]) for i in range(n_rows)]


def load_examples(path: str | Path, dimension: Optional[int] = None) -> list[LabeledExample]:
    """Load examples from a dense table or a sparse ``label index:value`` file.

    Dense tables (``.npy``, ``.csv``, ``.txt``) carry the label in column 0 and
    features after it. Sparse files (``.svm``, ``.libsvm``) use zero-based
    indices and may give a per-example weight as ``weight:<w>`` right after the
    label.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    suffix = path.suffix.lower()
    if suffix in _SPARSE_SUFFIXES:
        X, y, w = _read_sparse(path, dimension)
        return examples_from_arrays(X, y, w)
    if suffix in _DENSE_SUFFIXES:
        table = np.load(path) if suffix == ".npy" else np.loadtxt(path, delimiter=",", ndmin=2)
        table = np.asarray(table, dtype=float)
        if table.ndim != 2 or table.shape[1] < 2:
            raise ValueError(f"{path}: expected a 2-D table with a label column and features")
        if dimension is not None and table.shape[1] - 1 != dimension:
            raise ValueError(
                f"{path}: table has {table.shape[1] - 1} features, expected {dimension}"
            )
        return examples_from_arrays(table[:, 1:], table[:, 0])
    raise ValueError(f"unsupported example file type: {path}")


def _read_sparse(path: Path, dimension: Optional[int]):
    rows: list[int] = []
    cols: list[int] = []
    data: list[float] = []
    labels: list[float] = []
    weights: list[float] = []

    with path.open("r", encoding="utf-8") as handle:
        for lineno, raw in enumerate(handle, start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            tokens = line.split()
            try:
                label = float(tokens[0])
                weight = 1.0
                entries = tokens[1:]
                if entries and entries[0].startswith("weight:"):
                    weight = float(entries[0].split(":", 1)[1])
                    entries = entries[1:]
                row = len(labels)
                for entry in entries:
                    index, value = entry.split(":", 1)
                    rows.append(row)
                    cols.append(int(index))
                    data.append(float(value))
            except ValueError as exc:
                raise ValueError(f"{path}:{lineno}: malformed line: {exc}") from exc
            labels.append(label)
            weights.append(weight)

    if cols and min(cols) < 0:
        raise ValueError(f"{path}: feature indices must be non-negative")
    width = (max(cols) + 1) if cols else 0
    if dimension is not None:
        if dimension < width:
            raise ValueError(f"{path}: feature index {width - 1} exceeds dimension {dimension}")
        width = dimension
    X = scipy.sparse.csr_matrix((data, (rows, cols)), shape=(len(labels), width))
    return X, np.array(labels, dtype=float), np.array(weights, dtype=float)
