"""Dense and sparse feature vectors."""

from .base import DimensionMismatchError, FeatureVector
from .dense import DenseVector
from .sparse import SparseVector

__all__ = ["DenseVector", "DimensionMismatchError", "FeatureVector", "SparseVector"]
