"""Examples, example sources, loaders and synthetic streams."""

from .example import LabeledExample
from .loader import examples_from_arrays, load_examples
from .source import ExampleCursor, ExampleSource, iter_batches
from .synthetic import (
    LinearClassificationStream,
    LinearRegressionStream,
    LinearStream,
    identity_label,
    sign_label,
)

__all__ = [
    "ExampleCursor",
    "ExampleSource",
    "LabeledExample",
    "LinearClassificationStream",
    "LinearRegressionStream",
    "LinearStream",
    "examples_from_arrays",
    "identity_label",
    "iter_batches",
    "load_examples",
    "sign_label",
]
