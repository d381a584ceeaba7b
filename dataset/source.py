"""Example sources that can report their length before being consumed."""

from __future__ import annotations

from itertools import islice
from typing import Iterable, Iterator, Optional, Protocol, Sequence

from .example import LabeledExample


class ExampleSource(Protocol):
    """Forward-only sequence of examples with a non-consuming length query."""

    def remaining(self) -> int:
        """Number of examples still to be yielded."""

    def __iter__(self) -> Iterator[LabeledExample]:
        ...


class ExampleCursor:
    """Length-tracking cursor over ``examples[start:stop]``."""

    def __init__(
        self,
        examples: Sequence[LabeledExample],
        start: int = 0,
        stop: Optional[int] = None,
    ) -> None:
        end = len(examples) if stop is None else min(int(stop), len(examples))
        if start < 0 or start > end:
            raise ValueError(f"invalid cursor range [{start}, {stop})")
        self._examples = examples
        self._pos = int(start)
        self._stop = end

    def remaining(self) -> int:
        return self._stop - self._pos

    def __iter__(self) -> "ExampleCursor":
        return self

    def __next__(self) -> LabeledExample:
        if self._pos >= self._stop:
            raise StopIteration
        example = self._examples[self._pos]
        self._pos += 1
        return example

    def __len__(self) -> int:
        return self.remaining()


def iter_batches(
    examples: Iterable[LabeledExample],
    batch_size: int,
) -> Iterator[ExampleCursor]:
    """Split ``examples`` into cursors of at most ``batch_size`` items.

    Works on unbounded streams: only one batch is buffered at a time.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    iterator = iter(examples)
    while True:
        chunk = list(islice(iterator, batch_size))
        if not chunk:
            return
        yield ExampleCursor(chunk)
