"""Main orchestration loop for incremental ASGD training."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import islice
from typing import Any, Iterable, Optional, Sequence

import numpy as np

from dataset import ExampleCursor, LabeledExample, iter_batches
from learners.asgd import AsgdOptimizer

from .evaluate import evaluate

logger = logging.getLogger(__name__)


@dataclass
class BatchRecord:
    batch: int
    total_iterations: int
    size: int
    progressive_loss: float
    weight_norm: float
    bias: float
    holdout_loss: Optional[float] = None
    holdout_error: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "batch": self.batch,
            "t": self.total_iterations,
            "size": self.size,
            "progressive_loss": self.progressive_loss,
            "weight_norm": self.weight_norm,
            "bias": self.bias,
            "holdout_loss": self.holdout_loss,
            "holdout_error": self.holdout_error,
        }


def run_training(
    optimizer: AsgdOptimizer,
    stream: Iterable[LabeledExample],
    *,
    batch_size: int,
    max_examples: Optional[int] = None,
    holdout: Optional[Sequence[LabeledExample]] = None,
    eval_every: int = 1,
    classification: bool = True,
) -> list[BatchRecord]:
    """Feed ``stream`` to ``optimizer`` batch by batch and record progress.

    Each batch is scored by the averaged predictor before it is used for
    training (progressive validation). Holdout error rates are only recorded
    when ``classification`` is true.
    """
    if eval_every < 1:
        raise ValueError("eval_every must be at least 1")
    if max_examples is not None:
        if max_examples < 0:
            raise ValueError("max_examples must be non-negative")
        stream = islice(stream, max_examples)

    history: list[BatchRecord] = []
    for index, cursor in enumerate(iter_batches(stream, batch_size)):
        batch = list(cursor)
        predictor = optimizer.get_predictor()
        scored = evaluate(predictor, batch, optimizer.loss, classification=False)

        optimizer.update(ExampleCursor(batch))

        record = BatchRecord(
            batch=index,
            total_iterations=optimizer.total_iterations,
            size=len(batch),
            progressive_loss=scored.mean_loss,
            weight_norm=float(np.linalg.norm(predictor.weights)),
            bias=predictor.bias,
        )
        if holdout is not None and (index + 1) % eval_every == 0:
            held = evaluate(predictor, holdout, optimizer.loss, classification=classification)
            record.holdout_loss = held.mean_loss
            record.holdout_error = held.error_rate
        history.append(record)
        logger.debug("batch trained", extra=record.to_dict())

    if history:
        logger.info(
            "training finished",
            extra={
                "batches": len(history),
                "total_iterations": optimizer.total_iterations,
                "final_progressive_loss": history[-1].progressive_loss,
            },
        )
    else:
        logger.info("training finished with an empty stream")
    return history
