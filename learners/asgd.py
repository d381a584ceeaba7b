"""Averaged stochastic gradient descent for L2-regularized linear models.

The last iterate is stored lazily: inside a batch its weights are kept at the
scale they had when the batch started, and the regularization shrinkage for the
whole batch is applied once at the end. Predictions made mid-batch are
corrected by ``T_prev / (t - 1)`` so the result matches the eager algorithm
with step size ``1 / (lam * t)``.

The averaged predictor weights iterate ``t`` by roughly ``1 / t`` using the
closed form ``ln(t) + 0.5 / t`` for the harmonic partial sums, so past
examples never need to be revisited.
"""

from __future__ import annotations

import logging
import math

from dataset.source import ExampleSource
from losses import LossFunction
from predictors import LinearPredictor
from vectors import DenseVector, DimensionMismatchError

logger = logging.getLogger(__name__)


class OptimizerStateError(RuntimeError):
    """Raised when the optimizer's internal state can no longer be trusted."""


def _log_weight(t: float) -> float:
    return math.log(t) + 0.5 / t


class AsgdOptimizer:
    def __init__(self, dimension: int, lam: float, loss: LossFunction) -> None:
        if int(dimension) < 1:
            raise ValueError(f"dimension must be positive, got {dimension}")
        lam = float(lam)
        if not math.isfinite(lam) or lam <= 0:
            raise ValueError(f"lambda must be positive and finite, got {lam}")
        self._dimension = int(dimension)
        self._lam = lam
        self._loss = loss
        self.reset()

    def reset(self) -> None:
        """Return to the seed state: zero predictors, one elapsed iteration."""
        self._total_iterations = 1
        self._last = LinearPredictor.zeros(self._dimension)
        self._averaged = LinearPredictor.zeros(self._dimension)
        self._invalid = False

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def lam(self) -> float:
        return self._lam

    @property
    def loss(self) -> LossFunction:
        return self._loss

    @property
    def total_iterations(self) -> int:
        return self._total_iterations

    @property
    def last_predictor(self) -> LinearPredictor:
        return self._last

    @property
    def averaged_predictor(self) -> LinearPredictor:
        return self._averaged

    def get_predictor(self, copy: bool = False) -> LinearPredictor:
        """Return the averaged predictor.

        The default is a live reference that the next ``update`` mutates; pass
        ``copy=True`` for a snapshot.
        """
        self._check_valid()
        return self._averaged.copy() if copy else self._averaged

    def update(self, source: ExampleSource) -> None:
        """Consume one batch from ``source`` and advance both predictors.

        ``source.remaining()`` is read once, before any example. If anything
        raises part-way through, the optimizer refuses further use until
        :meth:`reset`.
        """
        self._check_valid()
        count = int(source.remaining())
        if count < 0:
            raise ValueError(f"example source reported a negative count: {count}")
        try:
            self._apply_batch(source, count)
        except Exception:
            self._invalid = True
            raise

    def _apply_batch(self, source: ExampleSource, count: int) -> None:
        if self._total_iterations < 1:
            raise OptimizerStateError(
                f"total_iterations must stay >= 1, found {self._total_iterations}"
            )
        last = self._last
        averaged = self._averaged

        t_prev = float(self._total_iterations)
        t_next = t_prev + count
        eta = 1.0 / (self._lam * t_prev)
        sigma = _log_weight(t_next)

        # Exactly 0.0 when the batch is empty.
        history_weight = sigma - _log_weight(t_prev)
        DenseVector(last.weights).add_to(averaged.weights, history_weight)
        averaged.bias += history_weight * last.bias

        t = t_prev
        iterator = iter(source)
        for _ in range(count):
            try:
                example = next(iterator)
            except StopIteration:
                raise OptimizerStateError(
                    f"example source ended after {int(t - t_prev)} of {count} examples"
                ) from None
            t += 1.0
            x = example.features
            if x.size != self._dimension:
                raise DimensionMismatchError(
                    f"example has dimension {x.size}, predictor has {self._dimension}"
                )

            alpha = (t_prev / (t - 1.0)) * last.predict(x)
            beta = example.weight * self._loss.derivative(alpha, example.label)

            last_coeff = -eta * beta
            x.add_to(last.weights, last_coeff)
            last.bias += last_coeff

            avg_coeff = last_coeff * (sigma - _log_weight(t))
            x.add_to(averaged.weights, avg_coeff)
            averaged.bias += avg_coeff

        self._total_iterations += count
        scale = t_prev / t_next
        last.scale(scale)
        averaged.scale(scale)
        logger.debug(
            "asgd batch applied",
            extra={"batch_size": count, "total_iterations": self._total_iterations},
        )

    def _check_valid(self) -> None:
        if self._invalid:
            raise OptimizerStateError(
                "a previous update failed part-way; call reset() before reusing the optimizer"
            )
