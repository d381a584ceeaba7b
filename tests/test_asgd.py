import math

import numpy as np
import pytest

from dataset import ExampleCursor, LabeledExample, LinearClassificationStream
from learners.asgd import AsgdOptimizer, OptimizerStateError
from losses import HingeLoss, LogisticLoss, SquaredLoss
from runner.evaluate import evaluate
from vectors import DenseVector, DimensionMismatchError, SparseVector


def _example(values, label, weight=1.0):
    return LabeledExample(DenseVector(values), label, weight)


def _random_examples(rng, count, dim, *, sparse=False):
    examples = []
    for _ in range(count):
        x = rng.standard_normal(dim)
        features = SparseVector.from_dense(x) if sparse else DenseVector(x)
        label = 1.0 if rng.random() < 0.5 else -1.0
        examples.append(LabeledExample(features, label, rng.uniform(0.2, 2.0)))
    return examples


def _train(examples, sizes, *, dim=3, lam=0.5, loss=None):
    opt = AsgdOptimizer(dim, lam, loss or LogisticLoss())
    start = 0
    for size in sizes:
        opt.update(ExampleCursor(examples, start, start + size))
        start += size
    assert start == len(examples)
    return opt


def _lw(t):
    return math.log(t) + 0.5 / t


def _eager_reference(examples, dim, lam, loss):
    """Per-example shrinkage and averaging, bias folded in as a last coordinate."""
    w = np.zeros(dim + 1)
    avg = np.zeros(dim + 1)
    for s, ex in enumerate(examples, start=2):
        x = np.append(ex.features.to_array(), 1.0)
        beta = ex.weight * loss.derivative(w @ x, ex.label)
        avg = ((s - 1) / s) * (avg + (_lw(s) - _lw(s - 1)) * w)
        w = ((s - 1) / s) * w - beta * x / (lam * s)
    return w, avg


def test_first_step_matches_hand_computation():
    opt = AsgdOptimizer(2, 1.0, SquaredLoss())
    opt.update(ExampleCursor([_example([1.0, 0.0], 1.0)]))

    # eta = 1, alpha = 0, beta = -1 -> last = (1, 0) + 1, then scaled by 1/2.
    last = opt.last_predictor
    assert last.weights[0] == pytest.approx(0.5, abs=1e-9)
    assert last.weights[1] == pytest.approx(0.0, abs=1e-9)
    assert last.bias == pytest.approx(0.5, abs=1e-9)
    # The only new iterate lands at t = T_next and carries no averaging weight yet.
    np.testing.assert_allclose(opt.get_predictor().weights, [0.0, 0.0], atol=1e-9)
    assert opt.get_predictor().bias == pytest.approx(0.0, abs=1e-9)
    assert opt.total_iterations == 2


def test_iteration_count_tracks_batch_sizes():
    rng = np.random.default_rng(0)
    sizes = [3, 0, 5, 1, 0, 2]
    examples = _random_examples(rng, sum(sizes), 3)
    opt = AsgdOptimizer(3, 0.1, HingeLoss())
    start = 0
    expected = 1
    for size in sizes:
        opt.update(ExampleCursor(examples, start, start + size))
        start += size
        expected += size
        assert opt.total_iterations == expected


def test_empty_batch_leaves_state_bit_identical():
    rng = np.random.default_rng(1)
    opt = _train(_random_examples(rng, 7, 3), [4, 3])
    last = opt.last_predictor.copy()
    averaged = opt.averaged_predictor.copy()

    opt.update(ExampleCursor([]))

    assert opt.total_iterations == 8
    assert np.array_equal(opt.last_predictor.weights, last.weights)
    assert opt.last_predictor.bias == last.bias
    assert np.array_equal(opt.averaged_predictor.weights, averaged.weights)
    assert opt.averaged_predictor.bias == averaged.bias


@pytest.mark.parametrize("sizes", [[1] * 9, [2, 3, 4], [5, 0, 4], [8, 1]])
def test_split_batches_match_single_batch(sizes):
    rng = np.random.default_rng(2)
    examples = _random_examples(rng, 9, 3)
    whole = _train(examples, [9])
    split = _train(examples, sizes)

    np.testing.assert_allclose(split.last_predictor.weights, whole.last_predictor.weights, rtol=1e-9, atol=1e-12)
    assert split.last_predictor.bias == pytest.approx(whole.last_predictor.bias, rel=1e-9, abs=1e-12)
    np.testing.assert_allclose(split.averaged_predictor.weights, whole.averaged_predictor.weights, rtol=1e-9, atol=1e-12)
    assert split.averaged_predictor.bias == pytest.approx(whole.averaged_predictor.bias, rel=1e-9, abs=1e-12)


@pytest.mark.parametrize("loss", [SquaredLoss(), LogisticLoss(), HingeLoss()])
def test_lazy_scaling_matches_eager_reference(loss):
    rng = np.random.default_rng(3)
    examples = _random_examples(rng, 12, 3)
    lam = 2.0
    opt = _train(examples, [4, 5, 3], lam=lam, loss=loss)
    w, avg = _eager_reference(examples, 3, lam, loss)

    np.testing.assert_allclose(opt.last_predictor.weights, w[:3], rtol=1e-9, atol=1e-12)
    assert opt.last_predictor.bias == pytest.approx(w[3], rel=1e-9, abs=1e-12)
    np.testing.assert_allclose(opt.averaged_predictor.weights, avg[:3], rtol=1e-9, atol=1e-12)
    assert opt.averaged_predictor.bias == pytest.approx(avg[3], rel=1e-9, abs=1e-12)


def test_example_order_changes_result():
    a = _example([1.0, 0.0], 1.0)
    b = _example([0.0, 1.0], -1.0)

    ab = AsgdOptimizer(2, 1.0, SquaredLoss())
    ab.update(ExampleCursor([a, b]))
    ba = AsgdOptimizer(2, 1.0, SquaredLoss())
    ba.update(ExampleCursor([b, a]))

    np.testing.assert_allclose(ab.last_predictor.weights, [1.0 / 3.0, -0.5], atol=1e-12)
    assert ab.last_predictor.bias == pytest.approx(-1.0 / 6.0)
    np.testing.assert_allclose(ba.last_predictor.weights, [0.5, -1.0 / 3.0], atol=1e-12)
    assert ba.last_predictor.bias == pytest.approx(1.0 / 6.0)


def test_sparse_and_dense_features_train_identically():
    rng = np.random.default_rng(4)
    dense = _random_examples(rng, 10, 6)
    sparse = [
        LabeledExample(SparseVector.from_dense(ex.features.to_array()), ex.label, ex.weight)
        for ex in dense
    ]
    a = _train(dense, [3, 7], dim=6)
    b = _train(sparse, [3, 7], dim=6)
    np.testing.assert_allclose(a.get_predictor().weights, b.get_predictor().weights, rtol=1e-12, atol=1e-14)
    assert a.get_predictor().bias == pytest.approx(b.get_predictor().bias)


def test_zero_weight_examples_only_shrink():
    opt = AsgdOptimizer(2, 1.0, SquaredLoss())
    opt.update(ExampleCursor([_example([1.0, 0.0], 1.0)]))
    before = opt.last_predictor.copy()
    opt.update(ExampleCursor([_example([3.0, 4.0], 10.0, weight=0.0)]))
    np.testing.assert_allclose(opt.last_predictor.weights, before.weights * 2.0 / 3.0)
    assert opt.last_predictor.bias == pytest.approx(before.bias * 2.0 / 3.0)


def test_snapshot_is_detached_from_later_updates():
    rng = np.random.default_rng(5)
    examples = _random_examples(rng, 6, 3)
    opt = AsgdOptimizer(3, 0.5, LogisticLoss())
    opt.update(ExampleCursor(examples, 0, 3))
    live = opt.get_predictor()
    snapshot = opt.get_predictor(copy=True)
    frozen = snapshot.weights.copy()

    opt.update(ExampleCursor(examples, 3))

    assert live is opt.averaged_predictor
    np.testing.assert_array_equal(snapshot.weights, frozen)
    assert not np.array_equal(live.weights, frozen)


@pytest.mark.parametrize("lam", [0.0, -1.0, float("nan"), float("inf")])
def test_rejects_invalid_lambda(lam):
    with pytest.raises(ValueError):
        AsgdOptimizer(3, lam, SquaredLoss())


def test_rejects_non_positive_dimension():
    with pytest.raises(ValueError):
        AsgdOptimizer(0, 1.0, SquaredLoss())


def test_dimension_mismatch_invalidates_until_reset():
    opt = AsgdOptimizer(2, 1.0, SquaredLoss())
    with pytest.raises(DimensionMismatchError):
        opt.update(ExampleCursor([_example([1.0, 2.0, 3.0], 1.0)]))

    with pytest.raises(OptimizerStateError):
        opt.update(ExampleCursor([_example([1.0, 0.0], 1.0)]))
    with pytest.raises(OptimizerStateError):
        opt.get_predictor()

    opt.reset()
    assert opt.total_iterations == 1
    opt.update(ExampleCursor([_example([1.0, 0.0], 1.0)]))
    assert opt.last_predictor.weights[0] == pytest.approx(0.5)


class _ShortSource:
    def __init__(self, reported, examples):
        self._reported = reported
        self._examples = examples

    def remaining(self):
        return self._reported

    def __iter__(self):
        return iter(self._examples)


def test_source_yielding_fewer_examples_than_reported():
    opt = AsgdOptimizer(2, 1.0, SquaredLoss())
    with pytest.raises(OptimizerStateError, match="ended after 1 of 3"):
        opt.update(_ShortSource(3, [_example([1.0, 0.0], 1.0)]))


def test_negative_count_is_rejected_without_invalidating():
    opt = AsgdOptimizer(2, 1.0, SquaredLoss())
    with pytest.raises(ValueError):
        opt.update(_ShortSource(-1, []))
    opt.update(ExampleCursor([_example([1.0, 0.0], 1.0)]))
    assert opt.total_iterations == 2


def test_remaining_is_queried_once_before_reading():
    calls = []

    class _Recording(_ShortSource):
        def remaining(self):
            calls.append("remaining")
            return super().remaining()

        def __iter__(self):
            calls.append("iter")
            return super().__iter__()

    opt = AsgdOptimizer(2, 1.0, SquaredLoss())
    opt.update(_Recording(2, [_example([1.0, 0.0], 1.0), _example([0.0, 1.0], -1.0)]))
    assert calls == ["remaining", "iter"]


def test_learns_separable_stream():
    rng = np.random.default_rng(6)
    stream = LinearClassificationStream(
        weights=np.array([1.5, -2.0, 0.5, 0.0, 1.0]),
        rng=rng,
    )
    train = stream.sample(3000)
    test = stream.sample(500)
    opt = AsgdOptimizer(stream.dimension, 0.01, LogisticLoss())
    for start in range(0, len(train), 50):
        opt.update(ExampleCursor(train, start, start + 50))

    result = evaluate(opt.get_predictor(), test, LogisticLoss())
    assert result.error_rate < 0.15
