import numpy as np
import pytest

from dataset import LabeledExample, LinearClassificationStream
from learners.asgd import AsgdOptimizer
from losses import HingeLoss, LogisticLoss, SquaredLoss
from predictors import LinearPredictor
from runner.evaluate import evaluate
from runner.loop import run_training
from vectors import DenseVector


def test_evaluate_weighted_loss_and_error():
    predictor = LinearPredictor(np.array([1.0, 0.0]), bias=0.0)
    examples = [
        LabeledExample(DenseVector([2.0, 0.0]), 1.0, weight=1.0),
        LabeledExample(DenseVector([-1.0, 5.0]), 1.0, weight=3.0),
        LabeledExample(DenseVector([0.0, 1.0]), -1.0, weight=0.0),
    ]
    result = evaluate(predictor, examples, HingeLoss())
    assert result.count == 3
    assert result.total_weight == pytest.approx(4.0)
    assert result.mean_loss == pytest.approx((0.0 + 3.0 * 2.0) / 4.0)
    assert result.error_rate == pytest.approx(0.75)


def test_evaluate_empty_collection():
    result = evaluate(LinearPredictor.zeros(2), [], SquaredLoss())
    assert result.count == 0
    assert result.mean_loss == 0.0


def test_run_training_records_each_batch():
    stream = LinearClassificationStream(weights=np.array([1.0, -1.0, 2.0]), rng=np.random.default_rng(0))
    holdout = stream.sample(40)
    optimizer = AsgdOptimizer(3, 0.1, LogisticLoss())

    history = run_training(
        optimizer,
        stream.sample(25),
        batch_size=10,
        holdout=holdout,
        eval_every=2,
    )

    assert [rec.size for rec in history] == [10, 10, 5]
    assert [rec.total_iterations for rec in history] == [11, 21, 26]
    assert history[0].holdout_loss is None
    assert history[1].holdout_loss is not None
    assert 0.0 <= history[1].holdout_error <= 1.0
    assert history[2].holdout_loss is None
    # The zero predictor scores every logistic example at log(2).
    assert history[0].progressive_loss == pytest.approx(np.log(2.0))
    assert history[-1].weight_norm == pytest.approx(np.linalg.norm(optimizer.get_predictor().weights))


def test_run_training_stops_at_max_examples_on_unbounded_stream():
    stream = LinearClassificationStream(weights=np.ones(4), rng=np.random.default_rng(1))
    optimizer = AsgdOptimizer(4, 0.1, HingeLoss())
    history = run_training(optimizer, iter(stream), batch_size=8, max_examples=30)
    assert optimizer.total_iterations == 31
    assert len(history) == 4
    assert history[0].to_dict()["t"] == 9


def test_run_training_validates_arguments():
    optimizer = AsgdOptimizer(2, 1.0, SquaredLoss())
    with pytest.raises(ValueError):
        run_training(optimizer, [], batch_size=1, eval_every=0)
    with pytest.raises(ValueError):
        run_training(optimizer, [], batch_size=1, max_examples=-1)
    assert run_training(optimizer, [], batch_size=4) == []


def test_predictor_predict_many_and_scale():
    predictor = LinearPredictor(np.array([2.0, -1.0]), bias=0.5)
    examples = [
        LabeledExample(DenseVector([1.0, 1.0]), 1.0),
        LabeledExample(DenseVector([0.0, 2.0]), -1.0),
    ]
    np.testing.assert_allclose(predictor.predict_many(examples), [1.5, -1.5])
    predictor.scale(0.5)
    np.testing.assert_allclose(predictor.weights, [1.0, -0.5])
    assert predictor.bias == pytest.approx(0.25)
    assert predictor.to_dict() == {"weights": [1.0, -0.5], "bias": 0.25}


def test_evaluate_skips_error_rate_for_regression():
    predictor = LinearPredictor(np.array([1.0]), bias=0.0)
    examples = [LabeledExample(DenseVector([2.0]), 3.5), LabeledExample(DenseVector([-1.0]), 0.5)]
    result = evaluate(predictor, examples, SquaredLoss(), classification=False)
    assert result.error_rate is None
    assert result.mean_loss == pytest.approx((0.5 * 1.5**2 + 0.5 * 1.5**2) / 2)
    assert evaluate(predictor, [], SquaredLoss(), classification=False).error_rate is None
