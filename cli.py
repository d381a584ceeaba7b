"""Command-line interface for ASGD training runs."""

from __future__ import annotations

import argparse
import logging
from itertools import chain, repeat
from pathlib import Path
from typing import Optional

import numpy as np

from config import Config, load_config
from dataset import (
    LabeledExample,
    LinearClassificationStream,
    LinearRegressionStream,
    load_examples,
)
from learners.asgd import AsgdOptimizer
from plots.metrics import generate_plots
from runner.evaluate import evaluate
from runner.loop import run_training
from telemetry.logs import configure_logging
from telemetry.writer import write_history, write_summary

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Incremental ASGD trainer for linear models")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to YAML configuration file.",
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output directory for history, summary and plots.",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip writing matplotlib figures.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    cfg = load_config(args.config)
    out_dir = Path(args.out)
    if cfg.run.logging:
        configure_logging(cfg.run.log_level, out_dir / "train.log")

    try:
        train, holdout, dimension = _load_data(cfg)
    except (OSError, ValueError):
        logger.exception("failed to load training data")
        raise
    optimizer = AsgdOptimizer(dimension, cfg.optimizer.lam, cfg.optimizer.make_loss())
    logger.info(
        "starting training",
        extra={
            "examples": len(train),
            "holdout": len(holdout) if holdout else 0,
            "dimension": dimension,
            "loss": cfg.optimizer.loss,
            "lambda": cfg.optimizer.lam,
        },
    )

    classification = cfg.data.task == "classification"
    stream = chain.from_iterable(repeat(train, cfg.data.epochs))
    history = run_training(
        optimizer,
        stream,
        batch_size=cfg.data.batch_size,
        max_examples=cfg.run.max_examples,
        holdout=holdout,
        eval_every=cfg.run.eval_every,
        classification=classification,
    )

    write_history(out_dir / "history.jsonl", (record.to_dict() for record in history))
    predictor = optimizer.get_predictor()
    summary = {
        "config": cfg.to_dict(),
        "batches": len(history),
        "total_iterations": optimizer.total_iterations,
        "train": evaluate(predictor, train, optimizer.loss, classification=classification).to_dict(),
        "holdout": (
            evaluate(predictor, holdout, optimizer.loss, classification=classification).to_dict()
            if holdout
            else None
        ),
    }
    write_summary(out_dir / "summary.json", summary)
    if not args.no_plots:
        generate_plots(history, out_dir / "plots")


def _load_data(
    cfg: Config,
) -> tuple[list[LabeledExample], Optional[list[LabeledExample]], int]:
    rng = np.random.default_rng(cfg.run.seed)
    data = cfg.data

    if data.source == "synthetic":
        examples = _make_stream(cfg, rng).sample(data.n_examples)
    else:
        examples = load_examples(data.path, data.dimension)
    if not examples:
        raise ValueError("no training examples available")
    # Holdout rows are padded (sparse) or checked (dense) against the training width.
    dimension = data.dimension or examples[0].dimension

    holdout: Optional[list[LabeledExample]] = None
    if data.holdout_path is not None:
        holdout = load_examples(data.holdout_path, dimension)
    elif data.holdout_fraction > 0:
        order = rng.permutation(len(examples))
        n_holdout = int(round(len(examples) * data.holdout_fraction))
        holdout = [examples[i] for i in order[:n_holdout]]
        examples = [examples[i] for i in sorted(order[n_holdout:])]
    return examples, holdout, dimension


def _make_stream(cfg: Config, rng: np.random.Generator):
    data = cfg.data
    weights = rng.standard_normal(data.dimension)
    stream_type = LinearClassificationStream if data.task == "classification" else LinearRegressionStream
    return stream_type(
        weights=weights,
        noise_std=data.noise_std,
        density=data.density,
        rng=rng,
    )


if __name__ == "__main__":
    main()
