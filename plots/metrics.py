"""Plotting utilities for training curves."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import matplotlib.pyplot as plt
import numpy as np

from runner.loop import BatchRecord


def generate_plots(history: Iterable[BatchRecord], out_dir: str | Path) -> list[Path]:
    records = list(history)
    if not records:
        return []
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    t = np.array([rec.total_iterations for rec in records], dtype=float)
    losses = np.array([rec.progressive_loss for rec in records], dtype=float)
    norms = np.array([rec.weight_norm for rec in records], dtype=float)

    ema = _ema(losses, span=max(5, int(len(records) * 0.1)))
    plt.figure(figsize=(6, 4))
    plt.plot(t, losses, label="progressive loss")
    plt.plot(t, ema, label="EMA", linestyle="--")
    plt.xlabel("examples seen")
    plt.ylabel("loss")
    plt.legend()
    plt.tight_layout()
    written.append(_save(out_path / "progressive_loss.png"))

    plt.figure(figsize=(6, 4))
    plt.plot(t, norms, label="||w_avg||")
    plt.xlabel("examples seen")
    plt.ylabel("weight norm")
    plt.tight_layout()
    written.append(_save(out_path / "weight_norm.png"))

    held = [rec for rec in records if rec.holdout_loss is not None]
    if held:
        th = np.array([rec.total_iterations for rec in held], dtype=float)
        plt.figure(figsize=(6, 4))
        plt.plot(th, [rec.holdout_loss for rec in held], label="holdout loss")
        if held[0].holdout_error is not None:
            plt.plot(th, [rec.holdout_error for rec in held], label="holdout error", linestyle="--")
        plt.xlabel("examples seen")
        plt.legend()
        plt.tight_layout()
        written.append(_save(out_path / "holdout.png"))

    return written


def _save(path: Path) -> Path:
    plt.savefig(path, dpi=150)
    plt.close()
    return path


def _ema(values: np.ndarray, span: int) -> np.ndarray:
    alpha = 2.0 / (span + 1.0)
    ema = np.zeros_like(values)
    current = 0.0
    for idx, val in enumerate(values):
        if idx == 0:
            current = val
        else:
            current = alpha * val + (1 - alpha) * current
        ema[idx] = current
    return ema
