"""Configuration loading for the ASGD trainer."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional

import yaml

from losses import LossFunction, make_loss


@dataclass
class OptimizerConfig:
    lam: float
    loss: str = "logistic"
    loss_params: dict[str, Any] = field(default_factory=dict)

    def make_loss(self) -> LossFunction:
        return make_loss(self.loss, **self.loss_params)


@dataclass
class DataConfig:
    source: Literal["synthetic", "file"]
    task: Literal["classification", "regression"] = "classification"
    dimension: Optional[int] = None
    n_examples: int = 1000
    noise_std: float = 0.0
    density: float = 1.0
    path: Optional[Path] = None
    holdout_path: Optional[Path] = None
    holdout_fraction: float = 0.0
    batch_size: int = 1
    epochs: int = 1


@dataclass
class RunConfig:
    seed: int = 0
    logging: bool = True
    log_level: str = "INFO"
    eval_every: int = 1
    max_examples: Optional[int] = None


@dataclass
class Config:
    optimizer: OptimizerConfig
    data: DataConfig
    run: RunConfig
    base_path: Path

    def to_dict(self) -> dict[str, Any]:
        return {
            "optimizer": asdict(self.optimizer),
            "data": {
                key: (str(value) if isinstance(value, Path) else value)
                for key, value in asdict(self.data).items()
            },
            "run": asdict(self.run),
        }


def _optional_path(base: Path, value: Any) -> Optional[Path]:
    if value is None:
        return None
    return (base / str(value)).expanduser().resolve()


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def load_config(path: str | Path) -> Config:
    cfg_path = Path(path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)
    with cfg_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    base = cfg_path.parent

    optimizer_raw = raw.get("optimizer") or {}
    data_raw = raw.get("data") or {}
    run_raw = raw.get("run") or {}

    if "lambda" not in optimizer_raw and "lam" not in optimizer_raw:
        raise ValueError("optimizer.lambda is required")
    optimizer = OptimizerConfig(
        lam=float(optimizer_raw.get("lambda", optimizer_raw.get("lam"))),
        loss=str(optimizer_raw.get("loss", "logistic")),
        loss_params=dict(optimizer_raw.get("loss_params") or {}),
    )

    data = DataConfig(
        source=str(data_raw.get("source", "synthetic")),
        task=str(data_raw.get("task", "classification")),
        dimension=_optional_int(data_raw.get("dimension")),
        n_examples=int(data_raw.get("n_examples", 1000)),
        noise_std=float(data_raw.get("noise_std", 0.0)),
        density=float(data_raw.get("density", 1.0)),
        path=_optional_path(base, data_raw.get("path")),
        holdout_path=_optional_path(base, data_raw.get("holdout_path")),
        holdout_fraction=float(data_raw.get("holdout_fraction", 0.0)),
        batch_size=int(data_raw.get("batch_size", 1)),
        epochs=int(data_raw.get("epochs", 1)),
    )

    run = RunConfig(
        seed=int(run_raw.get("seed", 0)),
        logging=bool(run_raw.get("logging", True)),
        log_level=str(run_raw.get("log_level", "INFO")).upper(),
        eval_every=int(run_raw.get("eval_every", 1)),
        max_examples=_optional_int(run_raw.get("max_examples")),
    )

    cfg = Config(optimizer=optimizer, data=data, run=run, base_path=base)
    _validate(cfg)
    return cfg


def _validate(cfg: Config) -> None:
    if cfg.optimizer.lam <= 0:
        raise ValueError("optimizer.lambda must be positive")
    data = cfg.data
    if data.source not in ("synthetic", "file"):
        raise ValueError(f"unsupported data source: {data.source}")
    if data.task not in ("classification", "regression"):
        raise ValueError(f"unsupported synthetic task: {data.task}")
    if data.source == "synthetic":
        if data.dimension is None or data.dimension < 1:
            raise ValueError("data.dimension must be a positive integer for synthetic data")
        if data.n_examples < 0:
            raise ValueError("data.n_examples must be non-negative")
    elif data.path is None:
        raise ValueError("data.path is required when data.source is 'file'")
    if not 0.0 <= data.holdout_fraction < 1.0:
        raise ValueError("data.holdout_fraction must lie in [0, 1)")
    if data.batch_size < 1:
        raise ValueError("data.batch_size must be at least 1")
    if data.epochs < 1:
        raise ValueError("data.epochs must be at least 1")
    if cfg.run.eval_every < 1:
        raise ValueError("run.eval_every must be at least 1")
    if cfg.run.max_examples is not None and cfg.run.max_examples < 0:
        raise ValueError("run.max_examples must be non-negative")
