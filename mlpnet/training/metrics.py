"""Metric helpers for the trainer."""

from __future__ import annotations

from typing import Dict, Iterable

import numpy as np

from ..core.types import Array

METRICS = ("cost", "mae", "rmse", "accuracy")


def default_metrics(task_type: str) -> list[str]:
    if task_type == "regression":
        return ["mae", "rmse"]
    if task_type in {"binary", "multiclass"}:
        return ["accuracy"]
    raise ValueError(f"Unknown task type: {task_type}")


def compute_metric(name: str, predictions: Array, targets: Array) -> float:
    """Evaluate metric ``name`` over row-aligned ``predictions`` and ``targets``."""

    key = name.lower()
    preds = np.asarray(predictions, dtype=np.float64)
    targs = np.asarray(targets, dtype=np.float64)
    if preds.shape != targs.shape:
        raise ValueError(f"Predictions {preds.shape} and targets {targs.shape} differ in shape")
    if preds.shape[0] == 0:
        return 0.0
    if key == "cost":
        return float(np.mean(0.5 * np.sum((targs - preds) ** 2, axis=1)))
    if key == "mae":
        return float(np.mean(np.abs(preds - targs)))
    if key == "rmse":
        return float(np.sqrt(np.mean((preds - targs) ** 2)))
    if key == "accuracy":
        if preds.shape[1] == 1:
            hits = (preds[:, 0] >= 0.5) == (targs[:, 0] >= 0.5)
        else:
            hits = np.argmax(preds, axis=1) == np.argmax(targs, axis=1)
        return float(np.mean(hits))
    raise ValueError(f"Unknown metric {name!r}. Available metrics: {', '.join(METRICS)}")


def compute_metrics(names: Iterable[str], predictions: Array, targets: Array) -> Dict[str, float]:
    return {name: compute_metric(name, predictions, targets) for name in names}


__all__ = ["METRICS", "compute_metric", "compute_metrics", "default_metrics"]
