"""Utility helpers for dataset loaders."""

from __future__ import annotations

import numpy as np

from ..core.types import Array


def min_max_scale(values: Array) -> tuple[Array, Array, Array]:
    """Scale each column of ``values`` into ``[0, 1]``.

    Constant columns map to ``0``. Returns the scaled array together with the
    per-column minimum and range so the transform can be reapplied.
    """

    values = np.asarray(values, dtype=np.float64)
    low = values.min(axis=0, keepdims=True)
    span = values.max(axis=0, keepdims=True) - low
    safe_span = np.where(span > 0, span, 1.0)
    return (values - low) / safe_span, low, span


def one_hot(indices: Array, num_classes: int) -> Array:
    indices = np.asarray(indices, dtype=np.int64).reshape(-1)
    out = np.zeros((indices.shape[0], num_classes), dtype=np.float64)
    out[np.arange(indices.shape[0]), indices] = 1.0
    return out


__all__ = ["min_max_scale", "one_hot"]
